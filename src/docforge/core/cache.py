"""
Module: core.cache

Purpose:
    Call-scoped memo for expensive intermediate results (chiefly table
    layouts). The generator creates one ComputationCache per generation
    call, threads it explicitly through the layout and render passes,
    and drops it when the call ends. It is never shared between calls.

Key Classes:
    - ComputationCache: Key -> memoised value, plus height bookkeeping
    - CacheInconsistency: Same key produced two different height lists

Key Functions:
    - make_cache_key(): Stable string key from JSON-like parts

Used By:
    - plugins.table: Memoises table layouts
    - generator.layout.paginator: Records planned row heights
    - generator.controller: One cache per call
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Sequence, Tuple, TypeVar

from docforge.core.errors import DocforgeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheInconsistency(DocforgeError):
    """Raised when one cache key yields two different height sequences."""

    def __init__(self, key: str, expected: Sequence[float], actual: Sequence[float]):
        super().__init__(
            f"Cached heights changed for the same key: {list(expected)} != {list(actual)}"
        )
        self.key = key
        self.expected = tuple(expected)
        self.actual = tuple(actual)


def make_cache_key(*parts: Any) -> str:
    """
    Build a stable cache key from JSON-serialisable parts.

    Dict ordering does not matter, so two equal schemas always map to the
    same key.

    Example:
        >>> make_cache_key("table", {"b": 1, "a": 2}) == make_cache_key("table", {"a": 2, "b": 1})
        True
    """
    return json.dumps(parts, sort_keys=True, separators=(",", ":"), default=str)


class ComputationCache:
    """
    Memo for one generation call.

    Example:
        >>> cache = ComputationCache()
        >>> cache.get_or_compute("k", lambda: 42)
        42
        >>> cache.get_or_compute("k", lambda: 0)  # Cache hit
        42
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Any] = {}
        self._heights: Dict[str, Tuple[float, ...]] = {}
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the memoised value for key, computing it on first use."""
        if key in self._entries:
            self.hits += 1
            logger.debug(f"Cache HIT: {key[:80]}")
            return self._entries[key]

        self.misses += 1
        value = compute()
        self._entries[key] = value
        logger.debug(f"Cache MISS: {key[:80]}")
        return value

    def record_heights(self, key: str, heights: Sequence[float]) -> Tuple[float, ...]:
        """
        Remember the heights computed for key and check later computations.

        Args:
            key: Identity of the (schema, value) pair
            heights: Height sequence just computed

        Returns:
            The heights as a tuple

        Raises:
            CacheInconsistency: If key was recorded before with different heights
        """
        current = tuple(heights)
        previous = self._heights.get(key)
        if previous is None:
            self._heights[key] = current
        elif previous != current:
            raise CacheInconsistency(key, previous, current)
        return current

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Clear the cache."""
        self._entries.clear()
        self._heights.clear()
        logger.debug("Cache cleared")

    @property
    def hit_rate(self) -> str:
        """Return cache statistics as string."""
        return f"Cache: {self.hits} hits, {self.misses} misses, {len(self)} entries"
