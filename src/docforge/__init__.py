"""Top-level package for docforge.

Turns a position-based document template plus a list of input records
into paginated PDF output.

Provides subpackages:
- docforge.common – unit conversion, colours, font metrics
- docforge.core – template models, draw primitives, validation
- docforge.images – header-only image dimension probe
- docforge.plugins – field-type renderers and the plugin registry
- docforge.generator – dynamic layout, orchestration and PDF output
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.4.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("docforge")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
