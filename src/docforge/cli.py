"""
Module: cli

Purpose:
    Command-line entry point.

    docforge generate TEMPLATE INPUTS -o OUT [--strict] [--verbose]
    docforge validate TEMPLATE [INPUTS] [--strict] [--verbose]

    Exit code 0 on success, 1 on validation or generation errors (every
    violation is printed), 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from docforge import __version__
from docforge.common.fonts import FontSet
from docforge.core.errors import DocforgeError
from docforge.core.models import is_blank_pdf
from docforge.core.schemas import ValidationError, check_inputs, check_template
from docforge.core.utils import load_inputs, load_template
from docforge.generator import GeneratorConfig, generate_pdf
from docforge.generator.output import read_page_geometries
from docforge.plugins import default_registry

logger = logging.getLogger("docforge.cli")


def _build_parser() -> argparse.ArgumentParser:
    # Accepted before or after the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
                        help="Enable debug logging")

    parser = argparse.ArgumentParser(prog="docforge", description="Generate PDFs from templates", parents=[common])
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a PDF for every input record", parents=[common])
    gen.add_argument("template", type=Path, help="Template JSON file")
    gen.add_argument("inputs", type=Path, help="Input records (JSON array or JSONL)")
    gen.add_argument("-o", "--output", type=Path, required=True, help="Output PDF path")
    gen.add_argument("--strict", action="store_true", help="Treat validation warnings as errors")
    gen.add_argument("--title", default="", help="PDF title")
    gen.add_argument("--author", default="", help="PDF author")

    val = sub.add_parser("validate", help="Check a template (and optionally inputs)", parents=[common])
    val.add_argument("template", type=Path, help="Template JSON file")
    val.add_argument("inputs", type=Path, nargs="?", help="Input records (JSON array or JSONL)")
    val.add_argument("--strict", action="store_true", help="Treat validation warnings as errors")
    return parser


def _print_violations(error: ValidationError) -> None:
    print(f"error: {error}", file=sys.stderr)
    details = error.violations or error.errors
    for item in details:
        print(f"  - {item}", file=sys.stderr)


def _run_generate(args: argparse.Namespace) -> int:
    template = load_template(args.template, strict=args.strict)
    inputs = load_inputs(args.inputs)
    config = GeneratorConfig(title=args.title, author=args.author, strict=args.strict)
    generate_pdf(template, inputs, output_path=args.output, config=config)
    print(f"Wrote {args.output}")
    return 0


def _run_validate(args: argparse.Namespace) -> int:
    template = load_template(args.template, strict=args.strict)
    registry = default_registry()

    base_pages = None
    if not is_blank_pdf(template.base_pdf):
        try:
            base_pages = len(read_page_geometries(template.base_pdf.data))
        except ValueError as exc:
            raise ValidationError(str(exc), path="basePdf") from exc

    violations = check_template(template, registry, fonts=FontSet.standard(), base_page_count=base_pages)
    if args.inputs is not None:
        violations.extend(check_inputs(template, load_inputs(args.inputs), registry))

    failing = [v for v in violations if v.fatal or args.strict]
    for violation in violations:
        label = "error" if violation in failing else "warning"
        print(f"{label}: {violation}", file=sys.stderr)
    if failing:
        return 1
    print(f"{args.template}: OK ({template.page_count} page(s))")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "generate":
            return _run_generate(args)
        return _run_validate(args)
    except ValidationError as e:
        _print_violations(e)
        return 1
    except (DocforgeError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
