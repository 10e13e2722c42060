"""Command-line entry point for todoc.

Generates, for every documented source file:
    <stem>.md           - Reference page beside the source (or under --output-dir)
    README.md           - Index of all pages (with --index)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .base import TodocError
from .config import Settings
from .extractors import extract_docs
from .generators import generate_index, generate_page, output_path_for
from .models import ExtractionResult, LanguageId
from .validators import compute_coverage, validate_docs

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todoc",
        description="Generate Markdown reference pages from Lua doc-comments.",
    )
    parser.add_argument(
        "--files",
        nargs="+",
        action="extend",
        default=[],
        metavar="PATH",
        help="source files to process",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="process every supported file in the workspace directory",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="descend into sub-directories (with --all)",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, help="write pages here instead of beside sources"
    )
    parser.add_argument(
        "--index", action="store_true", help="also write a README.md index"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="fail when functions are undocumented or lack @brief",
    )
    parser.add_argument("--workspace", type=Path, help="workspace directory")
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=None, help="debug logging"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def discover_sources(workspace: Path, recursive: bool = False) -> list[Path]:
    """Find files with a known language extension, skipping hidden paths."""
    pattern = "**/*" if recursive else "*"
    sources = []
    for path in sorted(workspace.glob(pattern)):
        relative = path.relative_to(workspace)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and LanguageId.from_extension(path.suffix) is not LanguageId.NONE:
            sources.append(path)
    return sources


def run(settings: Settings, sources: list[Path], write_index: bool = False) -> int:
    """Extract, validate and write documentation for `sources`.

    Returns:
        Process exit code (1 if strict validation failed)
    """
    print("Extracting docs...")

    extracted: list[tuple[Path, ExtractionResult]] = []
    for source in sources:
        try:
            result = extract_docs(source, settings.workspace)
        except TodocError as e:
            log.warning("skipping %s: %s", e.path, e)
            continue
        extracted.append((source, result))
        documented = sum(1 for d in result.documents if d.brief)
        print(
            f"  ✓ {result.source_file}: "
            f"{documented}/{len(result.all_declarations)} functions"
        )

    results = [result for _, result in extracted]

    validation = validate_docs(results, strict=settings.strict)
    for warning in validation.warnings:
        log.debug("%s", warning)
    if validation.errors:
        print("\nValidation errors:")
        for err in validation.errors:
            print(f"  ✗ {err}")
        return 1

    coverage = compute_coverage(results)
    if coverage:
        summary = ", ".join(f"{lang} {value:.0%}" for lang, value in coverage.items())
        print(f"\nCoverage: {summary}")

    print("\nGenerated:")

    pages: dict[Path, ExtractionResult] = {}
    for source, result in extracted:
        page = generate_page(result)
        if not page:
            continue
        destination = output_path_for(source, settings.output_dir, settings.workspace)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(page, encoding="utf-8")
        pages[destination] = result
        print(f"  {destination}")

    if write_index:
        index_dir = settings.output_dir or settings.workspace
        index_dir.mkdir(parents=True, exist_ok=True)
        links = {
            Path(os.path.relpath(page, index_dir)).as_posix(): result
            for page, result in pages.items()
        }
        index_path = index_dir / "README.md"
        index_path.write_text(generate_index(links), encoding="utf-8")
        print(f"  {index_path}")

    print("\nDone!")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Generate documentation for the requested files."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.files and not args.all:
        parser.error("nothing to do: pass --files PATH... or --all")

    settings = Settings.from_env().with_overrides(
        workspace=args.workspace,
        output_dir=args.output_dir,
        strict=args.strict,
        debug=args.verbose,
    )

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sources = [Path(f) for f in args.files]
    if args.all:
        sources.extend(discover_sources(settings.workspace, args.recursive))

    return run(settings, sources, write_index=args.index)


if __name__ == "__main__":
    sys.exit(main())
