"""CLI entry point: python -m semanticmd [-i FILE | -u URL] [options]"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any

from semanticmd import __version__
from semanticmd.convert import ConversionResult, convert
from semanticmd.errors import ConversionError
from semanticmd.fetch import FetchError, fetch_html, read_input
from semanticmd.profiles import load_profile

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="semantic-md",
        description=(
            "Convert HTML to semantic, token-efficient Markdown for LLMs.\n"
            "Reads from --url, --input, or stdin and writes to --output or stdout."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-i", "--input", default=None, metavar="FILE",
                        help="Input HTML file ('-' for stdin, default: stdin)")
    parser.add_argument("-o", "--output", default=None, metavar="FILE",
                        help="Output Markdown file (default: stdout)")
    parser.add_argument("-u", "--url", default=None, metavar="URL",
                        help="Fetch HTML from URL (takes precedence over --input)")
    parser.add_argument("-e", "--extract-main", action="store_true", default=None,
                        help="Extract only the main content of the page")
    parser.add_argument("-t", "--track-table-columns", action="store_true", default=None,
                        help="Annotate table cells with column IDs (A, B, ...)")
    parser.add_argument("-m", "--include-meta-data", default=None,
                        choices=["basic", "extended"], metavar="{basic,extended}",
                        help="Emit head metadata as YAML frontmatter")
    parser.add_argument("-r", "--refify-urls", action="store_true", default=None,
                        help="Replace long URLs with reference tokens")
    parser.add_argument("-d", "--domain", default=None, metavar="DOMAIN",
                        help="Website domain recorded in the options")
    parser.add_argument("--escape-mode", default=None,
                        choices=["smart", "disabled"], metavar="{smart,disabled}",
                        help="Markdown escaping mode (default: smart)")
    parser.add_argument("--profile", default=None, metavar="YAML",
                        help="YAML profile with default and per-domain options")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    parser.add_argument("--debug", action="store_true", default=False,
                        help="Shorthand for --log-level DEBUG")
    parser.add_argument("--summary", action="store_true", default=False,
                        help="Print a conversion summary table to stderr")
    parser.add_argument("--version", action="version",
                        version=f"semantic-md {__version__}")
    return parser


def _options_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Profile values first, explicit flags on top."""
    options: dict[str, Any] = {}
    if args.profile:
        options.update(load_profile(args.profile, args.url or args.domain or ""))

    flags = {
        "extract_main_content": args.extract_main,
        "enable_table_column_tracking": args.track_table_columns,
        "include_metadata": args.include_meta_data,
        "refify_urls": args.refify_urls,
        "website_domain": args.domain,
        "escape_mode": args.escape_mode,
    }
    options.update({k: v for k, v in flags.items() if v is not None})
    return options


def _print_summary(source: str, html: str, result: ConversionResult, elapsed: float) -> None:
    try:
        from rich import box
        from rich.console import Console
        from rich.table import Table

        console = Console(stderr=True)
        tbl = Table(title="[bold cyan]Conversion Summary[/bold cyan]", box=box.SIMPLE_HEAVY)
        tbl.add_column("Field", style="bold")
        tbl.add_column("Value", style="green")
        tbl.add_row("Source", source)
        tbl.add_row("HTML size", f"{len(html):,} chars")
        tbl.add_row("Markdown size", f"{len(result.markdown):,} chars")
        tbl.add_row("URL references", str(len(result.url_references)))
        if result.metadata is not None:
            tbl.add_row("Metadata keys", str(len(result.metadata.standard)))
        tbl.add_row("Elapsed", f"{elapsed * 1000:.1f} ms")
        console.print(tbl)
    except Exception as exc:
        logger.debug("Rich summary display failed: %s", exc)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level="DEBUG" if args.debug else args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = _options_from_args(args)
        started = time.perf_counter()
        if args.url:
            source = args.url
            html = fetch_html(args.url)
            options.setdefault("website_domain", args.url)
        else:
            source = args.input or "<stdin>"
            html = read_input(args.input)
        result = convert(html, options)
        elapsed = time.perf_counter() - started
    except (ConversionError, FetchError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.output:
        try:
            Path(args.output).write_text(result.markdown, encoding="utf-8")
        except OSError as exc:
            print(f"ERROR: Cannot write {args.output}: {exc}", file=sys.stderr)
            return 1
        logger.info("Wrote %d characters to %s", len(result.markdown), args.output)
    else:
        sys.stdout.write(result.markdown)
        if result.markdown:
            sys.stdout.write("\n")

    if args.summary:
        _print_summary(source, html, result, elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
