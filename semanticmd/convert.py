"""semanticmd.convert - top-level HTML to Markdown entry points.

Basic usage::

    from semanticmd import convert_to_markdown

    md = convert_to_markdown(html, extract_main_content=True,
                             include_metadata="extended")

With the URL reference table::

    from semanticmd import convert

    result = convert(html, refify_urls=True, include_metadata="basic")
    print(result.markdown)
    print(result.url_references)   # {'ref0': 'https://cdn.example.com/img'}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup, Tag

from semanticmd.errors import ConversionError, InvalidConfiguration, ParseError
from semanticmd.extractors.ast_builder import html_to_ast
from semanticmd.extractors.dom import find_element
from semanticmd.extractors.main_content import find_main_content
from semanticmd.extractors.markdown import render_markdown
from semanticmd.extractors.metadata import extract_metadata
from semanticmd.extractors.refify import refify_urls
from semanticmd.nodes import MetaData, Node
from semanticmd.options import ConversionOptions

logger = logging.getLogger(__name__)

__all__ = [
    "ConversionError",
    "ConversionResult",
    "InvalidConfiguration",
    "ParseError",
    "convert",
    "convert_to_markdown",
    "parse_html",
    "resolve_options",
]


@dataclass
class ConversionResult:
    """Markdown output plus the side products of one conversion."""

    markdown: str
    url_references: dict[str, str] = field(default_factory=dict)
    metadata: MetaData | None = None

    def __str__(self) -> str:
        return self.markdown


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------


def resolve_options(
    options: ConversionOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ConversionOptions:
    """Normalise *options* (model, mapping or None) and apply *overrides*."""
    if options is None:
        return ConversionOptions.build(**overrides)
    if isinstance(options, ConversionOptions):
        return options.merged(**overrides)
    if isinstance(options, Mapping):
        return ConversionOptions.build(**{**options, **overrides})
    raise InvalidConfiguration(
        f"options must be ConversionOptions or a mapping, not {type(options).__name__}",
    )


def parse_html(markup: str | bytes | Tag) -> Tag:
    """Parse *markup* with lxml; already-parsed trees are returned unchanged."""
    if isinstance(markup, Tag):
        return markup
    if markup is None:
        raise ParseError("no HTML input provided")
    if not isinstance(markup, (str, bytes)):
        raise ParseError(f"cannot parse {type(markup).__name__} as HTML")
    if not markup:
        raise ParseError("empty HTML input")
    try:
        return BeautifulSoup(markup, "lxml")
    except Exception as exc:
        raise ParseError(f"failed to parse HTML: {exc}") from exc


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def convert(
    markup: str | bytes | Tag,
    options: ConversionOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ConversionResult:
    """Convert HTML to Markdown and return a :class:`ConversionResult`.

    Args:
        markup:    HTML text, bytes, or a parsed BeautifulSoup tree.
        options:   A :class:`ConversionOptions`, a mapping of option names,
                   or None for defaults.
        overrides: Individual option values applied on top of *options*.

    Raises:
        InvalidConfiguration: Unknown option name or unrecognised mode value.
        ParseError:           Empty or unparseable input.
    """
    opts = resolve_options(options, **overrides)
    doc = parse_html(markup)
    logger.debug(
        "Converting (main=%s, metadata=%s, refify=%s, escape=%s)",
        opts.extract_main_content, opts.include_metadata.value,
        opts.refify_urls, opts.escape_mode.value,
    )

    meta: MetaData | None = None
    if opts.metadata_enabled:
        meta = extract_metadata(find_element(doc, "head"), opts.include_metadata)

    root = find_main_content(doc) if opts.extract_main_content else doc

    nodes: list[Node] = html_to_ast(root, opts)
    if meta is not None:
        nodes.insert(0, meta)

    references: dict[str, str] = {}
    if opts.refify_urls:
        references = refify_urls(nodes)

    markdown = render_markdown(nodes, opts, references)
    return ConversionResult(markdown=markdown, url_references=references, metadata=meta)


def convert_to_markdown(
    markup: str | bytes | Tag,
    options: ConversionOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> str:
    """Same as :func:`convert` but return only the Markdown text."""
    return convert(markup, options, **overrides).markdown
