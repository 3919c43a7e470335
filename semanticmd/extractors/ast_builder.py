"""Convert a BeautifulSoup tree into the document AST.

Block and inline elements map onto :mod:`semanticmd.nodes` types; wrappers
such as ``<p>``, ``<div>`` and ``<span>`` are transparent and splice their
children into the parent sequence.  Two host hooks can intercept elements:
``override_element_processing`` before the built-in dispatch for every child
and ``process_unhandled_element`` for tags without a built-in rule.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from bs4 import PageElement, Tag

from semanticmd.extractors.dom import (
    class_tokens,
    direct_children,
    get_attribute,
    has_attribute,
    is_text,
    tag_name,
    text_content,
)
from semanticmd.nodes import (
    SEMANTIC_KINDS,
    Blockquote,
    Bold,
    Code,
    Heading,
    Image,
    Italic,
    Link,
    List,
    ListItem,
    Node,
    SemanticHTML,
    Strikethrough,
    Table,
    TableCell,
    TableRow,
    Text,
    Video,
)
from semanticmd.options import ConversionOptions

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^h([1-6])$")
_SPAN_RE = re.compile(r"^\d+$")

_TRANSPARENT_TAGS: frozenset[str] = frozenset({"p", "div", "span"})
_DROPPED_TAGS: frozenset[str] = frozenset({"script", "style", "noscript"})
_STRIKE_TAGS: frozenset[str] = frozenset({"s", "strike", "del"})
_ROW_GROUP_TAGS: tuple[str, ...] = ("thead", "tbody", "tfoot")
_LANGUAGE_PREFIXES: tuple[str, ...] = ("language-", "lang-")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def generate_column_id(index: int) -> str:
    """Spreadsheet-style column label: 0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ."""
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def _parse_span(value: str) -> int:
    value = value.strip()
    if not _SPAN_RE.match(value):
        return 1
    return max(int(value), 1)


def _code_language(code: Tag) -> str:
    for token in class_tokens(code):
        for prefix in _LANGUAGE_PREFIXES:
            if token.startswith(prefix):
                return token[len(prefix):]
    return ""


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class _AstBuilder:
    def __init__(self, options: ConversionOptions) -> None:
        self.options = options
        self._handlers: dict[str, Callable[[Tag, int], list[Node]]] = {
            "a": self._link,
            "img": self._image,
            "video": self._video,
            "ul": self._list,
            "ol": self._list,
            "strong": self._wrap(Bold),
            "b": self._wrap(Bold),
            "em": self._wrap(Italic),
            "i": self._wrap(Italic),
            "code": self._inline_code,
            "pre": self._pre,
            "blockquote": self._wrap(Blockquote),
            "table": self._table,
            "br": lambda el, depth: [Text("\n")],
        }
        for tag in _STRIKE_TAGS:
            self._handlers[tag] = self._wrap(Strikethrough)

    def children(self, parent: Tag, depth: int) -> list[Node]:
        nodes: list[Node] = []
        for child in parent.children:
            nodes.extend(self.node(child, depth))
        return nodes

    def node(self, child: PageElement, depth: int) -> list[Node]:
        hook = self.options.override_element_processing
        if hook is not None:
            replaced = hook(child, self.options, depth)
            if replaced is not None:
                return list(replaced)

        if is_text(child):
            text = str(child).strip()
            return [Text(text)] if text else []
        if not isinstance(child, Tag):
            return []
        return self.element(child, depth)

    def element(self, el: Tag, depth: int) -> list[Node]:
        name = tag_name(el)

        heading = _HEADING_RE.match(name)
        if heading:
            return [Heading(int(heading.group(1)), self.children(el, depth))]
        if name in _TRANSPARENT_TAGS:
            return self.children(el, depth)
        if name in _DROPPED_TAGS:
            return []
        if name in SEMANTIC_KINDS:
            return [SemanticHTML(name, self.children(el, depth))]

        handler = self._handlers.get(name)
        if handler is not None:
            return handler(el, depth)

        hook = self.options.process_unhandled_element
        if hook is not None:
            replaced = hook(el, self.options, depth)
            if replaced is not None:
                return list(replaced)
        return self.children(el, depth)

    # -- element handlers ----------------------------------------------------

    def _wrap(self, node_type: type) -> Callable[[Tag, int], list[Node]]:
        def handler(el: Tag, depth: int) -> list[Node]:
            return [node_type(self.children(el, depth))]
        return handler

    def _link(self, el: Tag, depth: int) -> list[Node]:
        return [Link(get_attribute(el, "href"), self.children(el, depth))]

    def _image(self, el: Tag, depth: int) -> list[Node]:
        return [Image(get_attribute(el, "src"), get_attribute(el, "alt"))]

    def _video(self, el: Tag, depth: int) -> list[Node]:
        return [
            Video(
                get_attribute(el, "src"),
                poster=get_attribute(el, "poster"),
                controls=has_attribute(el, "controls"),
            ),
        ]

    def _list(self, el: Tag, depth: int) -> list[Node]:
        items = [
            ListItem(self.children(li, depth + 1))
            for li in direct_children(el, "li")
        ]
        return [List(tag_name(el) == "ol", items)]

    def _inline_code(self, el: Tag, depth: int) -> list[Node]:
        if tag_name(el.parent) == "pre":
            return []
        return [Code(text_content(el), inline=True)]

    def _pre(self, el: Tag, depth: int) -> list[Node]:
        code = next(iter(direct_children(el, "code")), None)
        language = ""
        content = ""
        if code is not None:
            language = _code_language(code)
            content = text_content(code)
        if not content:
            content = text_content(el)
        return [Code(content, language=language)]

    def _table(self, el: Tag, depth: int) -> list[Node]:
        row_elements: list[Tag] = []
        for child in el.children:
            name = tag_name(child)
            if name == "tr":
                row_elements.append(child)
            elif name in _ROW_GROUP_TAGS:
                row_elements.extend(direct_children(child, "tr"))

        tracking = self.options.enable_table_column_tracking
        table = Table()
        for row_idx, tr in enumerate(row_elements):
            row = TableRow()
            for col_idx, td in enumerate(direct_children(tr, "th", "td")):
                cell = TableCell(
                    self.children(td, depth + 1),
                    colspan=_parse_span(get_attribute(td, "colspan")),
                    rowspan=_parse_span(get_attribute(td, "rowspan")),
                    is_header=tag_name(td) == "th",
                )
                if tracking:
                    cell.col_id = generate_column_id(col_idx)
                    if row_idx == 0:
                        table.col_ids.append(cell.col_id)
                row.cells.append(cell)
            table.rows.append(row)

        first = table.rows[0].cells if table.rows else []
        table.has_header = bool(first) and all(c.is_header for c in first)
        return [table]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def html_to_ast(root: Tag, options: ConversionOptions | None = None, depth: int = 0) -> list[Node]:
    """Parse the children of *root* into a list of AST nodes."""
    nodes = _AstBuilder(options or ConversionOptions()).children(root, depth)
    logger.debug("Parsed <%s> into %d top-level nodes", tag_name(root) or "document", len(nodes))
    return nodes
