"""Document AST produced by the parser and consumed by the renderer.

The node set is closed: the renderer dispatches on the concrete class and
anything host-specific travels inside :class:`Custom`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

SEMANTIC_KINDS: frozenset[str] = frozenset(
    {
        "article",
        "section",
        "aside",
        "nav",
        "header",
        "footer",
        "main",
        "figure",
        "figcaption",
        "details",
        "summary",
        "mark",
        "time",
    },
)


@dataclass
class Text:
    content: str


@dataclass
class Bold:
    content: list[Node] = field(default_factory=list)


@dataclass
class Italic:
    content: list[Node] = field(default_factory=list)


@dataclass
class Strikethrough:
    content: list[Node] = field(default_factory=list)


@dataclass
class Heading:
    level: int
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.level = min(max(int(self.level), 1), 6)


@dataclass
class Link:
    href: str
    content: list[Node] = field(default_factory=list)


@dataclass
class Image:
    src: str
    alt: str = ""


@dataclass
class Video:
    src: str
    poster: str = ""
    controls: bool = False


@dataclass
class ListItem:
    content: list[Node] = field(default_factory=list)


@dataclass
class List:
    ordered: bool
    items: list[ListItem] = field(default_factory=list)


@dataclass
class TableCell:
    content: list[Node] = field(default_factory=list)
    col_id: str = ""
    colspan: int = 1
    rowspan: int = 1
    is_header: bool = False

    def __post_init__(self) -> None:
        self.colspan = max(self.colspan, 1)
        self.rowspan = max(self.rowspan, 1)


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table:
    rows: list[TableRow] = field(default_factory=list)
    col_ids: list[str] = field(default_factory=list)
    has_header: bool = False


@dataclass
class Blockquote:
    content: list[Node] = field(default_factory=list)


@dataclass
class SemanticHTML:
    """Wrapper for one of the :data:`SEMANTIC_KINDS` HTML5 elements."""

    kind: str
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.kind not in SEMANTIC_KINDS:
            raise ValueError(f"Unsupported semantic element: {self.kind!r}")


@dataclass
class Code:
    content: str
    language: str = ""
    inline: bool = False


@dataclass
class MetaData:
    """Head metadata; at most one per document and always the first node."""

    standard: dict[str, str] = field(default_factory=dict)
    open_graph: dict[str, str] = field(default_factory=dict)
    twitter: dict[str, str] = field(default_factory=dict)
    jsonld: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class Custom:
    """Opaque host payload, rendered only by a custom-node renderer hook."""

    payload: Any = None


Node = Union[
    Text,
    Bold,
    Italic,
    Strikethrough,
    Heading,
    Link,
    Image,
    Video,
    List,
    ListItem,
    Table,
    TableRow,
    TableCell,
    Blockquote,
    SemanticHTML,
    Code,
    MetaData,
    Custom,
]

__all__ = [
    "SEMANTIC_KINDS",
    "Blockquote",
    "Bold",
    "Code",
    "Custom",
    "Heading",
    "Image",
    "Italic",
    "Link",
    "List",
    "ListItem",
    "MetaData",
    "Node",
    "SemanticHTML",
    "Strikethrough",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "Video",
]
