"""Render the document AST to Markdown.

Raw text is marked by the :class:`~semanticmd.escape.Escaper` while each
node is rendered; the markers are resolved once the whole body exists,
because whether a character needs escaping depends on the Markdown around
it (line starts, table pipes, link brackets).
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

from semanticmd.escape import PLACEHOLDER, Escaper
from semanticmd.extractors.frontmatter import render_frontmatter
from semanticmd.nodes import (
    Blockquote,
    Bold,
    Code,
    Custom,
    Heading,
    Image,
    Italic,
    Link,
    List,
    MetaData,
    Node,
    SemanticHTML,
    Strikethrough,
    Table,
    TableCell,
    Text,
    Video,
)
from semanticmd.options import ConversionOptions

logger = logging.getLogger(__name__)

# Characters JavaScript's encodeURI leaves alone (plus '%' to keep
# already-encoded sequences intact).
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#%[]"

_CELL_PIPE_RE = re.compile(re.escape(PLACEHOLDER) + r"?\|")


def _encode_uri(uri: str) -> str:
    return quote(uri, safe=_URI_SAFE)


class MarkdownRenderer:
    """Stateless per-call renderer bound to one options value."""

    def __init__(self, options: ConversionOptions) -> None:
        self.options = options
        self.escaper = Escaper(options.escape_mode)

    # -- entry points --------------------------------------------------------

    def render_nodes(self, nodes: list[Node], depth: int = 0) -> str:
        return "".join(self.render_node(node, depth) for node in nodes)

    def render_node(self, node: Node, depth: int = 0) -> str:
        hook = self.options.override_node_renderer
        if hook is not None:
            result = hook(node, self.options, depth)
            if result:
                return result

        if isinstance(node, Text):
            return self.escaper.mark(node.content)
        if isinstance(node, Heading):
            return "#" * node.level + " " + self._inner(node.content, depth) + "\n\n"
        if isinstance(node, Bold):
            return "**" + self._inner(node.content, depth) + "**"
        if isinstance(node, Italic):
            return "*" + self._inner(node.content, depth) + "*"
        if isinstance(node, Strikethrough):
            return "~~" + self._inner(node.content, depth) + "~~"
        if isinstance(node, Link):
            return self._link(node, depth)
        if isinstance(node, Image):
            return f"![{node.alt.strip()}]({_encode_uri(node.src)})\n"
        if isinstance(node, Video):
            return self._video(node)
        if isinstance(node, List):
            return self._list(node, depth)
        if isinstance(node, Code):
            if node.inline:
                return f"`{node.content}`"
            return f"```{node.language}\n{node.content}\n```\n\n"
        if isinstance(node, Blockquote):
            lines = self._inner(node.content, depth).split("\n")
            return "\n".join("> " + line.strip() for line in lines) + "\n\n"
        if isinstance(node, Table):
            return self._table(node, depth)
        if isinstance(node, SemanticHTML):
            return self._semantic(node, depth)
        if isinstance(node, Custom):
            custom = self.options.render_custom_node
            return custom(node, self.options, depth) if custom is not None else ""
        # MetaData is emitted as frontmatter; structural parts render via parents
        return ""

    # -- helpers -------------------------------------------------------------

    def _inner(self, nodes: list[Node], depth: int) -> str:
        return self.render_nodes(nodes, depth).strip()

    def _link(self, node: Link, depth: int) -> str:
        content = self._inner(node.content, depth)
        href = _encode_uri(node.href)
        if all(isinstance(child, Text) for child in node.content):
            return f"[{content}]({href})"
        return f'<a href="{href}">{content}</a>'

    def _video(self, node: Video) -> str:
        out = f"![Video]({_encode_uri(node.src)})\n"
        if node.poster:
            out += f"![Poster]({_encode_uri(node.poster)})\n"
        if node.controls:
            out += "Controls: true\n"
        return out

    def _list(self, node: List, depth: int) -> str:
        indent = "  " * depth
        lines: list[str] = []
        for number, item in enumerate(node.items, 1):
            parts: list[str] = []
            for child in item.content:
                rendered = self.render_node(child, depth + 1)
                if isinstance(child, List) and parts:
                    rendered = "\n" + rendered
                parts.append(rendered)
            content = "".join(parts).strip()
            marker = f"{number}. " if node.ordered else "- "
            lines.append(f"{indent}{marker}{content}\n")
        if depth == 0:
            lines.append("\n")
        return "".join(lines)

    def _cell(self, cell: TableCell, depth: int) -> str:
        content = self.render_nodes(cell.content, depth + 1).strip()
        content = _CELL_PIPE_RE.sub(r"\\|", content)
        if cell.col_id:
            content += f" <!-- {cell.col_id} -->"
        if cell.colspan > 1:
            content += f" <!-- colspan: {cell.colspan} -->"
        if cell.rowspan > 1:
            content += f" <!-- rowspan: {cell.rowspan} -->"
        return content

    def _table(self, node: Table, depth: int) -> str:
        if not node.rows:
            return ""
        width = max(len(row.cells) for row in node.rows)
        out: list[str] = []
        for row_idx, row in enumerate(node.rows):
            line = "".join(f"| {self._cell(cell, depth)} " for cell in row.cells)
            line += "|  " * (width - len(row.cells))
            out.append(line + "|\n")
            if row_idx == 0 and node.has_header:
                out.append("| --- " * width + "|\n")
        out.append("\n")
        return "".join(out)

    def _semantic(self, node: SemanticHTML, depth: int) -> str:
        content = self._inner(node.content, depth)
        if node.kind == "article":
            return content + "\n\n"
        if node.kind == "section":
            return "---\n\n" + content + "\n\n---\n\n"
        return f"<!-- <{node.kind}> -->\n{content}\n<!-- </{node.kind}> -->\n\n"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_markdown(
    nodes: list[Node],
    options: ConversionOptions | None = None,
    url_references: dict[str, str] | None = None,
) -> str:
    """Render *nodes* (frontmatter first, then the escaped body)."""
    options = options or ConversionOptions()
    renderer = MarkdownRenderer(options)

    frontmatter = ""
    meta = next((n for n in nodes if isinstance(n, MetaData)), None)
    if meta is not None:
        frontmatter = render_frontmatter(meta, options, url_references)

    body = renderer.escaper.resolve(renderer.render_nodes(nodes))
    markdown = (frontmatter + body).rstrip("\n\r\t ")
    logger.debug("Rendered %d characters of Markdown", len(markdown))
    return markdown
