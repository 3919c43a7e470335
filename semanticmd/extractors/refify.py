"""URL refification: shorten long absolute URLs into reference tokens.

Media URLs keep their filename and share a token per directory::

    https://cdn.example.com/img/a.jpg  ->  ref0://a.jpg
    https://cdn.example.com/img/b.jpg  ->  ref0://b.jpg

Other absolute URLs with a deep path are replaced by a bare token.  The
returned table maps each token back to the text it replaced.
"""

from __future__ import annotations

import logging
import re

from semanticmd.nodes import (
    Blockquote,
    Bold,
    Heading,
    Image,
    Italic,
    Link,
    List,
    Node,
    SemanticHTML,
    Strikethrough,
    Table,
    Video,
)

logger = logging.getLogger(__name__)

MEDIA_SUFFIXES: frozenset[str] = frozenset(
    {
        # images
        "jpeg", "jpg", "png", "gif", "bmp", "tiff", "tif", "svg", "webp", "ico",
        # video
        "avi", "mov", "mp4", "mkv", "flv", "wmv", "webm", "mpeg", "mpg",
        # audio
        "mp3", "wav", "aac", "ogg", "flac", "m4a",
        # documents
        "pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "txt",
        # web
        "css", "js", "xml", "json", "html", "htm",
    },
)

_QUERY_OR_FRAGMENT_RE = re.compile(r"[?#].*$", re.DOTALL)
_MIN_SEGMENTS = 4


class _Refifier:
    def __init__(self) -> None:
        self.prefix_to_token: dict[str, str] = {}

    def _token(self, prefix: str) -> str:
        token = self.prefix_to_token.get(prefix)
        if token is None:
            token = f"ref{len(self.prefix_to_token)}"
            self.prefix_to_token[prefix] = token
        return token

    def url(self, url: str) -> str:
        if not url.startswith("http"):
            return url

        suffix = _QUERY_OR_FRAGMENT_RE.sub("", url.rsplit(".", 1)[-1])
        if suffix.lower() in MEDIA_SUFFIXES:
            prefix, _, filename = url.rpartition("/")
            return f"{self._token(prefix)}://{filename}"

        if len(url.split("/")) > _MIN_SEGMENTS:
            return self._token(url)
        return url

    def walk(self, nodes: list[Node]) -> None:
        for node in nodes:
            if isinstance(node, Link):
                node.href = self.url(node.href)
                self.walk(node.content)
            elif isinstance(node, Image):
                node.src = self.url(node.src)
            elif isinstance(node, Video):
                node.src = self.url(node.src)
                if node.poster:
                    node.poster = self.url(node.poster)
            elif isinstance(node, List):
                for item in node.items:
                    self.walk(item.content)
            elif isinstance(node, Table):
                for row in node.rows:
                    for cell in row.cells:
                        self.walk(cell.content)
            elif isinstance(
                node,
                (Bold, Italic, Strikethrough, Heading, Blockquote, SemanticHTML),
            ):
                self.walk(node.content)


def refify_urls(nodes: list[Node]) -> dict[str, str]:
    """Rewrite URL fields in *nodes* in place; return ``{token: original}``."""
    refifier = _Refifier()
    refifier.walk(nodes)
    references = {token: prefix for prefix, token in refifier.prefix_to_token.items()}
    logger.debug("Refified URLs into %d references", len(references))
    return references
