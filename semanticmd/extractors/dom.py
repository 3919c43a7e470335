"""Small helpers over BeautifulSoup trees shared by the extractors."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString


def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def is_text(node: PageElement) -> bool:
    """True for character data; comments, doctype, CDATA and PIs excluded."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_element(node: PageElement) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def tag_name(node: PageElement) -> str:
    return (node.name or "").lower() if isinstance(node, Tag) else ""


def get_attribute(el: Tag, name: str) -> str:
    return _safe_str(el.get(name))


def has_attribute(el: Tag, name: str) -> bool:
    return el.has_attr(name)


def class_tokens(el: Tag) -> list[str]:
    return get_attribute(el, "class").split()


def text_content(node: PageElement) -> str:
    """Concatenate all descendant text, like DOM ``textContent``."""
    if is_text(node):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    return "".join(str(s) for s in node.descendants if is_text(s))


def iter_elements(root: Tag) -> Iterator[Tag]:
    """Depth-first, document-order walk over *root* and its descendant tags."""
    if is_element(root):
        yield root
    for el in root.descendants:
        if isinstance(el, Tag):
            yield el


def find_element(root: Tag, name: str) -> Tag | None:
    """First element named *name* in document order, *root* included."""
    for el in iter_elements(root):
        if tag_name(el) == name:
            return el
    return None


def direct_children(el: Tag, *names: str) -> list[Tag]:
    return [c for c in el.children if isinstance(c, Tag) and tag_name(c) in names]
