"""Head metadata extraction.

basic:    <title> + plain <meta name=... content=...> pairs
extended: basic + Open Graph + Twitter Card + JSON-LD objects
"""

from __future__ import annotations

import json
import logging
from typing import Any

from bs4 import Tag

from semanticmd.extractors.dom import direct_children, find_element, get_attribute, text_content
from semanticmd.nodes import MetaData
from semanticmd.options import MetaDataMode

logger = logging.getLogger(__name__)

_IGNORED_META_NAMES: frozenset[str] = frozenset(
    {"viewport", "referrer", "Content-Security-Policy"},
)

_OG_PREFIX = "og:"
_TWITTER_PREFIX = "twitter:"
_JSONLD_TYPE = "application/ld+json"


class MalformedJSONLD(ValueError):
    """A JSON-LD script did not contain a JSON object; the item is skipped."""


# ---------------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------------


def _parse_jsonld(script: Tag) -> dict[str, Any]:
    try:
        data = json.loads(text_content(script))
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedJSONLD(str(exc)) from exc
    if not isinstance(data, dict):
        raise MalformedJSONLD(f"expected a JSON object, got {type(data).__name__}")
    return data


def _extract_jsonld(head: Tag) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for script in direct_children(head, "script"):
        if get_attribute(script, "type") != _JSONLD_TYPE:
            continue
        try:
            items.append(_parse_jsonld(script))
        except MalformedJSONLD as exc:
            logger.debug("Skipping JSON-LD block: %s", exc)
    return items


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_metadata(head: Tag | None, mode: MetaDataMode | str) -> MetaData | None:
    """Read *head* into a :class:`MetaData` record.

    Returns ``None`` when *mode* is ``none``.  A missing head yields an empty
    record so callers can still emit frontmatter.
    """
    mode = MetaDataMode(mode or MetaDataMode.NONE)
    if mode is MetaDataMode.NONE:
        return None

    meta = MetaData()
    if head is None:
        return meta

    extended = mode is MetaDataMode.EXTENDED

    title = find_element(head, "title")
    if title is not None:
        meta.standard["title"] = text_content(title).strip()

    for tag in direct_children(head, "meta"):
        prop = get_attribute(tag, "property")
        name = get_attribute(tag, "name")
        content = get_attribute(tag, "content")

        if prop.startswith(_OG_PREFIX) and content:
            if extended:
                meta.open_graph[prop[len(_OG_PREFIX):]] = content
        elif name.startswith(_TWITTER_PREFIX) and content:
            if extended:
                meta.twitter[name[len(_TWITTER_PREFIX):]] = content
        elif name and content and name not in _IGNORED_META_NAMES:
            meta.standard[name] = content

    if extended:
        meta.jsonld = _extract_jsonld(head)

    logger.debug(
        "Metadata (%s): %d standard, %d og, %d twitter, %d json-ld",
        mode.value, len(meta.standard), len(meta.open_graph),
        len(meta.twitter), len(meta.jsonld),
    )
    return meta
