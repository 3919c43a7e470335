"""Main content detection.

Tier 1: first ``<main>`` element
Tier 2: first element whose ``role`` contains "main"
Tier 3: heuristic score over every element under ``<body>``; the highest
        scoring element at or above :data:`MIN_SCORE` wins, ties going to the
        element that comes first in the document.  Without any candidate the
        body itself is returned.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from semanticmd.extractors.dom import (
    class_tokens,
    find_element,
    get_attribute,
    has_attribute,
    iter_elements,
    tag_name,
    text_content,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 20

# id / class tokens that strongly indicate primary content
_HIGH_IMPACT_NAMES: tuple[str, ...] = (
    "article",
    "content",
    "main-container",
    "main",
    "main-content",
)

_HIGH_IMPACT_TAGS: frozenset[str] = frozenset({"article", "main", "section"})

_DATA_ATTRIBUTES: tuple[str, ...] = ("data-main", "data-content")

_MAX_PARAGRAPH_BONUS = 5
_MAX_TEXT_BONUS = 5
_TEXT_BLOCK = 200
_LINK_DENSITY_LIMIT = 0.3


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def link_density(el: Tag) -> float:
    """Share of *el*'s text that sits inside ``<a>`` descendants."""
    total = len(text_content(el))
    if total == 0:
        return 0.0
    linked = sum(len(text_content(a)) for a in el.find_all("a"))
    return linked / total


def calculate_score(el: Tag) -> int:
    score = 0

    el_id = get_attribute(el, "id")
    classes = class_tokens(el)
    for name in _HIGH_IMPACT_NAMES:
        if el_id == name or name in classes:
            score += 10

    if tag_name(el) in _HIGH_IMPACT_TAGS:
        score += 5

    score += min(len(el.find_all("p")), _MAX_PARAGRAPH_BONUS)

    text_length = len(text_content(el).strip())
    if text_length > _TEXT_BLOCK:
        score += min(text_length // _TEXT_BLOCK, _MAX_TEXT_BONUS)

    if link_density(el) < _LINK_DENSITY_LIMIT:
        score += 5

    if any(has_attribute(el, attr) for attr in _DATA_ATTRIBUTES):
        score += 10

    if "main" in get_attribute(el, "role"):
        score += 10

    return score


# ---------------------------------------------------------------------------
# Candidate selection
# ---------------------------------------------------------------------------


def _find_role_main(root: Tag) -> Tag | None:
    for el in iter_elements(root):
        if "main" in get_attribute(el, "role"):
            return el
    return None


def find_main_content(root: Tag) -> Tag:
    """Return the element judged to hold the document's primary content."""
    main = find_element(root, "main")
    if main is not None:
        logger.debug("Main content: <main> element")
        return main

    role_main = _find_role_main(root)
    if role_main is not None:
        logger.debug("Main content: role=main on <%s>", tag_name(role_main))
        return role_main

    body = find_element(root, "body") or root

    best: Tag | None = None
    best_score = -1
    for el in iter_elements(body):
        score = calculate_score(el)
        if score >= MIN_SCORE and score > best_score:
            best, best_score = el, score

    if best is None:
        logger.debug("Main content: no candidate >= %d, using body", MIN_SCORE)
        return body

    logger.debug("Main content: <%s> scored %d", tag_name(best), best_score)
    return best
