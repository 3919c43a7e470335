"""Context-sensitive CommonMark escaping in two phases.

Phase 1 (:meth:`Escaper.mark`) runs on every raw text run while the
document is rendered and prefixes each potentially significant character
with :data:`PLACEHOLDER`.  Phase 2 (:meth:`Escaper.resolve`) runs once over
the fully assembled output and decides, looking at the surrounding Markdown,
which placeholders become a literal backslash.  The rest are dropped.

Usage::

    esc = Escaper(EscapeMode.SMART)
    body = "## Title\\n\\n" + esc.mark("# not a heading")
    esc.resolve(body)   # '## Title\\n\\n\\\\# not a heading'
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from semanticmd.options import EscapeMode

logger = logging.getLogger(__name__)

# ASCII SUB; never produced by rendering and stripped from incoming text.
PLACEHOLDER = "\x1a"

_REPLACEMENT_CHAR = "\ufffd"

ESCAPABLE_CHARS: frozenset[str] = frozenset("\\*_-+.>|$#=[]()!~`\"'")

_LINE_BREAKS: frozenset[str] = frozenset("\n\r")
_INLINE_SPACE: frozenset[str] = frozenset(" \t")

# A rule receives the buffer and the index of the character that follows a
# placeholder.  It returns how many characters the match covers, or -1.
Rule = Callable[[str, int], int]


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------

def _at_line_start(chars: str, index: int) -> bool:
    """True when only placeholders and spaces precede *index* on its line."""
    for i in range(index - 1, -1, -1):
        ch = chars[i]
        if ch == "\n":
            return True
        if ch not in (PLACEHOLDER, " "):
            return False
    return True


def _next_visible(chars: str, index: int) -> str:
    """Return the first non-placeholder character after *index* ('' at end)."""
    for i in range(index + 1, len(chars)):
        if chars[i] != PLACEHOLDER:
            return chars[i]
    return ""


def _followed_by_space(chars: str, index: int) -> bool:
    return index + 1 < len(chars) and chars[index + 1] in _INLINE_SPACE


# ---------------------------------------------------------------------------
# Rules (evaluated in RULES order, first match wins)
# ---------------------------------------------------------------------------

def emphasis(chars: str, index: int) -> int:
    if chars[index] not in "*_":
        return -1
    nxt = _next_visible(chars, index)
    if not nxt or nxt.isspace():
        return -1
    return 1


def blockquote(chars: str, index: int) -> int:
    if chars[index] != ">":
        return -1
    return 1 if _at_line_start(chars, index) else -1


def atx_header(chars: str, index: int) -> int:
    if chars[index] != "#" or not _at_line_start(chars, index):
        return -1
    count = 1
    for i in range(index + 1, len(chars)):
        ch = chars[i]
        if ch == "#":
            count += 1
            if count > 6:
                return -1
            continue
        if ch == PLACEHOLDER:
            continue
        if ch in " \t\n\r":
            return i - index
        return -1
    return 1


def setext_header(chars: str, index: int) -> int:
    if chars[index] not in "=-":
        return -1
    newlines = 0
    for i in range(index - 1, -1, -1):
        ch = chars[i]
        if ch in (PLACEHOLDER, " "):
            continue
        if ch == "\n":
            newlines += 1
            continue
        return 1 if newlines == 1 else -1
    return -1


def divider(chars: str, index: int) -> int:
    marker = chars[index]
    if marker not in "-*_" or not _at_line_start(chars, index):
        return -1
    count = 1
    for i in range(index + 1, len(chars)):
        ch = chars[i]
        if ch == marker:
            count += 1
        elif ch in (PLACEHOLDER, " "):
            continue
        elif ch in _LINE_BREAKS:
            break
        else:
            return -1
    return 1 if count >= 3 else -1


def ordered_list(chars: str, index: int) -> int:
    if chars[index] != ".":
        return -1
    has_digits = False
    for i in range(index - 1, -1, -1):
        ch = chars[i]
        if ch == "\n":
            break
        if "0" <= ch <= "9":
            has_digits = True
            continue
        if ch in (PLACEHOLDER, " "):
            continue
        return -1
    if has_digits and _followed_by_space(chars, index):
        return 1
    return -1


def unordered_list(chars: str, index: int) -> int:
    if chars[index] not in "-*+" or not _at_line_start(chars, index):
        return -1
    return 1 if _followed_by_space(chars, index) else -1


def image_or_link(chars: str, index: int) -> int:
    ch = chars[index]
    following = chars[index + 1] if index + 1 < len(chars) else ""
    if ch == "!":
        return 2 if following == "[" else -1
    if ch == "[":
        return 1
    if ch == "]":
        return 2 if following == "(" else -1
    if ch == "(":
        for i in range(index - 1, -1, -1):
            if chars[i] == "]":
                return 1
            if chars[i] != PLACEHOLDER:
                break
    return -1


def fenced_code(chars: str, index: int) -> int:
    fence = chars[index]
    if fence not in "`~" or not _at_line_start(chars, index):
        return -1
    count = 1
    for i in range(index + 1, min(len(chars), index + 3)):
        if chars[i] != fence:
            break
        count += 1
    return count if count >= 3 else -1


def inline_code(chars: str, index: int) -> int:
    if chars[index] != "`":
        return -1
    count = 1
    for i in range(index + 1, len(chars)):
        if chars[i] != "`":
            break
        count += 1
    return count


def backslash(chars: str, index: int) -> int:
    return 1 if chars[index] == "\\" else -1


RULES: tuple[Rule, ...] = (
    emphasis,
    blockquote,
    atx_header,
    setext_header,
    divider,
    ordered_list,
    unordered_list,
    image_or_link,
    fenced_code,
    inline_code,
    backslash,
)


# ---------------------------------------------------------------------------
# Escaper
# ---------------------------------------------------------------------------

class Escaper:
    """Marks raw text and later resolves the marks against the full output."""

    def __init__(self, mode: EscapeMode | str = EscapeMode.SMART) -> None:
        self.mode = EscapeMode(mode)
        self.rules: tuple[Rule, ...] = RULES if self.mode is EscapeMode.SMART else ()

    def mark(self, text: str) -> str:
        """Phase 1: sanitise *text* and place markers before escapable chars."""
        out: list[str] = []
        smart = self.mode is EscapeMode.SMART
        for ch in text:
            if ch == "\x00" or ch == PLACEHOLDER:
                out.append(_REPLACEMENT_CHAR)
            elif smart and ch in ESCAPABLE_CHARS:
                out.append(PLACEHOLDER)
                out.append(ch)
            else:
                out.append(ch)
        return "".join(out)

    def resolve(self, content: str) -> str:
        """Phase 2: turn each marker into ``\\`` or drop it."""
        if self.mode is not EscapeMode.SMART or PLACEHOLDER not in content:
            return content

        length = len(content)
        escape_at: set[int] = set()
        i = 0
        while i < length:
            if content[i] == PLACEHOLDER:
                if i + 1 >= length:
                    break
                for rule in self.rules:
                    width = rule(content, i + 1)
                    if width != -1:
                        escape_at.add(i)
                        i += width - 1
                        break
            i += 1

        logger.debug("Resolved %d of %d escape markers", len(escape_at), content.count(PLACEHOLDER))
        return "".join(
            ("\\" if idx in escape_at else "") if ch == PLACEHOLDER else ch
            for idx, ch in enumerate(content)
        )
