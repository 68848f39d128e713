"""Display-width helpers for drawing buffer lines on a fixed-width terminal."""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

_CONTROL_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f-\x9f]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tone modifiers, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000 or 0x2600 <= ord(first) <= 0x27BF:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def sanitize(text: str) -> str:
    """Make *text* safe to print inside one screen row.

    Tabs become three spaces; other control characters become ``?`` so a
    loaded file cannot move the cursor or restyle the screen.
    """
    return _CONTROL_RE.sub("?", text.replace("\t", "   "))


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies once printed."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def truncate_to_width(text: str, max_width: int) -> str:
    """Return the longest prefix of *text* that fits in *max_width* columns.

    The cut happens on grapheme boundaries so combining marks and emoji
    sequences are never split.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > max_width:
            break
        result.append(g)
        cols += w
    return "".join(result)
