"""Markup normalization: strip inline emphasis markers, keep a position map.

Only ``**bold**`` and ``*italic*`` are recognised. The scan is a single
leftmost-first pass driven by an explicit cursor, emitting three parallel
structures: the clean text buffer, the raw -> clean index map and the
format ranges.
"""
from __future__ import annotations

import re

from overlay.types import FormatRange, FormatType, NormalizedMarkup

# Bold is tried first so ``**x**`` is never read as two italic markers.
_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*|\*(.+?)\*")


def normalize_markup(raw_text: str) -> NormalizedMarkup:
    """Strip emphasis markers from *raw_text*.

    Marker characters collapse onto the clean index of the content they
    delimit: opening markers map to the first inner character, closing
    markers map to the position just past the inner text. Unmatched or
    empty markers (``**``, a lone ``*``) stay in the text as literals.

    Args:
        raw_text: Section text with inline emphasis markers.

    Returns:
        NormalizedMarkup with ``len(raw_text) + 1`` map entries; the last
        one maps to ``len(clean_text)``.
    """
    raw = raw_text or ""
    clean_chars: list[str] = []
    position_map = [0] * (len(raw) + 1)
    formats: list[FormatRange] = []

    clean_idx = 0
    cursor = 0
    while cursor < len(raw):
        match = _EMPHASIS_RE.search(raw, cursor)
        if match is None:
            break

        for raw_pos in range(cursor, match.start()):
            position_map[raw_pos] = clean_idx
            clean_chars.append(raw[raw_pos])
            clean_idx += 1

        if match.group(1) is not None:
            inner = match.group(1)
            marker_len = 2
            fmt_type: FormatType = "bold"
        else:
            inner = match.group(2)
            marker_len = 1
            fmt_type = "italic"

        inner_start = match.start() + marker_len
        for raw_pos in range(match.start(), inner_start):
            position_map[raw_pos] = clean_idx

        fmt_start = clean_idx
        for offset, ch in enumerate(inner):
            position_map[inner_start + offset] = clean_idx
            clean_chars.append(ch)
            clean_idx += 1

        for raw_pos in range(inner_start + len(inner), match.end()):
            position_map[raw_pos] = clean_idx

        formats.append(FormatRange(start=fmt_start, end=clean_idx, type=fmt_type))
        cursor = match.end()

    for raw_pos in range(cursor, len(raw)):
        position_map[raw_pos] = clean_idx
        clean_chars.append(raw[raw_pos])
        clean_idx += 1

    position_map[len(raw)] = clean_idx

    return NormalizedMarkup(
        raw_text=raw,
        clean_text="".join(clean_chars),
        position_map=tuple(position_map),
        formats=tuple(formats),
    )
