"""Segment building: partition clean text by format, highlight and note edges.

All edges are collected into one boundary set up front, so every emitted
segment carries exactly one resolved format set, at most one highlight and
at most one note. Precedence on physical overlap:

- highlights: latest ``created_at`` wins (first in input on ties);
- notes: first in input order wins, the caller owns the ordering.

Malformed annotation offsets never raise; the annotation is clamped or
dropped from segmentation.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import TypeAlias

from overlay.markup import normalize_markup
from overlay.types import (
    Annotation,
    FormatRange,
    FormatType,
    Note,
    Segment,
    SegmentLayout,
)

# (annotation, clean_start, clean_end)
_AnchoredHighlight: TypeAlias = tuple[Annotation, int, int]
_AnchoredNote: TypeAlias = tuple[Note, int, int]


def _to_clean(raw_offset: int, position_map: Sequence[int]) -> int:
    """Clamp *raw_offset* into the raw text and map it to clean coordinates."""
    raw_len = len(position_map) - 1
    return position_map[min(max(raw_offset, 0), raw_len)]


def _clean_span(
    start: int | None,
    end: int | None,
    position_map: Sequence[int],
) -> tuple[int, int] | None:
    """Return the clean span of a raw annotation span, or None if unusable."""
    raw_len = len(position_map) - 1
    if start is None or end is None:
        return None
    if start >= raw_len or end <= 0:
        return None
    clean_start = _to_clean(start, position_map)
    clean_end = _to_clean(end, position_map)
    if clean_start > clean_end:
        return None
    return clean_start, clean_end


def _created_key(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so mixed inputs stay comparable.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _resolve_highlight(
    highlights: list[_AnchoredHighlight], start: int, end: int,
) -> Annotation | None:
    best: Annotation | None = None
    for highlight, clean_start, clean_end in highlights:
        if clean_start > start or clean_end < end:
            continue
        if best is None or _created_key(highlight.created_at) > _created_key(best.created_at):
            best = highlight
    return best


def _resolve_note(notes: list[_AnchoredNote], start: int, end: int) -> Note | None:
    for note, clean_start, clean_end in notes:
        if clean_start <= start and clean_end >= end:
            return note
    return None


def note_end_index(
    notes: Iterable[Note],
    position_map: Sequence[int],
) -> dict[int, Note]:
    """Map clean end offsets to the note whose anchor ends there.

    The renderer places a note indicator right after the segment whose
    ``end_offset`` is a key of this map. Notes without an end, or whose end
    lies outside the raw text, are skipped. A later note sharing an end
    offset replaces an earlier one.
    """
    raw_len = len(position_map) - 1
    ends: dict[int, Note] = {}
    for note in notes:
        if note.end is None or note.end < 0 or note.end > raw_len:
            continue
        ends[_to_clean(note.end, position_map)] = note
    return ends


def build_segments(
    clean_text: str,
    formats: Sequence[FormatRange],
    highlights: Iterable[Annotation],
    notes: Iterable[Note],
    position_map: Sequence[int],
) -> SegmentLayout:
    """Partition *clean_text* into minimal, non-overlapping segments.

    Args:
        clean_text: Text with emphasis markers removed.
        formats: Format ranges in clean coordinates.
        highlights: Highlights in raw coordinates.
        notes: Notes in raw coordinates; unanchored notes are ignored.
        position_map: Raw -> clean map with ``len(raw_text) + 1`` entries.

    Returns:
        SegmentLayout whose segment texts concatenate to *clean_text*.
    """
    clean_len = len(clean_text)
    note_list = list(notes)

    anchored_highlights: list[_AnchoredHighlight] = []
    for highlight in highlights:
        span = _clean_span(highlight.start, highlight.end, position_map)
        if span is not None:
            anchored_highlights.append((highlight, *span))

    anchored_notes: list[_AnchoredNote] = []
    for note in note_list:
        span = _clean_span(note.start, note.end, position_map)
        if span is not None:
            anchored_notes.append((note, *span))

    boundaries = {0, clean_len}
    for fmt in formats:
        boundaries.add(min(fmt.start, clean_len))
        boundaries.add(min(fmt.end, clean_len))
    for _, clean_start, clean_end in (*anchored_highlights, *anchored_notes):
        boundaries.add(max(0, min(clean_start, clean_len)))
        boundaries.add(max(0, min(clean_end, clean_len)))
    ordered = sorted(boundaries)

    segments: list[Segment] = []
    for start, end in zip(ordered, ordered[1:]):
        if start >= end:
            continue
        segment_formats: set[FormatType] = {
            fmt.type for fmt in formats if fmt.start < end and fmt.end > start
        }
        segments.append(
            Segment(
                text=clean_text[start:end],
                start_offset=start,
                end_offset=end,
                formats=frozenset(segment_formats),
                highlight=_resolve_highlight(anchored_highlights, start, end),
                note=_resolve_note(anchored_notes, start, end),
            ),
        )

    return SegmentLayout(
        clean_text=clean_text,
        segments=tuple(segments),
        note_ends=note_end_index(note_list, position_map),
    )


def overlay_text(
    raw_text: str,
    highlights: Iterable[Annotation] = (),
    notes: Iterable[Note] = (),
) -> SegmentLayout:
    """Normalize *raw_text* and segment it against highlights and notes."""
    normalized = normalize_markup(raw_text)
    return build_segments(
        normalized.clean_text,
        normalized.formats,
        highlights,
        notes,
        normalized.position_map,
    )
