"""Core types for markup normalization, segmentation and range merging.

Three coordinate spaces meet here:

- *raw* offsets index the stored section text, emphasis markers included;
- *clean* offsets index the text with the markers stripped;
- annotation offsets are raw offsets authored independently of both.

Everything is a frozen, slotted dataclass so results can be compared and
memoized by callers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, TypeAlias


FormatType: TypeAlias = Literal["bold", "italic"]
SegmentType: TypeAlias = Literal["plain", "highlight", "note", "highlight-with-note"]


@dataclass(frozen=True, slots=True)
class FormatRange:
    """Bold or italic interval ``[start, end)`` in clean coordinates."""

    start: int
    end: int
    type: FormatType

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"end must be >= start, got {self.end} < {self.start}",
            )


@dataclass(frozen=True, slots=True)
class NormalizedMarkup:
    """Clean text plus the raw -> clean position map and format ranges."""

    raw_text: str
    clean_text: str
    position_map: tuple[int, ...]
    formats: tuple[FormatRange, ...]

    def __post_init__(self) -> None:
        if len(self.position_map) != len(self.raw_text) + 1:
            raise ValueError("position_map length must equal len(raw_text) + 1")
        if len(self.clean_text) > len(self.raw_text):
            raise ValueError("clean_text cannot be longer than raw_text")
        if self.position_map[-1] != len(self.clean_text):
            raise ValueError(
                "position_map must map len(raw_text) to len(clean_text)",
            )
        previous = 0
        for raw_index, clean_index in enumerate(self.position_map):
            if clean_index < previous:
                raise ValueError(
                    f"position_map decreases at raw index {raw_index}: "
                    f"{clean_index} < {previous}",
                )
            previous = clean_index
        for fmt in self.formats:
            if fmt.end > len(self.clean_text):
                raise ValueError(
                    f"format {fmt.type} [{fmt.start}, {fmt.end}) exceeds clean text",
                )


@dataclass(frozen=True, slots=True)
class Annotation:
    """A stored highlight. Offsets are raw and may be out of range."""

    id: str
    start: int
    end: int
    color: str
    created_at: datetime
    content: str | None = None
    for_review: bool = False
    section_id: str | None = None
    text_selection: str | None = None


@dataclass(frozen=True, slots=True)
class Note:
    """A free-text note, optionally anchored to a raw text span."""

    id: str
    content: str
    start: int | None = None
    end: int | None = None
    text_selection: str | None = None
    created_at: datetime | None = None
    section_id: str | None = None

    @property
    def is_anchored(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass(frozen=True, slots=True)
class Segment:
    """Minimal slice of clean text with its resolved format/highlight/note."""

    text: str
    start_offset: int
    end_offset: int
    formats: frozenset[FormatType] = frozenset()
    highlight: Annotation | None = None
    note: Note | None = None

    def __post_init__(self) -> None:
        if self.start_offset < 0:
            raise ValueError(f"start_offset must be >= 0, got {self.start_offset}")
        if self.end_offset <= self.start_offset:
            raise ValueError(
                "end_offset must be > start_offset, got "
                f"{self.end_offset} <= {self.start_offset}",
            )
        if len(self.text) != self.end_offset - self.start_offset:
            raise ValueError("text length must match the segment span")

    @property
    def segment_type(self) -> SegmentType:
        if self.highlight is not None and self.note is not None:
            return "highlight-with-note"
        if self.highlight is not None:
            return "highlight"
        if self.note is not None:
            return "note"
        return "plain"

    @property
    def is_bold(self) -> bool:
        return "bold" in self.formats

    @property
    def is_italic(self) -> bool:
        return "italic" in self.formats


@dataclass(frozen=True, slots=True)
class SegmentLayout:
    """Ordered segments for one section plus the note-end index."""

    clean_text: str
    segments: tuple[Segment, ...]
    note_ends: dict[int, Note] = field(default_factory=dict)

    def note_ending_at(self, segment: Segment) -> Note | None:
        """Return the note whose anchor ends where *segment* ends, if any."""
        return self.note_ends.get(segment.end_offset)


@dataclass(frozen=True, slots=True)
class MergedRange:
    """Bare position pair left over after merging highlight ranges."""

    start: int
    end: int


def annotation_to_dict(annotation: Annotation) -> dict[str, object]:
    """Serialize a highlight for JSON output."""

    return {
        "id": annotation.id,
        "start": annotation.start,
        "end": annotation.end,
        "color": annotation.color,
        "created_at": annotation.created_at.isoformat(),
        "content": annotation.content,
        "for_review": annotation.for_review,
        "section_id": annotation.section_id,
        "text_selection": annotation.text_selection,
    }


def layout_to_dict(layout: SegmentLayout) -> dict[str, object]:
    """Serialize a segment layout for deterministic snapshots."""

    return {
        "clean_text": layout.clean_text,
        "segments": [
            {
                "text": segment.text,
                "start_offset": segment.start_offset,
                "end_offset": segment.end_offset,
                "type": segment.segment_type,
                "formats": sorted(segment.formats),
                "highlight_id": segment.highlight.id if segment.highlight else None,
                "note_id": segment.note.id if segment.note else None,
                "note_ending_id": getattr(layout.note_ending_at(segment), "id", None),
            }
            for segment in layout.segments
        ],
        "note_ends": {
            str(offset): note.id for offset, note in sorted(layout.note_ends.items())
        },
    }
