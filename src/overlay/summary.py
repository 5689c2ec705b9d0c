"""Annotation counts for a section or document.

Counts are taken over the merged highlight set, so a run of overlapping
highlights counts once towards ``merged_range_count`` and ``covered_chars``.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from overlay.merge import covered_length, merge_overlapping
from overlay.palette import color_label
from overlay.types import Annotation, Note


@dataclass(frozen=True, slots=True)
class AnnotationSummary:
    highlight_count: int
    for_review_count: int
    merged_range_count: int
    covered_chars: int
    note_count: int
    anchored_note_count: int
    by_color: dict[str, int] = field(default_factory=dict)


def filter_for_review(highlights: Sequence[Annotation]) -> list[Annotation]:
    """Highlights flagged for later review, input order preserved."""
    return [row for row in highlights if row.for_review]


def summarize_annotations(
    highlights: Sequence[Annotation],
    notes: Sequence[Note] = (),
) -> AnnotationSummary:
    """Aggregate highlight and note counts.

    Highlights from different sections share no coordinate space, so merging
    is done per ``section_id``.
    """
    by_section: dict[str | None, list[Annotation]] = {}
    for row in highlights:
        by_section.setdefault(row.section_id, []).append(row)

    merged_count = 0
    covered = 0
    for rows in by_section.values():
        merged_count += len(merge_overlapping(rows))
        covered += covered_length(rows)

    colors = Counter(color_label(row.color) for row in highlights)

    return AnnotationSummary(
        highlight_count=len(highlights),
        for_review_count=len(filter_for_review(highlights)),
        merged_range_count=merged_count,
        covered_chars=covered,
        note_count=len(notes),
        anchored_note_count=sum(1 for note in notes if note.is_anchored),
        by_color=dict(sorted(colors.items())),
    )


def summary_lines(summary: AnnotationSummary, *, review_only: bool = False) -> list[str]:
    """Statistics fragments such as ``"3 Markierungen"`` for export headers.

    With *review_only*, notes are left out and the review count is not
    repeated, since every listed highlight is already a review highlight.
    """
    parts = [f"{summary.highlight_count} Markierungen"]
    if summary.for_review_count > 0 and not review_only:
        parts.append(f"{summary.for_review_count} zur Vertiefung")
    if not review_only:
        parts.append(f"{summary.note_count} Notizen")
    return parts
