"""Highlight range merging (sweep-line interval union).

Touching ranges (``current.start == last.end``) merge. When ranges combine,
the earliest-started highlight keeps its identity and metadata; only its
``end`` is extended, on a new record.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from overlay.types import Annotation, MergedRange


def merge_overlapping(highlights: Sequence[Annotation]) -> list[Annotation]:
    """Coalesce overlapping or touching highlights into a minimal list.

    Args:
        highlights: Highlights in a single coordinate space, any order.

    Returns:
        Highlights sorted by start with no two ranges overlapping or
        touching. Inputs with fewer than two elements come back unchanged.
    """
    if len(highlights) <= 1:
        return list(highlights)

    ordered = sorted(highlights, key=lambda row: row.start)
    merged: list[Annotation] = [ordered[0]]

    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = replace(last, end=current.end)
        else:
            merged.append(current)

    return merged


def merged_ranges(highlights: Sequence[Annotation]) -> list[MergedRange]:
    """Merge *highlights* and keep only their positions."""
    return [
        MergedRange(start=row.start, end=row.end)
        for row in merge_overlapping(highlights)
    ]


def covered_length(highlights: Sequence[Annotation]) -> int:
    """Number of offsets covered by at least one highlight."""
    return sum(
        max(0, row.end - row.start) for row in merge_overlapping(highlights)
    )
