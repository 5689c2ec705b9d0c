"""Text annotation overlay: markup normalization, segmentation, range merging."""

from overlay.markup import normalize_markup
from overlay.merge import covered_length, merge_overlapping, merged_ranges
from overlay.segments import build_segments, note_end_index, overlay_text
from overlay.types import (
    Annotation,
    FormatRange,
    FormatType,
    MergedRange,
    NormalizedMarkup,
    Note,
    Segment,
    SegmentLayout,
    SegmentType,
    layout_to_dict,
)

__all__ = [
    "Annotation",
    "FormatRange",
    "FormatType",
    "MergedRange",
    "NormalizedMarkup",
    "Note",
    "Segment",
    "SegmentLayout",
    "SegmentType",
    "build_segments",
    "covered_length",
    "layout_to_dict",
    "merge_overlapping",
    "merged_ranges",
    "normalize_markup",
    "note_end_index",
    "overlay_text",
]
