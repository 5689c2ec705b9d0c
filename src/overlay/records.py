"""Conversion of stored annotation rows into engine records.

Rows come from the annotation storage layer, one table for highlights and
notes distinguished by ``type``:

    {"id", "type", "section_id", "position_start", "position_end", "color",
     "content", "text_selection", "for_review", "created_at"}
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from overlay.palette import DEFAULT_HIGHLIGHT_COLOR
from overlay.types import Annotation, Note


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"invalid timestamp: {value!r}") from exc
    else:
        raise ValueError(f"invalid timestamp type: {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _optional_int(row: Mapping[str, Any], key: str) -> int | None:
    value = row.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    return int(value)


def _require_id(row: Mapping[str, Any]) -> str:
    row_id = row.get("id")
    if row_id is None or str(row_id) == "":
        raise ValueError("row has no id")
    return str(row_id)


def _optional_str(row: Mapping[str, Any], key: str) -> str | None:
    value = row.get(key)
    return None if value is None else str(value)


def annotation_from_row(row: Mapping[str, Any]) -> Annotation:
    """Build a highlight from a stored row.

    Raises:
        ValueError: The row has no id, no positions, or a bad timestamp.
    """
    row_id = _require_id(row)
    start = _optional_int(row, "position_start")
    end = _optional_int(row, "position_end")
    if start is None or end is None:
        raise ValueError(f"highlight {row_id} has no position")
    created_at = parse_timestamp(row.get("created_at"))
    if created_at is None:
        created_at = datetime.fromtimestamp(0, tz=UTC)
    return Annotation(
        id=row_id,
        start=start,
        end=end,
        color=str(row.get("color") or DEFAULT_HIGHLIGHT_COLOR),
        created_at=created_at,
        content=_optional_str(row, "content"),
        for_review=bool(row.get("for_review", False)),
        section_id=_optional_str(row, "section_id"),
        text_selection=_optional_str(row, "text_selection"),
    )


def note_from_row(row: Mapping[str, Any]) -> Note:
    """Build a note from a stored row. Positions are optional.

    Raises:
        ValueError: The row has no id, non-numeric positions or a bad timestamp.
    """
    return Note(
        id=_require_id(row),
        content=str(row.get("content") or ""),
        start=_optional_int(row, "position_start"),
        end=_optional_int(row, "position_end"),
        text_selection=_optional_str(row, "text_selection"),
        created_at=parse_timestamp(row.get("created_at")),
        section_id=_optional_str(row, "section_id"),
    )


def split_rows(
    rows: Iterable[Mapping[str, Any]],
) -> tuple[list[Annotation], list[Note], list[str]]:
    """Sort mixed stored rows into highlights and notes.

    Returns:
    1. highlights
    2. notes
    3. warnings for rows that could not be converted
    """
    highlights: list[Annotation] = []
    notes: list[Note] = []
    warnings: list[str] = []

    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            warnings.append(f"not_an_object:{index}")
            continue
        kind = row.get("type", "highlight")
        try:
            if kind == "highlight":
                highlights.append(annotation_from_row(row))
            elif kind == "note":
                notes.append(note_from_row(row))
            else:
                warnings.append(f"unknown_type:{index}:{kind}")
        except ValueError as exc:
            warnings.append(f"invalid_row:{index}:{exc}")

    return highlights, notes, warnings
