"""JSON / JSONL I/O and section payload loading, backed by orjson."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson

from overlay.records import split_rows
from overlay.types import Annotation, Note


@dataclass(frozen=True, slots=True)
class SectionPayload:
    """One text block with the highlights and notes scoped to it."""

    section_id: str | None
    text: str
    highlights: tuple[Annotation, ...]
    notes: tuple[Note, ...]


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def load_jsonl(path: Path) -> list[dict[str, Any]]:
    """Load a JSON Lines file (one JSON object per line). Blank lines skipped."""
    records: list[dict[str, Any]] = []
    for line in path.read_bytes().split(b"\n"):
        line = line.strip()
        if line:
            records.append(orjson.loads(line))
    return records


def save_jsonl(records: list[dict[str, Any]], path: Path) -> None:
    """Save a list of dicts as a JSON Lines file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [orjson.dumps(r, option=orjson.OPT_SORT_KEYS) for r in records]
    path.write_bytes(b"\n".join(lines) + b"\n")


def section_payload_from_dict(payload: Mapping[str, Any]) -> tuple[SectionPayload, list[str]]:
    """Build a SectionPayload from a decoded JSON object.

    Accepts either a mixed ``annotations`` row list or separate
    ``highlights`` / ``notes`` lists. Rows in ``highlights`` and ``notes``
    default their ``type`` to the list they came from.

    Returns:
        (payload, warnings) where warnings name the rows that were skipped.
    """
    text = payload.get("text")
    if not isinstance(text, str):
        raise ValueError("section payload needs a string 'text' field")

    rows: list[Any] = list(payload.get("annotations") or [])
    for key, kind in (("highlights", "highlight"), ("notes", "note")):
        for row in payload.get(key) or []:
            rows.append({"type": kind, **row} if isinstance(row, Mapping) else row)

    highlights, notes, warnings = split_rows(rows)
    section_id = payload.get("section_id")
    return (
        SectionPayload(
            section_id=None if section_id is None else str(section_id),
            text=text,
            highlights=tuple(highlights),
            notes=tuple(notes),
        ),
        warnings,
    )


def load_section_payload(path: Path) -> tuple[SectionPayload, list[str]]:
    """Load a section payload JSON file.

    Raises:
        ValueError: The file does not hold a JSON object with a 'text' string.
        orjson.JSONDecodeError: The file is not valid JSON.
    """
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"Section payload must be a JSON object: {path}")
    return section_payload_from_dict(payload)
