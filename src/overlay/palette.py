"""Highlight colour palette of the reader."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HighlightColor:
    key: str
    value: str
    label: str


HIGHLIGHT_COLORS: dict[str, HighlightColor] = {
    "yellow": HighlightColor(key="yellow", value="#ffeb3b", label="Gelb"),
    "green": HighlightColor(key="green", value="#a5d6a7", label="Grün"),
    "blue": HighlightColor(key="blue", value="#90caf9", label="Blau"),
    "pink": HighlightColor(key="pink", value="#f48fb1", label="Rosa"),
    "orange": HighlightColor(key="orange", value="#ffcc80", label="Orange"),
}

DEFAULT_HIGHLIGHT_COLOR = HIGHLIGHT_COLORS["yellow"].value

# Label used when a stored colour is not part of the palette.
UNKNOWN_COLOR_LABEL = "Markierung"

_BY_VALUE: dict[str, HighlightColor] = {
    color.value.lower(): color for color in HIGHLIGHT_COLORS.values()
}


def color_by_value(value: str | None) -> HighlightColor | None:
    """Look up a palette colour by hex value (case-insensitive)."""
    if not value:
        return None
    return _BY_VALUE.get(value.strip().lower())


def color_label(value: str | None, default: str = UNKNOWN_COLOR_LABEL) -> str:
    """Human-readable label for a stored colour value."""
    color = color_by_value(value)
    return color.label if color is not None else default
