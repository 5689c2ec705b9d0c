"""Tests for overlay.markup normalization."""
import pytest

from overlay.markup import normalize_markup
from overlay.types import FormatRange, NormalizedMarkup


def _assert_well_formed(normalized: NormalizedMarkup) -> None:
    pmap = normalized.position_map
    assert len(pmap) == len(normalized.raw_text) + 1
    assert pmap[-1] == len(normalized.clean_text)
    assert list(pmap) == sorted(pmap)
    assert len(normalized.clean_text) <= len(normalized.raw_text)


class TestNormalizeMarkup:
    def test_bold_round_trip(self) -> None:
        normalized = normalize_markup("a **b** c")
        assert normalized.clean_text == "a b c"
        assert normalized.formats == (FormatRange(start=2, end=3, type="bold"),)

    def test_bold_position_map(self) -> None:
        normalized = normalize_markup("a **b** c")
        # opening markers -> first inner char, closing markers -> past inner
        assert normalized.position_map == (0, 1, 2, 2, 2, 3, 3, 3, 4, 5)
        _assert_well_formed(normalized)

    def test_italic_position_map(self) -> None:
        normalized = normalize_markup("*it* x")
        assert normalized.clean_text == "it x"
        assert normalized.formats == (FormatRange(start=0, end=2, type="italic"),)
        assert normalized.position_map == (0, 0, 1, 2, 2, 3, 4)

    def test_multiple_spans(self) -> None:
        normalized = normalize_markup("**A** and *b*")
        assert normalized.clean_text == "A and b"
        assert normalized.formats == (
            FormatRange(start=0, end=1, type="bold"),
            FormatRange(start=6, end=7, type="italic"),
        )
        _assert_well_formed(normalized)

    def test_plain_text_is_identity(self) -> None:
        raw = "no markers here"
        normalized = normalize_markup(raw)
        assert normalized.clean_text == raw
        assert normalized.formats == ()
        assert normalized.position_map == tuple(range(len(raw) + 1))

    def test_empty_text(self) -> None:
        normalized = normalize_markup("")
        assert normalized.clean_text == ""
        assert normalized.position_map == (0,)
        assert normalized.formats == ()

    def test_lone_marker_is_literal(self) -> None:
        normalized = normalize_markup("a * b")
        assert normalized.clean_text == "a * b"
        assert normalized.formats == ()

    def test_empty_bold_is_literal(self) -> None:
        normalized = normalize_markup("a ** b")
        assert normalized.clean_text == "a ** b"
        assert normalized.formats == ()

    def test_markers_do_not_span_newlines(self) -> None:
        raw = "**a\nb**"
        normalized = normalize_markup(raw)
        assert normalized.clean_text == raw
        assert normalized.formats == ()

    def test_triple_markers_degrade_to_literal_asterisks(self) -> None:
        normalized = normalize_markup("***x***")
        assert normalized.clean_text == "*x*"
        assert normalized.formats == (FormatRange(start=0, end=2, type="bold"),)
        _assert_well_formed(normalized)

    def test_umlauts_and_long_text(self) -> None:
        raw = "Die **Übung** ist *wichtig* für die Prüfung. " * 20
        normalized = normalize_markup(raw)
        assert "*" not in normalized.clean_text
        assert len(normalized.formats) == 40
        _assert_well_formed(normalized)

    def test_deterministic(self) -> None:
        raw = "x **y** *z* w"
        assert normalize_markup(raw) == normalize_markup(raw)


class TestNormalizedMarkupValidation:
    def test_rejects_short_map(self) -> None:
        with pytest.raises(ValueError, match="position_map length"):
            NormalizedMarkup(raw_text="ab", clean_text="ab", position_map=(0, 1), formats=())

    def test_rejects_decreasing_map(self) -> None:
        with pytest.raises(ValueError, match="decreases"):
            NormalizedMarkup(
                raw_text="abc", clean_text="abc", position_map=(0, 2, 1, 3), formats=(),
            )

    def test_rejects_bad_sentinel(self) -> None:
        with pytest.raises(ValueError, match="len\\(clean_text\\)"):
            NormalizedMarkup(raw_text="ab", clean_text="ab", position_map=(0, 1, 1), formats=())

    def test_rejects_format_past_clean_text(self) -> None:
        with pytest.raises(ValueError, match="exceeds"):
            NormalizedMarkup(
                raw_text="ab",
                clean_text="ab",
                position_map=(0, 1, 2),
                formats=(FormatRange(start=0, end=3, type="bold"),),
            )

    def test_format_range_rejects_inverted(self) -> None:
        with pytest.raises(ValueError):
            FormatRange(start=3, end=1, type="italic")
