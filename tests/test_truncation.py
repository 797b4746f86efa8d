"""Tests de la troncature des valeurs affichées."""

from __future__ import annotations

from metadisplay.domain.display_config import DescriptionConfig, TruncationOptions
from metadisplay.domain.truncation import truncate_text, truncate_values

TEXT = "The quick brown fox jumps"


def test_no_truncation_when_disabled_or_short() -> None:
    assert truncate_text(TEXT, TruncationOptions()) == TEXT
    assert truncate_text(TEXT, TruncationOptions(max_length=30)) == TEXT
    assert truncate_text(TEXT, TruncationOptions(max_length=len(TEXT))) == TEXT


def test_hard_cut() -> None:
    assert truncate_text(TEXT, TruncationOptions(max_length=10)) == "The quick "


def test_word_safe_cut() -> None:
    opts = TruncationOptions(max_length=12, word_safe=True)
    assert truncate_text(TEXT, opts) == "The quick"


def test_word_safe_with_ellipsis() -> None:
    """Teste que l'ellipse est comptée dans la longueur maximale."""
    opts = TruncationOptions(max_length=13, word_safe=True, ellipsis=True)
    assert truncate_text(TEXT, opts) == "The quick..."


def test_ellipsis_hard_cut() -> None:
    assert truncate_text(TEXT, TruncationOptions(max_length=8, ellipsis=True)) == "The q..."


def test_word_safe_falls_back_to_hard_cut() -> None:
    opts = TruncationOptions(max_length=10, word_safe=True, min_wordsafe_length=3)
    assert truncate_text("Supercalifragilistic word", opts) == "Supercalif"


def test_options_from_description_data() -> None:
    desc = DescriptionConfig(
        description_field="dc.description",
        description_data={"truncation": {"max_length": "8", "ellipsis": 1}},
    )
    assert desc.truncation == TruncationOptions(max_length=8, ellipsis=True)
    assert truncate_values(["short", TEXT], desc.truncation) == ["short", "The q..."]
