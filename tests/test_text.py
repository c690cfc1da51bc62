"""Tests for text normalization and title cleanup helpers."""

from __future__ import annotations

import pytest

from clipcore.text import (
    calculate_similarity,
    clean_tag_prefix,
    clean_title_line,
    collapse_whitespace,
    contains_session_id,
    extract_single_words,
    is_error_response,
    is_meta_line,
    is_valid_single_word_tag,
    normalize_for_comparison,
    overlap_ratio,
    remove_number_prefix,
    remove_quotes,
    sanitize_custom_prompt,
    truncate_transcript,
)


class TestNormalizeForComparison:
    def test_punctuation_and_case(self) -> None:
        assert normalize_for_comparison("Hello, World!") == "hello world"

    def test_underscores_and_whitespace(self) -> None:
        assert normalize_for_comparison("  snake_case\n\tvalue  ") == "snake case value"

    def test_keeps_umlauts(self) -> None:
        assert normalize_for_comparison("Größe & Übersicht") == "größe übersicht"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value: str | None) -> None:
        assert normalize_for_comparison(value) == ""

    def test_long_text(self) -> None:
        text = "Word, " * 100
        assert normalize_for_comparison(text) == " ".join(["word"] * 100)


class TestSimilarity:
    def test_identical(self) -> None:
        assert calculate_similarity("budget review", "Budget Review") == 1.0

    def test_partial(self) -> None:
        assert calculate_similarity("a b c", "a b d") == pytest.approx(0.5)

    def test_empty(self) -> None:
        assert calculate_similarity("", "anything") == 0.0

    def test_overlap_ratio_uses_smaller_set(self) -> None:
        assert overlap_ratio({"a", "b"}, {"a", "b", "c", "d"}) == 1.0
        assert overlap_ratio(set(), {"a"}) == 0.0


class TestQuotesAndTitles:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('"Hello"', "Hello"),
            ("„Hallo“", "Hallo"),
            ("'Nested \"quotes\"'", 'Nested "quotes"'),
            ('"Hello".', "Hello"),
            ("No quotes", "No quotes"),
        ],
    )
    def test_remove_quotes(self, raw: str, expected: str) -> None:
        assert remove_quotes(raw) == expected

    def test_remove_number_prefix(self) -> None:
        assert remove_number_prefix("1. Intro") == "Intro"
        assert remove_number_prefix("2) Setup") == "Setup"
        assert remove_number_prefix("2024 plans") == "2024 plans"

    def test_clean_title_line(self) -> None:
        assert clean_title_line('2) - "Budget Review":') == "Budget Review"
        assert clean_title_line("• Next   steps") == "Next steps"
        assert clean_title_line(None) == ""

    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace(" a\n\n b\tc ") == "a b c"


class TestPromptHygiene:
    def test_contains_session_id(self) -> None:
        assert contains_session_id("Session: 1a2b3c4d notes")
        assert not contains_session_id("A session about baking")

    def test_sanitize_custom_prompt(self) -> None:
        assert sanitize_custom_prompt("<|system|> Focus on recipes ```") == "Focus on recipes"
        assert sanitize_custom_prompt("   ") == ""
        assert len(sanitize_custom_prompt("x" * 500)) == 200


class TestContentHelpers:
    @pytest.mark.parametrize(
        "line", ["", "  ", "[Session: 1234abcd]", "<|end|>", "# Heading", "--- cut ---", "Titel: X"]
    )
    def test_meta_lines(self, line: str) -> None:
        assert is_meta_line(line)

    def test_content_line_is_not_meta(self) -> None:
        assert not is_meta_line("Baking sourdough at home")

    def test_error_responses(self) -> None:
        assert is_error_response("")
        assert is_error_response("[oracle not configured]")
        assert is_error_response("Sorry, no transcript was provided.")
        assert is_error_response("Fehler beim Generieren")
        assert not is_error_response("Baking sourdough at home")

    def test_truncate_transcript(self) -> None:
        assert truncate_transcript("  short  ", 10) == "short"
        assert truncate_transcript("abcdefghij", 4) == "abcd [...]"
        assert truncate_transcript(None, 4) == ""

    def test_clean_tag_prefix(self) -> None:
        assert clean_tag_prefix("## bread") == "bread"
        assert clean_tag_prefix("• 3. oven") == "oven"
        assert clean_tag_prefix(None) == ""

    def test_single_word_tags(self) -> None:
        assert is_valid_single_word_tag("Sauerteig")
        assert not is_valid_single_word_tag("a")
        assert not is_valid_single_word_tag("home-made")
        assert not is_valid_single_word_tag("1234")
        assert extract_single_words('"home_made bread"') == ["home", "made", "bread"]
        assert extract_single_words("  ") == []
