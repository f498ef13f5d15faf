"""Tests for the training-time text preprocessing pipeline."""

from __future__ import annotations

import pytest

from fake_news_detector.preprocessing import (
    STOP_WORDS,
    TextPreprocessor,
    preprocess,
    stem,
)


@pytest.fixture
def preprocessor() -> TextPreprocessor:
    """Default preprocessor matching the standard trainer."""
    return TextPreprocessor()


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_lowercases(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.tokenize("BREAKING News") == ["breaking", "news"]

    def test_non_letters_split_tokens(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.tokenize("covid-19 vaccine's") == ["covid", "vaccine", "s"]

    def test_digits_removed(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.tokenize("100% 2024") == []

    def test_non_ascii_letters_are_separators(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.tokenize("café naïve") == ["caf", "na", "ve"]

    def test_whitespace_variants(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.tokenize("one\ttwo\nthree\r\n  four") == ["one", "two", "three", "four"]


class TestFilterTokens:
    def test_stopwords_removed(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.filter_tokens(["the", "senator", "said", "that"]) == ["senator"]

    def test_single_letters_are_stopwords(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.filter_tokens(["g", "s", "vaccine"]) == ["vaccine"]

    def test_min_token_length(self) -> None:
        pp = TextPreprocessor(min_token_length=3)
        assert pp.filter_tokens(["an", "ox", "ran", "far"]) == ["ran", "far"]

    def test_max_tokens_applied_after_stopwords(self) -> None:
        pp = TextPreprocessor(max_tokens=2)
        assert pp.filter_tokens(["the", "alpha", "beta", "gamma"]) == ["alpha", "beta"]


class TestStem:
    @pytest.mark.parametrize(
        "word, expected",
        [
            ("caresses", "caress"),
            ("cats", "cat"),
            ("hopping", "hop"),
            ("motoring", "motor"),
            ("happy", "happi"),
            ("relational", "relat"),
            ("news", "new"),
            ("vaccines", "vaccin"),
        ],
    )
    def test_porter_stems(self, word: str, expected: str) -> None:
        assert stem(word) == expected

    def test_short_words_unchanged(self) -> None:
        assert stem("ox") == "ox"


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------


class TestProcess:
    def test_full_pipeline(self, preprocessor: TextPreprocessor) -> None:
        text = "SHOCKING news: the secret miracle cure they hide!!! 100% FAKE, fake."
        assert preprocessor.process(text) == "shock new secret miracl cure hide fake fake"

    def test_running_example(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.process("Running runners ran") == "run runner ran"

    def test_numbers_and_punctuation(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.process("COVID-19 vaccine's 5G") == "covid vaccin"

    def test_only_stopwords(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.process("The and of it was") == ""

    def test_empty_string(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor.process("") == ""

    def test_single_spaces_between_stems(self, preprocessor: TextPreprocessor) -> None:
        result = preprocessor.process("  hoax...   hoax ---  hoax  ")
        assert result == "hoax hoax hoax"

    def test_callable(self, preprocessor: TextPreprocessor) -> None:
        assert preprocessor("Cats") == preprocessor.process("Cats")

    def test_max_tokens_limits_output(self) -> None:
        pp = TextPreprocessor(max_tokens=2)
        assert pp.process("alpha beta gamma delta") == "alpha beta"

    def test_deterministic(self, preprocessor: TextPreprocessor) -> None:
        text = "Officials deny the leaked report about election fraud claims."
        assert preprocessor.process(text) == preprocessor.process(text)
        assert preprocessor.process(text) == TextPreprocessor().process(text)

    def test_module_level_preprocess(self, preprocessor: TextPreprocessor) -> None:
        text = "Scientists SHOCKED by miracle cure!"
        assert preprocess(text) == preprocessor.process(text)
        assert preprocess(text) == "scientist shock miracl cure"


class TestConfiguration:
    def test_rejects_zero_min_length(self) -> None:
        with pytest.raises(ValueError):
            TextPreprocessor(min_token_length=0)

    def test_rejects_non_positive_max_tokens(self) -> None:
        with pytest.raises(ValueError):
            TextPreprocessor(max_tokens=0)


class TestStopWords:
    def test_is_frozen(self) -> None:
        assert isinstance(STOP_WORDS, frozenset)

    def test_contains_common_words(self) -> None:
        for word in ("the", "and", "about", "they", "would"):
            assert word in STOP_WORDS

    def test_all_single_letters(self) -> None:
        assert set("abcdefghijklmnopqrstuvwxyz") <= STOP_WORDS

    def test_content_words_not_stopwords(self) -> None:
        for word in ("fake", "news", "hoax", "vaccine", "secret"):
            assert word not in STOP_WORDS
