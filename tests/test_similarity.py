"""Tests for food name similarity scoring."""

import pytest

from food_suggest.services.similarity import (
    NO_MATCH_SCORE,
    NON_FOOD_SCORE,
    is_likely_food_name,
    is_relevant_match,
    normalized_distance,
    score,
    token_coverage,
    token_matches,
)


def test_exact_match_scores_zero() -> None:
    assert score("Greek Yogurt", "  greek yogurt ") == 0.0


def test_empty_input_scores_no_match() -> None:
    assert score("", "yogurt") == NO_MATCH_SCORE
    assert score("Greek Yogurt", "") == NO_MATCH_SCORE


def test_non_food_name_scores_sentinel() -> None:
    assert score("Scan to win a prize", "prize") == NON_FOOD_SCORE
    assert score("Yoga Mat", "yog") == NON_FOOD_SCORE


def test_scores_are_never_negative() -> None:
    for candidate in ["Yogurt", "Yogurt Parfait", "Greek Yogurt", "Oat Milk"]:
        assert score(candidate, "yogurt") >= 0


def test_prefix_beats_substring() -> None:
    assert score("Yogurt Parfait", "yog") < score("Frozen Yogurt", "yog")


def test_normalized_distance_divides_by_longer_length() -> None:
    assert normalized_distance("kitten", "sitting") == pytest.approx(3 / 7)
    assert normalized_distance("", "abc") == 1.0
    assert normalized_distance("same", "same") == 0.0
    assert normalized_distance("", "") == 0.0


def test_token_matches_allows_small_typos() -> None:
    assert token_matches("yogurt", "yoghurt")
    assert token_matches("yogurt", "yog")
    assert not token_matches("coke", "diet")


def test_token_coverage() -> None:
    assert token_coverage("Diet Coke (can)", "diet coke") == 1.0
    assert token_coverage("Coke", "diet coke") == 0.5
    assert token_coverage("Coke", "") == 0.0


def test_multi_word_query_penalizes_missing_words() -> None:
    assert score("Diet Coke (can)", "diet coke") < score("Coke", "diet coke")


def test_is_likely_food_name() -> None:
    assert is_likely_food_name("Strawberry Yogurt")
    assert is_likely_food_name("Cappuccino")
    assert not is_likely_food_name("ab")
    assert not is_likely_food_name("12345")
    assert not is_likely_food_name("Plastic Film Wrap")
    assert not is_likely_food_name("Collect points and instant win")


def test_is_relevant_match() -> None:
    assert is_relevant_match("Greek Yogurt", "yog")
    assert is_relevant_match("Yoghurt", "yogurt")
    assert not is_relevant_match("Motor Oil", "banana")
    assert not is_relevant_match("", "banana")
