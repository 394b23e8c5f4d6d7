"""Tests for text normalization and similarity scoring."""

import pytest

from game.scoring import edit_distance, normalize_text, round_half_up, similarity, split_words


def test_normalize_text_strips_case_punctuation_and_whitespace():
    assert normalize_text("  Cat!!  Sat\t\nON the MAT.  ") == "cat sat on the mat"
    assert normalize_text("don't") == "dont"
    assert normalize_text("!!!") == ""


def test_split_words_handles_empty_text():
    assert split_words("") == []
    assert split_words("  ?? ") == []
    assert split_words("Red lorry, yellow lorry") == ["red", "lorry", "yellow", "lorry"]


@pytest.mark.parametrize("text", ["a", "Peter Piper", "she sells sea shells 123"])
def test_identical_text_scores_100(text):
    assert similarity(text, text) == 100


def test_empty_strings():
    assert similarity("", "") == 100
    assert similarity("!!", "  ") == 100
    assert similarity("", "abc") == 0
    assert similarity("abc", "") == 0


def test_similarity_ignores_case_punctuation_and_repeated_whitespace():
    assert similarity("Cat!!  Sat", "cat sat") == 100


def test_edit_distance_is_symmetric():
    pairs = [("kitten", "sitting"), ("flaw", "lawn"), ("", "abc"), ("red lorry", "yellow lorry")]
    for a, b in pairs:
        assert edit_distance(a, b) == edit_distance(b, a)
    assert edit_distance("kitten", "sitting") == 3


def test_similarity_uses_longer_normalized_length():
    # distance 3 over 7 characters
    assert similarity("kitten", "sitting") == 57


def test_disjoint_strings_of_equal_length_score_zero():
    assert similarity("abc", "xyz") == 0


def test_half_scores_round_up():
    # 5 of 8 characters survive: 62.5
    assert similarity("abcdefgh", "abcdexyz") == 63
    assert round_half_up(62.5) == 63
    assert round_half_up(63.49) == 63
