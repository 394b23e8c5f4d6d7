"""Tests for per-attempt match verdicts."""

from game.evaluator import MATCH_THRESHOLD, evaluate


def test_exact_attempt_matches_every_word():
    verdict = evaluate("she sells sea shells", "She sells sea shells!")
    assert verdict.is_match
    assert verdict.similarity == 100
    assert verdict.per_word_match == [True, True, True, True]
    assert verdict.attempted_word_count == 4


def test_is_match_follows_threshold():
    assert MATCH_THRESHOLD == 80
    at_threshold = evaluate("abcdefghxy", "abcdefghij")
    below = evaluate("abcdefgxyz", "abcdefghij")
    assert at_threshold.similarity == 80 and at_threshold.is_match
    assert below.similarity == 70 and not below.is_match
    for verdict in (at_threshold, below):
        assert verdict.is_match == (verdict.similarity >= MATCH_THRESHOLD)


def test_empty_attempt_flags_no_words():
    verdict = evaluate("", "red lorry yellow lorry")
    assert verdict.similarity == 0
    assert not verdict.is_match
    assert verdict.per_word_match == [False, False, False, False]
    assert verdict.attempted_word_count == 0


def test_per_word_length_tracks_target_not_attempt():
    verdict = evaluate("red lorry yellow lorry and more words", "red lorry")
    assert len(verdict.per_word_match) == 2
    assert verdict.attempted_word_count == 7


def test_close_words_still_count():
    verdict = evaluate("she sell sea shell", "she sells sea shells")
    assert verdict.per_word_match == [True, True, True, True]


def test_word_flags_are_positional():
    # One extra leading word shifts every comparison even though the
    # phrase as a whole is close enough to match.
    verdict = evaluate("a red lorry yellow lorry", "red lorry yellow lorry")
    assert verdict.is_match
    assert verdict.per_word_match == [False, False, False, False]


def test_evaluate_is_repeatable():
    assert evaluate("peter piper", "Peter Piper picked") == evaluate("peter piper", "Peter Piper picked")
