"""Per-attempt verdicts for a spoken transcript against a phrase."""

from game.models import MatchVerdict
from game.scoring import similarity, split_words

# Changing this changes game difficulty globally.
MATCH_THRESHOLD = 80


def evaluate(attempt_text: str, target_text: str) -> MatchVerdict:
    """Score an attempt against a target phrase.

    Word flags are positional: word ``i`` of the attempt is compared with
    word ``i`` of the target, so one inserted or dropped word shifts every
    later comparison. Gameplay relies on this simpler behaviour; do not
    replace it with sequence alignment.

    Args:
        attempt_text: Transcript or typed text from the player
        target_text: The phrase the player is trying to say

    Returns:
        MatchVerdict with overall similarity and one flag per target word
    """
    score = similarity(target_text, attempt_text)

    target_words = split_words(target_text)
    attempt_words = split_words(attempt_text)

    per_word_match = []
    for index, target_word in enumerate(target_words):
        if index < len(attempt_words):
            per_word_match.append(
                similarity(target_word, attempt_words[index]) >= MATCH_THRESHOLD
            )
        else:
            per_word_match.append(False)

    return MatchVerdict(
        is_match=score >= MATCH_THRESHOLD,
        similarity=score,
        per_word_match=per_word_match,
        attempted_word_count=len(attempt_words),
    )
