"""Text normalization and edit-distance similarity scoring."""

import math
import re
from typing import List

from rapidfuzz.distance import Levenshtein

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9 ]")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (``round`` is banker's)."""
    return int(math.floor(value + 0.5))


def normalize_text(value: str) -> str:
    """Lowercase, keep only ``[a-z0-9 ]``, collapse whitespace runs and trim."""
    text = _WHITESPACE_RE.sub(" ", (value or "").lower())
    text = _DISALLOWED_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def split_words(value: str) -> List[str]:
    """Split normalized text into words; empty text has no words."""
    normalized = normalize_text(value)
    if not normalized:
        return []
    return normalized.split(" ")


def edit_distance(source: str, target: str) -> int:
    """Unit-cost Levenshtein distance (insert, delete, substitute)."""
    return Levenshtein.distance(source, target)


def similarity(target: str, attempt: str) -> int:
    """Score how closely ``attempt`` reproduces ``target`` on a 0-100 scale.

    Both strings are normalized first. Two empty strings are a vacuous match
    (100); one empty string scores 0. Otherwise the score is the share of the
    longer normalized string that survives the edit distance.
    """
    normalized_target = normalize_text(target)
    normalized_attempt = normalize_text(attempt)

    if not normalized_target and not normalized_attempt:
        return 100
    if not normalized_target or not normalized_attempt:
        return 0

    distance = edit_distance(normalized_target, normalized_attempt)
    longest = max(len(normalized_target), len(normalized_attempt))
    raw_score = (longest - distance) / longest * 100
    return round_half_up(max(0.0, raw_score))
