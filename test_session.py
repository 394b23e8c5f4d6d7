"""Tests for the Session value and its pure transitions."""

import pytest
from pydantic import ValidationError

from game.models import Phrase, RoundResult, SessionSettings
from game.session import (
    add_round_result,
    advance_session,
    calculate_accuracy,
    create_session,
    current_phrase,
    elapsed_ms,
    is_session_complete,
)


def _phrases(count=3):
    return [Phrase(id=f"p{i}", text=f"phrase number {i}") for i in range(count)]


def test_create_session_starts_at_first_phrase():
    settings = SessionSettings(topic="Animals", length="short", rounds=3)
    session = create_session(_phrases(), settings, start_timestamp=1000)
    assert session.current_index == 0
    assert session.round_results == ()
    assert session.start_timestamp == 1000
    assert session.settings == settings
    assert current_phrase(session).id == "p0"


def test_sessions_get_unique_ids():
    assert create_session(_phrases()).id != create_session(_phrases()).id


def test_advance_returns_new_session_and_leaves_results():
    session = create_session(_phrases(), start_timestamp=0)
    session = add_round_result(session, RoundResult(phrase_id="p0", similarity=90))
    advanced = advance_session(session)
    assert advanced is not session
    assert session.current_index == 0
    assert advanced.current_index == 1
    assert advanced.round_results == session.round_results


def test_add_round_result_appends_without_moving_index():
    session = create_session(_phrases(), start_timestamp=0)
    updated = add_round_result(session, RoundResult(phrase_id="p0", similarity=50))
    assert session.round_results == ()
    assert [r.similarity for r in updated.round_results] == [50]
    assert updated.current_index == 0


def test_completion_happens_exactly_at_phrase_count():
    session = create_session(_phrases(2), start_timestamp=0)
    session = advance_session(session)
    assert session.current_index == 1
    assert not is_session_complete(session)
    session = advance_session(session)
    assert session.current_index == 2
    assert is_session_complete(session)
    assert current_phrase(session) is None
    # Never moves past the end or backwards
    assert advance_session(session).current_index == 2


def test_empty_session_is_complete():
    session = create_session([], start_timestamp=0)
    assert is_session_complete(session)
    assert current_phrase(session) is None


def test_accuracy():
    session = create_session(_phrases(), start_timestamp=0)
    assert calculate_accuracy(session) == 0
    for phrase_id, score in (("p0", 100), ("p1", 80), ("p2", 0)):
        session = add_round_result(session, RoundResult(phrase_id=phrase_id, similarity=score))
    assert calculate_accuracy(session) == 60


def test_accuracy_rounds_mean():
    session = create_session(_phrases(), start_timestamp=0)
    for phrase_id, score in (("p0", 90), ("p1", 0), ("p2", 100)):
        session = add_round_result(session, RoundResult(phrase_id=phrase_id, similarity=score))
    assert calculate_accuracy(session) == 63


def test_elapsed_ms_is_wall_clock_since_creation():
    session = create_session(_phrases(), start_timestamp=5_000)
    assert elapsed_ms(session, now=7_500) == 2_500


def test_session_is_frozen():
    session = create_session(_phrases(), start_timestamp=0)
    with pytest.raises(ValidationError):
        session.current_index = 2
