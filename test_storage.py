"""Tests for best-effort session and result persistence."""

from game.errors import PersistenceFailure
from game.models import FinalResult, Phrase, RoundResult
from game.session import add_round_result, create_session
from services.storage import (
    FINAL_RESULT_KEY,
    SESSION_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    clear_final_result,
    clear_session,
    create_store,
    load_final_result,
    load_session,
    save_final_result,
    save_session,
)


class BrokenStore(KeyValueStore):
    """Store whose every operation fails like a full or locked disk."""

    def save(self, key, value):
        raise PersistenceFailure("disk full")

    def load(self, key):
        raise PersistenceFailure("unreadable")

    def clear(self, key):
        raise PersistenceFailure("locked")


def _session():
    session = create_session(
        [Phrase(id="a", text="red lorry"), Phrase(id="b", text="yellow lorry")],
        start_timestamp=42,
    )
    return add_round_result(session, RoundResult(phrase_id="a", similarity=88))


def test_memory_store_session_lifecycle():
    store = MemoryStore()
    assert load_session(store) is None

    session = _session()
    save_session(store, session)
    assert load_session(store) == session

    clear_session(store)
    assert load_session(store) is None


def test_json_file_store_survives_new_instance(tmp_path):
    session = _session()
    save_session(JsonFileStore(str(tmp_path)), session)
    save_final_result(JsonFileStore(str(tmp_path)), FinalResult(accuracy=70, elapsed_time_ms=1234))

    reopened = JsonFileStore(str(tmp_path))
    assert load_session(reopened) == session
    assert load_final_result(reopened) == FinalResult(accuracy=70, elapsed_time_ms=1234)

    clear_final_result(reopened)
    assert load_final_result(reopened) is None
    clear_final_result(reopened)  # clearing twice is fine


def test_session_and_result_use_separate_keys():
    store = MemoryStore()
    save_session(store, _session())
    save_final_result(store, FinalResult(accuracy=100, elapsed_time_ms=0))
    assert store.load(SESSION_KEY) is not None
    assert store.load(FINAL_RESULT_KEY) is not None

    clear_session(store)
    assert load_final_result(store).accuracy == 100


def test_failures_are_swallowed():
    store = BrokenStore()
    save_session(store, _session())
    save_final_result(store, FinalResult(accuracy=1, elapsed_time_ms=1))
    clear_session(store)
    clear_final_result(store)
    assert load_session(store) is None
    assert load_final_result(store) is None


def test_missing_store_is_a_no_op():
    save_session(None, _session())
    clear_session(None)
    assert load_session(None) is None
    assert load_final_result(None) is None


def test_corrupt_records_load_as_none():
    store = MemoryStore()
    store.save(SESSION_KEY, "{not json")
    store.save(FINAL_RESULT_KEY, '{"accuracy": 150, "elapsed_time_ms": 5}')
    assert load_session(store) is None
    assert load_final_result(store) is None


def test_json_file_store_raises_persistence_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = JsonFileStore(str(blocker))
    try:
        store.save(SESSION_KEY, "{}")
    except PersistenceFailure:
        pass
    else:
        raise AssertionError("expected PersistenceFailure")
    # The helper swallows the same failure.
    save_session(store, _session())


def test_create_store_picks_backend(tmp_path):
    assert isinstance(create_store(None), MemoryStore)
    store = create_store(str(tmp_path))
    assert isinstance(store, JsonFileStore)
    assert store.directory == str(tmp_path)


def test_json_file_store_removes_empty_directory(tmp_path):
    directory = tmp_path / "browser-session"
    store = JsonFileStore(str(directory))
    save_session(store, _session())
    save_final_result(store, FinalResult(accuracy=50, elapsed_time_ms=10))

    clear_session(store)
    assert directory.exists()
    clear_final_result(store)
    assert not directory.exists()
    assert load_session(store) is None
