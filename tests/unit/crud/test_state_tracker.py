"""Unit tests for the memory and SQL StateTracker implementations"""

import pytest
from sqlmodel import Session

from mdsite.crud.memory_repo import MemoryStateTracker
from mdsite.crud.sql_repo import SQLStateTracker


@pytest.fixture(params=["memory", "sql"])
def tracker(request, session):
    """Each tracker implementation, exercised through the common interface."""
    if request.param == "memory":
        return MemoryStateTracker()
    return SQLStateTracker(session)


def test_get_unknown_returns_none(tracker):
    """An untracked repository has no state."""
    assert tracker.get("missing") is None


def test_setters_record_state(tracker):
    """Count, hash, and paths are all recorded under the repository id."""
    tracker.set_document_count("r1", 2)
    tracker.set_document_set_hash("r1", "abc")
    tracker.set_document_paths("r1", ["content/r1/a.md", "content/r1/b.md"])
    tracker.flush()

    state = tracker.get("r1")
    assert state.document_count == 2
    assert state.doc_files_hash == "abc"
    assert state.doc_paths == ["content/r1/a.md", "content/r1/b.md"]


def test_repositories_are_independent(tracker):
    """Writing one repository never touches another."""
    tracker.set_document_set_hash("r1", "h1")
    tracker.set_document_set_hash("r2", "h2")
    tracker.flush()
    tracker.set_document_set_hash("r1", "h1b")
    tracker.flush()

    assert tracker.get("r1").doc_files_hash == "h1b"
    assert tracker.get("r2").doc_files_hash == "h2"


def test_all_sorted_by_repo_id(tracker):
    """all() returns rows ordered by repository id."""
    for repo_id in ("zeta", "alpha", "mid"):
        tracker.set_document_count(repo_id, 1)
    tracker.flush()
    assert [s.repo_id for s in tracker.all()] == ["alpha", "mid", "zeta"]


def test_sql_tracker_commits_on_flush(file_engine):
    """SQL writes become visible to other sessions only after flush()."""
    with Session(file_engine) as writer:
        tracker = SQLStateTracker(writer)
        tracker.set_document_count("r1", 3)
        tracker.set_document_set_hash("r1", "h")

        with Session(file_engine) as reader:
            assert SQLStateTracker(reader).get("r1") is None

        tracker.flush()

    with Session(file_engine) as reader:
        state = SQLStateTracker(reader).get("r1")
        assert state.document_count == 3
        assert state.doc_files_hash == "h"


def test_sql_tracker_updates_existing_row(file_engine):
    """A later session updates the stored row instead of inserting a duplicate."""
    with Session(file_engine) as s:
        t = SQLStateTracker(s)
        t.set_document_count("r1", 1)
        t.flush()
    with Session(file_engine) as s:
        t = SQLStateTracker(s)
        t.set_document_count("r1", 5)
        t.flush()
    with Session(file_engine) as s:
        rows = SQLStateTracker(s).all()
        assert [(r.repo_id, r.document_count) for r in rows] == [("r1", 5)]


def test_sql_tracker_flush_failure_rolls_back(session, monkeypatch):
    """A failed commit discards staged rows and leaves the session usable."""
    tracker = SQLStateTracker(session)
    tracker.set_document_count("r1", 3)

    def fail():
        raise RuntimeError("disk I/O error")

    monkeypatch.setattr(session, "commit", fail)
    with pytest.raises(RuntimeError):
        tracker.flush()
    monkeypatch.undo()

    assert tracker.get("r1") is None
    tracker.set_document_count("r2", 1)
    tracker.flush()
    assert [s.repo_id for s in tracker.all()] == ["r2"]
