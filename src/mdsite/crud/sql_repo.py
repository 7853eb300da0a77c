from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlmodel import Session, select

from mdsite.crud.repo import StateTracker
from mdsite.crud.tables import RepositoryState


class SQLStateTracker(StateTracker):
    """StateTracker backed by the repository_state table.

    Setters only stage changes on the session; flush() commits them in one
    transaction so a build either records every repository or none.
    """

    def __init__(self, session: Session):
        self.session = session
        self._staged: dict[str, RepositoryState] = {}

    def _state(self, repo_id: str) -> RepositoryState:
        state = self._staged.get(repo_id)
        if state is None:
            state = self.session.get(RepositoryState, repo_id) or RepositoryState(repo_id=repo_id)
            self._staged[repo_id] = state
        state.updated_at = datetime.now()
        self.session.add(state)
        return state

    def set_document_count(self, repo_id: str, count: int) -> None:
        self._state(repo_id).document_count = count

    def set_document_set_hash(self, repo_id: str, signature: str) -> None:
        self._state(repo_id).doc_files_hash = signature

    def set_document_paths(self, repo_id: str, paths: Sequence[str]) -> None:
        self._state(repo_id).doc_paths = list(paths)

    def get(self, repo_id: str) -> RepositoryState | None:
        return self._staged.get(repo_id) or self.session.get(RepositoryState, repo_id)

    def all(self) -> list[RepositoryState]:
        return list(self.session.exec(select(RepositoryState).order_by(RepositoryState.repo_id)).all())

    def flush(self) -> None:
        """Commit staged rows; on failure roll back so the session stays usable."""
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._staged.clear()
