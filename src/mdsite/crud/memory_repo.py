from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from mdsite.crud.repo import StateTracker
from mdsite.crud.tables import RepositoryState


@dataclass
class MemoryStateTracker(StateTracker):
    _states: dict[str, RepositoryState] = field(default_factory=dict)

    def _state(self, repo_id: str) -> RepositoryState:
        state = self._states.get(repo_id)
        if state is None:
            state = self._states[repo_id] = RepositoryState(repo_id=repo_id)
        state.updated_at = datetime.now()
        return state

    def set_document_count(self, repo_id: str, count: int) -> None:
        self._state(repo_id).document_count = count

    def set_document_set_hash(self, repo_id: str, signature: str) -> None:
        self._state(repo_id).doc_files_hash = signature

    def set_document_paths(self, repo_id: str, paths: Sequence[str]) -> None:
        self._state(repo_id).doc_paths = list(paths)

    def get(self, repo_id: str) -> RepositoryState | None:
        return self._states.get(repo_id)

    def all(self) -> list[RepositoryState]:
        return [self._states[k] for k in sorted(self._states)]
