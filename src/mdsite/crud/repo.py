from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from mdsite.crud.tables import RepositoryState


class StateTracker(ABC):
    """Keyed store of per-repository discovery summaries, read by future runs.

    Keys are repository ids; each repository's keys are disjoint, so writes
    never need cross-repository coordination.
    """

    @abstractmethod
    def set_document_count(self, repo_id: str, count: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_document_set_hash(self, repo_id: str, signature: str) -> None:
        raise NotImplementedError

    def set_document_paths(self, repo_id: str, paths: Sequence[str]) -> None:
        """Optional; trackers that do not keep paths ignore the call."""

    @abstractmethod
    def get(self, repo_id: str) -> RepositoryState | None:
        raise NotImplementedError

    @abstractmethod
    def all(self) -> list[RepositoryState]:
        raise NotImplementedError

    def flush(self) -> None:
        """Make pending writes durable. No-op for trackers that write through."""
