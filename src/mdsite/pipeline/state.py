"""Mutable build state shared by the stages of one generation"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from mdsite.config import RepositoryConfig, Settings
from mdsite.core.discovery import Discoverer
from mdsite.core.frontmatter.page import Page
from mdsite.core.models import DocumentSet
from mdsite.crud.repo import StateTracker
from mdsite.pipeline.report import BuildReport


@dataclass
class BuildState:
    """Owned exclusively by the orchestrator for the duration of one build."""
    settings:      Settings
    repo_paths:    dict[str, Path]
    discoverer:    Discoverer
    tracker:       Optional[StateTracker] = None
    report:        BuildReport = field(default_factory=BuildReport)
    previous_docs: DocumentSet = field(default_factory=DocumentSet)
    previous_content_hash: str = ""
    docs:          DocumentSet = field(default_factory=DocumentSet)
    pages:         list[Page] = field(default_factory=list)
    docs_changed:  bool = False
    content_hash:  str = ""
    repo_hashes:   dict[str, str] = field(default_factory=dict)
    start_time:    datetime = field(default_factory=lambda: datetime.now().astimezone())
    # populated once by prepare_output, read by later stages
    repo_configs:  dict[str, RepositoryConfig] = field(default_factory=dict)

    @property
    def output_dir(self) -> Path:
        return Path(self.settings.output_dir)

    @property
    def is_first_generation(self) -> bool:
        return len(self.previous_docs) == 0

    def repository(self, name: str) -> RepositoryConfig | None:
        return self.repo_configs.get(name)

    def repo_id(self, name: str) -> str:
        """Tracked identity for a repository: its configured URL, else its name."""
        repo = self.repository(name)
        return repo.repo_id if repo is not None else name
