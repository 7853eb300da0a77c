"""Shared fixtures for pipeline unit tests"""

from pathlib import Path

import pytest

from mdsite.config import RepositoryConfig, Settings
from mdsite.core.discovery import Discovery
from mdsite.crud.memory_repo import MemoryStateTracker
from mdsite.pipeline.state import BuildState


def write_docs(root: Path, files: dict[str, str]) -> Path:
    """Create files (relative path -> text) below root/docs and return root."""
    for rel, text in files.items():
        p = root / "docs" / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text)
    return root


@pytest.fixture
def make_state(tmp_path):
    """Factory for a BuildState over repositories (name -> {path: text}) checked out under tmp_path."""
    def _make(repos: dict[str, dict[str, str]], tracker=None, **settings) -> BuildState:
        configs = [
            RepositoryConfig(name=name, path=str(write_docs(tmp_path / "repos" / name, files)))
            for name, files in repos.items()
        ]
        s = Settings(output_dir=str(tmp_path / "site"), repositories=configs, **settings)
        return BuildState(
            settings=s,
            repo_paths={r.name: Path(r.path) for r in configs},
            discoverer=Discovery(configs),
            tracker=tracker if tracker is not None else MemoryStateTracker(),
        )
    return _make
