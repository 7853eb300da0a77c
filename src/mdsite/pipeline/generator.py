"""Site generator: wires settings, discovery, and state tracking into successive build generations"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from mdsite.config import Settings
from mdsite.core.discovery import Discoverer, Discovery
from mdsite.core.errors import StageError, StageName
from mdsite.core.models import DocumentSet
from mdsite.crud.repo import StateTracker
from mdsite.logging import get_logger
from mdsite.pipeline import stages
from mdsite.pipeline.cancel import CancelToken
from mdsite.pipeline.orchestrator import Pipeline, StageDef, run_stages
from mdsite.pipeline.report import BuildReport
from mdsite.pipeline.state import BuildState


logger = get_logger("generator")


def default_stages(copy_content: bool = True) -> list[StageDef]:
    return (
        Pipeline()
        .add(StageName.prepare_output, stages.prepare_output)
        .add(StageName.discover_docs, stages.discover_docs)
        .add(StageName.assemble_pages, stages.assemble_pages)
        .add_if(copy_content, StageName.copy_content, stages.copy_content)
        .build()
    )


class SiteGenerator:
    """Runs build generations, retaining only the previous DocumentSet for comparison."""

    def __init__(
        self,
        settings: Settings,
        tracker: Optional[StateTracker] = None,
        discoverer: Optional[Discoverer] = None,
        stage_defs: Optional[list[StageDef]] = None,
        ):
        self.settings = settings
        self.tracker = tracker
        self.discoverer = discoverer or Discovery(settings.repositories)
        self.stage_defs = stage_defs if stage_defs is not None else default_stages()
        self._previous_docs = DocumentSet()
        self._previous_content_hash = ""

    def repo_paths(self) -> dict[str, Path]:
        return {r.name: Path(r.path) for r in self.settings.repositories}

    def generate(self, token: Optional[CancelToken] = None) -> tuple[BuildState, Optional[StageError]]:
        """Run one generation. Returns the final state and the terminal error, if any."""
        token = token or CancelToken()
        bs = BuildState(
            settings=self.settings,
            repo_paths=self.repo_paths(),
            discoverer=self.discoverer,
            tracker=self.tracker,
            report=BuildReport(),
            previous_docs=self._previous_docs,
            previous_content_hash=self._previous_content_hash,
        )
        logger.info("Starting build of %d repositories", len(bs.repo_paths))
        err = run_stages(token, bs, self.stage_defs)
        bs.report.finish()

        if err is None:
            self._previous_docs = bs.docs
            self._previous_content_hash = bs.content_hash
        logger.info("Build finished: %s", bs.report.summary())
        return bs, err
