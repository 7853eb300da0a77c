"""Stage orchestration: ordered stage definitions and sequential execution with classification"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from mdsite.core.errors import (
    DiscoveryError, StageError, StageErrorKind, StageName, ValidationError, classify,
)
from mdsite.logging import get_logger
from mdsite.pipeline.cancel import CancelToken
from mdsite.pipeline.report import IssueCode, StageResult
from mdsite.pipeline.state import BuildState


StageFn = Callable[[CancelToken, BuildState], None]

logger = get_logger("orchestrator")


@dataclass(frozen=True)
class StageDef:
    name: str
    fn:   StageFn


class Pipeline:
    """Fluent builder for an ordered list of stage definitions."""

    def __init__(self):
        self.defs: list[StageDef] = []

    def add(self, name: str | StageName, fn: StageFn) -> Pipeline:
        self.defs.append(StageDef(name=str(getattr(name, "value", name)), fn=fn))
        return self

    def add_if(self, cond: bool, name: str | StageName, fn: StageFn) -> Pipeline:
        if cond:
            self.add(name, fn)
        return self

    def build(self) -> list[StageDef]:
        return list(self.defs)


def issue_code(err: StageError, bs: BuildState) -> IssueCode:
    """Map a classified stage error to a report issue code."""
    if err.kind is StageErrorKind.canceled:
        return IssueCode.canceled
    if isinstance(err.cause, ValidationError):
        return IssueCode.no_repositories if not bs.repo_paths else IssueCode.validation_failure
    if isinstance(err.cause, DiscoveryError) or err.stage == StageName.discover_docs.value:
        return IssueCode.discovery_failure
    return IssueCode.generic


def run_stages(token: CancelToken, bs: BuildState, stages: list[StageDef]) -> Optional[StageError]:
    """Run stages strictly in order; return the terminal StageError, or None.

    Warnings are recorded and the next stage runs. A fatal or canceled result
    stops the pipeline and the remaining stages are skipped. The token is
    checked before every stage.
    """
    report = bs.report
    for i, stage in enumerate(stages):
        if token.cancelled:
            err = StageError.canceled(stage.name)
        else:
            logger.debug("Stage %s starting", stage.name)
            t0 = time.perf_counter()
            try:
                stage.fn(token, bs)
                err = None
            except Exception as e:
                err = classify(stage.name, e)
            report.stage_durations[stage.name] = time.perf_counter() - t0

        if err is None:
            report.record_stage_result(stage.name, StageResult.success)
            continue

        report.record_stage_result(stage.name, StageResult(err.kind.value))
        report.record_stage_error(err, issue_code(err, bs))
        if err.kind is StageErrorKind.warning:
            logger.warning("Stage %s: %s", stage.name, err.cause)
            continue

        for skipped in stages[i + 1:]:
            report.record_stage_result(skipped.name, StageResult.skipped)
        if err.is_canceled:
            logger.warning("Build canceled during stage %s", stage.name)
        else:
            logger.error("Stage %s failed: %s", stage.name, err.cause)
        return err
    return None
