"""Build report: stage outcomes, structured issues, change signature, and atomic persistence"""

import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from mdsite.core.errors import StageError, StageErrorKind


REPORT_JSON = "build-report.json"
REPORT_TXT = "build-report.txt"


class BuildOutcome(str, Enum):
    success = "success"
    warning = "warning"
    failed = "failed"
    canceled = "canceled"


class StageResult(str, Enum):
    success = "success"
    warning = "warning"
    fatal = "fatal"
    canceled = "canceled"
    skipped = "skipped"


class IssueCode(str, Enum):
    discovery_failure = "DISCOVERY_FAILURE"
    no_repositories = "NO_REPOSITORIES"
    validation_failure = "VALIDATION_FAILURE"
    canceled = "BUILD_CANCELED"
    generic = "GENERIC_STAGE_ERROR"


class ReportIssue(BaseModel):
    code:     IssueCode
    stage:    str
    severity: str               # "error" | "warning"
    message:  str


class StageCount(BaseModel):
    success:  int = 0
    warning:  int = 0
    fatal:    int = 0
    canceled: int = 0


class BuildReport(BaseModel):
    schema_version:  int = 1
    repositories:    int = 0
    files:           int = 0
    start:           datetime = Field(default_factory=datetime.now)
    end:             Optional[datetime] = None
    errors:          list[str] = Field(default_factory=list)
    warnings:        list[str] = Field(default_factory=list)
    stage_durations: dict[str, float] = Field(default_factory=dict, description="Seconds per stage")
    stage_error_kinds: dict[str, StageErrorKind] = Field(default_factory=dict)
    stage_counts:    dict[str, StageCount] = Field(default_factory=dict)
    issues:          list[ReportIssue] = Field(default_factory=list)
    outcome:         Optional[BuildOutcome] = None
    skip_reason:     str = ""
    rendered_pages:  int = 0
    docs_changed:    bool = False
    changed_repositories: list[str] = Field(default_factory=list)
    doc_files_hash:  str = Field(default="", description="Change signature over all logical paths")

    def record_stage_result(self, stage: str, result: StageResult) -> None:
        counts = self.stage_counts.setdefault(stage, StageCount())
        if result is not StageResult.skipped:
            setattr(counts, result.value, getattr(counts, result.value) + 1)

    def record_stage_error(self, err: StageError, code: IssueCode = IssueCode.generic) -> None:
        """Store a classified stage error as an issue and as an error or warning line."""
        self.stage_error_kinds[err.stage] = err.kind
        severity = "warning" if err.kind is StageErrorKind.warning else "error"
        self.issues.append(ReportIssue(code=code, stage=err.stage, severity=severity, message=str(err.cause)))
        if severity == "warning":
            self.warnings.append(str(err))
        else:
            self.errors.append(str(err))

    def finish(self) -> None:
        self.end = datetime.now()
        self.derive_outcome()

    def derive_outcome(self) -> BuildOutcome:
        """canceled beats failed beats warning beats success."""
        if self.errors:
            canceled = StageErrorKind.canceled in self.stage_error_kinds.values()
            self.outcome = BuildOutcome.canceled if canceled else BuildOutcome.failed
        elif self.warnings:
            self.outcome = BuildOutcome.warning
        else:
            self.outcome = BuildOutcome.success
        return self.outcome

    def summary(self) -> str:
        dur = (self.end - self.start).total_seconds() if self.end else 0.0
        outcome = self.outcome.value if self.outcome else "pending"
        return (
            f"repos={self.repositories} files={self.files} duration={dur:.3f}s "
            f"errors={len(self.errors)} warnings={len(self.warnings)} stages={len(self.stage_durations)} "
            f"rendered={self.rendered_pages} outcome={outcome}"
        )

    def persist(self, root: Path) -> Path:
        """Write build-report.json and build-report.txt via temp file + rename. Returns the JSON path."""
        if self.end is None:
            self.finish()
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)
        json_path = root / REPORT_JSON
        _atomic_write(json_path, self.model_dump_json(indent=2))
        _atomic_write(root / REPORT_TXT, self.summary() + "\n")
        return json_path


def _atomic_write(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)
