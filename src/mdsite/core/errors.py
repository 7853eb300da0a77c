"""Error taxonomy and stage error classification"""

from __future__ import annotations

from enum import Enum


class MdsiteError(Exception):
    """Base class for mdsite build errors."""


class ValidationError(MdsiteError):
    """Build inputs are unusable (e.g. no repositories configured)."""


class DiscoveryError(MdsiteError):
    """The discovery collaborator failed to read or walk a repository."""


class CancellationError(MdsiteError):
    """The build's cancel token fired."""


class StageName(str, Enum):
    prepare_output = "prepare_output"
    discover_docs = "discover_docs"
    assemble_pages = "assemble_pages"
    copy_content = "copy_content"


class StageErrorKind(str, Enum):
    fatal = "fatal"        # build must abort
    warning = "warning"    # record and continue
    canceled = "canceled"  # cancel token observed


class StageError(MdsiteError):
    """A stage failure carrying its classification, the stage name, and the cause."""

    def __init__(self, kind: StageErrorKind, stage: str, cause: BaseException | None = None):
        self.kind = StageErrorKind(kind)
        self.stage = str(getattr(stage, "value", stage))
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.kind.value} stage {self.stage}: {self.cause}"

    @classmethod
    def fatal(cls, stage: str, cause: BaseException | None = None) -> StageError:
        return cls(StageErrorKind.fatal, stage, cause)

    @classmethod
    def warning(cls, stage: str, cause: BaseException | None = None) -> StageError:
        return cls(StageErrorKind.warning, stage, cause)

    @classmethod
    def canceled(cls, stage: str, cause: BaseException | None = None) -> StageError:
        return cls(StageErrorKind.canceled, stage, cause or CancellationError("build canceled"))

    @property
    def is_fatal(self) -> bool:
        return self.kind is StageErrorKind.fatal

    @property
    def is_canceled(self) -> bool:
        return self.kind is StageErrorKind.canceled

    @property
    def aborts(self) -> bool:
        """True when no further stages may run."""
        return self.kind is not StageErrorKind.warning


def classify(stage: str, exc: BaseException) -> StageError:
    """Normalize any exception raised by a stage into a StageError.

    StageErrors pass through unchanged; CancellationError maps to canceled and
    anything else is treated as fatal.
    """
    if isinstance(exc, StageError):
        return exc
    if isinstance(exc, CancellationError):
        return StageError.canceled(stage, exc)
    return StageError.fatal(stage, exc)
