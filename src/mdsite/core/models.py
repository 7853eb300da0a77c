"""Document records and per-generation document sets"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional


CONTENT_ROOT = "content"


@dataclass
class DocumentRecord:
    """One discovered documentation file."""
    repository:    str
    relative_path: str              # path below the docs directory, POSIX separators
    name:          str              # file name without extension
    extension:     str = ".md"
    section:       str = ""         # parent directory below the docs directory; "" at root
    docs_base:     str = "."        # configured docs directory within the repository
    source_path:   Optional[Path] = None
    metadata:      dict[str, str] = field(default_factory=dict)
    raw_content:   bytes = b""
    transformed_content: Optional[bytes] = None

    def logical_path(self, is_single_repository: bool) -> str:
        """Destination path in the generated site.

        Multi-repository builds nest every file under its repository name;
        single-repository builds drop that segment.
        """
        parts = [CONTENT_ROOT]
        if not is_single_repository:
            parts.append(self.repository)
        if self.section:
            parts.append(self.section)
        parts.append(f"{self.name}{self.extension}")
        return str(PurePosixPath(*parts))

    @property
    def repo_relative_path(self) -> str:
        """Path of the file relative to its repository root."""
        base = self.docs_base.strip()
        if base and base != ".":
            return str(PurePosixPath(base, self.relative_path))
        return str(PurePosixPath(self.relative_path))


@dataclass
class DocumentSet:
    """All DocumentRecords of one generation; replaced wholesale, never mutated across builds."""
    records: list[DocumentRecord] = field(default_factory=list)
    is_single_repository: bool = False

    @classmethod
    def from_records(cls, records: list[DocumentRecord], is_single_repository: bool | None = None) -> DocumentSet:
        """Build a set, deriving the single-repository flag from the records when not given."""
        if is_single_repository is None:
            is_single_repository = len({r.repository for r in records}) == 1
        return cls(records=list(records), is_single_repository=is_single_repository)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[DocumentRecord]:
        return iter(self.records)

    def logical_paths(self) -> list[str]:
        """Sorted logical paths of every record."""
        return sorted(r.logical_path(self.is_single_repository) for r in self.records)

    def repositories(self) -> list[str]:
        return sorted({r.repository for r in self.records})

    def paths_by_repository(self) -> dict[str, list[str]]:
        """Sorted logical paths grouped by repository name."""
        grouped: dict[str, list[str]] = defaultdict(list)
        for r in self.records:
            grouped[r.repository].append(r.logical_path(self.is_single_repository))
        return {repo: sorted(paths) for repo, paths in sorted(grouped.items())}
