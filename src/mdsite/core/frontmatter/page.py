"""Renderable page: base front matter, contributed patches, and the merged result"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from mdsite.core.frontmatter.base import build_base_frontmatter, split_frontmatter
from mdsite.core.frontmatter.merge import apply_patches, clone
from mdsite.core.frontmatter.patch import FrontMatterPatch
from mdsite.core.models import DocumentRecord


@dataclass
class Page:
    """One renderable unit.

    merged stays None until merge() runs. Adding a patch discards it; the next
    merge starts again from base, so merges are never incremental.
    """
    document: DocumentRecord
    logical_path: str
    base: dict[str, Any]
    body: str = ""
    patches: list[FrontMatterPatch] = field(default_factory=list)
    _merged: Optional[dict[str, Any]] = field(default=None, repr=False)

    @classmethod
    def from_document(cls, doc: DocumentRecord, is_single_repository: bool, now: datetime) -> Page:
        """Parse the document's existing front matter and derive its base metadata."""
        text = doc.raw_content.decode("utf-8", errors="replace")
        existing, body = split_frontmatter(text)
        return cls(
            document=doc,
            logical_path=doc.logical_path(is_single_repository),
            base=build_base_frontmatter(doc, now, existing),
            body=body,
        )

    def add_patch(self, patch: FrontMatterPatch) -> None:
        self.patches.append(patch)
        self._merged = None

    def add_patches(self, patches: list[FrontMatterPatch]) -> None:
        for p in patches:
            self.add_patch(p)

    @property
    def merged(self) -> Optional[dict[str, Any]]:
        """A copy of the merged front matter, or None when not yet computed."""
        return clone(self._merged) if self._merged is not None else None

    def merge(self) -> dict[str, Any]:
        """Compute (or reuse) the merged front matter and return a copy."""
        if self._merged is None:
            self._merged = apply_patches(self.base, self.patches)
        return clone(self._merged)
