"""Shared fixtures for core unit tests"""

import pytest

from mdsite.core.models import DocumentRecord, DocumentSet


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """Factory for DocumentRecords from a repository name and a docs-relative path."""
    def _make(repository: str, relative_path: str, content: bytes = b"# Doc\n") -> DocumentRecord:
        parts = relative_path.rsplit("/", 1)
        section, filename = (parts[0], parts[1]) if len(parts) == 2 else ("", parts[0])
        name, _, ext = filename.rpartition(".")
        return DocumentRecord(
            repository=repository,
            relative_path=relative_path,
            name=name,
            extension=f".{ext}",
            section=section,
            raw_content=content,
        )
    return _make


@pytest.fixture(name="make_set")
def make_set_fixture(make_doc):
    """Factory for a multi-repository DocumentSet from (repository, path) pairs."""
    def _make(*pairs: tuple[str, str], single: bool = False) -> DocumentSet:
        return DocumentSet.from_records([make_doc(r, p) for r, p in pairs], is_single_repository=single)
    return _make
