"""Documentation file discovery across locally checked-out repositories"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol

from mdsite.config import RepositoryConfig
from mdsite.core.errors import DiscoveryError
from mdsite.core.models import DocumentRecord, DocumentSet
from mdsite.logging import get_logger


MD_EXTENSIONS = {'.md', '.markdown', '.mdown', '.mkd'}
IGNORED_FILES = {'readme.md', 'contributing.md', 'changelog.md', 'license.md'}
DOCIGNORE_FILE = '.docignore'

logger = get_logger("discovery")


class Discoverer(Protocol):
    def discover(self, repo_paths: Mapping[str, Path]) -> DocumentSet: ...


def _is_doc_file(path: Path) -> bool:
    name = path.name
    return (
        path.suffix.lower() in MD_EXTENSIONS
        and not name.startswith('.')
        and name.lower() not in IGNORED_FILES
    )


def discover_files(docs_dir: Path) -> list[Path]:
    """Return sorted documentation files under docs_dir, skipping hidden directories."""
    return sorted(
        p for p in docs_dir.rglob('*')
        if p.is_file()
        and _is_doc_file(p)
        and not any(part.startswith('.') for part in p.relative_to(docs_dir).parts[:-1])
    )


class Discovery:
    """Walks each repository's configured docs paths and loads matching files."""

    def __init__(self, repositories: list[RepositoryConfig]):
        self.repositories = {r.name: r for r in repositories}

    def discover(self, repo_paths: Mapping[str, Path]) -> DocumentSet:
        """Return the DocumentSet for repo_paths (repository name -> checkout dir).

        Raises DiscoveryError when a docs directory cannot be read.
        """
        records: list[DocumentRecord] = []
        for repo_name in sorted(repo_paths):
            repo_path = Path(repo_paths[repo_name])
            repo = self.repositories.get(repo_name)
            if repo is None:
                logger.warning("Repository configuration not found: %s", repo_name)
                continue
            if (repo_path / DOCIGNORE_FILE).exists():
                logger.info("Skipping repository %s due to %s", repo_name, DOCIGNORE_FILE)
                continue
            found = 0
            for docs_path in repo.paths:
                docs_dir = repo_path / docs_path
                if not docs_dir.is_dir():
                    logger.warning("Documentation path not found: repository=%s path=%s", repo_name, docs_path)
                    continue
                try:
                    files = discover_files(docs_dir)
                    for f in files:
                        records.append(self._record(repo, docs_dir, docs_path, f))
                except OSError as e:
                    raise DiscoveryError(f"Failed to walk {docs_path} in {repo_name}: {e}") from e
                found += len(files)
            logger.info("Discovered %d documentation file(s) in %s", found, repo_name)

        logger.info("Total documentation files discovered: %d", len(records))
        return DocumentSet.from_records(records, is_single_repository=len(repo_paths) == 1)

    @staticmethod
    def _record(repo: RepositoryConfig, docs_dir: Path, docs_base: str, path: Path) -> DocumentRecord:
        rel = path.relative_to(docs_dir)
        section = rel.parent.as_posix()
        return DocumentRecord(
            repository=repo.name,
            relative_path=rel.as_posix(),
            name=path.stem,
            extension=path.suffix,
            section="" if section == "." else section,
            docs_base=docs_base,
            source_path=path,
            metadata=dict(repo.tags),
            raw_content=path.read_bytes(),
        )
