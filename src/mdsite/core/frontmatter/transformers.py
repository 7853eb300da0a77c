"""Front matter transformers: each contributes one prioritized patch per document"""

from __future__ import annotations

from typing import Any, Callable, Optional

from mdsite.config import RepositoryConfig, Settings
from mdsite.core.frontmatter.base import split_frontmatter
from mdsite.core.frontmatter.patch import ArrayStrategy, FrontMatterPatch, MergeMode
from mdsite.core.models import DocumentRecord
from mdsite.core.parse import leading_h1


PRIORITY_DEFAULTS    = 10
PRIORITY_INDEX_TITLE = 15
PRIORITY_REPOSITORY  = 20
PRIORITY_EDIT_LINK   = 30
PRIORITY_OVERRIDES   = 100


Transformer = Callable[[DocumentRecord, Optional[RepositoryConfig], Settings], Optional[FrontMatterPatch]]


def defaults_patch(doc: DocumentRecord, repo: RepositoryConfig | None, settings: Settings) -> FrontMatterPatch | None:
    """Site-wide defaults; never override anything a page already has."""
    if not settings.frontmatter_defaults:
        return None
    return FrontMatterPatch(
        source="defaults",
        mode=MergeMode.set_if_missing,
        priority=PRIORITY_DEFAULTS,
        data=settings.frontmatter_defaults,
    )


def index_title_patch(doc: DocumentRecord, repo: RepositoryConfig | None, settings: Settings) -> FrontMatterPatch | None:
    """Index pages get no title from their file name; use a leading H1 instead."""
    if doc.name != "index":
        return None
    _, body = split_frontmatter(doc.raw_content.decode("utf-8", errors="replace"))
    title = leading_h1(body)
    if title is None:
        return None
    return FrontMatterPatch(
        source="index_title",
        mode=MergeMode.set_if_missing,
        priority=PRIORITY_INDEX_TITLE,
        data={"title": title},
    )


def repository_patch(doc: DocumentRecord, repo: RepositoryConfig | None, settings: Settings) -> FrontMatterPatch:
    """Source provenance block plus the section as a category."""
    source: dict[str, Any] = {"repository": doc.repository, "path": doc.repo_relative_path}
    if repo is not None:
        source["branch"] = repo.branch
        if repo.url:
            source["url"] = repo.url
    data: dict[str, Any] = {"repository": doc.repository, "docsource": source}
    if doc.section:
        data["categories"] = [doc.section]
    return FrontMatterPatch(
        source="repository",
        mode=MergeMode.deep,
        priority=PRIORITY_REPOSITORY,
        data=data,
        array_strategy=ArrayStrategy.union,
    )


def _web_base(url: str) -> str:
    """Normalize ssh/https clone URLs to an https web URL without a .git suffix."""
    url = url.strip().removesuffix("/").removesuffix(".git")
    if url.startswith("git@") and ":" in url:
        host, _, path = url[len("git@"):].partition(":")
        url = f"https://{host}/{path}"
    return url


def edit_url(url: str, branch: str, repo_path: str) -> str | None:
    """Forge-specific edit link for a file, or None when the host is not recognized."""
    if not url:
        return None
    base = _web_base(url)
    branch = branch or "main"
    if "github.com" in base:
        return f"{base}/edit/{branch}/{repo_path}"
    if "gitlab" in base:
        return f"{base}/-/edit/{branch}/{repo_path}"
    if "bitbucket.org" in base:
        return f"{base}/src/{branch}/{repo_path}?mode=edit"
    if "gitea" in base or "codeberg.org" in base or "forgejo" in base:
        return f"{base}/_edit/{branch}/{repo_path}"
    return None


def edit_url_patch(doc: DocumentRecord, repo: RepositoryConfig | None, settings: Settings) -> FrontMatterPatch | None:
    if repo is None:
        return None
    link = edit_url(repo.url, repo.branch, doc.repo_relative_path)
    if link is None:
        return None
    return FrontMatterPatch(
        source="edit_link",
        mode=MergeMode.set_if_missing,
        priority=PRIORITY_EDIT_LINK,
        data={"editURL": link},
    )


def overrides_patch(doc: DocumentRecord, repo: RepositoryConfig | None, settings: Settings) -> FrontMatterPatch | None:
    """Configured values forced onto every page."""
    if not settings.frontmatter_overrides:
        return None
    return FrontMatterPatch(
        source="overrides",
        mode=MergeMode.replace,
        priority=PRIORITY_OVERRIDES,
        data=settings.frontmatter_overrides,
    )


DEFAULT_TRANSFORMERS: tuple[Transformer, ...] = (
    repository_patch,
    index_title_patch,
    edit_url_patch,
    defaults_patch,
    overrides_patch,
)


def build_patches(
    doc: DocumentRecord,
    repo: RepositoryConfig | None,
    settings: Settings,
    transformers: tuple[Transformer, ...] = DEFAULT_TRANSFORMERS,
    ) -> list[FrontMatterPatch]:
    """Run each transformer in order, dropping those with nothing to contribute."""
    patches = []
    for transform in transformers:
        patch = transform(doc, repo, settings)
        if patch is not None and not patch.is_empty():
            patches.append(patch)
    return patches
