"""Pipeline stage functions: prepare, discover, assemble pages, and copy content"""

import shutil

from mdsite.core.changes import changed_repositories, detect_changes
from mdsite.core.errors import DiscoveryError, StageError, StageName, ValidationError
from mdsite.core.frontmatter.page import Page
from mdsite.core.frontmatter.serialize import render_page
from mdsite.core.frontmatter.transformers import build_patches
from mdsite.core.models import CONTENT_ROOT
from mdsite.core.utils.hashing import hash_paths, sha256
from mdsite.logging import get_logger
from mdsite.pipeline.cancel import CancelToken
from mdsite.pipeline.state import BuildState


logger = get_logger("stages")


def prepare_output(token: CancelToken, bs: BuildState) -> None:
    """Validate the repository inputs and create the output directory."""
    stage = StageName.prepare_output
    if not bs.repo_paths:
        raise StageError.fatal(stage, ValidationError("no repositories configured"))
    bs.repo_configs = {r.name: r for r in bs.settings.repositories}

    missing = sorted(name for name, path in bs.repo_paths.items() if not path.is_dir())
    for name in missing:
        del bs.repo_paths[name]
    if not bs.repo_paths:
        raise StageError.fatal(stage, ValidationError(f"no repository checkout found: {', '.join(missing)}"))

    bs.output_dir.mkdir(parents=True, exist_ok=True)
    if missing:
        raise StageError.warning(stage, ValidationError(f"skipping missing repository checkout(s): {', '.join(missing)}"))


def _persist_repo_state(token: CancelToken, bs: BuildState) -> None:
    """Record per-repository count, signature, and paths; all or nothing."""
    if bs.tracker is None:
        return
    by_repo = bs.docs.paths_by_repository()
    # everything is computed before the first write; emptied repositories record zero
    rows = [(bs.repo_id(name), by_repo.get(name, []), bs.repo_hashes[name]) for name in sorted(bs.repo_hashes)]
    token.raise_if_cancelled()
    for repo_id, paths, signature in rows:
        bs.tracker.set_document_count(repo_id, len(paths))
        bs.tracker.set_document_set_hash(repo_id, signature)
        bs.tracker.set_document_paths(repo_id, paths)
    bs.tracker.flush()
    logger.debug("Recorded incremental state for %d repositories", len(rows))


def discover_docs(token: CancelToken, bs: BuildState) -> None:
    """Run discovery, detect structural changes, compute signatures, and update tracked state."""
    stage = StageName.discover_docs
    if token.cancelled:
        raise StageError.canceled(stage)
    try:
        docs = bs.discoverer.discover(bs.repo_paths)
    except DiscoveryError as e:
        raise StageError.fatal(stage, e) from e
    except OSError as e:
        raise StageError.fatal(stage, DiscoveryError(str(e))) from e

    bs.docs = docs
    bs.docs_changed = bs.is_first_generation or detect_changes(bs.previous_docs, docs)
    if not bs.docs_changed:
        logger.info("Documentation files unchanged (%d files)", len(docs))

    previous_by_repo = bs.previous_docs.paths_by_repository()
    current_by_repo = docs.paths_by_repository()
    bs.repo_hashes = {repo: hash_paths(current_by_repo.get(repo, [])) for repo in bs.repo_paths}
    previous_hashes = {}
    if not bs.is_first_generation:
        # a repository with no documents in the previous generation had the empty signature
        previous_hashes = {
            repo: hash_paths(previous_by_repo.get(repo, []))
            for repo in previous_by_repo.keys() | bs.repo_hashes.keys()
        }

    report = bs.report
    report.repositories = len(docs.repositories())
    report.files = len(docs)
    report.docs_changed = bs.docs_changed
    report.doc_files_hash = hash_paths(docs.logical_paths())
    report.changed_repositories = changed_repositories(previous_hashes, bs.repo_hashes)

    try:
        _persist_repo_state(token, bs)
    except StageError:
        raise
    except Exception as e:
        if token.cancelled:
            raise
        # tracking only serves future runs; this generation's output is unaffected
        raise StageError.warning(stage, e) from e

    if len(docs) == 0:
        raise StageError.warning(stage, DiscoveryError(f"no documentation files found in {len(bs.repo_paths)} repositories"))


def assemble_pages(token: CancelToken, bs: BuildState) -> None:
    """Build each page's front matter from its base and transformer patches, then render it."""
    pages = []
    content_lines = []
    for doc in sorted(bs.docs, key=lambda d: d.logical_path(bs.docs.is_single_repository)):
        token.raise_if_cancelled()
        page = Page.from_document(doc, bs.docs.is_single_repository, bs.start_time)
        page.add_patches(build_patches(doc, bs.repository(doc.repository), bs.settings))
        doc.transformed_content = render_page(page.merge(), page.body)
        pages.append(page)
        content_lines.append(f"{page.logical_path}\x00{sha256(doc.raw_content)}")
    bs.pages = pages
    bs.content_hash = hash_paths(content_lines)
    logger.info("Assembled %d page(s)", len(pages))


def copy_content(token: CancelToken, bs: BuildState) -> None:
    """Write rendered pages below output_dir, replacing the previous content tree.

    The structural change flag alone misses edits inside existing files, so a
    digest of every source file is compared as well before skipping.
    """
    content_dir = bs.output_dir / CONTENT_ROOT
    unchanged = (
        not bs.docs_changed
        and bs.content_hash == bs.previous_content_hash
        and content_dir.is_dir()
    )
    if unchanged:
        bs.report.skip_reason = "no_changes"
        logger.info("Content unchanged; keeping %s", content_dir)
        return

    token.raise_if_cancelled()
    if content_dir.exists():
        shutil.rmtree(content_dir)
    for page in bs.pages:
        target = bs.output_dir / page.logical_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(page.document.transformed_content)
    bs.report.rendered_pages = len(bs.pages)
    logger.info("Wrote %d page(s) to %s", len(bs.pages), content_dir)
