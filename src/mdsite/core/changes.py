"""Structural change detection between two document generations"""

from mdsite.core.models import DocumentSet


def detect_changes(previous: DocumentSet, current: DocumentSet) -> bool:
    """Return True when the set of logical paths differs between generations.

    An empty previous generation reports no change; callers decide separately
    that a first build needs full processing. Each set derives its paths with
    its own single-repository flag. Order is irrelevant, and byte-level
    content differences under an unchanged path set are not detected.
    """
    if len(previous) == 0:
        return False
    if len(current) != len(previous):
        return True
    return set(previous.logical_paths()) != set(current.logical_paths())


def changed_repositories(previous: dict[str, str], current: dict[str, str]) -> list[str]:
    """Repository ids whose per-repository signature was added, removed, or changed."""
    keys = set(previous) | set(current)
    return sorted(k for k in keys if previous.get(k) != current.get(k))
