"""SHA-256 hashing for content and document path sets"""

import hashlib
from typing import Iterable


PATH_SEPARATOR = b"\x00"


def sha256(content: str | bytes) -> str:
    """Return hex-encoded SHA-256 hash of content (64 chars)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def hash_paths(paths: Iterable[str]) -> str:
    """Return a change signature for a collection of logical paths.

    Paths are sorted first, so discovery order never affects the result. Each
    path is followed by a NUL byte so that ["a/b", "c"] and ["a", "b/c"] hash
    differently. An empty collection yields the digest of no input.
    """
    h = hashlib.sha256()
    for p in sorted(paths):
        h.update(p.encode("utf-8"))
        h.update(PATH_SEPARATOR)
    return h.hexdigest()
