"""Existing front matter extraction and generated base front matter for a document"""

import re
from datetime import datetime
from typing import Any

import yaml

from mdsite.core.frontmatter.merge import clone
from mdsite.core.models import DocumentRecord
from mdsite.logging import get_logger


FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(.*?)\r?\n?---[ \t]*(?:\r?\n|$)', re.DOTALL)

logger = get_logger("frontmatter")


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body).

    Malformed YAML, or YAML that is not a mapping, counts as no front matter;
    the delimited block is still removed from the body.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    body = text[m.end():].lstrip("\r\n")
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid YAML front matter: %s", e)
        return {}, body
    if not isinstance(fm, dict):
        logger.warning("Ignoring front matter of type %s; expected a mapping", type(fm).__name__)
        return {}, body
    return fm, body


def title_from_name(name: str) -> str:
    """'getting-started' -> 'Getting Started'; existing capitals are kept."""
    words = re.split(r"[-_\s]+", name.strip())
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


def build_base_frontmatter(doc: DocumentRecord, now: datetime, existing: dict[str, Any] | None = None) -> dict[str, Any]:
    """Merge a document's existing front matter with generated defaults.

    title is derived from the file name when missing (index pages stay
    untitled), date defaults to now, repository is always set, section only
    when non-empty, and repository metadata fills keys that are still absent.
    """
    fm = clone(existing) if existing else {}

    if fm.get("title") is None and doc.name != "index":
        fm["title"] = title_from_name(doc.name)
    if fm.get("date") is None:
        fm["date"] = now.isoformat(timespec="seconds")
    fm["repository"] = doc.repository
    if doc.section:
        fm["section"] = doc.section
    for k, v in doc.metadata.items():
        if fm.get(k) is None:
            fm[k] = v
    return fm
