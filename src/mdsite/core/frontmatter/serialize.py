"""YAML front matter serialization for rendered page content"""

from typing import Any

import yaml


def dump_frontmatter(frontmatter: dict[str, Any]) -> str:
    """Serialize front matter as block YAML with sorted keys for stable output."""
    if not frontmatter:
        return ""
    return yaml.safe_dump(frontmatter, sort_keys=True, allow_unicode=True, default_flow_style=False)


def render_page(frontmatter: dict[str, Any], body: str) -> bytes:
    """Return '---\\n<yaml>---\\n\\n<body>' as UTF-8 bytes."""
    text = f"---\n{dump_frontmatter(frontmatter)}---\n\n{body}"
    if not text.endswith("\n"):
        text += "\n"
    return text.encode("utf-8")
