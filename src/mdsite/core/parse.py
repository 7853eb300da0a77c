"""markdown-it tokenization helpers for page bodies"""

from typing import Optional

from markdown_it import MarkdownIt


DEFAULT_PRESET = "gfm-like"


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def leading_h1(body: str, preset: str = DEFAULT_PRESET) -> Optional[str]:
    """Text of the first block when it is a level-1 heading, else None.

    Anything before the heading (a paragraph, a list) disqualifies it.
    """
    tokens = _make_parser(preset).parse(body)
    if len(tokens) < 2 or tokens[0].type != "heading_open" or tokens[0].tag != "h1":
        return None
    text = tokens[1].content.strip()
    return text or None
