"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDSITE_"


class RepositoryConfig(BaseModel):
    """A source repository already checked out on local disk."""
    name:   str
    path:   str = Field(...,            description="Local checkout directory")
    url:    str = Field(default="",     description="Canonical clone URL; used as the tracked repository identity")
    branch: str = Field(default="main", description="Branch used for edit links")
    paths:  list[str] = Field(default_factory=lambda: ["docs"], description="Docs directories relative to path")
    tags:   dict[str, str] = Field(default_factory=dict, description="Metadata copied into each page's front matter")

    @property
    def repo_id(self) -> str:
        """Stable identity for incremental state: the URL when known, else the name."""
        return self.url or self.name


class Settings(BaseModel):
    app_name:     str = "mdsite"
    db_url:       str = "sqlite:///mdsite.db"
    output_dir:   str = Field(default="site", description="Directory receiving the generated content tree")
    report_dir:   str = Field(default="",     description="Directory for build-report.json; defaults to output_dir")
    track_state:  bool = Field(default=True,  description="Record per-repository hashes for future runs")
    verbose:      bool = False
    repositories: list[RepositoryConfig] = Field(default_factory=list)
    frontmatter_defaults:  dict[str, Any] = Field(default_factory=dict, description="Set on every page when missing")
    frontmatter_overrides: dict[str, Any] = Field(default_factory=dict, description="Forced onto every page")

    @property
    def effective_report_dir(self) -> str:
        return self.report_dir or self.output_dir


_SCALAR_FIELDS = {"app_name", "db_url", "output_dir", "report_dir", "track_state", "verbose"}


def load_config(overrides: dict[str, Any] = None, config_file: str | Path = CONFIG_FILE) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    path = Path(config_file)
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {path.name}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")

    # Structured fields (repositories, front matter maps) only come from the file.
    for name in _SCALAR_FIELDS:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
