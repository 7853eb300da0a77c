"""Unit tests for config.py"""

import pytest

from mdsite.config import RepositoryConfig, load_config


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run each test from an empty directory with no MDSITE_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "OUTPUT_DIR", "REPORT_DIR", "TRACK_STATE", "VERBOSE", "APP_NAME"):
        monkeypatch.delenv(f"MDSITE_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.db_url == "sqlite:///mdsite.db"
    assert settings.output_dir == "site"
    assert settings.effective_report_dir == "site"
    assert settings.repositories == []
    assert settings.track_state is True


def test_load_config_uses_env_db_url(monkeypatch):
    """MDSITE_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("MDSITE_DB_URL", "sqlite:///env.db")
    assert load_config().db_url == "sqlite:///env.db"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDSITE_OUTPUT_DIR takes precedence over config.yaml output_dir."""
    (tmp_path / "config.yaml").write_text("output_dir: public\n")
    monkeypatch.setenv("MDSITE_OUTPUT_DIR", "env-site")
    assert load_config().output_dir == "env-site"


def test_load_config_env_bool_coerced(monkeypatch):
    """Boolean env vars are coerced by the settings model."""
    monkeypatch.setenv("MDSITE_TRACK_STATE", "false")
    assert load_config().track_state is False


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDSITE_DB_URL", "sqlite:///env.db")
    settings = load_config(overrides={"db_url": "sqlite:///cli.db", "output_dir": None})
    assert settings.db_url == "sqlite:///cli.db"
    assert settings.output_dir == "site"


def test_load_config_repositories_from_yaml(tmp_path):
    """Repositories and front matter maps are read from config.yaml."""
    (tmp_path / "config.yaml").write_text(
        "report_dir: reports\n"
        "repositories:\n"
        "  - name: api\n"
        "    path: ./checkouts/api\n"
        "    url: https://github.com/org/api.git\n"
        "    tags: {team: platform}\n"
        "  - name: guides\n"
        "    path: ./checkouts/guides\n"
        "    paths: [docs, manual]\n"
        "frontmatter_defaults:\n"
        "  draft: false\n"
    )
    settings = load_config()
    api, guides = settings.repositories
    assert api.repo_id == "https://github.com/org/api.git"
    assert api.branch == "main"
    assert api.paths == ["docs"]
    assert api.tags == {"team": "platform"}
    assert guides.repo_id == "guides"
    assert guides.paths == ["docs", "manual"]
    assert settings.frontmatter_defaults == {"draft": False}
    assert settings.effective_report_dir == "reports"


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping(tmp_path):
    """A config.yaml holding a list is rejected."""
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_explicit_file(tmp_path):
    """config_file points at an alternate YAML file."""
    (tmp_path / "alt.yaml").write_text("app_name: docs-portal\n")
    assert load_config(config_file=tmp_path / "alt.yaml").app_name == "docs-portal"


def test_repository_config_requires_path():
    with pytest.raises(ValueError):
        RepositoryConfig(name="x")
