"""CLI command implementations"""

import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import CONFIG_FILE, RepositoryConfig, Settings, load_config
from mdsite.core.utils.hashing import hash_paths
from mdsite.crud.database import init_db, make_engine, reset_db, session_scope
from mdsite.crud.sql_repo import SQLStateTracker
from mdsite.logging import configure_logging
from mdsite.pipeline.cancel import CancelToken
from mdsite.pipeline.generator import SiteGenerator


EXIT_CANCELED = 130


def _fail(msg: str, cause: Exception = None, code: int = 1) -> None:
    """Print a user-friendly error to stderr and exit."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(code)


def _settings(overrides: dict = None, config_file: str = CONFIG_FILE) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides, config_file=config_file)
    except ValueError as e:
        _fail(str(e))


def _parse_repo(spec: str) -> RepositoryConfig:
    """'name=path' -> RepositoryConfig; a bare path uses its directory name."""
    name, sep, path = spec.partition("=")
    if not sep:
        path = name
        name = Path(path).resolve().name
    if not name or not path:
        _fail(f"Invalid --repo value: {spec!r} (expected NAME=PATH)")
    return RepositoryConfig(name=name, path=path)


@contextmanager
def _cancel_on_sigint(token: CancelToken):
    """Turn Ctrl-C into cooperative cancellation for the duration of the build."""
    try:
        previous = signal.signal(signal.SIGINT, lambda *_: token.cancel("interrupted"))
    except ValueError:      # not on the main thread
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def build_cmd(
    repos: Annotated[Optional[list[str]], typer.Option("--repo", help="Repository checkout as NAME=PATH (repeatable)")] = None,
    config_file: Annotated[str, typer.Option("--config-file", help="YAML config file")] = CONFIG_FILE,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    report_dir: Annotated[Optional[str], typer.Option("--report-dir", help="Directory for build-report.json")] = None,
    no_state: Annotated[bool, typer.Option("--no-state", help="Do not record incremental state")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    """Discover docs, merge front matter, and write the site content tree."""
    settings = _settings(
        overrides={"output_dir": out, "report_dir": report_dir, "verbose": verbose or None},
        config_file=config_file,
    )
    if repos:
        settings.repositories = settings.repositories + [_parse_repo(r) for r in repos]
    configure_logging(verbose=settings.verbose)

    session = None
    tracker = None
    if settings.track_state and not no_state:
        engine = make_engine(settings.db_url)
        init_db(engine)
        session = session_scope(engine)
        tracker = SQLStateTracker(session)

    token = CancelToken()
    try:
        with _cancel_on_sigint(token):
            bs, err = SiteGenerator(settings, tracker=tracker).generate(token)
    finally:
        if session is not None:
            session.close()

    report = bs.report
    try:
        report_path = report.persist(Path(settings.effective_report_dir))
    except OSError as e:
        _fail("Could not write build report", e)

    for warning in report.warnings:
        typer.echo(f"  warning: {warning}")
    if err is not None and err.is_canceled:
        _fail(f"Build canceled during stage {err.stage}", code=EXIT_CANCELED)
    if err is not None:
        _fail(f"Build failed in stage {err.stage}", err.cause)

    if report.skip_reason:
        typer.echo(f"Skipped writing content: {report.skip_reason}")
    typer.echo(f"Built {report.files} document(s) from {report.repositories} repositories -> {settings.output_dir}/")
    typer.echo(f"Doc files hash: {report.doc_files_hash}")
    typer.echo(f"Report: {report_path}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the state database schema. Use --reset to clear tracked state."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing state cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def state_cmd():
    """List tracked repositories with their document counts and signatures."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with session_scope(engine) as session:
        rows = SQLStateTracker(session).all()
        if not rows:
            typer.echo("No repository state recorded.")
            raise typer.Exit(1)
        for row in rows:
            typer.echo(f"{row.repo_id}  files={row.document_count}  hash={row.doc_files_hash}")


def hash_cmd(
    paths: Annotated[list[str], typer.Argument(help="Logical paths to fingerprint")],
    ):
    """Print the change signature of the given paths (order-independent)."""
    typer.echo(hash_paths(paths))
