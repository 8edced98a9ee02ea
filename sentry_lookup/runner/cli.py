from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from sentry_lookup import __version__
from sentry_lookup.core.config import (
    API_KEY_ENV,
    API_URL_ENV,
    CACHE_DIR_ENV,
    DEFAULT_API_URL,
    ORG_ENV,
    LookupConfig,
)
from sentry_lookup.core.exceptions import ConfigurationError, SentryLookupError
from sentry_lookup.core.logging import configure_logging, get_logger
from sentry_lookup.core.resolver import get_projects, get_slug

app = typer.Typer(help="Look up stuff using the sentry api", no_args_is_help=True)
log = get_logger("cli")
console = Console()
err_console = Console(stderr=True)

ApiKeyOption = Annotated[
    Optional[str],
    typer.Option("--api-key", envvar=API_KEY_ENV, help="Sentry API token.", show_default=False),
]
ApiUrlOption = Annotated[
    str,
    typer.Option("--api-url", envvar=API_URL_ENV, help="Base URL of the Sentry instance."),
]
OrgOption = Annotated[
    Optional[str],
    typer.Option("--org", envvar=ORG_ENV, help="Organization slug.", show_default=False),
]
ClearCacheOption = Annotated[
    bool,
    typer.Option("--clear-cache", help="Ignore the cached project list and fetch a fresh one."),
]
CacheDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--cache-dir",
        envvar=CACHE_DIR_ENV,
        help="Directory holding projects.json (defaults to the user cache dir).",
        show_default=False,
    ),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _fail(exc: SentryLookupError) -> NoReturn:
    log.debug("command_failed", error=str(exc), error_type=type(exc).__name__)
    # one line on the terminal, even for multi-line response bodies
    message = " ".join(str(exc).split())
    err_console.print(f"Error: {message}", style="red", markup=False, highlight=False, soft_wrap=True)
    code = 2 if isinstance(exc, ConfigurationError) else 1
    raise typer.Exit(code=code)


def _resolve_config(ctx: typer.Context, **overrides: Any) -> LookupConfig:
    return LookupConfig.resolve(**ctx.obj, **overrides)


@app.callback()
def main_callback(
    ctx: typer.Context,
    api_key: ApiKeyOption = None,
    api_url: ApiUrlOption = DEFAULT_API_URL,
    org: OrgOption = None,
    clear_cache: ClearCacheOption = False,
    cache_dir: CacheDirOption = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    configure_logging(verbose)
    ctx.obj = {
        "api_key": api_key,
        "api_url": api_url,
        "org": org,
        "clear_cache": clear_cache,
        "cache_dir": cache_dir,
    }


@app.command("get-slug")
def get_slug_command(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., metavar="PROJECT-ID", help="The project id to look up"),
) -> None:
    """Find a project slug by id."""
    try:
        cfg = _resolve_config(ctx, project_id=project_id, require_project_id=True)
        slug = get_slug(project_id, cfg)
    except SentryLookupError as exc:
        _fail(exc)
    typer.echo(slug)


@app.command("list-projects")
def list_projects_command(ctx: typer.Context) -> None:
    """List the organization's projects with their ids and slugs."""
    try:
        cfg = _resolve_config(ctx)
        projects = get_projects(cfg)
    except SentryLookupError as exc:
        _fail(exc)

    table = Table(title=f"Projects in {cfg.org}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Slug", style="green")
    for project in projects:
        table.add_row(project.id, project.slug)
    console.print(table)


def main() -> None:
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
