"""Main Typer application for the jirawalk CLI."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import typer

from jirawalk.clients.client_exceptions import UnauthorizedError
from jirawalk.clients.jira import JiraApi, SearchExecutor
from jirawalk.config import JiraConfig, load_config
from jirawalk.core.errors import ConfigError
from jirawalk.core.logger import LogConfig, UnifiedLogger
from jirawalk.core.logging import CollectingDiagnosticSink, StructlogDiagnosticSink
from jirawalk.core.logging.log_events import LogEvents
from jirawalk.issues import Walker

__all__ = ["app", "create_app", "run"]

EXIT_CONFIG_ERROR = 2
EXIT_UNAUTHORIZED = 3
EXIT_TRUNCATED = 4

ApiFactory = Callable[[JiraConfig], SearchExecutor]

ConfigOption = typer.Option(None, "--config", "-c", help="YAML configuration file.")
EndpointOption = typer.Option(None, "--endpoint", help="Jira base URL (overrides config).")
PerPageOption = typer.Option(None, "--per-page", min=1, help="Issues requested per page.")


def _build_overrides(endpoint: str | None, per_page: int | None) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if endpoint:
        overrides["endpoint"] = endpoint
    if per_page is not None:
        overrides["page_size"] = per_page
    return overrides


def _load(config_path: Path | None, overrides: dict[str, Any]) -> JiraConfig:
    # Configuration loading logs too; stdout must carry command output only.
    UnifiedLogger.configure(LogConfig())
    try:
        config = load_config(config_path, overrides=overrides)
    except ConfigError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc
    UnifiedLogger.configure(LogConfig(level=config.logging.level, format=config.logging.format))
    return config


def create_app(api_factory: ApiFactory = JiraApi.from_config) -> typer.Typer:
    """Create the Typer application; ``api_factory`` builds the search executor."""

    app = typer.Typer(
        name="jirawalk",
        help="Walk every issue matching a JQL query across all result pages.",
        add_completion=False,
    )

    @app.command(name="search")
    def search_command(
        jql: str = typer.Argument(..., help="JQL query."),
        field: Optional[list[str]] = typer.Option(
            None, "--field", "-f", help="Field to return; repeat for several."
        ),
        limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Stop after N issues."),
        config_path: Optional[Path] = ConfigOption,
        endpoint: Optional[str] = EndpointOption,
        per_page: Optional[int] = PerPageOption,
    ) -> None:
        """Print every matching issue as one JSON document per line."""

        config = _load(config_path, _build_overrides(endpoint, per_page))
        log = UnifiedLogger.get(__name__).bind(component="cli.search")
        log.info(LogEvents.CLI_RUN_START, command="search", jql=jql)

        diagnostics = CollectingDiagnosticSink(forward_to=StructlogDiagnosticSink())
        walker = Walker(api_factory(config), config.page_size, diagnostics=diagnostics)
        walker.push(jql, field or None)

        printed = 0
        try:
            for issue in walker:
                typer.echo(json.dumps(issue, ensure_ascii=False, sort_keys=True))
                printed += 1
                if limit is not None and printed >= limit:
                    break
        except UnauthorizedError as exc:
            log.error(LogEvents.CLI_RUN_ERROR, command="search", error=str(exc))
            typer.echo("Jira rejected the credentials (HTTP 401).", err=True)
            raise typer.Exit(code=EXIT_UNAUTHORIZED) from exc

        log.info(LogEvents.CLI_RUN_FINISH, command="search", issues=printed)
        if diagnostics.lines:
            typer.echo(
                f"Search ended early after {printed} issues: {diagnostics.lines[-1]}",
                err=True,
            )
            raise typer.Exit(code=EXIT_TRUNCATED)

    @app.command(name="count")
    def count_command(
        jql: str = typer.Argument(..., help="JQL query."),
        config_path: Optional[Path] = ConfigOption,
        endpoint: Optional[str] = EndpointOption,
        per_page: Optional[int] = PerPageOption,
    ) -> None:
        """Print the number of issues matching the query."""

        config = _load(config_path, _build_overrides(endpoint, per_page))
        log = UnifiedLogger.get(__name__).bind(component="cli.count")
        log.info(LogEvents.CLI_RUN_START, command="count", jql=jql)

        diagnostics = CollectingDiagnosticSink(forward_to=StructlogDiagnosticSink())
        walker = Walker(api_factory(config), config.page_size, diagnostics=diagnostics)
        walker.push(jql)
        try:
            total = walker.count()
        except UnauthorizedError as exc:
            log.error(LogEvents.CLI_RUN_ERROR, command="count", error=str(exc))
            typer.echo("Jira rejected the credentials (HTTP 401).", err=True)
            raise typer.Exit(code=EXIT_UNAUTHORIZED) from exc
        except Exception as exc:
            log.error(LogEvents.CLI_RUN_ERROR, command="count", error=str(exc))
            typer.echo(f"Count failed: {exc}", err=True)
            raise typer.Exit(code=EXIT_TRUNCATED) from exc

        log.info(LogEvents.CLI_RUN_FINISH, command="count", total=total)
        if diagnostics.lines:
            typer.echo(
                f"Count ended early after {total} issues: {diagnostics.lines[-1]}",
                err=True,
            )
            raise typer.Exit(code=EXIT_TRUNCATED)
        typer.echo(str(total))

    return app


app = create_app()


def run() -> None:
    """Console script entry point."""

    app()


if __name__ == "__main__":
    run()
