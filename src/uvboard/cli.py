"""CLI interface for uvboard."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import structlog
import typer

from uvboard import __version__
from uvboard.config import UvboardConfig
from uvboard.context.loader import load_documents
from uvboard.context.pipeline import PipelineResult, TruncationPipeline
from uvboard.exceptions import UvboardError

CONFIG_FILENAME = "uvboard.yaml"


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for CLI output on stderr."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


configure_logging()

logger = structlog.get_logger()

app = typer.Typer(
    name="uvboard",
    help="Budgeted README, manifest and source excerpts for packaging prompts",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"uvboard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log per-document budget decisions."),
    ] = False,
) -> None:
    """uvboard - context budgeting for packaging-manifest generation."""
    configure_logging(verbose)


def _load_config(repo_dir: Path, config: Path | None) -> UvboardConfig:
    config_path = config
    if config_path is None:
        default_config = repo_dir / CONFIG_FILENAME
        if default_config.exists():
            config_path = default_config
    if config_path is None:
        return UvboardConfig.default()
    return UvboardConfig.load(config_path)


def _run_pipeline(repo_dir: Path, config: Path | None) -> PipelineResult:
    try:
        cfg = _load_config(repo_dir, config)
        documents = load_documents(repo_dir, cfg.discovery)
    except (UvboardError, ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    return TruncationPipeline(cfg.budgets).run(documents)


RepoDir = Annotated[
    Path,
    typer.Argument(
        help="Repository checkout to read",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help=f"Path to {CONFIG_FILENAME} config file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


@app.command()
def excerpt(
    repo_dir: RepoDir,
    config: ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print excerpts as JSON"),
    ] = False,
) -> None:
    """Print the budgeted excerpts of a repository."""
    result = _run_pipeline(repo_dir, config)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    rendered = result.render()
    typer.echo(rendered if rendered else "No documents found.")


@app.command()
def plan(
    repo_dir: RepoDir,
    config: ConfigOption = None,
) -> None:
    """Show how each category budget was spent."""
    result = _run_pipeline(repo_dir, config)

    for item in result.prose.values():
        status = "truncated" if item.truncated else "whole"
        typer.echo(
            f"prose     {item.name:<24} {item.consumed_chars:>6}/{item.source_chars:<6} {status}"
        )

    for category, budget_plan in (
        ("manifest", result.manifest_plan),
        ("source", result.source_plan),
    ):
        for name, item in budget_plan.excerpts.items():
            status = "truncated" if item.truncated else "whole"
            typer.echo(
                f"{category:<9} {name:<24} {item.consumed_chars:>6}/{item.source_chars:<6} {status}"
            )
        for name in budget_plan.dropped:
            typer.echo(
                typer.style(f"{category:<9} {name:<24} dropped", fg=typer.colors.YELLOW)
            )
        typer.echo(
            f"{category:<9} {'(total)':<24} {budget_plan.consumed_chars:>6}/{budget_plan.budget:<6}"
        )


@app.command()
def init(
    base_dir: Annotated[
        Path,
        typer.Option(
            "--dir",
            "-d",
            help="Directory to initialize",
            resolve_path=True,
        ),
    ] = Path.cwd(),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Write a default uvboard configuration."""
    config_path = base_dir / CONFIG_FILENAME

    if config_path.exists() and not force:
        typer.echo(f"Config already exists: {config_path}")
        typer.echo("Use --force to overwrite.")
        raise typer.Exit(1)

    UvboardConfig.default().save(config_path)
    logger.debug("Config written", path=str(config_path))

    typer.echo(f"Created config: {config_path}")
    typer.echo(f"Edit {CONFIG_FILENAME} to customize budgets.")


if __name__ == "__main__":
    app()
