#!/usr/bin/env python3
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
import pyperclip
from rich.console import Console
from rich.markup import escape

from . import __version__
from .batch import BatchValidator
from .config import DEFAULT_CONFIG_FILENAME, Config
from .git_source import CommitSourceError, collect_commits
from .observers import ConsoleLogObserver, FileLogObserver
from .report import print_report, render, render_json
from .rules import ConfigurationError

console = Console()

EXIT_CONFIG_ERROR = 2


def exit_with_error(label: str, error: Exception) -> None:
    console.print(f"[red]{label}: {escape(str(error))}[/red]")
    sys.exit(EXIT_CONFIG_ERROR)


def apply_overrides(config: Config, **overrides) -> Config:
    """Apply command line values that were actually given."""
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config


def show_config(config: Config, config_path: Path) -> None:
    source = "config" if config_path.exists() else "default"

    console.print("\n[bold]Current Configuration Settings:[/bold]")
    if config_path.exists():
        console.print(f"[dim]Config file: {str(config_path).replace(os.sep, '/')}[/dim]")
    else:
        console.print("[dim]Using default values (no config file found)[/dim]")

    console.print(f"\n{'Setting':<20} {'Value':<40} {'Source':<10}")
    console.print("-" * 70)
    for name, value in config.model_dump().items():
        shown = "None" if value is None else str(value)
        console.print(f"{name:<20} {shown:<40} {source:<10}", highlight=False)

    console.print(
        f"\nTo modify these settings, create or edit {DEFAULT_CONFIG_FILENAME} in your repository root"
    )


@click.command()
@click.argument(
    "message_files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--title", envvar="COMMIT_CHECK_TITLE", help="Pull request title to validate")
@click.option(
    "-r",
    "--range",
    "rev_range",
    help="Git revision range to read commits from (e.g. origin/main..HEAD)",
)
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option("--types", help="Comma-separated list of allowed commit types")
@click.option(
    "--require-scope/--no-require-scope",
    default=None,
    help="Require a scope in every header",
)
@click.option("--min-subject-length", type=int, help="Minimum subject length")
@click.option("--max-subject-length", type=int, help="Maximum subject length")
@click.option(
    "--fail-on-error/--no-fail-on-error",
    default=None,
    help="Exit non-zero when validation fails",
)
@click.option(
    "--validate-commits/--no-validate-commits",
    default=None,
    help="Whether commit messages count toward the verdict",
)
@click.option(
    "--validate-title/--no-validate-title",
    default=None,
    help="Whether the PR title counts toward the verdict",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Report format",
)
@click.option("-v", "--verbose", is_flag=True, help="Log each validated message")
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log validation results (overrides config setting)",
)
@click.option(
    "--config-list", is_flag=True, help="Display current configuration settings"
)
@click.option(
    "--config-dir",
    is_flag=True,
    help="Display the config file location and copy it to clipboard",
)
@click.version_option(__version__, prog_name="commitcheck")
def main(
    message_files: Tuple[Path, ...],
    title: Optional[str],
    rev_range: Optional[str],
    path: Path,
    types: Optional[str],
    require_scope: Optional[bool],
    min_subject_length: Optional[int],
    max_subject_length: Optional[int],
    fail_on_error: Optional[bool],
    validate_commits: Optional[bool],
    validate_title: Optional[bool],
    output_format: str,
    verbose: bool,
    log_file: Optional[Path],
    config_list: bool,
    config_dir: bool,
):
    """
    Validate commit messages and a pull request title against Conventional Commits.

    Commits are read from MESSAGE_FILES and/or a git revision range. Every
    message is checked and all problems are reported in one run.

    Configuration can be set in .commitcheck.toml in the repository root.
    Command line options override configuration file settings.
    """
    repo_path = path.absolute()
    config_path = repo_path / DEFAULT_CONFIG_FILENAME

    try:
        config = Config.load(repo_path)
    except ConfigurationError as e:
        exit_with_error("Configuration error", e)

    if config_list:
        show_config(config, config_path)
        return

    if config_dir:
        if not config_path.exists():
            config.save(repo_path)
            console.print("[yellow]Created new config file with default values[/yellow]")

        pyperclip.copy(str(config_path))
        console.print(f"[green]Config file location:[/green] {config_path}")
        console.print("[green]Path copied to clipboard![/green]")
        return

    config = apply_overrides(
        config,
        types=types,
        require_scope=require_scope,
        min_subject_length=min_subject_length,
        max_subject_length=max_subject_length,
        fail_on_error=fail_on_error,
        validate_commits=validate_commits,
        validate_title=validate_title,
    )

    try:
        rules = config.to_rule_set()
    except ConfigurationError as e:
        exit_with_error("Configuration error", e)

    commits = []
    commit_ids = []
    for message_file in message_files:
        commits.append(message_file.read_text(encoding="utf-8", errors="replace"))
        commit_ids.append(message_file.name)

    if rev_range:
        try:
            for sha, message in collect_commits(repo_path, rev_range):
                commit_ids.append(sha)
                commits.append(message)
        except CommitSourceError as e:
            exit_with_error("Error", e)

    validator = BatchValidator(rules, config.batch_options())
    if verbose:
        validator.add_observer(ConsoleLogObserver(Console(stderr=True)))
    # A path given on the command line is used as is
    log_file_path = log_file or config.get_log_file()
    if log_file_path:
        validator.add_observer(FileLogObserver(str(log_file_path)))

    result = validator.run(title, commits, commit_ids)
    report = render(result, fail_on_error=config.fail_on_error)

    if output_format == "json":
        click.echo(render_json(result))
    else:
        print_report(result, report, console)

    sys.exit(report.exit_code)


if __name__ == "__main__":
    main()
