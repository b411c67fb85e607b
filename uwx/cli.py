"""CLI entrypoint for UWX."""

from __future__ import annotations

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, TextIO

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from uwx import __version__
from uwx.config import (
    DEFAULT_CONFIG_NAME,
    load_config,
    resolve_filter_config,
    resolve_outputs,
    write_default_config,
)
from uwx.router import Sinks, TokenRouter
from uwx.stream import PipelineResult, run_pipeline

app = typer.Typer(
    name="uwx",
    help=(
        "URL Wordlist eXtractor (UWX) - turn a stream of URLs into deduplicated wordlist tokens.\n\n"
        "Examples:\n"
        "  cat urls.txt | uwx extract\n"
        "  uwx extract --input urls.txt --min 3 --alpha-num-only\n"
        "  uwx extract -i urls.txt -o paths.txt --op params.txt\n"
        "  uwx init"
    ),
    add_completion=False,
)
# stdout carries tokens; all diagnostics go to stderr.
console = Console(stderr=True)
logger = logging.getLogger("uwx")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _render_stats(result: PipelineResult, router: TokenRouter) -> None:
    table = Table(title="UWX Extraction Totals")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    table.add_row("Lines", str(result.lines))
    table.add_row("Tokens", str(result.tokens))
    for key, value in router.stats.to_dict().items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    table.add_row("Distinct values", str(len(router.seen)))
    console.print(table)


def _open_sink(stack: ExitStack, path: str, label: str) -> Optional[TextIO]:
    if not path:
        return None
    try:
        return stack.enter_context(open(path, "w", encoding="utf-8"))
    except OSError as exc:
        console.print(f"[red]Failed to create {label} output file:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command("extract")
def extract_command(
    input_file: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        exists=True,
        dir_okay=False,
        help="File with one URL per line. Defaults to stdin.",
    ),
    min_length: Optional[int] = typer.Option(None, "--min", help="Min length of tokens to output [default: 1]"),
    max_length: Optional[int] = typer.Option(None, "--max", help="Max length of tokens to output [default: 25]"),
    alpha_num_only: bool = typer.Option(
        False,
        "--alpha-num-only",
        help="Only output tokens containing at least one letter and one number.",
    ),
    substring: Optional[str] = typer.Option(None, "--filter", "-f", help="Only output tokens containing this string."),
    pattern: Optional[str] = typer.Option(None, "--regex", "-r", help="Only output tokens matching this regex."),
    path_output: Optional[str] = typer.Option(None, "--path-output", "-o", help="Output file for path tokens."),
    param_output: Optional[str] = typer.Option(
        None,
        "--param-output",
        "--op",
        help="Output file for parameter name tokens.",
    ),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME),
        "--config",
        "-c",
        help="YAML config file. Missing files fall back to defaults.",
    ),
    stats: bool = typer.Option(False, "--stats", help="Print extraction totals to stderr when done."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr."),
) -> None:
    """Extract wordlist tokens from URLs, one token per output line."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
        filter_config = resolve_filter_config(
            config,
            min_length=min_length,
            max_length=max_length,
            alpha_num_only=alpha_num_only or None,
            substring=substring,
            pattern=pattern,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    outputs = resolve_outputs(config, paths=path_output, params=param_output)
    logger.debug("Filters: %s", filter_config)
    logger.debug("Outputs: %s", outputs)

    with ExitStack() as stack:
        sinks = Sinks(
            default=sys.stdout,
            paths=_open_sink(stack, outputs["paths"], "path"),
            params=_open_sink(stack, outputs["params"], "param"),
        )
        if input_file is not None:
            lines = stack.enter_context(input_file.open("r", encoding="utf-8", errors="replace"))
        else:
            lines = sys.stdin

        router = TokenRouter(filter_config, sinks)
        result = run_pipeline(lines, router.process)
        sys.stdout.flush()

    if stats:
        _render_stats(result, router)


@app.command("init")
def init_command(
    path: Path = typer.Argument(Path(DEFAULT_CONFIG_NAME), help="Where to write the default config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a default uwx.yaml with filter and output settings."""
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {path} (use --force to overwrite)")
        raise typer.Exit(code=1)
    write_default_config(path)
    console.print(f"[green]Config created:[/green] {path}")


@app.command("version")
def version_command() -> None:
    """Print the UWX version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
