"""CLI entry point for linewise."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from linewise.config import LinewiseConfig, WriterConfig, load_config
from linewise.config.loader import PROJECT_CONFIG, find_config_path, render_config_template
from linewise.errors import InvalidArgumentError
from linewise.layers import parse_binmode

app = typer.Typer(
    name="linewise",
    help="Inspect linewise writer configuration and I/O layers.",
)

config_app = typer.Typer(help="Manage linewise configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: LinewiseConfig | None = None
_config_source: Path | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {"level": record.levelname.lower(), "logger": record.name, "message": record.getMessage()},
            ensure_ascii=False,
        )


def _get_config() -> LinewiseConfig:
    if _config is None:
        return load_config()
    return _config


def _setup_logging(cfg: LinewiseConfig) -> None:
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler])


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to linewise.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config, _config_source
    try:
        _config = load_config(config)
        _config_source = find_config_path(config)
    except ValueError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _setup_logging(_config)


@app.command()
def layers(
    binmode: str = typer.Argument(..., help='Layer string, e.g. "encoding(UTF-8)" or "raw:crlf"'),
) -> None:
    """Show how a binmode layer string resolves."""
    try:
        spec = parse_binmode(binmode)
    except InvalidArgumentError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=escape(f"binmode {binmode!r}"))
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("layers", escape(", ".join(spec.layers)) or "-")
    table.add_row("encoding", escape(spec.encoding))
    table.add_row("octets", "yes" if spec.octets else "no")
    table.add_row("newline", repr(spec.newline) if spec.newline else "untranslated")
    table.add_row("unencodable", escape(spec.errors))
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show the resolved configuration and the file it came from."""
    cfg = _get_config()
    source = str(_config_source) if _config_source is not None else "built-in defaults"
    rprint(f"[bold]source:[/bold] {escape(source)}")
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(), default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    method: str = typer.Option("write_handle", "--method", help="Handle-writing method name"),
    binmode: str = typer.Option("encoding(UTF-8)", "--binmode", help="Default I/O layer string"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Write linewise.yaml in the current directory."""
    try:
        writer_cfg = WriterConfig(method=method, binmode=binmode)
    except ValueError as e:
        rprint(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if PROJECT_CONFIG.exists() and not force:
        rprint(f"[yellow]{PROJECT_CONFIG} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    PROJECT_CONFIG.write_text(
        render_config_template(writer_cfg.method, writer_cfg.binmode), encoding="utf-8"
    )
    rprint(f"[green]Created[/green] {PROJECT_CONFIG} (binmode={escape(writer_cfg.binmode)})")
