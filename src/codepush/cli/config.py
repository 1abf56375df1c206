"""
codepush config - Inspect the resolved configuration.

Show the configuration the server would start with and check that the
selected storage backend can be used.
"""

import json
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from codepush.config.loader import ResolvedConfig, load_config
from codepush.config.storage import require_download_url
from codepush.exceptions import StorageError

app = typer.Typer(name="config", help="Inspect CodePush configuration", no_args_is_help=True)

console = Console()

OUTPUT_FORMATS = ("table", "yaml", "json")


def _load(env_file: Path | None) -> ResolvedConfig:
    return load_config(env_file=env_file, configure_logging=False)


def _flatten(data: dict, prefix: str = "") -> list[tuple[str, object]]:
    rows: list[tuple[str, object]] = []
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            rows.extend(_flatten(value, name))
        else:
            rows.append((name, value))
    return rows


@app.command("show")
def show(
    output: str = typer.Option("table", "--format", "-f", help="Output format: table, yaml or json"),
    env_file: Path = typer.Option(None, "--env-file", "-e", help="Optional .env file"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Do not mask credentials"),
):
    """
    Show the resolved configuration.
    """
    if output not in OUTPUT_FORMATS:
        console.print(f"[red]Unknown format: {escape(output)}[/red] (expected one of: {', '.join(OUTPUT_FORMATS)})")
        raise typer.Exit(2)

    cfg = _load(env_file)
    data = cfg.to_dict(mask_secrets=not show_secrets)

    if output == "json":
        typer.echo(json.dumps(data, indent=2))
    elif output == "yaml":
        content = yaml.safe_dump(data, sort_keys=False)
        if console.is_terminal:
            console.print(Syntax(content, "yaml", theme="monokai"))
        else:
            typer.echo(content)
    else:
        table = Table(title=f"CodePush configuration ({escape(cfg.env)})")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key, value in _flatten(data):
            table.add_row(escape(key), "[dim]unset[/dim]" if value is None else escape(str(value)))
        console.print(table)


@app.command("check")
def check(
    env_file: Path = typer.Option(None, "--env-file", "-e", help="Optional .env file"),
):
    """
    Check that the selected storage backend is usable.
    """
    cfg = _load(env_file)
    try:
        profile = cfg.active_storage()
        download_url = require_download_url(profile)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] storage: {profile.storage_type.value}, download url: {escape(download_url)}")
