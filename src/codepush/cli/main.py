"""
Main CLI entry point.
"""

import typer

from codepush import __version__
from codepush.cli import config


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"codepush version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="codepush",
    help="CodePush server configuration tools",
    add_completion=False,
)

# Register subcommands
app.add_typer(config.app, name="config")


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        help="Show version and exit.",
    ),
):
    """
    CodePush server configuration tools.

    Run 'codepush <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        if not version:
            typer.echo(ctx.get_help())
            raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
