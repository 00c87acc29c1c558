"""
Main CLI entry point using Typer.

This module defines the command-line interface for regexflow. It provides
two commands: rewrite and validate.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .commands import rewrite_command, validate_command
from .display import print_error


app = typer.Typer(
    name="regexflow",
    help="regexflow - Stateful, regex-driven stream rewriting",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("rewrite")
def rewrite(
    machine: Annotated[
        Path,
        typer.Option("--machine", "-m", help="Path to machine JSON file", exists=True, file_okay=True, dir_okay=False)
    ],
    input_file: Annotated[
        Optional[Path],
        typer.Option("--input", "-i", help="File to rewrite (default: stdin)", exists=True, file_okay=True, dir_okay=False)
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Destination file (default: stdout)")
    ] = None,
    initial: Annotated[
        Optional[str],
        typer.Option("--initial", help="Start state (default: the machine's 'initial')")
    ] = None,
    chunk_size: Annotated[
        int,
        typer.Option("--chunk-size", help="Characters read per step", min=1)
    ] = 8192,
    stats: Annotated[
        bool,
        typer.Option("--stats", help="Show rewrite statistics")
    ] = False,
) -> None:
    """
    Rewrite a text stream with a state machine.

    Example:
        regexflow rewrite \\
            --machine quotes.json \\
            --input page.txt \\
            --output page.out.txt \\
            --stats
    """
    try:
        rewrite_command(
            machine_path=machine,
            input_path=input_file,
            output_path=output,
            chunk_size=chunk_size,
            initial=initial,
            show_stats=stats
        )
    except SystemExit:
        raise
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("validate")
def validate(
    machine: Annotated[
        Path,
        typer.Option("--machine", "-m", help="Path to machine JSON file", exists=True, file_okay=True, dir_okay=False)
    ],
    show_config: Annotated[
        bool,
        typer.Option("--show-config", help="Display the machine configuration")
    ] = False,
) -> None:
    """
    Validate a machine file and show its states.

    Example:
        regexflow validate --machine quotes.json --show-config
    """
    try:
        validate_command(machine_path=machine, show_config=show_config)
    except SystemExit:
        raise
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log state transitions to stderr")
    ] = False,
) -> None:
    """
    regexflow - Stateful, regex-driven stream rewriting.
    """
    if version:
        from regexflow import __version__
        typer.echo(f"regexflow version {__version__}")
        raise typer.Exit()

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for the console script."""
    app()


if __name__ == "__main__":
    cli()
