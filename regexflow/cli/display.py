"""
Rich terminal display utilities for the CLI.

Provides formatted output using the Rich library for:
- Syntax-highlighted machine configurations
- State tables (token pattern, action, transitions, guard)
- Validation errors and lint findings
- Rewrite statistics

Status output goes to stderr so that ``regexflow rewrite`` can stream the
rewritten text to stdout.
"""

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from regexflow.machine.analysis import LintIssue
from regexflow.machine.definition import StateMachine

console = Console(stderr=True)


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def print_config(config: Dict[str, Any], title: Optional[str] = "Machine") -> None:
    """
    Print a machine configuration with JSON syntax highlighting.

    Args:
        config: Configuration dict
        title: Optional title for the panel
    """
    syntax = Syntax(json.dumps(config, indent=2), "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=f"[bold]{title}[/bold]", border_style="cyan"))
    else:
        console.print(syntax)


def print_validation_errors(errors: List[Any]) -> None:
    """Print validation errors in a formatted list."""
    if not errors:
        return

    console.print()
    console.print("[bold red]Validation Errors:[/bold red]")
    for error in errors:
        console.print(f"  [red]•[/red] {error}", markup=False, highlight=False)
    console.print()


def print_state_table(machine: StateMachine) -> None:
    """
    Print one row per state: pattern, action, transitions and guard.

    The initial state is marked with an arrow, terminal states in yellow.
    """
    table = Table(title=f"Machine '{machine.name}'", show_header=True, header_style="bold cyan")
    table.add_column("State", style="cyan")
    table.add_column("Pattern", style="white")
    table.add_column("Action", style="white")
    table.add_column("Transitions")
    table.add_column("Guard", style="dim")

    for state in machine:
        name = f"→ {state.name}" if state.name == machine.initial else state.name
        action = getattr(state.token.action, "__name__", None) or repr(state.token.action)
        if state.transitions is None:
            targets = Text("terminal", style="yellow")
            guard = ""
        else:
            targets = Text(", ".join(c.name for c in state.transitions.candidates))
            guard = repr(state.transitions.guard)
        table.add_row(name, Text(state.token.pattern.pattern), Text(action), targets, Text(guard))

    console.print()
    console.print(table)
    console.print()


def print_lint_issues(issues: List[LintIssue]) -> None:
    """Print lint findings; warnings in yellow, info dimmed."""
    for issue in issues:
        if issue.level == "warning":
            print_warning(f"{issue.state}: {issue.message}")
        else:
            console.print(f"[dim]  {issue.state}: {issue.message}[/dim]")


def print_rewrite_stats(
    chars_in: int,
    chars_out: int,
    transitions: int,
    final_state: str,
    elapsed_ms: float,
) -> None:
    """Print rewrite statistics in a table."""
    table = Table(title="Rewrite Statistics", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan", width=20)
    table.add_column("Value", style="white", width=30)

    table.add_row("Characters in", str(chars_in))
    table.add_row("Characters out", str(chars_out))
    table.add_row("Transitions", str(transitions))
    table.add_row("Final state", final_state)
    table.add_row("Elapsed", f"{elapsed_ms:.1f} ms")

    console.print()
    console.print(table)
    console.print()


def print_separator() -> None:
    """Print a visual separator line."""
    console.print("[dim]" + "─" * 70 + "[/dim]")
