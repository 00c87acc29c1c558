"""
CLI command implementations.

This module contains the logic behind each CLI command:
- rewrite: stream a file (or stdin) through a machine
- validate: check a machine file and show its states
"""

import sys
import time
from pathlib import Path
from typing import Optional

from regexflow.config import build_machine, load_config, validate_config
from regexflow.engine import (
    DEFAULT_LOOK_AHEAD,
    DEFAULT_MAX_MATCH_LENGTH,
    ModifyingWriter,
    StatefulModifier,
)
from regexflow.errors import ConfigurationError
from regexflow.machine.analysis import lint_machine

from .display import (
    print_config,
    print_error,
    print_header,
    print_info,
    print_lint_issues,
    print_rewrite_stats,
    print_separator,
    print_state_table,
    print_success,
    print_validation_errors,
)


def rewrite_command(
    machine_path: Path,
    input_path: Optional[Path],
    output_path: Optional[Path],
    chunk_size: int,
    initial: Optional[str],
    show_stats: bool,
) -> None:
    """
    Execute the rewrite command.

    Args:
        machine_path: Path to the machine JSON file
        input_path: File to rewrite (stdin if None)
        output_path: Destination file (stdout if None)
        chunk_size: Characters read per write to the engine
        initial: Start state overriding the file's "initial"
        show_stats: Whether to print statistics afterwards
    """
    try:
        config = load_config(machine_path)
        machine = build_machine(config)
    except ConfigurationError as e:
        print_error(f"Failed to load machine: {machine_path}")
        print_validation_errors(e.errors or [str(e)])
        raise SystemExit(1)

    modifier = StatefulModifier(
        machine,
        initial,
        max_match_length=config.get("max_match_length", DEFAULT_MAX_MATCH_LENGTH),
        look_ahead=config.get("look_ahead", DEFAULT_LOOK_AHEAD),
    )

    source = open(input_path, encoding="utf-8") if input_path else sys.stdin
    target = open(output_path, "w", encoding="utf-8") if output_path else sys.stdout

    chars_in = 0
    started = time.perf_counter()
    writer = ModifyingWriter(target, modifier)
    try:
        for chunk in iter(lambda: source.read(chunk_size), ""):
            chars_in += len(chunk)
            writer.write(chunk)
    finally:
        writer.close(close_target=output_path is not None)
        if input_path:
            source.close()
    elapsed_ms = (time.perf_counter() - started) * 1000

    if output_path:
        print_success(f"Output written to: {output_path}")

    if show_stats:
        print_rewrite_stats(
            chars_in=chars_in,
            chars_out=writer.chars_written,
            transitions=modifier.run.transition_count,
            final_state=modifier.active_state.name,
            elapsed_ms=elapsed_ms,
        )


def validate_command(machine_path: Path, show_config: bool) -> None:
    """
    Execute the validate command.

    Args:
        machine_path: Path to the machine JSON file
        show_config: Whether to display the configuration
    """
    print_header("regexflow - Validate Machine")

    try:
        config = load_config(machine_path)
        print_success(f"Loaded machine from: {machine_path}")
    except ConfigurationError as e:
        print_error(str(e))
        raise SystemExit(1)

    if show_config:
        print_config(config)

    print_separator()
    print_info("Validating...")

    result = validate_config(config)
    if not result.is_valid:
        print_error("Validation failed")
        print_validation_errors(result.errors)
        raise SystemExit(1)

    try:
        machine = build_machine(config)
    except ConfigurationError as e:
        print_error("Validation failed")
        print_validation_errors(e.errors or [str(e)])
        raise SystemExit(1)

    print_success("Validation passed!")
    print_state_table(machine)
    print_lint_issues(lint_machine(machine))
