"""
Command-line interface module.

This module provides a terminal interface for regexflow using Typer and Rich.

Commands:
    - rewrite: stream a file or stdin through a machine definition
    - validate: validate a machine file, print its state table and lint findings

Example Usage:
    ```bash
    # Rewrite a file
    regexflow rewrite --machine quotes.json --input in.txt --output out.txt

    # Pipe through stdin/stdout, logging transitions
    cat in.txt | regexflow --verbose rewrite --machine quotes.json

    # Check a machine file
    regexflow validate --machine quotes.json --show-config
    ```
"""

from .main import app

__all__ = ["app"]
