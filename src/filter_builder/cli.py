"""filter-builder CLI.

Reads saved filter documents (JSON) and compiles or validates them, e.g.
`filter-builder compile saved_filter.json`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from filter_builder.contracts.filters import ControlType, FilterPreset, FilterState
from filter_builder.engine.compiler import compile_state
from filter_builder.engine.operators import label_of, operators_for
from filter_builder.engine.validate import validate
from filter_builder.util.logging import configure_logging, get_logger

logger = get_logger("cli")

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    """filter-builder CLI."""
    configure_logging(log_level)


def _load_state(path: Path) -> FilterState:
    """Load a filter state, or a preset wrapping one, from a JSON document."""
    raw = json.loads(path.read_text())
    if isinstance(raw, dict) and "filter" in raw and "children" not in raw:
        return FilterPreset.model_validate(raw).filter
    return FilterState.model_validate(raw)


def _load_or_exit(path: Path) -> FilterState:
    if not path.exists():
        typer.echo(f"File not found: {path}")
        raise typer.Exit(1)
    try:
        return _load_state(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.debug("Failed to load %s", path, exc_info=True)
        typer.echo(f"Invalid filter document {path}: {e}")
        raise typer.Exit(1)


@app.command("compile")
def compile_command(
    path: Path = typer.Argument(..., help="Path to a saved filter state (JSON)"),
    strict: bool = typer.Option(False, "--strict", help="Refuse to compile invalid trees"),
) -> None:
    """Print the QueryKit filter string for a saved filter state."""
    state = _load_or_exit(path)
    if strict:
        result = validate(state)
        if not result.valid:
            typer.echo("\n".join(result.errors))
            raise typer.Exit(1)
    typer.echo(compile_state(state))


@app.command("validate")
def validate_command(
    path: Path = typer.Argument(..., help="Path to a saved filter state (JSON)"),
) -> None:
    """Check a saved filter state and list every structural problem."""
    state = _load_or_exit(path)
    result = validate(state)
    if result.valid:
        typer.echo("OK")
        return
    typer.echo("\n".join(result.errors))
    raise typer.Exit(1)


@app.command("operators")
def operators_command(
    control_type: ControlType = typer.Argument(..., help="Control type to list operators for"),
) -> None:
    """List the operators that apply to a control type."""
    for symbol in operators_for(control_type):
        typer.echo(f"{symbol.value}\t{label_of(symbol)}")
