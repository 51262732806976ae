"""Validate command for checking preset config files.

This module provides the `validate` command that checks a JSON preset config
against the shape its pricing model requires, including price advisories.
"""

from pathlib import Path
from typing import Annotated

import typer

from pricing.application.config import (
    ValidationResult,
    load_json_file,
    validate_preset_config,
)
from pricing.domain.exceptions import ConfigError


def _display_load_error(error: ConfigError) -> None:
    """Display a config loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


def _display_validation_result(result: ValidationResult) -> None:
    """Display validation results including errors and warnings.

    Args:
        result: The ValidationResult to display
    """
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.field}: {error.message}", err=True)
            if error.value is not None:
                typer.echo(f"    Value: {error.value!r}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.field}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    if result.errors:
        typer.echo(
            f"Validation failed: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)",
            err=True,
        )
    elif result.warnings:
        typer.echo(f"Validation passed with {len(result.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Config is valid.")


def validate_command(
    model: Annotated[
        str,
        typer.Argument(help="Pricing model: AREA_TIERED, QTY_TIERED or QTY_OPTIONS"),
    ],
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON preset config to validate"),
    ],
) -> None:
    """Validate a pricing preset config file.

    The file holds the preset's ``config`` document only.

    Exit codes:
        0 - Config is valid with no warnings
        1 - Config has errors (cannot be saved)
        2 - Config is valid but has warnings

    Example:
        pricing validate QTY_TIERED stickers.json
    """
    typer.echo(f"Validating {config_file} as {model}...")
    typer.echo()

    try:
        config = load_json_file(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_preset_config(model, config)
    _display_validation_result(result)
    raise typer.Exit(code=result.exit_code)
