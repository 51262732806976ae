"""JSON file loading and pydantic error formatting.

This module reads JSON documents (preset configs, catalogs) from disk and
turns file system errors, JSON parsing errors and pydantic validation errors
into ``ConfigError`` instances with clear, actionable messages.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pricing.domain.exceptions import ConfigError

_VALUE_ERROR_PREFIX = "Value error, "


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a JSON path string.

    Args:
        loc: Tuple of path segments (strings for keys, ints for array indices)

    Returns:
        Formatted JSON path like "sizes[0].tiers[1].unitPrice"

    Examples:
        >>> format_json_path(("tiers", 0, "upToSqft"))
        'tiers[0].upToSqft'
        >>> format_json_path(("fileFee",))
        'fileFee'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            # Array index - append to last part with brackets
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _error_message(err: dict[str, Any]) -> str:
    message = err["msg"]
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX):]
    if err["type"] == "missing":
        return "Required"
    return message


def extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Extract and format validation errors from a pydantic ValidationError.

    Args:
        error: The pydantic ValidationError to process

    Returns:
        List of error dictionaries with field, message, value and error_type
    """
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "field": format_json_path(err["loc"]),
                "message": _error_message(err),
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def format_validation_error_message(
    details: list[dict[str, Any]], heading: str = "Configuration validation failed:"
) -> str:
    """Format validation error details into a human-readable message.

    Args:
        details: List of error detail dictionaries
        heading: First line of the message

    Returns:
        Formatted multi-line error message
    """
    lines = [heading]
    for detail in details:
        field = detail["field"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {field}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {field}: {message}")
    return "\n".join(lines)


def load_json_file(path: Path) -> Any:
    """Read and parse a JSON document from disk.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed JSON value

    Raises:
        ConfigError: If the file cannot be read or parsed.
            The error_type attribute indicates the specific error category:
            - "file_not_found": File does not exist
            - "permission_denied": File cannot be read
            - "file_read_error": Any other OS error
            - "json_parse": Invalid JSON syntax
    """
    if not path.exists():
        raise ConfigError(
            message=f"File not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[
                {
                    "line": e.lineno,
                    "column": e.colno,
                    "message": e.msg,
                }
            ],
        )


def dump_json_file(path: Path, data: Any) -> None:
    """Write a JSON document to disk, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
