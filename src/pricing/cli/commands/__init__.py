"""CLI command implementations for the pricing application.

This package contains subcommands for the pricing CLI, including:
- validate: Validate a preset config file against a pricing model
- presets: List, show and export pricing presets
"""

from pricing.cli.commands.presets import presets_app
from pricing.cli.commands.validate import validate_command

__all__ = ["presets_app", "validate_command"]
