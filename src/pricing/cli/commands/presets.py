"""Presets commands for listing, showing and exporting pricing presets.

``list`` and ``show`` read the catalog. ``seeds`` and ``init`` work on the
presets bundled with the package.
"""

from pathlib import Path
from typing import Annotated

import typer

from pricing.application.factory import get_factory
from pricing.application.presets import PresetLibrary, PresetNotFoundError
from pricing.infrastructure.formatters import PresetFormatter

presets_app = typer.Typer(
    name="presets",
    help="Manage pricing presets.",
)


@presets_app.command(name="list")
def list_presets(
    active_only: Annotated[
        bool,
        typer.Option("--active-only", help="Hide inactive presets"),
    ] = False,
) -> None:
    """List the pricing presets stored in the catalog.

    Example:
        pricing presets list
    """
    store = get_factory().get_store()
    typer.echo(PresetFormatter().format_list(store.list_presets(active_only=active_only)))


@presets_app.command(name="show")
def show_preset(
    key: Annotated[str, typer.Argument(help="Preset key")],
) -> None:
    """Print one stored preset as JSON.

    Example:
        pricing presets show stickers_default
    """
    preset = get_factory().get_store().get_preset(key)
    if preset is None:
        typer.echo(f"Error: Pricing preset not found: {key}", err=True)
        raise typer.Exit(code=1)
    typer.echo(PresetFormatter().format_detail(preset))


@presets_app.command(name="seeds")
def list_seeds() -> None:
    """List the seed presets bundled with the package."""
    library = PresetLibrary()
    seeds = library.list_presets()

    typer.echo("Bundled presets:")
    typer.echo()
    max_key_width = max(len(key) for key, _ in seeds) if seeds else 0
    for key, description in seeds:
        typer.echo(f"  {key:<{max_key_width}}  - {description}")
    typer.echo()
    typer.echo("Use 'pricing presets init <key>' to export a preset config to a file.")


@presets_app.command(name="init")
def init_preset(
    key: Annotated[str, typer.Argument(help="Key of the bundled preset")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: <key>.json)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file"),
    ] = False,
) -> None:
    """Write a bundled preset's config to a JSON file for editing.

    Examples:
        pricing presets init stickers_default
        pricing presets init business_cards_default --output cards.json --force
    """
    library = PresetLibrary()
    if output is None:
        output = Path(f"{key}.json")

    if not library.preset_exists(key):
        available = ", ".join(k for k, _ in library.list_presets())
        typer.echo(f"Error: Seed preset not found: {key}", err=True)
        typer.echo(f"Available presets: {available}", err=True)
        raise typer.Exit(code=1)

    try:
        library.init_preset(key, output, overwrite=force)
        typer.echo(f"Created: {output}")
    except FileExistsError:
        typer.echo(f"Error: File already exists: {output}", err=True)
        typer.echo("Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)
    except PresetNotFoundError:
        typer.echo(f"Error: Seed preset not found: {key}", err=True)
        raise typer.Exit(code=1)
    except OSError as e:
        typer.echo(f"Error: Could not write file: {e}", err=True)
        raise typer.Exit(code=1)
