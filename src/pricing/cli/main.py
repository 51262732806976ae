"""Typer CLI for print pricing."""

import logging
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from pricing.application.config import load_json_file
from pricing.application.factory import ServiceFactory, get_factory, set_factory
from pricing.application.services import AdjustFlags
from pricing.cli.commands import presets_app, validate_command
from pricing.domain.entities import AccessorySelection, QuoteRequest
from pricing.domain.exceptions import ConfigError, PricingError, ValidationError
from pricing.infrastructure.formatters import (
    AnomalyReportFormatter,
    QuoteFormatter,
    format_from_price,
    format_refresh_report,
    to_json,
)
from pricing.settings import get_settings

app = typer.Typer(
    name="pricing",
    help="Quote print products and maintain pricing presets.",
)

# Register validate command
app.command(name="validate")(validate_command)

# Register presets subcommand group
app.add_typer(presets_app, name="presets")


def _configure_logging(level: str) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)


@app.callback()
def main(
    catalog: Annotated[
        Path | None,
        typer.Option(
            "--catalog",
            "-c",
            help="Catalog JSON file (default: PRICING_CATALOG_PATH or the bundled presets)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log at DEBUG level"),
    ] = False,
) -> None:
    """Quote print products and maintain pricing presets."""
    settings = get_settings()
    _configure_logging("DEBUG" if verbose else settings.log_level)
    if catalog is not None:
        set_factory(
            ServiceFactory(settings=settings.model_copy(update={"catalog_path": catalog}))
        )


def _fail(error: PricingError) -> NoReturn:
    """Print a pricing error and exit with code 1."""
    typer.echo(f"Error: {error.message}", err=True)
    if isinstance(error, ValidationError) and isinstance(error.details, dict):
        for detail in error.details.get("errors", [])[1:]:
            typer.echo(f"  {detail['field']}: {detail['message']}", err=True)
    elif isinstance(error, ConfigError) and "\n" not in error.message:
        for detail in error.details:
            if "field" not in detail:
                continue
            typer.echo(f"  {detail.get('field')}: {detail.get('message')}", err=True)
    raise typer.Exit(code=1)


def _parse_options(values: list[str]) -> dict[str, str]:
    options: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--option")
        options[key] = value
    return options


def _parse_accessories(values: list[str]) -> tuple[AccessorySelection, ...]:
    accessories = []
    for item in values:
        accessory_id, sep, qty = item.partition(":")
        if not accessory_id:
            raise typer.BadParameter(f"Expected ID[:QTY], got {item!r}", param_hint="--accessory")
        quantity = None
        if sep:
            try:
                quantity = int(qty)
            except ValueError:
                raise typer.BadParameter(
                    f"Accessory quantity must be an integer, got {qty!r}",
                    param_hint="--accessory",
                )
        accessories.append(AccessorySelection(accessory_id, quantity))
    return tuple(accessories)


@app.command()
def quote(
    slug: Annotated[str, typer.Argument(help="Product slug")],
    quantity: Annotated[int, typer.Option("--quantity", "-q", help="Number of pieces")],
    width: Annotated[
        float | None, typer.Option("--width", "-w", help="Width in inches")
    ] = None,
    height: Annotated[
        float | None, typer.Option("--height", "-h", help="Height in inches")
    ] = None,
    size: Annotated[
        str | None, typer.Option("--size", "-s", help="Named size (QTY_OPTIONS products)")
    ] = None,
    material: Annotated[
        str | None, typer.Option("--material", "-m", help="Material id or name")
    ] = None,
    option: Annotated[
        list[str] | None,
        typer.Option("--option", "-o", help="Finishing/addon selection as KEY=VALUE"),
    ] = None,
    accessory: Annotated[
        list[str] | None,
        typer.Option("--accessory", "-a", help="Accessory as ID or ID:QTY"),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the quote as JSON")
    ] = False,
) -> None:
    """Quote a catalog product.

    Examples:
        pricing quote vinyl-banner -q 2 -w 24 -h 36 -m "13oz Vinyl"
        pricing quote business-cards -q 500 -s 3.5x2 -o rounded=true
    """
    request = QuoteRequest(
        slug=slug,
        quantity=quantity,
        width_in=width,
        height_in=height,
        material=material,
        size_label=size,
        options=_parse_options(option or []),
        accessories=_parse_accessories(accessory or []),
    )
    try:
        result = get_factory().create_quote_command().execute(request)
    except PricingError as e:
        _fail(e)

    formatter = QuoteFormatter()
    typer.echo(formatter.format_json(result) if as_json else formatter.format(result))


@app.command(name="from-price")
def from_price(
    slug: Annotated[str, typer.Argument(help="Product slug")],
) -> None:
    """Show the listing "starting from" price of a product."""
    factory = get_factory()
    try:
        result = factory.create_from_price_command().execute(slug)
    except PricingError as e:
        _fail(e)
    typer.echo(format_from_price(slug, result, factory.get_settings().currency))


@app.command()
def scan(
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the report as JSON")
    ] = False,
) -> None:
    """Scan active presets and products for pricing defects.

    Exits with code 2 when anomalies are found.
    """
    try:
        report = get_factory().create_anomaly_scanner().scan()
    except PricingError as e:
        _fail(e)
    if as_json:
        typer.echo(to_json(report.to_dict()))
    else:
        typer.echo(AnomalyReportFormatter().format(report))
    if not report.is_clean:
        raise typer.Exit(code=2)


@app.command()
def refresh(
    preset: Annotated[
        str | None,
        typer.Option("--preset", "-p", help="Only products using this preset"),
    ] = None,
) -> None:
    """Recompute the cached minPrice of active products.

    Exits with code 1 when any product failed to refresh.
    """
    factory = get_factory()
    try:
        report = factory.create_refresh_command().execute(preset)
    except PricingError as e:
        _fail(e)
    typer.echo(format_refresh_report(report, factory.get_settings().currency))
    if not report.ok:
        raise typer.Exit(code=1)


@app.command(name="bulk-adjust")
def bulk_adjust(
    percent: Annotated[float, typer.Argument(help="Change in percent, in (-95, 500]")],
    category: Annotated[
        str | None, typer.Option("--category", help="Limit to one product category")
    ] = None,
    include_shared: Annotated[
        bool,
        typer.Option("--include-shared", help="Also adjust presets shared with other categories"),
    ] = False,
    addons: Annotated[bool, typer.Option("--addons", help="Adjust addon prices")] = False,
    finishings: Annotated[
        bool, typer.Option("--finishings", help="Adjust finishing prices")
    ] = False,
    minimum_price: Annotated[
        bool, typer.Option("--minimum-price", help="Adjust minimum order prices")
    ] = False,
    file_fee: Annotated[bool, typer.Option("--file-fee", help="Adjust file fees")] = False,
    no_tiers: Annotated[
        bool, typer.Option("--no-tiers", help="Leave tier prices unchanged")
    ] = False,
    apply: Annotated[
        bool, typer.Option("--apply", help="Save the changes (default: preview only)")
    ] = False,
) -> None:
    """Preview or apply a percentage change to preset prices."""
    flags = AdjustFlags(
        tiers=not no_tiers,
        addons=addons,
        finishings=finishings,
        minimum_price=minimum_price,
        file_fee=file_fee,
    )
    try:
        report = get_factory().create_bulk_adjust_command().execute(
            percent,
            flags=flags,
            category=category,
            include_shared=include_shared,
            apply=apply,
        )
    except PricingError as e:
        _fail(e)
    typer.echo(to_json(report.to_dict()))


@app.command(name="bulk-rollback")
def bulk_rollback(
    report_file: Annotated[
        Path,
        typer.Argument(help="JSON output of an applied bulk-adjust run"),
    ],
) -> None:
    """Restore presets from the snapshots of an applied bulk adjustment.

    Example:
        pricing bulk-adjust 10 --apply > adjust.json
        pricing bulk-rollback adjust.json
    """
    try:
        data = load_json_file(report_file)
        snapshots = data.get("snapshots") if isinstance(data, dict) else data
        result = get_factory().create_bulk_rollback_command().execute(snapshots)
    except PricingError as e:
        _fail(e)
    typer.echo(to_json(result.to_dict()))


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Bind port")] = 8000,
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from pricing.web import app as web_app

    uvicorn.run(web_app, host=host, port=port)


if __name__ == "__main__":
    app()
