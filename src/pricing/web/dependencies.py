"""FastAPI dependency injection for pricing services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from pricing.application.commands import (
    BulkAdjustPresetsCommand,
    QuoteProductCommand,
    RefreshMinPricesCommand,
    ResolveFromPriceCommand,
    RollbackBulkAdjustCommand,
    UpdatePresetCommand,
)
from pricing.application.factory import ServiceFactory, get_factory
from pricing.application.services import AnomalyScanner
from pricing.infrastructure.catalog_store import InMemoryCatalogStore


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance."""
    return get_factory()


def get_store(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> InMemoryCatalogStore:
    return factory.get_store()


def get_quote_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> QuoteProductCommand:
    """Dependency for QuoteProductCommand."""
    return factory.create_quote_command()


def get_from_price_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> ResolveFromPriceCommand:
    """Dependency for ResolveFromPriceCommand."""
    return factory.create_from_price_command()


def get_refresh_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> RefreshMinPricesCommand:
    return factory.create_refresh_command()


def get_update_preset_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> UpdatePresetCommand:
    return factory.create_update_preset_command()


def get_bulk_adjust_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> BulkAdjustPresetsCommand:
    return factory.create_bulk_adjust_command()


def get_bulk_rollback_command(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> RollbackBulkAdjustCommand:
    return factory.create_bulk_rollback_command()


def get_anomaly_scanner(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> AnomalyScanner:
    return factory.create_anomaly_scanner()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
StoreDep = Annotated[InMemoryCatalogStore, Depends(get_store)]
QuoteCommandDep = Annotated[QuoteProductCommand, Depends(get_quote_command)]
FromPriceCommandDep = Annotated[ResolveFromPriceCommand, Depends(get_from_price_command)]
RefreshCommandDep = Annotated[RefreshMinPricesCommand, Depends(get_refresh_command)]
UpdatePresetCommandDep = Annotated[UpdatePresetCommand, Depends(get_update_preset_command)]
BulkAdjustCommandDep = Annotated[BulkAdjustPresetsCommand, Depends(get_bulk_adjust_command)]
BulkRollbackCommandDep = Annotated[
    RollbackBulkAdjustCommand, Depends(get_bulk_rollback_command)
]
AnomalyScannerDep = Annotated[AnomalyScanner, Depends(get_anomaly_scanner)]
