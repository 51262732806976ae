"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pricing.application.commands import (
        BulkAdjustPresetsCommand,
        QuoteProductCommand,
        RefreshMinPricesCommand,
        ResolveFromPriceCommand,
        RollbackBulkAdjustCommand,
        UpdatePresetCommand,
    )
    from pricing.application.services import (
        AnomalyScanner,
        FromPriceResolver,
        LiveQuoteStrategy,
        MinPriceRefresher,
        QuoteEngine,
    )
    from pricing.infrastructure.catalog_store import InMemoryCatalogStore
    from pricing.settings import Settings


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Centralizes service instantiation so the CLI, the HTTP app and tests
    share one wiring:
    - the catalog store (JSON file when ``catalog_path`` is set, otherwise an
      in-memory store seeded with the bundled presets)
    - the quote engine, from-price resolver, refresher and scanner
    - application commands

    Example:
        ```python
        factory = ServiceFactory(settings=Settings(catalog_path=Path("catalog.json")))
        quote = factory.create_quote_command().execute(request)
        ```
    """

    settings: "Settings | None" = None
    store: "InMemoryCatalogStore | None" = None

    # Cached instances (use field with init=False for dataclass)
    _engine: "QuoteEngine | None" = field(default=None, init=False, repr=False)
    _resolver: "FromPriceResolver | None" = field(default=None, init=False, repr=False)
    _refresher: "MinPriceRefresher | None" = field(default=None, init=False, repr=False)

    def get_settings(self) -> "Settings":
        if self.settings is None:
            from pricing.settings import get_settings

            self.settings = get_settings()
        return self.settings

    def get_store(self) -> "InMemoryCatalogStore":
        """Get or create the catalog store."""
        if self.store is None:
            self.store = self._create_store(self.get_settings().catalog_path)
        return self.store

    @staticmethod
    def _create_store(path: Path | None) -> "InMemoryCatalogStore":
        from pricing.infrastructure.catalog_store import (
            InMemoryCatalogStore,
            JsonCatalogStore,
        )

        if path is not None:
            return JsonCatalogStore(path)

        from pricing.application.presets import PresetLibrary

        store = InMemoryCatalogStore()
        PresetLibrary().seed(store)
        return store

    def get_quote_engine(self) -> "QuoteEngine":
        """Get or create quote engine instance."""
        if self._engine is None:
            from pricing.application.services import QuoteEngine

            self._engine = QuoteEngine(currency=self.get_settings().currency)
        return self._engine

    def get_live_quote_strategy(self) -> "LiveQuoteStrategy":
        from pricing.application.services import LiveQuoteStrategy

        return LiveQuoteStrategy(
            self.get_quote_engine(), self.get_settings().default_area_size
        )

    def get_from_price_resolver(self) -> "FromPriceResolver":
        """Get or create from-price resolver instance."""
        if self._resolver is None:
            from pricing.application.services import FromPriceResolver, default_strategies

            self._resolver = FromPriceResolver(
                default_strategies(
                    self.get_quote_engine(), self.get_settings().default_area_size
                )
            )
        return self._resolver

    def get_min_price_refresher(self) -> "MinPriceRefresher":
        """Get or create min-price refresher instance."""
        if self._refresher is None:
            from pricing.application.services import MinPriceRefresher

            self._refresher = MinPriceRefresher(
                self.get_store(), self.get_live_quote_strategy()
            )
        return self._refresher

    def create_anomaly_scanner(self) -> "AnomalyScanner":
        from pricing.application.services import AnomalyScanner

        store = self.get_store()
        return AnomalyScanner(store, store)

    def create_quote_command(self) -> "QuoteProductCommand":
        from pricing.application.commands import QuoteProductCommand

        return QuoteProductCommand(self.get_store(), self.get_quote_engine())

    def create_from_price_command(self) -> "ResolveFromPriceCommand":
        from pricing.application.commands import ResolveFromPriceCommand

        return ResolveFromPriceCommand(self.get_store(), self.get_from_price_resolver())

    def create_refresh_command(self) -> "RefreshMinPricesCommand":
        from pricing.application.commands import RefreshMinPricesCommand

        return RefreshMinPricesCommand(self.get_store(), self.get_min_price_refresher())

    def create_update_preset_command(self) -> "UpdatePresetCommand":
        from pricing.application.commands import UpdatePresetCommand

        store = self.get_store()
        return UpdatePresetCommand(store, store, self.get_min_price_refresher())

    def create_bulk_adjust_command(self) -> "BulkAdjustPresetsCommand":
        from pricing.application.commands import BulkAdjustPresetsCommand

        store = self.get_store()
        return BulkAdjustPresetsCommand(store, store, self.get_min_price_refresher())

    def create_bulk_rollback_command(self) -> "RollbackBulkAdjustCommand":
        from pricing.application.commands import RollbackBulkAdjustCommand

        store = self.get_store()
        return RollbackBulkAdjustCommand(store, store, self.get_min_price_refresher())


# Default factory instance
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
