"""Admin pricing preset endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks

from pricing.application.commands import RefreshMinPricesCommand
from pricing.application.config import validate_preset_config
from pricing.domain.exceptions import NotFoundError
from pricing.web.dependencies import (
    AnomalyScannerDep,
    BulkAdjustCommandDep,
    BulkRollbackCommandDep,
    RefreshCommandDep,
    StoreDep,
    UpdatePresetCommandDep,
)
from pricing.web.schemas.requests import (
    BulkAdjustBody,
    BulkRollbackBody,
    PresetUpdateBody,
    ValidateConfigBody,
)
from pricing.web.schemas.responses import (
    PresetSchema,
    PresetUpdateResponseSchema,
    ValidationResultSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/pricing", tags=["admin"])


def _refresh_in_background(command: RefreshMinPricesCommand, preset_key: str) -> None:
    report = command.execute(preset_key)
    if not report.ok:
        logger.warning(
            f"minPrice refresh for preset {preset_key}: {len(report.failed)} product(s) failed"
        )


@router.post("/validate", response_model=ValidationResultSchema)
def validate_config(body: ValidateConfigBody) -> ValidationResultSchema:
    """Validate a preset config without saving it."""
    result = validate_preset_config(body.model, body.config)
    return ValidationResultSchema.model_validate(result.to_dict())


@router.get("/anomalies")
def scan_anomalies(scanner: AnomalyScannerDep) -> dict[str, Any]:
    """Scan active presets and products for pricing defects."""
    return scanner.scan().to_dict()


@router.post("/bulk-adjust")
def bulk_adjust(body: BulkAdjustBody, command: BulkAdjustCommandDep) -> dict[str, Any]:
    """Preview (default) or apply a percentage change to preset prices."""
    report = command.execute(
        body.percent,
        flags=body.flags(),
        category=body.category,
        include_shared=body.include_shared,
        apply=body.apply,
    )
    return report.to_dict()


@router.post("/bulk-adjust/rollback")
def rollback_bulk_adjust(
    body: BulkRollbackBody, command: BulkRollbackCommandDep
) -> dict[str, Any]:
    """Restore preset configs from the snapshots of an applied bulk adjustment."""
    return command.execute(body.snapshots).to_dict()


@router.get("/{key}", response_model=PresetSchema)
def get_preset(key: str, store: StoreDep) -> PresetSchema:
    preset = store.get_preset(key)
    if preset is None:
        raise NotFoundError(f"Pricing preset not found: {key}", key=key)
    return PresetSchema(
        key=preset.key,
        name=preset.name,
        model=preset.model,
        config=preset.config,
        is_active=preset.is_active,
    )


@router.put("/{key}", response_model=PresetUpdateResponseSchema)
def update_preset(
    key: str,
    body: PresetUpdateBody,
    background_tasks: BackgroundTasks,
    command: UpdatePresetCommandDep,
    refresh_command: RefreshCommandDep,
) -> PresetUpdateResponseSchema:
    """Validate and save a preset, then refresh affected minPrice caches.

    The refresh runs after the response is sent; a refresh failure never
    fails the save.
    """
    result = command.execute(
        key,
        name=body.name,
        config=body.config,
        is_active=body.is_active,
        refresh=False,
    )
    if result.affected_slugs:
        background_tasks.add_task(_refresh_in_background, refresh_command, key)
    preset = result.preset
    return PresetUpdateResponseSchema(
        preset=PresetSchema(
            key=preset.key,
            name=preset.name,
            model=preset.model,
            config=preset.config,
            is_active=preset.is_active,
        ),
        affected_products=result.affected_slugs,
        refresh_scheduled=bool(result.affected_slugs),
    )
