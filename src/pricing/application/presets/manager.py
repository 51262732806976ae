"""Preset library for bundled seed pricing presets.

This module provides the PresetLibrary class for listing, reading, exporting
and seeding the default presets shipped with the package.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from pricing.domain.entities import PricingPreset
from pricing.domain.exceptions import NotFoundError

if TYPE_CHECKING:
    from pricing.contracts.protocols import PresetRepository

logger = logging.getLogger(__name__)


class PresetNotFoundError(NotFoundError):
    """Raised when a requested seed preset does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Seed preset not found: {key}", key=key)


# Seed preset metadata: key -> description
PRESET_METADATA: dict[str, str] = {
    "largeformat_roll_default": "Large format and roll goods, priced per sqft",
    "stickers_default": "Stickers, labels and decals, priced per piece by volume",
    "business_cards_default": "Business cards and paper goods in named sizes",
}


class PresetLibrary:
    """Library of bundled seed presets.

    Example:
        library = PresetLibrary()
        for key, description in library.list_presets():
            print(f"{key}: {description}")

        library.init_preset("stickers_default", Path("stickers.json"))
    """

    def __init__(self) -> None:
        self._data_package = "pricing.application.presets.data"

    def list_presets(self) -> list[tuple[str, str]]:
        """List all seed presets as (key, description) tuples."""
        return [(key, desc) for key, desc in PRESET_METADATA.items()]

    def get_preset_json(self, key: str) -> str:
        """Get the raw JSON document of a seed preset.

        Raises:
            PresetNotFoundError: If the preset does not exist.
        """
        if key not in PRESET_METADATA:
            raise PresetNotFoundError(key)

        try:
            data_files = resources.files(self._data_package)
            return data_files.joinpath(f"{key}.json").read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise PresetNotFoundError(key) from e

    def load_preset(self, key: str) -> PricingPreset:
        """Load a seed preset as a PricingPreset."""
        data = json.loads(self.get_preset_json(key))
        return PricingPreset(
            key=data["key"],
            model=data["model"],
            config=data["config"],
            name=data.get("name", ""),
            is_active=data.get("isActive", True),
        )

    def init_preset(self, key: str, output_path: Path, overwrite: bool = False) -> None:
        """Write a seed preset's config document to ``output_path``.

        Raises:
            PresetNotFoundError: If the preset does not exist.
            FileExistsError: If the file exists and ``overwrite`` is False.
        """
        if output_path.exists() and not overwrite:
            raise FileExistsError(f"File already exists: {output_path}")
        preset = self.load_preset(key)
        output_path.write_text(json.dumps(preset.config, indent=2) + "\n", encoding="utf-8")

    def seed(self, repository: "PresetRepository", overwrite: bool = False) -> list[str]:
        """Upsert every seed preset into a repository by key.

        Existing presets are left alone unless ``overwrite`` is set, so
        seeding is safe to re-run.

        Returns:
            Keys of the presets written.
        """
        written = []
        for key in PRESET_METADATA:
            if repository.get_preset(key) is not None and not overwrite:
                continue
            repository.save_preset(self.load_preset(key))
            written.append(key)
        logger.info(f"Seeded {len(written)} pricing preset(s)")
        return written

    def preset_exists(self, key: str) -> bool:
        return key in PRESET_METADATA
