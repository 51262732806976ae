"""Bundled seed pricing presets."""

from .manager import PRESET_METADATA, PresetLibrary, PresetNotFoundError

__all__ = ["PRESET_METADATA", "PresetLibrary", "PresetNotFoundError"]
