"""
settings.py

Persistent settings management for BlockCanvas.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/blockcanvas/settings.toml
    - macOS: ~/Library/Application Support/blockcanvas/settings.toml
    - Linux: ~/.config/blockcanvas/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "blockcanvas"

log = logging.getLogger(__name__)

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# Canvas Settings
# =============================================================================

@dataclass
class CanvasHandleSettings:
    """Resize handle settings.

    Defaults:
        tolerance: 2
    """
    tolerance: int = 2  # Default: 2 pixels either side of an edge


@dataclass
class CanvasBlockSettings:
    """New block settings.

    Defaults:
        default_width: 50
        default_height: 50
    """
    default_width: int = 50   # Default: 50 pixels
    default_height: int = 50  # Default: 50 pixels


@dataclass
class CanvasInteractionSettings:
    """Gesture behavior settings.

    Defaults:
        dirty_requires_displacement: False
    """
    # False: any move during a drag suppresses the click.
    # True: only a move that actually displaces the target does.
    dirty_requires_displacement: bool = False


@dataclass
class CanvasColorSettings:
    """Canvas palette.

    Defaults:
        background: "#1E1F22"
        stroke: "#A0A0A0"
        preview: "#5A8DEE"
        selection: "#0078D7"
    """
    background: str = "#1E1F22"  # Default: near-black
    stroke: str = "#A0A0A0"      # Default: gray
    preview: str = "#5A8DEE"     # Default: light blue
    selection: str = "#0078D7"   # Default: blue


@dataclass
class CanvasPointSettings:
    """Connection point appearance.

    Defaults:
        radius: 3.0
    """
    radius: float = 3.0  # Default: 3.0 pixels


@dataclass
class CanvasSettings:
    """All canvas-related settings."""
    handles: CanvasHandleSettings = field(default_factory=CanvasHandleSettings)
    blocks: CanvasBlockSettings = field(default_factory=CanvasBlockSettings)
    interaction: CanvasInteractionSettings = field(default_factory=CanvasInteractionSettings)
    colors: CanvasColorSettings = field(default_factory=CanvasColorSettings)
    points: CanvasPointSettings = field(default_factory=CanvasPointSettings)


# =============================================================================
# Window Settings
# =============================================================================

@dataclass
class WindowSettings:
    """Main window settings.

    Defaults:
        width: 1200
        height: 800
    """
    width: int = 1200   # Default: 1200 pixels
    height: int = 800   # Default: 800 pixels


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        window: Main window geometry.
        canvas: Canvas-related settings.
    """
    window: WindowSettings = field(default_factory=WindowSettings)
    canvas: CanvasSettings = field(default_factory=CanvasSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Explicit directory to use instead of the platform one.
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            log.warning("Ignoring unreadable settings file %s: %s", self.settings_file, e)
            return AppSettings()

        return self._parse_toml(data)

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # Window section
        window = data.get("window", {})
        settings.window.width = window.get("width", settings.window.width)
        settings.window.height = window.get("height", settings.window.height)

        # Canvas section
        canvas = data.get("canvas", {})
        if "handles" in canvas:
            h = canvas["handles"]
            settings.canvas.handles.tolerance = h.get("tolerance", settings.canvas.handles.tolerance)
        if "blocks" in canvas:
            b = canvas["blocks"]
            settings.canvas.blocks.default_width = b.get("default_width", settings.canvas.blocks.default_width)
            settings.canvas.blocks.default_height = b.get("default_height", settings.canvas.blocks.default_height)
        if "interaction" in canvas:
            i = canvas["interaction"]
            settings.canvas.interaction.dirty_requires_displacement = i.get(
                "dirty_requires_displacement", settings.canvas.interaction.dirty_requires_displacement)
        if "colors" in canvas:
            c = canvas["colors"]
            settings.canvas.colors.background = c.get("background", settings.canvas.colors.background)
            settings.canvas.colors.stroke = c.get("stroke", settings.canvas.colors.stroke)
            settings.canvas.colors.preview = c.get("preview", settings.canvas.colors.preview)
            settings.canvas.colors.selection = c.get("selection", settings.canvas.colors.selection)
        if "points" in canvas:
            p = canvas["points"]
            settings.canvas.points.radius = p.get("radius", settings.canvas.points.radius)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "window": {
                "width": s.window.width,
                "height": s.window.height,
            },
            "canvas": {
                "handles": {
                    "tolerance": s.canvas.handles.tolerance,
                },
                "blocks": {
                    "default_width": s.canvas.blocks.default_width,
                    "default_height": s.canvas.blocks.default_height,
                },
                "interaction": {
                    "dirty_requires_displacement": s.canvas.interaction.dirty_requires_displacement,
                },
                "colors": {
                    "background": s.canvas.colors.background,
                    "stroke": s.canvas.colors.stroke,
                    "preview": s.canvas.colors.preview,
                    "selection": s.canvas.colors.selection,
                },
                "points": {
                    "radius": s.canvas.points.radius,
                },
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        return tomli_w.dumps(self._to_toml_dict())

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
