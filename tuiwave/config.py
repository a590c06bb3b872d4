"""Centralized configuration for tuiwave.

This module contains the glyphs, layout numbers and key bindings used
throughout the viewer. Defaults live in frozen dataclasses; a YAML file can
override any field (see `load_config`).
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderingConfig:
    """Configuration for waveform rendering."""
    # Steady-level glyphs for 1-bit signals
    BIT_HIGH: str = "▔"
    BIT_LOW: str = "▁"

    # One-cell transition glyphs
    EDGE_RISING: str = "╱"
    EDGE_FALLING: str = "╲"
    EDGE_VALUE: str = "╳"     # vector/real/text value changes
    EDGE_WARNING: str = "▒"   # either side is X or Z

    UNKNOWN_LABEL: str = "X"
    HIGH_Z_LABEL: str = "Z"

    # Zoom: character cells per tick
    MIN_TIME_PER_CELL: int = 2
    DEFAULT_TIME_PER_CELL: int = 4

    # Cache settings
    ROW_CACHE_MAX_ENTRIES: int = 1000


@dataclass(frozen=True)
class OutlineConfig:
    """Glyphs of the tree pane outline."""
    EXPANDED: str = "▼"
    COLLAPSED: str = "▶"
    CHECKED: str = "☑"
    UNCHECKED: str = "☐"
    BRANCH: str = "├ "
    LAST_BRANCH: str = "└ "
    PIPE: str = "│ "
    BLANK: str = "  "


@dataclass(frozen=True)
class UIConfig:
    """Layout of the terminal screen."""
    SIDEBAR_WIDTH_PERCENT: int = 20   # tree pane share of the screen width
    SIGNAME_WIDTH_PERCENT: int = 30   # signal name column share of the timeline area
    LINES_PER_SIGNAL: int = 2         # one text line plus one separator line
    PANE_BORDER: int = 2              # left+right (or top+bottom) border cells
    POLL_TIMEOUT_MS: int = 16


@dataclass(frozen=True)
class KeyBindings:
    """Action name -> key specs. A key spec is `[mod+...]code`, e.g. "ctrl+w"."""
    QUIT: Tuple[str, ...] = ("q",)
    PAN_LEFT: Tuple[str, ...] = ("h", "Left")
    PAN_RIGHT: Tuple[str, ...] = ("l", "Right")
    MOVE_UP: Tuple[str, ...] = ("k", "Up")
    MOVE_DOWN: Tuple[str, ...] = ("j", "Down")
    ZOOM_IN: Tuple[str, ...] = ("+", "=")
    ZOOM_OUT: Tuple[str, ...] = ("-",)
    JUMP_START: Tuple[str, ...] = ("0", "Home")
    JUMP_END: Tuple[str, ...] = ("$", "End")
    ACTIVATE: Tuple[str, ...] = ("Enter", " ")
    WINDOW_CHORD: Tuple[str, ...] = ("ctrl+w",)

    def action_for(self, key_spec: str) -> Optional[str]:
        """Return the lower-case action bound to `key_spec`, or None."""
        for f in fields(self):
            if key_spec in getattr(self, f.name):
                return f.name.lower()
        return None


@dataclass(frozen=True)
class AppConfig:
    rendering: RenderingConfig = field(default_factory=RenderingConfig)
    outline: OutlineConfig = field(default_factory=OutlineConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    keys: KeyBindings = field(default_factory=KeyBindings)


# Global instances for easy access
RENDERING = RenderingConfig()
OUTLINE = OutlineConfig()
UI = UIConfig()
KEYS = KeyBindings()


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "tuiwave" / "config.yaml"


def _override(section: str, defaults: Any, values: Any) -> Any:
    if not isinstance(values, dict):
        raise ConfigError(f"section '{section}' must be a mapping")
    known = {f.name: f for f in fields(defaults)}
    changes: Dict[str, Any] = {}
    for key, value in values.items():
        name = str(key).upper()
        if name not in known:
            raise ConfigError(f"unknown setting '{section}.{key}'")
        expected = type(getattr(defaults, name))
        if expected is tuple:
            value = (value,) if isinstance(value, str) else tuple(str(v) for v in value)
        elif not isinstance(value, expected) or isinstance(value, bool) != (expected is bool):
            raise ConfigError(f"'{section}.{key}' must be {expected.__name__}")
        changes[name] = value
    return replace(defaults, **changes)


def _validate(config: AppConfig) -> None:
    for section in ("rendering", "outline"):
        values = getattr(config, section)
        for f in fields(values):
            value = getattr(values, f.name)
            if isinstance(value, str) and not value:
                raise ConfigError(f"'{section}.{f.name.lower()}' must not be empty")

    if config.rendering.ROW_CACHE_MAX_ENTRIES < 1:
        raise ConfigError("'rendering.row_cache_max_entries' must be positive")
    for f in fields(config.ui):
        value = getattr(config.ui, f.name)
        # PANE_BORDER may be 0
        if value < 0 or (value == 0 and f.name != "PANE_BORDER"):
            raise ConfigError(f"'ui.{f.name.lower()}' must be positive")
    for name in ("SIDEBAR_WIDTH_PERCENT", "SIGNAME_WIDTH_PERCENT"):
        if getattr(config.ui, name) >= 100:
            raise ConfigError(f"'ui.{name.lower()}' must be below 100")

    rendering = config.rendering
    if rendering.MIN_TIME_PER_CELL < 2 or rendering.DEFAULT_TIME_PER_CELL < rendering.MIN_TIME_PER_CELL:
        raise ConfigError("time_per_cell must be at least 2 and the default at least the minimum")


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load the user configuration, falling back to defaults.

    Args:
        path: YAML file to read. When None, the default location is used and
            a missing file is not an error.

    Returns:
        AppConfig with the file's overrides applied.

    Raises:
        ConfigError: On malformed YAML, unknown sections or settings, empty
            glyphs or layout numbers that are not positive.
    """
    explicit = path is not None
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        return AppConfig()

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    config = AppConfig()
    overrides: Dict[str, Any] = {}
    for section, values in data.items():
        if section not in ("rendering", "outline", "ui", "keys"):
            raise ConfigError(f"unknown section '{section}'")
        overrides[section] = _override(section, getattr(config, section), values)

    config = replace(config, **overrides)
    _validate(config)

    logger.info(f"Loaded configuration from {config_path}")
    return config
