"""Configuration loading for clockit.

Settings live in ``config.yaml`` under the platform config directory
(``click.get_app_dir``). Every field is optional; anything missing or
invalid falls back to the built-in default so a bad config file never
stops the timer from starting.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import click
import yaml

logger = logging.getLogger(__name__)

APP_NAME = "clockit"
CONFIG_ENV_VAR = "CLOCKIT_CONFIG"
CONFIG_FILENAME = "config.yaml"

# Color names accepted in the config file, mapped to rich color names.
# Plain names are the bright variants, dark_* the standard ANSI colors.
COLOR_NAMES: dict[str, str] = {
    "black": "black",
    "blue": "bright_blue",
    "cyan": "bright_cyan",
    "dark_blue": "blue",
    "dark_cyan": "cyan",
    "dark_green": "green",
    "dark_grey": "bright_black",
    "dark_gray": "bright_black",
    "dark_magenta": "magenta",
    "dark_red": "red",
    "dark_yellow": "yellow",
    "green": "bright_green",
    "grey": "white",
    "gray": "white",
    "magenta": "bright_magenta",
    "red": "bright_red",
    "white": "bright_white",
    "yellow": "bright_yellow",
}
FALLBACK_COLOR = "default"

CONFIG_HEADER = """\
# Clockit Configuration File
#
# Available colors: black, blue, cyan, dark_blue, dark_cyan, dark_green,
# dark_grey, dark_magenta, dark_red, dark_yellow, green, grey,
# magenta, red, white, yellow
#
# countdown_refresh_rate: Time in ms between updates for countdown timer
# stopwatch_refresh_rate: Time in ms between updates for stopwatch
# blink_separator: Whether to make the colon/separators blink
# blink_every: Refresh intervals between blinks (0 = about twice a second)
# hours_width: Always show hours padded to this width (0 = only when needed)
#
# Pomodoro settings:
# work_duration: Duration of work sessions in minutes
# break_duration: Duration of break sessions in minutes
# cycles: Number of cycles to run (0 means infinite)
# sound_enabled: Play sound when sessions end (not implemented yet)
# refresh_rate: Update frequency in milliseconds

"""


@dataclass
class ColorScheme:
    countdown: str = "cyan"
    stopwatch: str = "green"
    times_up: str = "red"
    ui_text: str = "grey"
    pomodoro_work: str = "red"
    pomodoro_break: str = "green"


@dataclass
class PomodoroSettings:
    work_duration: int = 25
    break_duration: int = 5
    cycles: int = 0  # 0 = infinite
    sound_enabled: bool = False
    refresh_rate: int = 200


@dataclass
class Config:
    colors: ColorScheme = field(default_factory=ColorScheme)
    blink_separator: bool = False
    blink_every: int = 0  # 0 = derive from refresh rate
    hours_width: int = 0
    countdown_refresh_rate: int = 200
    stopwatch_refresh_rate: int = 100
    pomodoro: PomodoroSettings = field(default_factory=PomodoroSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Build a config from parsed YAML, keeping defaults for bad fields."""
        config = cls()
        colors = data.get("colors")
        if isinstance(colors, dict):
            _apply_section(config.colors, colors, "colors")
        elif colors is not None:
            logger.warning("Ignoring config 'colors': expected a mapping")

        pomodoro = data.get("pomodoro")
        if isinstance(pomodoro, dict):
            _apply_section(config.pomodoro, pomodoro, "pomodoro")
        elif pomodoro is not None:
            logger.warning("Ignoring config 'pomodoro': expected a mapping")

        scalars = {k: v for k, v in data.items() if k not in ("colors", "pomodoro")}
        _apply_section(config, scalars, "")
        return config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Fields that must be strictly positive; the rest only need to be >= 0.
_POSITIVE_FIELDS = {
    "countdown_refresh_rate",
    "stopwatch_refresh_rate",
    "refresh_rate",
    "work_duration",
    "break_duration",
}


def _apply_section(target: Any, data: dict[str, Any], section: str) -> None:
    known = {f.name: f for f in fields(target) if f.name not in ("colors", "pomodoro")}
    for key, value in data.items():
        name = f"{section}.{key}" if section else str(key)
        if key not in known:
            logger.debug("Ignoring unknown config key %r", name)
            continue

        default = getattr(target, key)
        if not _valid_value(key, value, default):
            logger.warning("Invalid value %r for config %r, using default %r", value, name, default)
            continue
        setattr(target, key, value)


def _valid_value(key: str, value: Any, default: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        return value > 0 if key in _POSITIVE_FIELDS else value >= 0
    if isinstance(default, str):
        return isinstance(value, str)
    return False


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME)) / CONFIG_FILENAME


def load_config(path: Path | None = None) -> Config:
    """Load the config file, falling back to defaults on any problem."""
    path = path or get_config_path()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug("No config at %s, using defaults", path)
        return Config()
    except OSError as e:
        logger.warning("Error reading config file %s: %s. Using defaults.", path, e)
        return Config()
    except yaml.YAMLError as e:
        logger.warning("Error parsing config file %s: %s. Using defaults.", path, e)
        return Config()

    if data is None:
        return Config()
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping. Using defaults.", path)
        return Config()

    config = Config.from_dict(data)
    logger.debug("Loaded config from %s: %s", path, config.to_dict())
    return config


def write_default_config(path: Path | None = None) -> tuple[Path, bool]:
    """Write the commented default config. Returns (path, created)."""
    path = path or get_config_path()
    if path.exists():
        return path, False

    path.parent.mkdir(parents=True, exist_ok=True)
    body = yaml.safe_dump(Config().to_dict(), sort_keys=False, default_flow_style=False)
    path.write_text(CONFIG_HEADER + body, encoding="utf-8")
    logger.info("Created default configuration at %s", path)
    return path, True


def resolve_color(name: str) -> str:
    """Map a config color name to a rich color name."""
    color = COLOR_NAMES.get(name.strip().lower())
    if color is None:
        logger.warning("Unknown color: %s. Using default.", name)
        return FALLBACK_COLOR
    return color


@dataclass(frozen=True)
class Palette:
    countdown: str
    stopwatch: str
    times_up: str
    ui_text: str
    pomodoro_work: str
    pomodoro_break: str

    @classmethod
    def from_config(cls, config: Config) -> "Palette":
        scheme = config.colors
        return cls(**{f.name: resolve_color(getattr(scheme, f.name)) for f in fields(ColorScheme)})
