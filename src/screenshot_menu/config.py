"""Configuration management for Screenshot Menu.

Configuration priority (highest to lowest):
1. CLI overrides (passed to load_config)
2. Environment variables (SCREENSHOT_MENU_*)
3. Config file (~/.config/screenshot-menu/config.yaml)
4. Built-in defaults

The screenshot directory is not part of this configuration; see paths.py.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Any

import yaml
from platformdirs import user_config_dir

ENV_PREFIX = "SCREENSHOT_MENU"
CONFIG_DIR = Path(user_config_dir("screenshot-menu"))
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"

log = logging.getLogger(__name__)


@dataclass
class Config:
    """Screenshot menu configuration."""

    # Binary names
    grimblast: str = "grimblast"
    rofi: str = "rofi"
    notify_send: str = "notify-send"
    hyprpicker: str = "hyprpicker"

    # Behavior
    freeze_screen: bool = True
    notify_timeout_ms: int = 1000
    default_format: str = "png"

    # Paths
    rofi_config: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.rofi_config, str):
            self.rofi_config = Path(self.rofi_config)

    def required_tools(self) -> list[str]:
        """Tools that must be on PATH before any workflow starts."""
        return [self.grimblast, self.rofi, self.notify_send]


DEFAULT_FORMATS = {"png", "jpg", "jpeg"}
PATH_KEYS = {"rofi_config"}
INT_KEYS = {"notify_timeout_ms"}
BOOL_KEYS = {"freeze_screen"}


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}_{name}")


def _config_path_from_env() -> Optional[Path]:
    value = _env("CONFIG") or _env("CONFIG_PATH")
    if value:
        return Path(value).expanduser()
    return None


def _load_config_file(path: Path, strict: bool = False) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        if strict:
            raise ValueError(f"Failed to parse config file {path}: {exc}")
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ValueError(f"Config file {path} must be a mapping")
        return {}

    return data


def _expand_path(value: Any) -> Any:
    if value is None:
        return value
    return str(Path(value).expanduser())


def config_defaults() -> dict:
    return {
        "grimblast": "grimblast",
        "rofi": "rofi",
        "notify_send": "notify-send",
        "hyprpicker": "hyprpicker",
        "freeze_screen": True,
        "notify_timeout_ms": 1000,
        "default_format": "png",
        "rofi_config": None,
    }


def _load_env_overrides() -> dict:
    config: dict[str, Any] = {}

    for key in config_defaults():
        value = _env(key.upper())
        if value is None:
            continue
        if key in PATH_KEYS:
            config[key] = _expand_path(value)
        elif key in INT_KEYS:
            try:
                config[key] = int(value)
            except ValueError:
                continue
        elif key in BOOL_KEYS:
            config[key] = value.lower() in ("true", "1", "yes", "on")
        else:
            config[key] = value

    return config


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    return config_path or _config_path_from_env() or DEFAULT_CONFIG_PATH


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict] = None,
    strict: bool = False,
) -> Config:
    """Load configuration from all sources."""
    resolved_path = resolve_config_path(config_path)

    config_dict = config_defaults()
    file_config = _load_config_file(resolved_path, strict=strict)
    # Unknown keys and bad values are reported by --validate-config; skip them here
    for key, value in file_config.items():
        if key not in config_dict:
            continue
        errors = validate_config_dict({key: value})
        if errors:
            log.warning("Ignoring config value: %s", errors[0])
            continue
        config_dict[key] = value
    config_dict.update(_load_env_overrides())

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config_dict[key] = value

    for key in PATH_KEYS:
        if config_dict.get(key) is not None:
            config_dict[key] = _expand_path(config_dict[key])

    return Config(**config_dict)


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def config_schema() -> dict:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "grimblast": {"type": "string"},
            "rofi": {"type": "string"},
            "notify_send": {"type": "string"},
            "hyprpicker": {"type": "string"},
            "freeze_screen": {"type": "boolean"},
            "notify_timeout_ms": {"type": "integer", "minimum": 0},
            "default_format": {"type": "string", "enum": sorted(DEFAULT_FORMATS)},
            "rofi_config": {"type": ["string", "null"]},
        },
        "additionalProperties": False,
    }


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    props = config_schema()["properties"]

    for key in data.keys():
        if key not in props:
            errors.append(f"Unknown config key: {key}")

    for key, value in data.items():
        if key not in props:
            continue
        expected = props[key]["type"]
        if isinstance(expected, list):
            if value is None and "null" in expected:
                continue
            if "string" in expected and isinstance(value, str):
                continue
            errors.append(f"{key} must be one of types: {', '.join(expected)}")
            continue

        if expected == "string" and not isinstance(value, str):
            errors.append(f"{key} must be a string")
        elif expected == "integer" and not _is_int(value):
            errors.append(f"{key} must be an integer")
        elif expected == "boolean" and not isinstance(value, bool):
            errors.append(f"{key} must be a boolean")

        if key == "default_format" and isinstance(value, str) and value not in DEFAULT_FORMATS:
            errors.append(f"default_format must be one of: {', '.join(sorted(DEFAULT_FORMATS))}")
        if key == "notify_timeout_ms" and _is_int(value) and value < 0:
            errors.append("notify_timeout_ms must be >= 0")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    path = resolve_config_path(config_path)
    if not path.exists():
        return []
    try:
        data = _load_config_file(path, strict=True)
    except ValueError as exc:
        return [str(exc)]
    return validate_config_dict(data)


def config_to_dict(config: Config) -> dict:
    return {
        "grimblast": config.grimblast,
        "rofi": config.rofi,
        "notify_send": config.notify_send,
        "hyprpicker": config.hyprpicker,
        "freeze_screen": config.freeze_screen,
        "notify_timeout_ms": config.notify_timeout_ms,
        "default_format": config.default_format,
        "rofi_config": str(config.rofi_config) if config.rofi_config else None,
    }
