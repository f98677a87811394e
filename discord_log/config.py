"""Handler configuration and JSON config-file helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from discord_log.embeds import CustomEmbed, LevelColors
from discord_log.webhook import DEFAULT_TIMEOUT


DEFAULT_CONFIG: dict[str, Any] = {
    "webhook": "",
    "username": "",
    "avatar_url": "",
    "min_level": "DEBUG",
    "timeout": DEFAULT_TIMEOUT,
    "level_colors": {
        "DEBUG": "0x95a5a6",
        "INFO": "0x3498db",
        "WARNING": "0xf1c40f",
        "ERROR": "0xe74c3c",
        "CRITICAL": "0x992d22",
    },
}

# Keys that must hold a value in the config file.
REQUIRED_KEYS = ("webhook",)


class ConfigError(ValueError):
    """Raised when the handler configuration is missing or invalid."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        self.message = message
        self.missing = missing or []
        super().__init__(message)


def parse_level(value: Union[int, str, None]) -> int:
    """Convert a level name or number to an int level.

    None maps to logging.NOTSET, which enables every level.
    """
    if value is None:
        return logging.NOTSET
    if isinstance(value, bool):
        raise ConfigError(f"invalid log level: {value!r}")
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level: {value!r}")
    return level


def parse_color(value: Union[int, str]) -> int:
    """Accept a color as an int or a string such as "0xf1c40f" or "15844367"."""
    if isinstance(value, bool):
        raise ConfigError(f"invalid color: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip(), 0)
    except ValueError as exc:
        raise ConfigError(f"invalid color: {value!r}") from exc


def parse_timeout(value: Union[int, float, str, None]) -> Optional[float]:
    """Convert a timeout in seconds to a float. None stays None (5 second fallback)."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"invalid timeout: {value!r}")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid timeout: {value!r}") from exc
    if timeout != timeout or timeout < 0:
        raise ConfigError(f"invalid timeout: {value!r}")
    return timeout


def color_key(name: str) -> str:
    """Return the canonical level name for a color-table key.

    Aliases such as "WARN" and "FATAL" map to the name records carry
    ("WARNING", "CRITICAL"). Unregistered names are kept upper-cased.
    """
    key = str(name).strip().upper()
    level = logging.getLevelName(key)
    if isinstance(level, int):
        return logging.getLevelName(level)
    return key


def _level_label(level: int) -> Union[int, str]:
    """Return the registered name for `level`, or the number itself."""
    name = logging.getLevelName(level)
    return level if name.startswith("Level ") else name


@dataclass(frozen=True)
class WebhookConfig:
    """
    Immutable settings for a DiscordHandler.

    `min_level` accepts a level number or name; None or NOTSET lets every
    record through. A zero/None `timeout` falls back to 5 seconds per call.
    """

    webhook_url: str
    min_level: Union[int, str, None] = logging.DEBUG
    timeout: Optional[float] = DEFAULT_TIMEOUT
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    level_colors: LevelColors = field(default_factory=dict)
    custom_embed: Optional[CustomEmbed] = None
    raise_errors: bool = True

    def __post_init__(self) -> None:
        if not self.webhook_url:
            raise ConfigError("webhook_url is required", missing=["webhook_url"])
        if self.custom_embed is not None and not callable(self.custom_embed):
            raise ConfigError("custom_embed must be callable")

        colors = {color_key(k): parse_color(v) for k, v in (self.level_colors or {}).items()}
        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "min_level", parse_level(self.min_level))
        object.__setattr__(self, "timeout", parse_timeout(self.timeout))
        object.__setattr__(self, "level_colors", MappingProxyType(colors))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], **overrides: Any) -> "WebhookConfig":
        """Build a config from the JSON config-file layout.

        Args:
            data: Parsed config file (see DEFAULT_CONFIG for the keys).
            overrides: Keyword arguments that win over file values, e.g. custom_embed.
        """
        kwargs: dict[str, Any] = {
            "webhook_url": data.get("webhook") or "",
            "min_level": data.get("min_level", logging.DEBUG),
            "timeout": data.get("timeout", DEFAULT_TIMEOUT),
            "username": data.get("username") or None,
            "avatar_url": data.get("avatar_url") or None,
            "level_colors": data.get("level_colors") or {},
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON config-file layout for this config (without custom_embed)."""
        return {
            "webhook": self.webhook_url,
            "username": self.username or "",
            "avatar_url": self.avatar_url or "",
            "min_level": _level_label(self.min_level),
            "timeout": self.timeout,
            "level_colors": {name: f"0x{color:06x}" for name, color in self.level_colors.items()},
        }


def load_config(path: str = "config.json", **overrides: Any) -> WebhookConfig:
    """Load and validate the handler configuration from a JSON file.

    Behavior:
        - If the config file does not exist, it is created with defaults and
          ConfigError is raised so the user fills it in.
        - If required fields are missing/empty, ConfigError lists them.

    Args:
        path: Path to the JSON config file.
        overrides: Extra WebhookConfig keyword arguments (e.g. custom_embed).

    Returns:
        A validated WebhookConfig.

    Raises:
        ConfigError: If the file was just created or is incomplete/invalid.
        json.JSONDecodeError: If the file exists but contains invalid JSON.
        OSError: If the file cannot be read/written.
    """
    if not os.path.isfile(path):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(DEFAULT_CONFIG, f, indent=4)
        raise ConfigError(f"config file '{path}' was created, please fill it in")

    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)

    missing = [key for key in REQUIRED_KEYS if not data.get(key)]
    if missing and "webhook_url" not in overrides:
        raise ConfigError(
            f"missing required fields in {path}: {', '.join(missing)}",
            missing=missing,
        )

    return WebhookConfig.from_dict(data, **overrides)


def save_config(config: WebhookConfig, path: str = "config.json") -> None:
    """Persist the given configuration to disk as pretty-printed JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=4)
