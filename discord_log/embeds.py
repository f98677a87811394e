"""Discord embed payloads for log records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, NotRequired, Optional, TypedDict


LevelColors = Mapping[str, int]

# Attributes every LogRecord carries; anything else came from `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class EmbedField(TypedDict):
    """A single name/value row rendered inside an embed."""
    name: str
    value: str
    inline: bool


class EmbedFooter(TypedDict):
    text: str


class Embed(TypedDict):
    """Serializable Discord embed."""
    title: str
    description: str
    color: int
    timestamp: str
    fields: list[EmbedField]
    footer: NotRequired[EmbedFooter]


class Payload(TypedDict):
    """Top-level JSON body posted to the webhook."""
    username: NotRequired[str]
    avatar_url: NotRequired[str]
    embeds: list[Embed]


CustomEmbed = Callable[[logging.LogRecord, LevelColors], Embed]


def record_attributes(record: logging.LogRecord) -> dict[str, Any]:
    """Return the attributes attached at the log call site, in order.

    Args:
        record: Log record produced by the `logging` module.

    Returns:
        A dict of the record's non-standard attributes (the `extra=` keys).
    """
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def default_embed(record: logging.LogRecord, level_colors: LevelColors) -> Embed:
    """Build the standard embed for a log record.

    Title is the level name, description is the formatted message and each
    call-site attribute becomes a non-inline field. No footer is set.

    Args:
        record: Log record to render.
        level_colors: Level name to color table. Missing levels get color 0.

    Returns:
        A new embed dictionary.
    """
    fields: list[EmbedField] = [
        {"name": str(key), "value": str(value), "inline": False}
        for key, value in record_attributes(record).items()
    ]

    return {
        "title": record.levelname,
        "description": record.getMessage(),
        "color": level_colors.get(record.levelname, 0),
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "fields": fields,
    }


def build_embed(
    record: logging.LogRecord,
    level_colors: LevelColors,
    custom_embed: Optional[CustomEmbed] = None,
) -> Embed:
    """Build the embed for `record`, delegating to `custom_embed` when set.

    The custom function's return value is used as-is.
    """
    if custom_embed is not None:
        return custom_embed(record, level_colors)
    return default_embed(record, level_colors)


def build_payload(
    embed: Embed,
    username: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Payload:
    """Wrap a single embed in a webhook payload, omitting empty identity fields."""
    payload: Payload = {"embeds": [embed]}
    if username:
        payload["username"] = username
    if avatar_url:
        payload["avatar_url"] = avatar_url
    return payload
