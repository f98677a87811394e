"""`logging.Handler` that posts every record to a Discord webhook."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from discord_log.config import WebhookConfig, load_config
from discord_log.embeds import Embed, build_embed, build_payload
from discord_log.webhook import WebhookClient, WebhookError

# Loggers whose records would re-enter this handler while it is delivering.
INTERNAL_LOGGERS = ("discord_log", "urllib3", "requests")


class DeliveryError(Exception):
    """Raised out of a log call when its record could not be delivered."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DiscordHandler(logging.Handler):
    """Terminal logging handler sending one embed per record, synchronously.

    Example:
        >>> handler = DiscordHandler("https://discord.com/api/webhooks/...")
        >>> logging.getLogger("app").addHandler(handler)
        >>> logging.getLogger("app").warning("disk low", extra={"pct": "92"})

    Notes:
        - Delivery failures raise DeliveryError from the log call unless
          `raise_errors` is False, in which case `handleError` reports them.
        - `with_attrs` and `with_group` are no-ops: attributes given to them
          never reach the embed. Only `extra=` attributes of the log call do.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        *,
        config: Optional[WebhookConfig] = None,
        **options: Any,
    ) -> None:
        """Create a handler from a WebhookConfig or from its keyword arguments.

        Args:
            webhook_url: Discord webhook URL (ignored when `config` is given).
            config: Prebuilt configuration.
            options: Other WebhookConfig fields (min_level, timeout, username, ...).
        """
        if config is None:
            config = WebhookConfig(webhook_url=webhook_url or "", **options)
        elif webhook_url or options:
            raise TypeError("pass either config or webhook_url/options, not both")

        super().__init__(level=config.min_level)
        self.config = config
        self.client = WebhookClient(config.webhook_url, config.timeout)

    @classmethod
    def from_config_file(cls, path: str = "config.json", **overrides: Any) -> "DiscordHandler":
        """Build a handler from a JSON config file (see `load_config`)."""
        return cls(config=load_config(path, **overrides))

    def enabled(self, level: int) -> bool:
        """Return True if records at `level` should be delivered."""
        return level >= self.config.min_level

    def filter(self, record: logging.LogRecord) -> bool | logging.LogRecord:
        """Drop records from the HTTP stack and this package, then apply attached filters.

        Returns the replacement record when an attached filter supplies one.
        """
        name = record.name
        for internal in INTERNAL_LOGGERS:
            if name == internal or name.startswith(internal + "."):
                return False
        return super().filter(record)

    def handle(self, record: logging.LogRecord) -> bool:
        """Filter and emit `record` without taking the handler lock.

        Concurrent log calls deliver in parallel; the handler holds no
        mutable state.

        Returns:
            True if the record was emitted.
        """
        if not self.enabled(record.levelno):
            return False
        rv = self.filter(record)
        if not rv:
            return False
        if isinstance(rv, logging.LogRecord):
            record = rv
        self.emit(record)
        return True

    def build_embed(self, record: logging.LogRecord) -> Embed:
        return build_embed(record, self.config.level_colors, self.config.custom_embed)

    def emit(self, record: logging.LogRecord) -> None:
        """Build the embed for `record` and deliver it.

        Formatting errors and custom embed failures are reported the same way
        as delivery failures.

        Raises:
            DeliveryError: If delivery failed and `raise_errors` is enabled.
        """
        try:
            embed = self.build_embed(record)
            payload = build_payload(embed, self.config.username, self.config.avatar_url)
            self.client.send(payload, self.config.timeout)
        except Exception as exc:
            if not self.config.raise_errors:
                self.handleError(record)
                return
            status_code = exc.status_code if isinstance(exc, WebhookError) else None
            raise DeliveryError(f"failed to deliver log: {exc}", status_code=status_code) from exc

    def with_attrs(self, attrs: Iterable[Any]) -> "DiscordHandler":
        """Accept handler-level attributes. They are discarded; returns self."""
        return self

    def with_group(self, name: str) -> "DiscordHandler":
        """Accept an attribute group name. It is discarded; returns self."""
        return self

