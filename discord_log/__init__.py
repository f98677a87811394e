"""Discord logging package.

This package provides a `logging.Handler` that renders each log record as a
Discord embed and posts it synchronously to a webhook.
"""

from .config import ConfigError, WebhookConfig, load_config, save_config
from .embeds import Embed, EmbedField, EmbedFooter, Payload, build_embed, default_embed
from .handler import DeliveryError, DiscordHandler
from .webhook import WebhookClient, WebhookError

__all__ = [
    "ConfigError",
    "DeliveryError",
    "DiscordHandler",
    "Embed",
    "EmbedField",
    "EmbedFooter",
    "Payload",
    "WebhookClient",
    "WebhookConfig",
    "WebhookError",
    "build_embed",
    "default_embed",
    "load_config",
    "save_config",
]
