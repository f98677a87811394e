"""Example entry-point.

This module:
- Loads the webhook configuration from config.json
- Sends a few records with the default embed layout
- Sends the same records with a custom embed layout
"""

import logging
from datetime import datetime, timezone

from discord_log import ConfigError, DeliveryError, DiscordHandler, Embed, load_config


def custom_embed(record: logging.LogRecord, level_colors) -> Embed:
    """Render a record with a custom title, a fixed field and a footer."""
    return {
        "title": f"Custom title: {record.levelname}",
        "description": f"Custom description: {record.getMessage()}",
        "color": level_colors.get(record.levelname, 0),
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "fields": [
            {"name": "Custom Field", "value": "Custom Value", "inline": True},
        ],
        "footer": {"text": "Custom Footer"},
    }


EXAMPLES = [
    (logging.INFO, "Hello from Info", {"version": "1.2.3"}),
    (logging.WARNING, "Watch out, memory usage is high", {"usage": "85%"}),
    (logging.ERROR, "Oh no, database connection failed", {"error": "timeout"}),
]


def send_examples(logger: logging.Logger) -> None:
    """Emit the example records, reporting failed deliveries."""
    for level, message, extra in EXAMPLES:
        try:
            logger.log(level, message, extra=extra)
        except DeliveryError as exc:
            print(f"[!] {exc}")


def run_examples(path: str = "config.json") -> None:
    """Run the default and custom embed examples against the configured webhook."""
    try:
        config = load_config(path)
    except ConfigError as exc:
        print(f"[!] {exc}")
        raise SystemExit(1)

    default_handler = DiscordHandler(config=config)
    default_logger = logging.getLogger("example.default")
    default_logger.setLevel(logging.DEBUG)
    default_logger.addHandler(default_handler)
    send_examples(default_logger)

    custom_handler = DiscordHandler.from_config_file(
        path,
        username="Log Notifications",
        custom_embed=custom_embed,
    )
    custom_logger = logging.getLogger("example.custom")
    custom_logger.setLevel(logging.DEBUG)
    custom_logger.addHandler(custom_handler)
    send_examples(custom_logger)

    print("Done.")


if __name__ == "__main__":
    run_examples()
