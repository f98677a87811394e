import logging
from datetime import datetime

import pytest

from discord_log import embeds
from discord_log.config import WebhookConfig
from discord_log.embeds import build_embed, build_payload, default_embed, record_attributes


def test_default_embed_maps_record(make_record):
    record = make_record(logging.WARNING, "disk low", pct="92")

    embed = default_embed(record, {"WARNING": 0xF1C40F})

    assert embed["title"] == "WARNING"
    assert embed["description"] == "disk low"
    assert embed["color"] == 0xF1C40F
    assert embed["fields"] == [{"name": "pct", "value": "92", "inline": False}]
    assert "footer" not in embed


def test_default_embed_timestamp_is_rfc3339(make_record):
    embed = default_embed(make_record(), {})

    parsed = datetime.fromisoformat(embed["timestamp"])
    assert parsed.tzinfo is not None
    assert embed["timestamp"].endswith("+00:00")


def test_missing_level_color_is_zero(make_record):
    embed = default_embed(make_record(logging.DEBUG), {"ERROR": 0xE74C3C})
    assert embed["color"] == 0


def test_description_uses_formatted_message(make_record):
    record = make_record(logging.INFO, "usage at %s%%", args=("85",))
    assert default_embed(record, {})["description"] == "usage at 85%"


def test_fields_keep_call_site_order_and_stringify(make_record):
    record = make_record(logging.ERROR, "boom", error="timeout", retries=3, ok=False)

    fields = default_embed(record, {})["fields"]

    assert [f["name"] for f in fields] == ["error", "retries", "ok"]
    assert [f["value"] for f in fields] == ["timeout", "3", "False"]
    assert all(f["inline"] is False for f in fields)


def test_record_attributes_skip_standard_attributes(make_record):
    record = make_record(pct="92")
    record.message = record.getMessage()

    assert record_attributes(record) == {"pct": "92"}


def test_build_embed_twice_differs_only_by_timestamp(make_record):
    record = make_record(logging.WARNING, "disk low", pct="92")
    colors = {"WARNING": 0xF1C40F}

    first = build_embed(record, colors)
    second = build_embed(record, colors)

    first.pop("timestamp")
    second.pop("timestamp")
    assert first == second


def test_custom_embed_is_used_verbatim(monkeypatch, make_record):
    def fail(*args, **kwargs):
        raise AssertionError("default embed must not run")

    monkeypatch.setattr(embeds, "default_embed", fail)

    custom = {"title": "anything", "unexpected": object()}
    calls = []

    def custom_embed(record, level_colors):
        calls.append((record, level_colors))
        return custom

    record = make_record()
    colors = {"WARNING": 1}

    assert build_embed(record, colors, custom_embed) is custom
    assert calls == [(record, colors)]


@pytest.mark.parametrize("username, avatar_url, expected_keys", [
    (None, None, {"embeds"}),
    ("", "", {"embeds"}),
    ("Log Bot", None, {"embeds", "username"}),
    ("Log Bot", "https://example.com/a.png", {"embeds", "username", "avatar_url"}),
])
def test_build_payload_omits_empty_identity(username, avatar_url, expected_keys):
    embed = {"title": "INFO", "description": "", "color": 0, "timestamp": "", "fields": []}

    payload = build_payload(embed, username, avatar_url)

    assert set(payload) == expected_keys
    assert payload["embeds"] == [embed]


def test_warn_color_key_applies_to_warning_records(make_record):
    config = WebhookConfig("https://discord.test/hook", level_colors={"WARN": 0xF1C40F})

    embed = default_embed(make_record(logging.WARNING), config.level_colors)

    assert embed["title"] == "WARNING"
    assert embed["color"] == 0xF1C40F
