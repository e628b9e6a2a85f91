# src/tallytest/telemetry/logger/processors.py

"""
Custom structlog processors for tallytest.
"""

import logging

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS = {
    "debug": "🐛",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
    "critical": "💥",
}
# Keys bound for internal bookkeeping that should never reach a renderer.
INTERNAL_KEYS = ("emoji_key",)
# Event-specific emojis, selected with `emoji_key=` on the log call.
EVENT_EMOJIS = {
    "run": "🧪",
    "file": "📄",
    "pass": "✅",
    "fail": "🚫",
    "report": "📋",
    "config": "⚙️",
}


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event message with an emoji for the level or event kind."""
    emoji_key = event_dict.get("emoji_key")
    emoji = EVENT_EMOJIS.get(emoji_key) if emoji_key else None
    if emoji is None:
        level = event_dict.get("level", method_name)
        if isinstance(level, int):
            level = logging.getLevelName(level)
        emoji = LOG_EMOJIS.get(str(level).lower(), "➡️")
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops internal keys so they do not clutter console or JSON output."""
    for key in INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict


# 🔼⚙️
