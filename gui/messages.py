"""User-facing strings looked up by key."""

from __future__ import annotations

from helper_engine.normalize import UNKNOWN_ERROR_KEY

MESSAGES = {
    UNKNOWN_ERROR_KEY: "Unknown error",
}


def translate(key: str) -> str:
    return MESSAGES.get(key, key)
