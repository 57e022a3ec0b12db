"""Runtime configuration: environment variables plus the SQLite settings table.

Environment variables always win over stored settings.

Known settings keys:
    claude_api_key : Anthropic API key for the intent classifier (stored as-is, never exported).
    owner_number   : the bot operator's own WhatsApp id; messages from it are ignored.
"""

import os
from typing import Optional

from marmita_ops.db.database import get_connection

DEFAULT_CLASSIFIER_MODEL = "claude-opus-4-5-20251101"
DEFAULT_WPP_SESSION = "bot-marmitas"


def get_setting(key: str, default: str = None) -> str:
    """Return the value for a settings key, or default if not found."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else default
    finally:
        conn.close()


def set_setting(key: str, value: str) -> None:
    """Insert or update a settings key-value pair (upsert)."""
    conn = get_connection()
    try:
        conn.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )
        conn.commit()
    finally:
        conn.close()


def get_api_key() -> Optional[str]:
    return os.environ.get("ANTHROPIC_API_KEY") or get_setting("claude_api_key")


def get_owner_number() -> Optional[str]:
    return os.environ.get("OWNER_NUMBER") or get_setting("owner_number")


def get_classifier_model() -> str:
    return os.environ.get("CLASSIFIER_MODEL", DEFAULT_CLASSIFIER_MODEL)


def get_classifier_timeout() -> float:
    return float(os.environ.get("CLASSIFIER_TIMEOUT", "30"))


def get_wpp_settings() -> dict:
    """Connection details for the WPPConnect server that relays WhatsApp traffic."""
    return {
        "base_url": os.environ.get("WPP_URL", "http://localhost:21465"),
        "session": os.environ.get("WPP_SESSION", DEFAULT_WPP_SESSION),
        "token": os.environ.get("WPP_TOKEN"),
    }
