"""
Message catalog lookup for user-visible strings.

Messages are looked up by stable identifier. Locale catalogs are optional JSON files
(<MESSAGE_CATALOG_DIR>/<locale>.json); the English defaults below apply whenever a
catalog has no entry.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from app.core import config
from app.utils import get_logger


log = get_logger(__name__)

DEFAULT_MESSAGES: Dict[str, str] = {
    "security_report.title": "Users, Groups and Permissions",
    "security_report.never": "Never",
    "security_report.no_groups": "Not in a Security Group",
    "security_report.no_permissions": "No Permissions",
    "reports.access_denied": "You do not have permission to view this report",
}


class Translator:
    """Resolves message identifiers for one locale."""

    def __init__(self, locale: str = "en", messages: Optional[Dict[str, str]] = None):
        self.locale = locale
        self.messages = messages or {}

    def translate(self, key: str, default: Optional[str] = None, **params) -> str:
        """
        Return the message for key.

        Falls back to the locale catalog, then the built-in English default, then
        default, then the key itself. params are applied with str.format.
        """
        message = self.messages.get(key)
        if message is None:
            message = DEFAULT_MESSAGES.get(key, default if default is not None else key)
        if params:
            message = message.format(**params)
        return message


def load_messages(catalog_dir: Optional[str], locale: str) -> Dict[str, str]:
    """
    Read <catalog_dir>/<locale>.json.

    A missing directory or file yields no messages; a file that isn't a JSON
    object of strings raises ValueError.
    """
    if not catalog_dir:
        return {}

    path = Path(catalog_dir) / f"{locale}.json"
    if not path.is_file():
        log.debug("No message catalog at %s", path)
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid message catalog {path}: {e}") from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise ValueError(f"Message catalog {path} must map identifiers to strings")

    log.info("Loaded %d messages for locale %s", len(data), locale)
    return data


@lru_cache
def get_translator() -> Translator:
    """Translator for the configured LOCALE."""
    return Translator(config.LOCALE, load_messages(config.MESSAGE_CATALOG_DIR, config.LOCALE))
