"""
Local session persistence.

The async auth client stores its session under ``supabase.auth.token`` and
its PKCE verifier under ``supabase.auth.token-code-verifier``. Nothing else
is kept locally; purging those keys recovers from a corrupted session.
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Key the supabase auth client persists its session under
SESSION_KEY = "supabase.auth.token"


class MemorySessionStorage:
    """In-process key/value storage (used for tests and throwaway sessions)."""

    def __init__(self, items: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    async def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._items)

    def _flush(self) -> None:
        """Persist the current items. No-op for the in-memory variant."""


class FileSessionStorage(MemorySessionStorage):
    """Key/value storage kept in a JSON file so sessions survive restarts."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._items), encoding="utf-8")


def is_session_artifact(key: str, prefix: str = SESSION_KEY, suffix: str = "") -> bool:
    """True if ``key`` names a provider session artifact."""
    return key.startswith(prefix) and key.endswith(suffix)


async def purge_session_artifacts(
    storage: MemorySessionStorage,
    prefix: str = SESSION_KEY,
    suffix: str = "",
) -> list[str]:
    """
    Remove every persisted session artifact.

    Returns:
        The keys that were removed
    """
    removed = [key for key in storage.keys() if is_session_artifact(key, prefix, suffix)]
    for key in removed:
        await storage.remove_item(key)
    if removed:
        logger.info(f"Purged {len(removed)} persisted session artifact(s)")
    return removed
