import json
import logging
import os
from typing import Dict, Optional

log = logging.getLogger(__name__)

SESSION_KEY = "blog_admin_session"


class SessionStore:
    """Key/value accessor for the session credential. No expiry logic here."""

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, credential: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, credential: Optional[str] = None):
        self._data: Dict[str, str] = {}
        if credential:
            self._data[SESSION_KEY] = credential

    def get(self) -> Optional[str]:
        return self._data.get(SESSION_KEY)

    def set(self, credential: str) -> None:
        self._data[SESSION_KEY] = credential

    def clear(self) -> None:
        self._data.pop(SESSION_KEY, None)


class FileSessionStore(SessionStore):
    """Durable store backed by a small JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning(f"Unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get(self) -> Optional[str]:
        value = self._load().get(SESSION_KEY)
        return value if isinstance(value, str) and value else None

    def set(self, credential: str) -> None:
        data = self._load()
        data[SESSION_KEY] = credential
        self._save(data)

    def clear(self) -> None:
        data = self._load()
        data.pop(SESSION_KEY, None)
        if data:
            self._save(data)
        elif os.path.exists(self.path):
            os.remove(self.path)
