"""
Session storage: key/value persistence of the signed-in user.

The Session Record lives under the "user" key as JSON, the bearer token
under "jwt". `load_session` is the only place the record is parsed; every
malformed or unknown record reads as "not authenticated".
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from pydantic import ValidationError

from billed.schemas.session import SessionRecord

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "jwt"


class SessionStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStorage:
    """Dict-backed storage, lost when the process exits"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileSessionStorage:
    """Storage persisted as a single JSON object in a file"""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Session file unreadable, starting empty: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, items: Dict[str, str]) -> None:
        self.path.write_text(json.dumps(items), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = str(value)
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


def load_session(storage: SessionStorage) -> Optional[SessionRecord]:
    """
    Read and validate the Session Record.

    Returns:
        The record, or None when absent or invalid
    """
    raw = storage.get_item(USER_KEY)
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.debug("Session record is not valid JSON")
        return None
    if not isinstance(data, dict):
        return None
    try:
        return SessionRecord.model_validate(data)
    except ValidationError:
        logger.debug("Session record rejected", extra={"record": data})
        return None


def save_session(storage: SessionStorage, record: SessionRecord) -> None:
    storage.set_item(
        USER_KEY,
        json.dumps(record.model_dump(mode="json", by_alias=True, exclude_none=True)),
    )


def session_email(storage: SessionStorage) -> Optional[str]:
    record = load_session(storage)
    return record.email if record else None
