"""
Durable client-side storage for the session agent.

FileKeyValueStore mirrors browser localStorage: string keys mapped to
text values, persisted as one JSON document. SessionCache keeps the
issued session under a fixed key.
"""

import json
import logging
import os
import tempfile
from typing import Dict, Optional

from pydantic import ValidationError

from chatweet.app.use_cases.sessions.dtos import CamelModel

logger = logging.getLogger(__name__)

STORAGE_KEY = "chatweet_session"


class FileKeyValueStore:
    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as r_file:
            data = json.load(r_file)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold an object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as w_file:
                json.dump(data, w_file)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class StoredSession(CamelModel):
    """What the device remembers about its session"""

    session_token: str
    device_id: str
    expires_at: str


class SessionCache:
    """
    The agent's local copy of its session.

    Storage problems are logged and read as "no cached session"; they
    never propagate into the caller.
    """

    def __init__(self, store: FileKeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[StoredSession]:
        try:
            raw = self.store.get_item(self.key)
            if raw is None:
                return None
            return StoredSession.model_validate_json(raw)
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Error reading stored session: %s", exc)
            return None

    def save(self, session: StoredSession) -> None:
        try:
            self.store.set_item(self.key, session.model_dump_json(by_alias=True))
        except (OSError, ValueError) as exc:
            logger.error("Error storing session: %s", exc)

    def clear(self) -> None:
        try:
            self.store.remove_item(self.key)
        except (OSError, ValueError) as exc:
            logger.error("Error clearing stored session: %s", exc)
