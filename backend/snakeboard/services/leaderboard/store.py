"""Key/value backends holding the leaderboard document.

Both expose ``get(key)`` (decoded JSON or None) and ``set(key, value)``.
Backend failures surface as StorageError.
"""
import json
import time
from typing import Any, Optional
from urllib.parse import quote

import requests

from snakeboard.services.errors import ConfigurationError, StorageError

__all__ = ["KeyValueStore", "UpstashStore", "SqlStore", "build_store"]


class KeyValueStore:
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError


class UpstashStore(KeyValueStore):
    """Upstash Redis over its REST API."""

    def __init__(self, url: str, token: str, timeout: float = 5.0):
        if not url or not token:
            raise ConfigurationError('Missing Upstash env')
        self.url = url.rstrip('/')
        self.timeout = timeout
        self._headers = {'Authorization': f'Bearer {token}'}

    def _call(self, path: str) -> dict:
        try:
            r = requests.get(f'{self.url}/{path}', headers=self._headers, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as exc:
            raise StorageError(f'upstash request failed: {exc}') from exc
        except ValueError as exc:
            raise StorageError('upstash returned a non-JSON body') from exc

    def get(self, key: str) -> Optional[Any]:
        body = self._call(f"get/{quote(key, safe='')}")
        raw = body.get('result') if isinstance(body, dict) else None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise StorageError(f'corrupt value under {key!r}') from exc

    def set(self, key: str, value: Any) -> None:
        encoded = quote(json.dumps(value), safe='')
        self._call(f"set/{quote(key, safe='')}/{encoded}")


class SqlStore(KeyValueStore):
    """Rows in the ``stored_value`` table via Flask-SQLAlchemy."""

    def __init__(self, db):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        from snakeboard.models import StoredValue
        try:
            row = self.db.session.get(StoredValue, key)
            return row.load() if row else None
        except ValueError as exc:
            raise StorageError(f'corrupt value under {key!r}') from exc
        except Exception as exc:
            self.db.session.rollback()
            raise StorageError(f'sql get failed: {exc}') from exc

    def set(self, key: str, value: Any) -> None:
        from snakeboard.models import StoredValue
        try:
            row = self.db.session.get(StoredValue, key)
            if row is None:
                row = StoredValue(key=key)
            row.value = json.dumps(value)
            row.updated_at = time.time()
            self.db.session.add(row)
            self.db.session.commit()
        except Exception as exc:
            self.db.session.rollback()
            raise StorageError(f'sql set failed: {exc}') from exc


def build_store(config) -> KeyValueStore:
    """Pick the backend named by LEADERBOARD_BACKEND."""
    backend = (config.get('LEADERBOARD_BACKEND') or 'upstash').lower()
    if backend == 'sql':
        from snakeboard import db
        return SqlStore(db)
    if backend == 'upstash':
        return UpstashStore(
            config.get('UPSTASH_REDIS_REST_URL'),
            config.get('UPSTASH_REDIS_REST_TOKEN'),
            timeout=float(config.get('STORE_TIMEOUT_SEC', 5)),
        )
    raise ConfigurationError(f'Unknown LEADERBOARD_BACKEND {backend!r}')
