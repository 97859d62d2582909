"""Key-value string stores for the persisted score record.

Both stores honour the same small contract: ``get(key)`` returns the stored
string or None, raising StorageReadError when the backend cannot be read;
``set(key, value)`` returns True on success and False on failure.
"""
import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from scoreboard import db
from scoreboard.exceptions import StorageReadError
from scoreboard.models import KeyValue

logger = logging.getLogger(__name__)


class MemoryStore:
    """Process-local store. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True


class SqlStore:
    """Store backed by the kv_store table. Requires an app context."""

    def get(self, key: str) -> Optional[str]:
        try:
            row = db.session.get(KeyValue, key)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageReadError(key, f"Database read failed: {exc}") from exc
        return row.value if row else None

    def set(self, key: str, value: str) -> bool:
        try:
            row = db.session.get(KeyValue, key)
            if row is None:
                row = KeyValue(key=key, value=value)
            else:
                row.value = value
            db.session.add(row)
            db.session.commit()
            return True
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error(f"[storage-write-failed] key={key}: {exc}")
            return False


def build_store(backend: str):
    if backend == 'memory':
        return MemoryStore()
    if backend == 'sql':
        return SqlStore()
    raise ValueError(f"Unknown storage backend {backend!r}")
