"""
In-memory store of loaded datasets.

A dataset and its column classification are computed once on load and
then shared read-only by every chart computed against it.
"""
import logging
import time
import uuid
from dataclasses import dataclass, field
from threading import Lock
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.core.config import get_settings
from app.core.schemas import ColumnType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSession:
    """A loaded dataset with its column classification."""
    dataset_id: str
    rows: Tuple[Mapping[str, Any], ...]
    headers: Tuple[str, ...]
    column_types: Mapping[str, ColumnType]
    created_at: float = field(default_factory=time.time)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def freeze_rows(rows: Sequence[Mapping[str, Any]]) -> Tuple[Mapping[str, Any], ...]:
    """Read-only copies of the rows, so no chart can alter the shared dataset."""
    return tuple(MappingProxyType(dict(row)) for row in rows)


class DatasetStore:
    """Thread-safe dataset sessions with TTL."""

    def __init__(self, ttl: float = 3600):
        self._sessions: Dict[str, DatasetSession] = {}
        self._lock = Lock()
        self.ttl = ttl

    def _expired(self, session: DatasetSession, now: float) -> bool:
        return now - session.created_at > self.ttl

    def add(
        self,
        rows: Sequence[Mapping[str, Any]],
        headers: Sequence[str],
        column_types: Mapping[str, ColumnType],
    ) -> DatasetSession:
        session = DatasetSession(
            dataset_id=uuid.uuid4().hex,
            rows=freeze_rows(rows),
            headers=tuple(headers),
            column_types=MappingProxyType(dict(column_types)),
        )
        with self._lock:
            self._sessions[session.dataset_id] = session
        logger.debug(f"Dataset stored: {session.dataset_id} ({session.row_count} rows)")
        return session

    def get(self, dataset_id: str) -> Optional[DatasetSession]:
        """Get a session if it exists and has not expired."""
        with self._lock:
            session = self._sessions.get(dataset_id)
            if session is None:
                return None
            if self._expired(session, time.time()):
                del self._sessions[dataset_id]
                logger.debug(f"Dataset expired: {dataset_id}")
                return None
            return session

    def discard(self, dataset_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(dataset_id, None) is not None

    def clear(self):
        with self._lock:
            self._sessions.clear()
            logger.info("Dataset store cleared")

    def cleanup_expired(self) -> int:
        """Remove expired sessions and return how many were dropped."""
        with self._lock:
            now = time.time()
            expired: List[str] = [
                key for key, session in self._sessions.items() if self._expired(session, now)
            ]
            for key in expired:
                del self._sessions[key]
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired datasets")
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        self.cleanup_expired()
        with self._lock:
            return {
                'size': len(self._sessions),
                'rows': sum(s.row_count for s in self._sessions.values()),
                'ttl': self.ttl,
            }


_dataset_store: Optional[DatasetStore] = None


def get_dataset_store() -> DatasetStore:
    """Get the process-wide dataset store."""
    global _dataset_store
    if _dataset_store is None:
        _dataset_store = DatasetStore(ttl=get_settings().session_ttl_seconds)
    return _dataset_store
