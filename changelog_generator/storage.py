"""
Storage for saved changelogs.

Records live in process memory only. Every operation takes the store lock,
since HTTP handlers run in a thread pool.
"""

import logging
import threading
from typing import Dict, List, Optional

from .models import ChangelogRecord
from .schemas import SaveChangelogRequest

logger = logging.getLogger("changelog-generator.storage")


class InMemoryChangelogStore:
    """Create, fetch, list and delete saved changelogs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[int, ChangelogRecord] = {}
        self._next_id = 1

    def create(self, user_id: str, data: SaveChangelogRequest) -> ChangelogRecord:
        """Save a changelog for a user and return the stored record."""
        with self._lock:
            record = ChangelogRecord(
                id=self._next_id,
                user_id=user_id,
                title=data.title,
                input_content=data.input_content,
                output_content=data.output_content,
                source_type=data.source_type.value,
                settings=data.settings.model_dump(mode="json", exclude_none=True) if data.settings else None,
            )
            self._records[record.id] = record
            self._next_id += 1
        logger.info("Saved changelog %d for user %s", record.id, user_id)
        return record

    def get(self, changelog_id: int) -> Optional[ChangelogRecord]:
        with self._lock:
            return self._records.get(changelog_id)

    def list(self, user_id: str) -> List[ChangelogRecord]:
        """Return the user's changelogs, newest first."""
        with self._lock:
            owned = [r for r in self._records.values() if r.user_id == user_id]
        return sorted(owned, key=lambda r: (r.created_at, r.id), reverse=True)

    def delete(self, changelog_id: int) -> None:
        with self._lock:
            self._records.pop(changelog_id, None)
        logger.info("Deleted changelog %d", changelog_id)
