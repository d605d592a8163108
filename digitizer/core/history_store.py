"""History of past extraction sessions.

Owns the process-wide list of HistoryItems. The list is loaded once from
LocalStorage and every mutation writes the complete snapshot back under a
single key. Most recent entries come first.

The store does not know which entry is active; DigitizationSession tracks
that and calls sync_active_edits() after each edit.

Failure policy:
- Load: absent, unreadable or invalid data gives an empty history (warning).
- Save: logged as an error; the in-memory history stays authoritative.
"""

import logging
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from digitizer.core.config import StorageConfig
from digitizer.core.errors import PersistenceError
from digitizer.core.local_storage import LocalStorage
from digitizer.pydantic_models.document_types import DocumentType
from digitizer.pydantic_models.history import HistoryItem, HistorySnapshot
from digitizer.pydantic_models.items import ExtractedItem

logger = logging.getLogger(__name__)


def _copy_items(items: Iterable[ExtractedItem]) -> list[ExtractedItem]:
    return [item.model_copy(deep=True) for item in items]


class HistoryStore:
    """Persisted, user-editable log of extraction sessions.

    Usage:
        store = HistoryStore(LocalStorage(storage_home()))
        store.load()
        entry = store.record_session("scan.jpg", DocumentType.BOM, items)
        store.sync_active_edits(entry.id, edited_items)
        store.delete_session(entry.id)
    """

    def __init__(self, storage: LocalStorage, key: str = StorageConfig.HISTORY_KEY) -> None:
        self._storage = storage
        self._key = key
        self._entries: list[HistoryItem] = []

    @property
    def entries(self) -> tuple[HistoryItem, ...]:
        """All entries, most recent first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: str) -> bool:
        return self._find(entry_id) is not None

    def _find(self, entry_id: str) -> HistoryItem | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    # Lifecycle

    def load(self) -> "HistoryStore":
        """Replace in-memory entries with the stored snapshot."""
        try:
            raw = self._storage.get_item(self._key)
        except PersistenceError as e:
            logger.warning(f"History unreadable, starting empty: {e.original_error or e}")
            self._entries = []
            return self

        if not raw:
            self._entries = []
            return self

        try:
            self._entries = HistorySnapshot.validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"History snapshot is corrupt, starting empty ({e.error_count()} errors)")
            self._entries = []
            return self

        logger.debug(f"Loaded {len(self._entries)} history entries")
        return self

    def save(self) -> None:
        """Write the complete snapshot. Failures are logged, not raised."""
        snapshot = HistorySnapshot.dump_json(self._entries, by_alias=True).decode("utf-8")
        try:
            self._storage.set_item(self._key, snapshot)
        except PersistenceError as e:
            logger.error(f"Could not save history: {e.original_error or e}")

    # Mutations

    def record_session(
        self,
        file_name: str,
        doc_type: DocumentType,
        items: Iterable[ExtractedItem],
    ) -> HistoryItem:
        """Create an entry at the front of the history and persist it."""
        entry = HistoryItem(
            file_name=file_name,
            doc_type=DocumentType(doc_type),
            items=_copy_items(items),
        )
        self._entries.insert(0, entry)
        self.save()
        logger.info(f"Recorded {entry.doc_type} session '{file_name}' ({len(entry.items)} rows)")
        return entry.model_copy(deep=True)

    def select_session(self, entry_id: str) -> HistoryItem:
        """Return a copy of a stored entry.

        Raises:
            KeyError: If no entry has this id.
        """
        entry = self._find(entry_id)
        if entry is None:
            raise KeyError(entry_id)
        return entry.model_copy(deep=True)

    def sync_active_edits(self, entry_id: str, items: Iterable[ExtractedItem]) -> bool:
        """Replace an entry's items wholesale.

        Unknown ids are ignored: the entry may have been deleted while an edit
        was in flight.

        Returns:
            True if an entry was updated.
        """
        entry = self._find(entry_id)
        if entry is None:
            logger.debug(f"Edit sync skipped, no history entry {entry_id}")
            return False
        entry.items = _copy_items(items)
        self.save()
        return True

    def delete_session(self, entry_id: str) -> bool:
        """Remove an entry. Returns False if the id is unknown."""
        entry = self._find(entry_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        self.save()
        logger.info(f"Deleted history entry '{entry.file_name}'")
        return True
