"""
Bounded, most-recent-first logs of past lookups.

Email lookups and company searches are kept under separate keys of a
key-value store, each capped independently. ``load_all_history`` merges both
into one chronological view.
"""
from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Generic, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.history_entry import CompanySearchHistoryEntry, HistoryEntry, SearchHistoryEntry
from ports.storage import KeyValueStorePort

logger = logging.getLogger(__name__)

EMAIL_HISTORY_KEY = "search-history"
COMPANY_HISTORY_KEY = "company-search-history"
MAX_ENTRIES = 100

EntryT = TypeVar("EntryT", bound=BaseModel)
HistoryFilter = Literal["all", "email", "company", "success", "error"]

_PROTECTED_FIELDS = ("id", "type", "created_at")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Time + random composite: unique enough for one local log, not a secret."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:7]}"


class BoundedLog(Generic[EntryT]):
    """Most-recent-first log of one entry kind, truncated to ``max_entries``."""

    def __init__(
        self,
        store: KeyValueStorePort,
        key: str,
        model: Type[EntryT],
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.key = key
        self.model = model
        self.max_entries = max_entries
        self.clock = clock

    def load(self) -> List[EntryT]:
        raw = self.store.get_item(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError:
            logger.warning(f"History under '{self.key}' is not valid JSON; treating as empty")
            return []
        if not isinstance(items, list):
            logger.warning(f"History under '{self.key}' is not a list; treating as empty")
            return []
        entries: List[EntryT] = []
        for item in items:
            try:
                entries.append(self.model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping unreadable history entry under '{self.key}': {e.error_count()} errors")
        return entries

    def _save(self, entries: List[EntryT]) -> None:
        payload = [e.model_dump(mode="json", exclude_none=True) for e in entries]
        self.store.set_item(self.key, json.dumps(payload, ensure_ascii=False))

    def add(self, **fields: Any) -> EntryT:
        """Finalize a new entry (id, timestamp), prepend it and persist."""
        for name in _PROTECTED_FIELDS:
            fields.pop(name, None)
        entry = self.model.model_validate({**fields, "id": generate_id(), "created_at": self.clock()})
        entries = [entry, *self.load()][: self.max_entries]
        self._save(entries)
        return entry

    def remove(self, entry_id: str) -> None:
        self._save([e for e in self.load() if getattr(e, "id") != entry_id])

    def get(self, entry_id: str) -> Optional[EntryT]:
        for entry in self.load():
            if getattr(entry, "id") == entry_id:
                return entry
        return None

    def clear(self) -> None:
        self.store.remove_item(self.key)


class EmailSearchHistory(BoundedLog[SearchHistoryEntry]):
    def __init__(self, store: KeyValueStorePort, max_entries: int = MAX_ENTRIES,
                 clock: Callable[[], datetime] = _utcnow):
        super().__init__(store, EMAIL_HISTORY_KEY, SearchHistoryEntry, max_entries, clock)


class CompanySearchHistory(BoundedLog[CompanySearchHistoryEntry]):
    def __init__(self, store: KeyValueStorePort, max_entries: int = MAX_ENTRIES,
                 clock: Callable[[], datetime] = _utcnow):
        super().__init__(store, COMPANY_HISTORY_KEY, CompanySearchHistoryEntry, max_entries, clock)

    def update(self, entry_id: str, **updates: Any) -> Optional[CompanySearchHistoryEntry]:
        """Merge fields into an existing entry (e.g. a later employee snapshot).

        Identity and creation time cannot change. Returns None if the id is gone.
        """
        for name in _PROTECTED_FIELDS:
            updates.pop(name, None)
        entries = self.load()
        updated: Optional[CompanySearchHistoryEntry] = None
        for idx, entry in enumerate(entries):
            if entry.id == entry_id:
                merged = {**entry.model_dump(), **updates}
                updated = CompanySearchHistoryEntry.model_validate(merged)
                entries[idx] = updated
        if updated is None:
            return None
        self._save(entries)
        return updated


def load_all_history(email_log: EmailSearchHistory, company_log: CompanySearchHistory) -> List[HistoryEntry]:
    """Both logs merged, newest first. Ties keep email-then-company log order."""
    combined: List[HistoryEntry] = [*email_log.load(), *company_log.load()]
    # sorted() is stable, reverse=True included
    return sorted(combined, key=lambda e: e.created_at, reverse=True)


def filter_history(entries: List[HistoryEntry], kind: HistoryFilter = "all") -> List[HistoryEntry]:
    if kind == "all":
        return list(entries)
    if kind in ("email", "company"):
        return [e for e in entries if e.type == kind]
    return [e for e in entries if isinstance(e, SearchHistoryEntry) and e.status == kind]


def format_relative_time(created_at: datetime, now: Optional[datetime] = None) -> str:
    now = now or _utcnow()
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    diff_seconds = (now - created_at).total_seconds()
    minutes = int(diff_seconds // 60)
    hours = int(diff_seconds // 3600)
    days = int(diff_seconds // 86400)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return created_at.strftime("%m/%d/%Y")
