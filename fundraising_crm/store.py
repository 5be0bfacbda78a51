"""Key-value persistence and record collections for the fundraising CRM."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Protocol, TypeVar

from .models import (
    FundingGrant,
    PhilanthropicSite,
    StrategyItem,
    TenderSite,
    coerce_amount,
    new_record_id,
    utc_timestamp,
)
from .seed import seed_grants, seed_philanthropic_sites, seed_tender_sites
from .statuses import EXTENDED_STATUSES, StatusSet


logger = logging.getLogger(__name__)

FUNDING_KEY = "cf_funding"
TENDERS_KEY = "cf_tenders"
PHILANTHROPY_KEY = "cf_philanthropy"
STRATEGY_KEY = "cf_strategy"
NOTES_KEY = "cf_notes"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class KeyValueStorage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class SQLiteKeyValueStorage:
    """Whole-blob persistence in a single SQLite table."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def init_db(self) -> None:
        with self._connect() as connection:
            connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );
                """
            )

    def read(self, key: str) -> str | None:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,),
            ).fetchone()
        return None if row is None else str(row["value"])

    def write(self, key: str, value: str) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )


RecordT = TypeVar("RecordT", FundingGrant, TenderSite, PhilanthropicSite, StrategyItem)


class RecordCollection(Generic[RecordT]):
    """Ordered records persisted as one JSON list under a single storage key."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        record_type: type[RecordT],
        defaults: Callable[[], list[RecordT]],
    ) -> None:
        self.storage = storage
        self.key = key
        self.record_type = record_type
        self._records = self._load(defaults)

    def _load(self, defaults: Callable[[], list[RecordT]]) -> list[RecordT]:
        raw = self.storage.read(self.key)
        if raw is None:
            return defaults()
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
            return [self.record_type.from_dict(item) for item in payload]
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.warning(f"Unreadable data under {self.key!r}, using defaults: {exc}")
            return defaults()

    def _persist(self) -> None:
        payload = [record.to_dict() for record in self._records]
        self.storage.write(self.key, json.dumps(payload))

    def list_all(self) -> list[RecordT]:
        return list(self._records)

    def get(self, record_id: str) -> RecordT | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def upsert(self, record: RecordT) -> RecordT:
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[index] = record
                break
        else:
            self._records.append(record)
        self._persist()
        return record

    def delete(self, record_id: str) -> bool:
        remaining = [record for record in self._records if record.id != record_id]
        removed = len(remaining) != len(self._records)
        self._records = remaining
        if removed:
            self._persist()
        return removed

    def replace_all(self, records: Iterable[RecordT]) -> None:
        self._records = list(records)
        self._persist()


class CRMStore:
    """Grants, tender sites, philanthropic contacts, strategy items, and notes."""

    def __init__(self, storage: KeyValueStorage, statuses: StatusSet = EXTENDED_STATUSES) -> None:
        self.storage = storage
        self.statuses = statuses
        self.grants = RecordCollection(
            storage, FUNDING_KEY, FundingGrant, lambda: seed_grants(statuses)
        )
        self.tender_sites = RecordCollection(
            storage, TENDERS_KEY, TenderSite, seed_tender_sites
        )
        self.philanthropic_sites = RecordCollection(
            storage, PHILANTHROPY_KEY, PhilanthropicSite, seed_philanthropic_sites
        )
        self.strategy_items = RecordCollection(storage, STRATEGY_KEY, StrategyItem, list)

    def list_grants(self) -> list[FundingGrant]:
        return self.grants.list_all()

    def new_grant(self, **fields: Any) -> FundingGrant:
        """Blank grant with a fresh id and creation time, not yet saved."""
        defaults: dict[str, Any] = {"funder": "", "status": self.statuses.default_label}
        defaults.update(fields)
        return FundingGrant(id=new_record_id(), created_at=utc_timestamp(), **defaults)

    def save_grant(self, grant: FundingGrant) -> FundingGrant | None:
        funder = _clean(grant.funder)
        fund_name = _clean(grant.fund_name)
        if not funder or not fund_name:
            return None
        if grant.status not in self.statuses.labels:
            logger.warning(f"Saving grant {grant.id} with unconfigured status {grant.status!r}")
        return self.grants.upsert(
            replace(grant, funder=funder, fund_name=fund_name, amount=coerce_amount(grant.amount))
        )

    def delete_grant(self, grant_id: str) -> bool:
        return self.grants.delete(grant_id)

    def list_tender_sites(self) -> list[TenderSite]:
        return self.tender_sites.list_all()

    def add_tender_site(self, name: str | None, login: str | None) -> TenderSite | None:
        clean_name = _clean(name)
        clean_login = _clean(login)
        if not clean_name or not clean_login:
            return None
        return self.tender_sites.upsert(
            TenderSite(id=new_record_id(), name=clean_name, login=clean_login)
        )

    def delete_tender_site(self, site_id: str) -> bool:
        return self.tender_sites.delete(site_id)

    def list_philanthropic_sites(self) -> list[PhilanthropicSite]:
        return self.philanthropic_sites.list_all()

    def add_philanthropic_site(
        self,
        organisation: str | None,
        website: str | None = None,
        notes: str | None = None,
    ) -> PhilanthropicSite | None:
        clean_organisation = _clean(organisation)
        if not clean_organisation:
            return None
        return self.philanthropic_sites.upsert(
            PhilanthropicSite(
                id=new_record_id(),
                organisation=clean_organisation,
                date_added=utc_timestamp(),
                website=_clean(website) or "",
                notes=_clean(notes) or "",
            )
        )

    def delete_philanthropic_site(self, site_id: str) -> bool:
        return self.philanthropic_sites.delete(site_id)

    def list_strategy_items(self) -> list[StrategyItem]:
        return self.strategy_items.list_all()

    def add_strategy_item(
        self,
        fund: str | None,
        details: str | None = None,
        comments: str | None = None,
        further_info: str | None = None,
    ) -> StrategyItem | None:
        clean_fund = _clean(fund)
        if not clean_fund:
            return None
        return self.strategy_items.upsert(
            StrategyItem(
                id=new_record_id(),
                fund=clean_fund,
                details=_clean(details) or "",
                comments=_clean(comments) or "",
                further_info=_clean(further_info) or "",
            )
        )

    def delete_strategy_item(self, item_id: str) -> bool:
        return self.strategy_items.delete(item_id)

    def read_notes(self) -> str:
        return self.storage.read(NOTES_KEY) or ""

    def write_notes(self, text: str) -> None:
        self.storage.write(NOTES_KEY, text)


class NotesDraft:
    """Holds notes edits until typing has paused for ``quiet_period`` seconds."""

    def __init__(
        self,
        store: CRMStore,
        quiet_period: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.quiet_period = quiet_period
        self.clock = clock
        self.text = store.read_notes()
        self._saved_text = self.text
        self._last_edit: float | None = None

    @property
    def status(self) -> str:
        return "saved" if self.text == self._saved_text else "unsaved"

    def edit(self, text: str) -> None:
        self.text = text
        self._last_edit = self.clock()

    def flush_if_quiet(self) -> bool:
        """Commit pending text once the quiet period has passed; True if written."""
        if self.status == "saved" or self._last_edit is None:
            return False
        if self.clock() - self._last_edit < self.quiet_period:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self.status == "saved":
            return False
        self.store.write_notes(self.text)
        self._saved_text = self.text
        return True
