"""
In-memory store - records live for the lifetime of the process.
"""

import logging
import uuid
from dataclasses import replace
from typing import Optional

from ovo.store.base import (
    DataStore,
    Record,
    RecordKind,
    RecordSnapshot,
)
from ovo.store.errors import DuplicateRecordError, RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore(DataStore):
    """Keeps every owner's records in plain dictionaries."""

    backend_name = "memory"

    def __init__(self, records: Optional[list[Record]] = None):
        super().__init__()
        # owner -> kind -> id -> record
        self._records: dict[str, dict[RecordKind, dict[str, Record]]] = {}
        for record in records or []:
            self._insert(record)

    def _bucket(self, owner: str, kind: RecordKind) -> dict[str, Record]:
        owner_records = self._records.setdefault(
            owner, {k: {} for k in RecordKind}
        )
        return owner_records[kind]

    def _insert(self, record: Record) -> Record:
        if not record.id:
            record = replace(record, id=new_record_id())
        bucket = self._bucket(record.owner, record.kind)
        if record.id in bucket:
            raise DuplicateRecordError(record.kind.value, record.id)
        bucket[record.id] = record
        return record

    def snapshot(self, owner: str) -> RecordSnapshot:
        owner_records = self._records.get(owner)
        if owner_records is None:
            return RecordSnapshot(owner=owner)
        return RecordSnapshot(
            owner=owner,
            expenses=tuple(owner_records[RecordKind.EXPENSE].values()),
            production=tuple(owner_records[RecordKind.PRODUCTION].values()),
            sales=tuple(owner_records[RecordKind.SALE].values()),
        )

    def add(self, record: Record) -> Record:
        stored = self._insert(record)
        bucket = self._bucket(stored.owner, stored.kind)
        try:
            self._persist()
        except StoreError:
            del bucket[stored.id]
            raise
        logger.debug("Added %s %s for %s", stored.kind.value, stored.id, stored.owner)
        self._notify(stored.owner)
        return stored

    def delete(self, owner: str, kind: RecordKind, record_id: str) -> None:
        kind = RecordKind(kind)
        bucket = self._bucket(owner, kind)
        if record_id not in bucket:
            raise RecordNotFoundError(kind.value, record_id)
        previous = dict(bucket)
        del bucket[record_id]
        try:
            self._persist()
        except StoreError:
            # Keep insertion order
            bucket.clear()
            bucket.update(previous)
            raise
        logger.debug("Deleted %s %s for %s", kind.value, record_id, owner)
        self._notify(owner)

    def _persist(self) -> None:
        """Write the current records to durable storage. Raises StoreError."""
        pass

    def owners(self) -> list[str]:
        return sorted(self._records)

    def all_records(self) -> list[Record]:
        records: list[Record] = []
        for owner_records in self._records.values():
            for bucket in owner_records.values():
                records.extend(bucket.values())
        return records


