"""
JSON file store - persists all owners' records in a single file.

File layout::

    {
      "version": 1,
      "owners": {
        "<owner>": {"expenses": [...], "production": [...], "sales": [...]}
      }
    }
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from ovo.store.base import RecordKind
from ovo.store.errors import StoreError
from ovo.store.memory import InMemoryStore
from ovo.store.parsing import parse_record, record_to_dict

logger = logging.getLogger(__name__)

FILE_VERSION = 1


class JsonFileStore(InMemoryStore):
    """In-memory store that writes through to a JSON file on every change."""

    backend_name = "json"

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.info("No data file at %s, starting empty", self.path)
            return

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read data file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Data file {self.path} must hold a JSON object")
        owners = data.get("owners", {})
        if not isinstance(owners, dict):
            raise StoreError(f"Data file {self.path}: \"owners\" must be an object")

        loaded = 0
        for owner, collections in owners.items():
            if not isinstance(collections, dict):
                raise StoreError(f"Data file {self.path}: records of {owner!r} must be an object")
            for kind in RecordKind:
                items = collections.get(kind.value, [])
                if not isinstance(items, list):
                    raise StoreError(f"Data file {self.path}: {owner!r} {kind.value} must be a list")
                for item in items:
                    if not isinstance(item, dict):
                        logger.warning("Skipping %s entry %r for %s: not an object", kind.value, item, owner)
                        continue
                    record = parse_record(kind, item, owner)
                    if record is None:
                        continue
                    self._insert(record)
                    loaded += 1

        logger.info("Loaded %d records from %s", loaded, self.path)

    def _save(self) -> None:
        owners: dict[str, dict[str, list]] = {}
        for owner in self.owners():
            snapshot = self.snapshot(owner)
            owners[owner] = {
                kind.value: [record_to_dict(r) for r in snapshot.records(kind)]
                for kind in RecordKind
            }
        payload = {"version": FILE_VERSION, "owners": owners}

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as e:
            raise StoreError(f"Could not write data file {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreError(f"Could not write data file {self.path}: {e}") from e

    def _persist(self) -> None:
        self._save()
