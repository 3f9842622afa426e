"""
Exceptions raised by the data-access layer.
"""


class OvoError(Exception):
    """Base class for all ovo errors."""


class ConfigError(OvoError):
    """Invalid or incomplete configuration."""


class StoreError(OvoError):
    """Base class for data store failures."""


class StoreNotReadyError(StoreError):
    """The store manager was used before init() or after reset()."""


class RecordNotFoundError(StoreError):
    """No record with the given id exists for the owner."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} record '{record_id}' not found")


class DuplicateRecordError(StoreError):
    """A record with the same id already exists for the owner."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} record '{record_id}' already exists")
