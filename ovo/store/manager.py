"""
Store lifecycle - pick a backend from settings and hand it out once ready.
"""

import logging
from enum import Enum

from ovo.config.settings import Settings
from ovo.store.base import DataStore
from ovo.store.errors import ConfigError, StoreNotReadyError
from ovo.store.jsonfile import JsonFileStore
from ovo.store.memory import InMemoryStore

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def create_store(settings: Settings) -> DataStore:
    """Instantiate the backend named in settings."""
    backend_map = {
        "memory": lambda: InMemoryStore(),
        "json": lambda: JsonFileStore(settings.data_path),
    }

    factory = backend_map.get(settings.backend)
    if factory is None:
        raise ConfigError(f"Unknown backend '{settings.backend}'")
    return factory()


class StoreManager:
    """Owns the configured DataStore.

    Lifecycle: ``init()`` -> ready -> ``reset()`` (optional). Asking for
    the store outside the ready state raises StoreNotReadyError.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.state = StoreState.UNINITIALIZED
        self._store: DataStore | None = None

    def init(self) -> DataStore:
        if self.state == StoreState.READY:
            return self._store
        self._store = create_store(self.settings)
        self.state = StoreState.READY
        logger.info("Data store ready (backend=%s)", self._store.backend_name)
        return self._store

    @property
    def store(self) -> DataStore:
        if self.state != StoreState.READY or self._store is None:
            raise StoreNotReadyError("Data store not initialized; call init() first")
        return self._store

    @property
    def is_ready(self) -> bool:
        return self.state == StoreState.READY

    def reset(self) -> None:
        if self._store is not None:
            self._store.close()
            logger.info("Data store reset (backend=%s)", self._store.backend_name)
        self._store = None
        self.state = StoreState.UNINITIALIZED
