"""
Storage backends and the process-wide storage accessor.

``STORAGE_BACKEND`` selects ``memory`` (default) or ``database``. The chosen
backend is created lazily on first use and shared by every request.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Optional

from crisis_alert.utils.feature_flags import seed_mock_data_enabled

from .base import Storage
from .memory import MemStorage

logger = logging.getLogger(__name__)

BACKEND_MEMORY = "memory"
BACKEND_DATABASE = "database"

_storage: Optional[Storage] = None
_storage_lock = threading.Lock()


def _build_storage() -> Storage:
    backend = os.getenv("STORAGE_BACKEND", BACKEND_MEMORY).strip().lower()
    seed = seed_mock_data_enabled()
    if backend == BACKEND_MEMORY:
        logger.info("storage_backend: memory seed=%s", seed)
        return MemStorage(seed=seed)
    if backend == BACKEND_DATABASE:
        from .database import DatabaseStorage  # engine is created on import

        logger.info("storage_backend: database seed=%s", seed)
        return DatabaseStorage(seed=seed)
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'. Expected one of: memory, database")


def get_storage() -> Storage:
    global _storage
    if _storage is None:
        with _storage_lock:
            if _storage is None:
                _storage = _build_storage()
    return _storage


def set_storage(storage: Optional[Storage]) -> None:
    """Install ``storage`` as the shared backend (``None`` forces a rebuild)."""
    global _storage
    with _storage_lock:
        _storage = storage


def reset_storage() -> None:
    set_storage(None)


__all__ = [
    "Storage",
    "MemStorage",
    "get_storage",
    "set_storage",
    "reset_storage",
    "BACKEND_MEMORY",
    "BACKEND_DATABASE",
]
