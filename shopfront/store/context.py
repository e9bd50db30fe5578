# shopfront/store/context.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..db import SqlBackend, select_backend, utcnow
from ..settings import Settings
from .memory import MemoryStore
from .repositories import Repositories

logger = logging.getLogger(__name__)


class Store:
    """
    Everything the request handlers persist through.

    Built once when the app starts (that is also when the backend is chosen)
    and closed when it stops.
    """

    def __init__(self, settings: Settings, clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self.memory = MemoryStore(clock=clock or utcnow)
        self.backend: Optional[SqlBackend] = select_backend(settings)
        self.repos = Repositories(self.memory, self.backend)

    @property
    def mode(self) -> str:
        return "sql" if self.backend is not None else "memory"

    def close(self) -> None:
        if self.backend is not None:
            self.backend.close()
            self.backend = None
            logger.info("Database connection closed")
