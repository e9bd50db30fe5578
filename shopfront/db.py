# shopfront/db.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .settings import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    # Naive UTC, matching what the SQL drivers hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SqlBackend:
    """
    Handle on the external relational store.

    There is exactly one connection behind it (StaticPool), shared by every
    request; a slow query holds everybody else up.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        s = self._sessions()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    def close(self) -> None:
        self.engine.dispose()


def _connect_args(url: str, timeout: int) -> Dict[str, Any]:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"timeout": timeout, "check_same_thread": False}
    if backend in {"mysql", "mariadb"}:
        return {"connect_timeout": timeout}
    if backend == "postgresql":
        return {"connect_timeout": timeout}
    return {}


def select_backend(settings: Settings) -> Optional[SqlBackend]:
    """
    Decide, once per process, whether the external store is usable.

    Returns a ready SqlBackend (schema provisioned, demo rows seeded) or None,
    in which case everything runs on the in-memory collections.
    """
    url = (settings.database_url or "").strip()
    if not url:
        logger.info("No DATABASE_URL configured, using in-memory data")
        return None

    engine: Optional[Engine] = None
    try:
        engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args=_connect_args(url, settings.db_connect_timeout),
        )
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        backend = SqlBackend(engine)
        provision_schema(backend)
        seed_demo_data(backend)
    except Exception as e:
        logger.warning("External database not available, using in-memory data (%s)", e)
        if engine is not None:
            engine.dispose()
        return None

    logger.info("Connected to %s database, tables ready", backend.dialect)
    return backend


def provision_schema(backend: SqlBackend) -> None:
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=backend.engine)


def seed_demo_data(backend: SqlBackend) -> None:
    """Insert the demo rows that are not there yet (keyed by primary key)."""
    from . import models
    from .store import seed

    plan = [
        (models.User, seed.USERS),
        (models.Category, seed.CATEGORIES),
        (models.Product, seed.PRODUCTS),
        (models.Transaction, seed.TRANSACTIONS),
    ]

    with backend.session() as s:
        for model, rows in plan:
            for row in rows:
                if s.get(model, row["id"]) is None:
                    s.add(model(**row))

        for row in seed.ORDERS:
            if s.get(models.Order, row["id"]) is not None:
                continue
            order = dict(row)
            items = order.pop("items")
            s.add(models.Order(**order))
            for item in items:
                s.add(models.OrderItem(order_id=row["id"], **item))
