# shopfront/store/sql.py
from __future__ import annotations

import functools
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..db import SqlBackend
from .result import Result

Record = Dict[str, Any]


def guarded(fn: Callable[..., Any]) -> Callable[..., Result]:
    """
    Run a query method and hand back a Result instead of raising.

    Constraint violations still raise: the store answered, and replaying the
    write in memory would sidestep the constraint.
    """

    @functools.wraps(fn)
    def wrapper(self: "SqlTable", *args: Any, **kwargs: Any) -> Result:
        try:
            return Result.success(fn(self, *args, **kwargs))
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            return Result.failure(e)

    return wrapper


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


class SqlTable:
    """
    One entity table on the external store.

    Method names and arguments mirror MemoryTable so a repository can send the
    same call to either side. Every public method returns a Result.
    """

    model: Any = None

    def __init__(self, backend: SqlBackend):
        self.backend = backend
        self.name = self.model.__tablename__
        self.columns = [c.name for c in self.model.__table__.columns]

    def _out(self, s: Session, obj: Any) -> Record:
        return {c: _plain(getattr(obj, c)) for c in self.columns}

    def _order_by(self) -> tuple:
        return (self.model.id,)

    def _load(self, s: Session, record_id: int) -> Optional[Record]:
        obj = s.get(self.model, record_id)
        return self._out(s, obj) if obj is not None else None

    @guarded
    def list(self, **match: Any) -> List[Record]:
        with self.backend.session() as s:
            q = select(self.model).filter_by(**match).order_by(*self._order_by())
            return [self._out(s, obj) for obj in s.scalars(q)]

    @guarded
    def get(self, record_id: int) -> Optional[Record]:
        with self.backend.session() as s:
            return self._load(s, record_id)

    @guarded
    def find_by(self, field: str, value: Any) -> Optional[Record]:
        with self.backend.session() as s:
            q = select(self.model).filter_by(**{field: value}).order_by(self.model.id).limit(1)
            obj = s.scalars(q).first()
            return self._out(s, obj) if obj is not None else None

    def _insert(self, s: Session, fields: Record) -> int:
        obj = self.model(**fields)
        s.add(obj)
        s.flush()
        return obj.id

    @guarded
    def create(self, fields: Record) -> Record:
        # insert and re-read share one transaction; a fault in either rolls
        # both back, so a failed create leaves nothing behind
        with self.backend.session() as s:
            new_id = self._insert(s, dict(fields))
            return self._load(s, new_id)

    @guarded
    def update(self, record_id: int, fields: Record) -> Optional[Record]:
        with self.backend.session() as s:
            obj = s.get(self.model, record_id)
            if obj is None:
                return None
            for k, v in fields.items():
                setattr(obj, k, v)
            s.flush()
            return self._out(s, obj)

    @guarded
    def delete(self, record_id: int) -> bool:
        with self.backend.session() as s:
            obj = s.get(self.model, record_id)
            if obj is None:
                return False
            s.delete(obj)
            return True


class SqlUsers(SqlTable):
    model = models.User


class SqlCategories(SqlTable):
    model = models.Category


class SqlProducts(SqlTable):
    model = models.Product


class SqlContactMessages(SqlTable):
    model = models.ContactMessage


class SqlTransactions(SqlTable):
    model = models.Transaction

    def _order_by(self) -> tuple:
        return (self.model.transaction_date.desc(), self.model.id.desc())


class SqlOrders(SqlTable):
    """Orders plus their order_items child rows, read and written together."""

    model = models.Order
    item_columns = ("product_id", "product_name", "quantity", "price")

    def _order_by(self) -> tuple:
        return (self.model.created_at.desc(), self.model.id.desc())

    def _out(self, s: Session, obj: Any) -> Record:
        out = super()._out(s, obj)
        q = (
            select(models.OrderItem)
            .where(models.OrderItem.order_id == obj.id)
            .order_by(models.OrderItem.id)
        )
        out["items"] = [
            {c: _plain(getattr(item, c)) for c in self.item_columns} for item in s.scalars(q)
        ]
        return out

    def _insert(self, s: Session, fields: Record) -> int:
        items = fields.pop("items", None) or []
        order_id = super()._insert(s, fields)
        for item in items:
            s.add(models.OrderItem(order_id=order_id, **{c: item.get(c) for c in self.item_columns}))
        s.flush()
        return order_id
