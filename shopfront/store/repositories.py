# shopfront/store/repositories.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from .errors import AlreadyExists
from .memory import MemoryStore, MemoryTable
from .sql import (
    SqlCategories,
    SqlContactMessages,
    SqlOrders,
    SqlProducts,
    SqlTable,
    SqlTransactions,
    SqlUsers,
)
from ..auth import verify_password
from ..db import SqlBackend

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

UNKNOWN = "Unknown"


def parse_id(raw: Any) -> Optional[int]:
    """Loose id parsing: anything that is not a whole number means "no such record"."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def _newest_first(rows: List[Record], field: str) -> List[Record]:
    return sorted(rows, key=lambda r: (r.get(field) is not None, r.get(field) or 0, r["id"]), reverse=True)


class Repository:
    """
    Same operations whichever backend is live.

    With an SQL table attached every call goes there first; when that call
    fails it is replayed on the in-memory table. Nothing is remembered between
    calls, so the next call tries SQL again.
    """

    def __init__(self, memory: MemoryTable, sql: Optional[SqlTable] = None):
        self.memory = memory
        self.sql = sql

    def _call(self, op: str, *args: Any, **kwargs: Any) -> Any:
        if self.sql is not None:
            result = getattr(self.sql, op)(*args, **kwargs)
            if result.ok:
                return result.value
            logger.warning(
                "Query %s.%s failed, using in-memory data: %s", self.memory.name, op, result.error
            )
        return getattr(self.memory, op)(*args, **kwargs)

    def list(self) -> List[Record]:
        return self._call("list")

    def get(self, raw_id: Any) -> Optional[Record]:
        """
        Memory is consulted only when the SQL call fails. A clean SQL miss is
        "not found"; searching memory as well would bring back seed rows that
        were already deleted in SQL.
        """
        record_id = parse_id(raw_id)
        if record_id is None:
            return None
        return self._call("get", record_id)

    def create(self, fields: Record) -> Record:
        return self._call("create", dict(fields))

    def update(self, raw_id: Any, fields: Record) -> Optional[Record]:
        record_id = parse_id(raw_id)
        if record_id is None:
            return None
        return self._call("update", record_id, dict(fields))

    def delete(self, raw_id: Any) -> bool:
        record_id = parse_id(raw_id)
        if record_id is None:
            return False
        return self._call("delete", record_id)


class CategoryRepository(Repository):
    pass


class ProductRepository(Repository):
    pass


class ContactMessageRepository(Repository):
    pass


class UserRepository(Repository):
    def _lookup_email_everywhere(self, email: str) -> List[Record]:
        # Demo accounts may exist only in memory, so memory is checked even
        # when the SQL side answered.
        found: List[Record] = []
        if self.sql is not None:
            result = self.sql.find_by("email", email)
            if result.ok and result.value is not None:
                found.append(result.value)
        mem = self.memory.find_by("email", email)
        if mem is not None:
            found.append(mem)
        return found

    def email_taken(self, email: str) -> bool:
        return bool(self._lookup_email_everywhere(email))

    def signup(self, fields: Record) -> Record:
        email = fields["email"]
        if self.email_taken(email):
            raise AlreadyExists("email", email)
        fields = dict(fields)
        fields["role"] = fields.get("role") or "user"
        try:
            return self.create(fields)
        except IntegrityError:
            # unique email index, e.g. a case-insensitive collation match
            raise AlreadyExists("email", email)

    def authenticate(self, email: str, password: str) -> Optional[Record]:
        for user in self._lookup_email_everywhere(email):
            if verify_password(password, user.get("password") or ""):
                return user
        return None

    def set_role(self, raw_id: Any, role: str) -> Optional[Record]:
        return self.update(raw_id, {"role": role})


class TransactionRepository(Repository):
    def list(self, user_id: Any = None) -> List[Record]:
        if user_id is None:
            rows = self._call("list")
        else:
            uid = parse_id(user_id)
            if uid is None:
                return []
            rows = self._call("list", user_id=uid)
        return _newest_first(rows, "transaction_date")

    def create(self, fields: Record) -> Record:
        fields = dict(fields)
        fields["status"] = "ordered"
        return super().create(fields)

    def set_status(self, raw_id: Any, status: str) -> Optional[Record]:
        return self.update(raw_id, {"status": status})


class OrderRepository(Repository):
    """
    Orders own their line items. Item name and price are copied when the
    order is placed and are never looked up again.
    """

    def __init__(self, memory: MemoryTable, products: ProductRepository, sql: Optional[SqlTable] = None):
        super().__init__(memory, sql)
        self.products = products

    def list(self, user_id: Any = None) -> List[Record]:
        if user_id is None:
            rows = self._call("list")
        else:
            uid = parse_id(user_id)
            if uid is None:
                return []
            rows = self._call("list", user_id=uid)
        return _newest_first(rows, "created_at")

    def _snapshot_item(self, item: Record) -> Record:
        product_id = item.get("product_id")
        name = item.get("name")
        price = item.get("price")
        if name is None or price is None:
            product = self.products.get(product_id) if product_id is not None else None
            if name is None:
                name = (product or {}).get("name") or UNKNOWN
            if price is None:
                price = (product or {}).get("price") or 0
        return {
            "product_id": product_id,
            "product_name": name,
            "quantity": int(item["quantity"]),
            "price": float(price),
        }

    def create(self, fields: Record) -> Record:
        fields = dict(fields)
        items = [self._snapshot_item(i) for i in fields.pop("items", None) or []]
        if fields.get("total_amount") is None:
            fields["total_amount"] = round(sum(i["price"] * i["quantity"] for i in items), 2)
        fields["status"] = fields.get("status") or "ordered"
        fields["items"] = items
        return super().create(fields)

    def set_status(self, raw_id: Any, status: str) -> Optional[Record]:
        return self.update(raw_id, {"status": status})


class Repositories:
    """One repository per resource, wired to memory and (optionally) SQL."""

    def __init__(self, memory: MemoryStore, backend: Optional[SqlBackend] = None):
        def sql(table_cls: type) -> Optional[SqlTable]:
            return table_cls(backend) if backend is not None else None

        self.users = UserRepository(memory.users, sql(SqlUsers))
        self.categories = CategoryRepository(memory.categories, sql(SqlCategories))
        self.products = ProductRepository(memory.products, sql(SqlProducts))
        self.transactions = TransactionRepository(memory.transactions, sql(SqlTransactions))
        self.orders = OrderRepository(memory.orders, self.products, sql(SqlOrders))
        self.contact_messages = ContactMessageRepository(
            memory.contact_messages, sql(SqlContactMessages)
        )
