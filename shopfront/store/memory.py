# shopfront/store/memory.py
from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..db import utcnow
from . import seed

Record = Dict[str, Any]


class MemoryTable:
    """
    Process-local collection of dict records.

    Ids come from a counter that only moves forward, so an id is never handed
    out twice even after the record holding it is deleted. Callers always get
    copies; stored records change only through update().
    """

    def __init__(
        self,
        name: str,
        rows: Iterable[Record],
        clock: Callable[[], datetime],
        stamp_field: Optional[str] = None,
    ):
        self.name = name
        self._rows: List[Record] = copy.deepcopy(list(rows))
        self._next_id = max((r["id"] for r in self._rows), default=0) + 1
        self._clock = clock
        self._stamp_field = stamp_field

    def __len__(self) -> int:
        return len(self._rows)

    def _find(self, record_id: int) -> Optional[Record]:
        for row in self._rows:
            if row["id"] == record_id:
                return row
        return None

    def list(self, **match: Any) -> List[Record]:
        rows = [r for r in self._rows if all(r.get(k) == v for k, v in match.items())]
        return copy.deepcopy(rows)

    def get(self, record_id: int) -> Optional[Record]:
        row = self._find(record_id)
        return copy.deepcopy(row) if row is not None else None

    def find_by(self, field: str, value: Any) -> Optional[Record]:
        for row in self._rows:
            if row.get(field) == value:
                return copy.deepcopy(row)
        return None

    def create(self, fields: Record) -> Record:
        row: Record = {"id": self._next_id}
        row.update(copy.deepcopy(fields))
        if self._stamp_field:
            row[self._stamp_field] = self._clock()
        self._next_id += 1
        self._rows.append(row)
        return copy.deepcopy(row)

    def update(self, record_id: int, fields: Record) -> Optional[Record]:
        row = self._find(record_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        return copy.deepcopy(row)

    def delete(self, record_id: int) -> bool:
        for i, row in enumerate(self._rows):
            if row["id"] == record_id:
                del self._rows[i]
                return True
        return False


class MemoryStore:
    """All in-memory collections, seeded with the demo data set."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self.users = MemoryTable("users", seed.USERS, clock, stamp_field="created_at")
        self.categories = MemoryTable("categories", seed.CATEGORIES, clock)
        self.products = MemoryTable("products", seed.PRODUCTS, clock)
        self.transactions = MemoryTable(
            "transactions", seed.TRANSACTIONS, clock, stamp_field="transaction_date"
        )
        self.orders = MemoryTable("orders", seed.ORDERS, clock, stamp_field="created_at")
        self.contact_messages = MemoryTable(
            "contact_messages", seed.CONTACT_MESSAGES, clock, stamp_field="created_at"
        )
