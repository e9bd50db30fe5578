# shopfront/store/enrich.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .repositories import UNKNOWN, Repositories

Record = Dict[str, Any]

# Live joins. Everything attached here is recomputed on every read and never
# written back. Order line items are deliberately not touched: they are
# snapshots owned by the order.


def _by_id(rows: List[Record]) -> Dict[Any, Record]:
    return {r["id"]: r for r in rows}


def _name(row: Optional[Record]) -> str:
    return (row or {}).get("name") or UNKNOWN


def transaction_view(t: Record, users: Dict[Any, Record], products: Dict[Any, Record]) -> Record:
    product = products.get(t.get("product_id"))
    out = dict(t)
    out["user_name"] = _name(users.get(t.get("user_id")))
    out["product_name"] = _name(product)
    out["price"] = (product or {}).get("price") or 0
    return out


def enrich_transactions(repos: Repositories, transactions: List[Record]) -> List[Record]:
    users = _by_id(repos.users.list())
    products = _by_id(repos.products.list())
    return [transaction_view(t, users, products) for t in transactions]


def enrich_transaction(repos: Repositories, t: Record) -> Record:
    return enrich_transactions(repos, [t])[0]


def enrich_orders(repos: Repositories, orders: List[Record]) -> List[Record]:
    users = _by_id(repos.users.list())
    out: List[Record] = []
    for o in orders:
        view = dict(o)
        view["user_name"] = _name(users.get(o.get("user_id")))
        out.append(view)
    return out


def enrich_order(repos: Repositories, order: Record) -> Record:
    return enrich_orders(repos, [order])[0]


def enrich_products(repos: Repositories, products: List[Record]) -> List[Record]:
    categories = _by_id(repos.categories.list())
    out: List[Record] = []
    for p in products:
        view = dict(p)
        view["category_name"] = _name(categories.get(p.get("category_id")))
        out.append(view)
    return out


def enrich_product(repos: Repositories, product: Record) -> Record:
    return enrich_products(repos, [product])[0]


def category_detail(repos: Repositories, raw_id: Any) -> Optional[Record]:
    """A category together with the products filed under it, or None."""
    category = repos.categories.get(raw_id)
    if category is None:
        return None
    products = [p for p in repos.products.list() if p.get("category_id") == category["id"]]
    return {"category": category, "products": products}
