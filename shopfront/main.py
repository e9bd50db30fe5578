# shopfront/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analytics import mock_analytics
from .auth import create_token, decode_token
from .schemas import (
    CategoryIn,
    ContactIn,
    LoginIn,
    OrderIn,
    ProductIn,
    RoleIn,
    SignupIn,
    StatusIn,
    TransactionIn,
)
from .settings import Settings, configure_logging
from .store.context import Store
from .store.enrich import (
    category_detail,
    enrich_order,
    enrich_orders,
    enrich_product,
    enrich_products,
    enrich_transaction,
    enrich_transactions,
)
from .store.errors import AlreadyExists
from .store.repositories import Repositories

logger = logging.getLogger(__name__)


# -------------------
# Helpers
# -------------------
def get_store(request: Request) -> Store:
    return request.app.state.store


def get_repos(store: Store = Depends(get_store)) -> Repositories:
    return store.repos


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k != "password"}


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")


def require_user(
    store: Store = Depends(get_store),
    authorization: str | None = Header(default=None),
) -> Dict[str, Any]:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    token = authorization.split(" ", 1)[1].strip()
    claims = decode_token(token, store.settings)
    if not claims:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = store.repos.users.get(claims["user_id"])
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


api = APIRouter(prefix="/api")


# -------------------
# Auth
# -------------------
@api.post("/signup")
def signup(payload: SignupIn, store: Store = Depends(get_store)):
    try:
        user = store.repos.users.signup(payload.model_dump())
    except AlreadyExists:
        raise HTTPException(status_code=400, detail="Account already exists")
    return {"user": public_user(user), "token": create_token(user, store.settings)}


@api.post("/login")
def login(payload: LoginIn, store: Store = Depends(get_store)):
    user = store.repos.users.authenticate(payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Account not found. Please sign up first.")
    return {"user": public_user(user), "token": create_token(user, store.settings)}


@api.get("/me")
def me(user: Dict[str, Any] = Depends(require_user)):
    return public_user(user)


# -------------------
# Products
# -------------------
@api.get("/products")
def list_products(repos: Repositories = Depends(get_repos)) -> List[dict]:
    return enrich_products(repos, repos.products.list())


@api.get("/products/{product_id}")
def get_product(product_id: str, repos: Repositories = Depends(get_repos)):
    product = repos.products.get(product_id)
    if not product:
        raise _not_found("Product")
    return enrich_product(repos, product)


@api.post("/products")
def create_product(payload: ProductIn, repos: Repositories = Depends(get_repos)):
    return repos.products.create(payload.model_dump())


@api.put("/products/{product_id}")
def update_product(product_id: str, payload: ProductIn, repos: Repositories = Depends(get_repos)):
    product = repos.products.update(product_id, payload.model_dump())
    if not product:
        raise _not_found("Product")
    return product


@api.delete("/products/{product_id}")
def delete_product(product_id: str, repos: Repositories = Depends(get_repos)):
    if not repos.products.delete(product_id):
        raise _not_found("Product")
    return {"message": "Product deleted successfully"}


# -------------------
# Categories
# -------------------
@api.get("/categories")
def list_categories(repos: Repositories = Depends(get_repos)) -> List[dict]:
    return repos.categories.list()


@api.get("/categories/{category_id}")
def get_category(category_id: str, repos: Repositories = Depends(get_repos)):
    detail = category_detail(repos, category_id)
    if detail is None:
        raise _not_found("Category")
    return detail


@api.post("/categories")
def create_category(payload: CategoryIn, repos: Repositories = Depends(get_repos)):
    return repos.categories.create(payload.model_dump())


@api.put("/categories/{category_id}")
def update_category(category_id: str, payload: CategoryIn, repos: Repositories = Depends(get_repos)):
    category = repos.categories.update(category_id, payload.model_dump())
    if not category:
        raise _not_found("Category")
    return category


@api.delete("/categories/{category_id}")
def delete_category(category_id: str, repos: Repositories = Depends(get_repos)):
    if not repos.categories.delete(category_id):
        raise _not_found("Category")
    return {"message": "Category deleted successfully"}


# -------------------
# Users (admin screens; role checks are the client's job)
# -------------------
@api.get("/users")
def list_users(repos: Repositories = Depends(get_repos)) -> List[dict]:
    return [public_user(u) for u in repos.users.list()]


@api.put("/users/{user_id}")
def update_user_role(user_id: str, payload: RoleIn, repos: Repositories = Depends(get_repos)):
    user = repos.users.set_role(user_id, payload.role)
    if not user:
        raise _not_found("User")
    return public_user(user)


# -------------------
# Orders
# -------------------
@api.get("/orders")
def list_orders(user_id: Optional[str] = None, repos: Repositories = Depends(get_repos)) -> List[dict]:
    return enrich_orders(repos, repos.orders.list(user_id=user_id))


@api.get("/orders/{order_id}")
def get_order(order_id: str, repos: Repositories = Depends(get_repos)):
    order = repos.orders.get(order_id)
    if not order:
        raise _not_found("Order")
    return enrich_order(repos, order)


@api.post("/orders")
def create_order(payload: OrderIn, repos: Repositories = Depends(get_repos)):
    order = repos.orders.create(payload.model_dump())
    logger.info("Order #%s placed by user %s", order["id"], order["user_id"])
    return {"id": order["id"], "message": "Order placed successfully"}


@api.put("/orders/{order_id}")
def update_order_status(order_id: str, payload: StatusIn, repos: Repositories = Depends(get_repos)):
    order = repos.orders.set_status(order_id, payload.status)
    if not order:
        raise _not_found("Order")
    return enrich_order(repos, order)


# -------------------
# Transactions (legacy single-product purchases)
# -------------------
@api.get("/transactions")
def list_transactions(
    user_id: Optional[str] = None, repos: Repositories = Depends(get_repos)
) -> List[dict]:
    return enrich_transactions(repos, repos.transactions.list(user_id=user_id))


@api.get("/transactions/{transaction_id}")
def get_transaction(transaction_id: str, repos: Repositories = Depends(get_repos)):
    t = repos.transactions.get(transaction_id)
    if not t:
        raise _not_found("Transaction")
    return enrich_transaction(repos, t)


@api.post("/transactions")
def create_transaction(payload: TransactionIn, repos: Repositories = Depends(get_repos)):
    return enrich_transaction(repos, repos.transactions.create(payload.model_dump()))


@api.put("/transactions/{transaction_id}")
def update_transaction_status(
    transaction_id: str, payload: StatusIn, repos: Repositories = Depends(get_repos)
):
    t = repos.transactions.set_status(transaction_id, payload.status)
    if not t:
        raise _not_found("Transaction")
    return enrich_transaction(repos, t)


# -------------------
# Contact / analytics
# -------------------
@api.post("/contact")
def contact(payload: ContactIn, repos: Repositories = Depends(get_repos)):
    repos.contact_messages.create(payload.model_dump())
    return {"message": "Message sent successfully"}


@api.get("/analytics")
def analytics(
    range_: str = Query("6months", alias="range"), repos: Repositories = Depends(get_repos)
):
    # range is accepted for the admin UI but the figures are fixed
    return mock_analytics(
        total_products=len(repos.products.list()),
        total_customers=len(repos.users.list()),
    )


# -------------------
# App factory
# -------------------
async def _server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(
    settings: Settings | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = Store(settings, clock=clock)
        app.state.store = store
        logger.info("Serving %s data", store.mode)
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Shopfront API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, _server_error)

    @app.get("/")
    def root(store: Store = Depends(get_store)):
        return {"ok": True, "service": "shopfront-api", "backend": store.mode}

    app.include_router(api)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Settings().port)
