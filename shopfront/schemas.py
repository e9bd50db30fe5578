# shopfront/schemas.py
"""
Request bodies accepted by the API.

Numbers arrive from HTML forms and are coerced here ("40" -> 40.0). Input that
cannot be coerced is rejected with a 422 before any record is touched.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field

Role = Literal["admin", "user"]
Status = Literal["ordered", "shipped", "delivered", "cancelled"]


# -------------------
# Auth / users
# -------------------
class SignupIn(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: Role = "user"


class LoginIn(BaseModel):
    email: str
    password: str


class RoleIn(BaseModel):
    role: Role


# -------------------
# Catalog
# -------------------
class CategoryIn(BaseModel):
    name: str
    description: Optional[str] = None


class ProductIn(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    image_url: Optional[str] = None
    stock: int = Field(0, ge=0)
    category_id: Optional[int] = None


# -------------------
# Commerce
# -------------------
class StatusIn(BaseModel):
    status: Status


class TransactionIn(BaseModel):
    user_id: int
    product_id: int
    quantity: int = Field(1, ge=1)


class OrderItemIn(BaseModel):
    # The storefront cart sends the product id as "id"
    product_id: Optional[int] = Field(None, validation_alias=AliasChoices("product_id", "id"))
    name: Optional[str] = None
    quantity: int = Field(1, ge=1)
    price: Optional[float] = Field(None, ge=0)


class OrderIn(BaseModel):
    user_id: int
    items: List[OrderItemIn] = Field(default_factory=list)
    delivery_info: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None
    total_amount: Optional[float] = Field(None, ge=0)
    status: Status = "ordered"


# -------------------
# Contact
# -------------------
class ContactIn(BaseModel):
    name: str
    email: EmailStr
    subject: str
    message: str
