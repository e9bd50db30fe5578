# shopfront/models.py
from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Integer, Numeric, String, Text

from .db import Base, utcnow

# Reference columns (user_id, product_id, ...) carry no FK constraint; rows
# outlive what they point at. Ids are never reused (AUTOINCREMENT on SQLite).


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(100), nullable=False)
    role = Column(String(10), nullable=False, default="user")  # admin | user
    created_at = Column(DateTime, default=utcnow)


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    image_url = Column(String(500))
    stock = Column(Integer, default=0)
    category_id = Column(Integer, index=True)


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, index=True)
    product_id = Column(Integer)
    quantity = Column(Integer, nullable=False)
    status = Column(String(20), default="ordered")  # ordered | shipped | delivered | cancelled
    transaction_date = Column(DateTime, default=utcnow)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, index=True)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status = Column(String(20), default="ordered")
    delivery_info = Column(JSON)
    payment_method = Column(String(50))
    created_at = Column(DateTime, default=utcnow)


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, index=True, nullable=False)
    product_id = Column(Integer)
    # snapshot of the product at checkout time
    product_name = Column(String(200))
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)


class ContactMessage(Base):
    __tablename__ = "contact_messages"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)
