# shopfront/store/seed.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

# Demo data set. The in-memory collections start from a copy of it and the
# SQL backend receives the same rows, so both modes look alike on first boot.

SEEDED_AT = datetime(2024, 1, 1)

USERS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Admin User",
        "email": "admin@admin.com",
        "password": "admin123",
        "role": "admin",
        "created_at": SEEDED_AT,
    },
    {
        "id": 2,
        "name": "John Doe",
        "email": "user@user.com",
        "password": "user123",
        "role": "user",
        "created_at": SEEDED_AT,
    },
]

CATEGORIES: List[Dict[str, Any]] = [
    {"id": 1, "name": "Shirts", "description": "Stylish shirts for all occasions"},
    {"id": 2, "name": "Pants", "description": "Comfortable and trendy pants"},
    {"id": 3, "name": "Shoes", "description": "Quality footwear for every style"},
]

PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Classic White Shirt",
        "description": "Elegant white cotton shirt perfect for office and casual wear",
        "price": 29.99,
        "image_url": "https://images.pexels.com/photos/996329/pexels-photo-996329.jpeg",
        "stock": 50,
        "category_id": 1,
    },
    {
        "id": 2,
        "name": "Blue Denim Jeans",
        "description": "Comfortable blue denim jeans with modern fit",
        "price": 49.99,
        "image_url": "https://images.pexels.com/photos/1598505/pexels-photo-1598505.jpeg",
        "stock": 35,
        "category_id": 2,
    },
    {
        "id": 3,
        "name": "Black Leather Shoes",
        "description": "Premium black leather dress shoes for formal occasions",
        "price": 89.99,
        "image_url": "https://images.pexels.com/photos/267301/pexels-photo-267301.jpeg",
        "stock": 25,
        "category_id": 3,
    },
]

TRANSACTIONS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "user_id": 2,
        "product_id": 1,
        "quantity": 2,
        "status": "delivered",
        "transaction_date": datetime(2024, 1, 15),
    },
    {
        "id": 2,
        "user_id": 2,
        "product_id": 3,
        "quantity": 1,
        "status": "shipped",
        "transaction_date": datetime(2024, 1, 20),
    },
]

ORDERS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "user_id": 2,
        "total_amount": 139.97,
        "status": "delivered",
        "delivery_info": None,
        "payment_method": None,
        "created_at": datetime(2024, 1, 15),
        "items": [
            {"product_id": 1, "product_name": "Classic White Shirt", "quantity": 2, "price": 29.99},
            {"product_id": 3, "product_name": "Black Leather Shoes", "quantity": 1, "price": 89.99},
        ],
    },
]

CONTACT_MESSAGES: List[Dict[str, Any]] = []
