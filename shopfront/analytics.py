# shopfront/analytics.py
from __future__ import annotations

from typing import Any, Dict

# Fixed demo figures for the admin charts. Only the catalogue/customer
# totals are real counts.


def mock_analytics(total_products: int, total_customers: int) -> Dict[str, Any]:
    return {
        "monthlyRevenue": [
            {"month": "Jan", "revenue": 4500, "orders": 45},
            {"month": "Feb", "revenue": 5200, "orders": 52},
            {"month": "Mar", "revenue": 4800, "orders": 48},
            {"month": "Apr", "revenue": 6100, "orders": 61},
            {"month": "May", "revenue": 7300, "orders": 73},
            {"month": "Jun", "revenue": 8200, "orders": 82},
        ],
        "topProducts": [
            {"name": "Classic White Shirt", "sales": 156, "revenue": 4680},
            {"name": "Blue Denim Jeans", "sales": 134, "revenue": 6698},
            {"name": "Black Leather Shoes", "sales": 98, "revenue": 8820},
            {"name": "Summer Dress", "sales": 87, "revenue": 3480},
            {"name": "Casual Sneakers", "sales": 76, "revenue": 4560},
        ],
        "ordersByStatus": [
            {"status": "Delivered", "count": 245, "color": "#10B981"},
            {"status": "Shipped", "count": 67, "color": "#3B82F6"},
            {"status": "Ordered", "count": 34, "color": "#F59E0B"},
            {"status": "Cancelled", "count": 12, "color": "#EF4444"},
        ],
        "totalStats": {
            "totalRevenue": 36100,
            "totalOrders": 358,
            "totalProducts": total_products,
            "totalCustomers": total_customers,
        },
    }
