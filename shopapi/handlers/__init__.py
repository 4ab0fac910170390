# shopapi/handlers/__init__.py
"""Route handlers, one router per resource"""
from .category_handlers import router as category_router
from .country_handlers import router as country_router
from .order_handlers import router as order_router
from .payment_method_handlers import router as payment_method_router
from .product_handlers import router as product_router

__all__ = [
    'category_router',
    'country_router',
    'order_router',
    'payment_method_router',
    'product_router',
]
