"""Product catalog persisted to a flat JSON file."""

from .errors import ConflictError, NotFoundError, ProductStoreError, ValidationError
from .models import Product, ProductCreate, ProductUpdate
from .services.product_store import ProductStore

__all__ = [
    "ConflictError",
    "NotFoundError",
    "Product",
    "ProductCreate",
    "ProductStore",
    "ProductStoreError",
    "ProductUpdate",
    "ValidationError",
]
