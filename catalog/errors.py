"""Errors raised by the product store.

Persistence failures (unreadable or undecodable files) surface as
``storelib.StoreError`` and ``storelib.StorageReadError``; the classes below
cover the business rules.
"""

from __future__ import annotations

from typing import Any


class ProductStoreError(Exception):
    """Base class for product rule violations."""


class ValidationError(ProductStoreError):
    """The payload does not have the shape of a product."""

    def __init__(self, errors: list[dict[str, Any]] | None = None):
        self.errors = list(errors or [])
        fields = sorted({".".join(str(p) for p in e.get("loc", ())) for e in self.errors} - {""})
        detail = f": {', '.join(fields)}" if fields else ""
        super().__init__(f"invalid fields{detail}")


class ConflictError(ProductStoreError):
    """Another product already uses the requested code."""

    def __init__(self, code: str):
        super().__init__(f"code already exists: {code!r}")
        self.code = code


class NotFoundError(ProductStoreError, LookupError):
    """No product carries the requested id."""

    def __init__(self, product_id: int):
        super().__init__(f"product {product_id} not found")
        self.product_id = product_id
