"""Helpers for managing the product catalog JSON store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog.errors import ConflictError, NotFoundError, ValidationError
from catalog.models import Product, ProductCreate, ProductUpdate
from storelib.config import StoreConfig
from storelib.storage import ListStore, StorageReadError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _is_code_unique(code: str, products: Iterable[Product]) -> bool:
    return not any(product.code == code for product in products)


def _next_id(products: Iterable[Product]) -> int:
    return max((product.id for product in products), default=0) + 1


def _check_id(product_id: Any) -> int:
    # bool is an int subclass and 1.0 == 1; neither names a product.
    if isinstance(product_id, bool) or not isinstance(product_id, int):
        raise TypeError(f"product id must be an int, got {type(product_id).__name__}")
    return product_id


def _find_index(product_id: int, products: List[Product]) -> Optional[int]:
    for index, product in enumerate(products):
        if product.id == product_id:
            return index
    return None


@dataclass(slots=True)
class ProductStore:
    """CRUD operations over a JSON file holding an array of products.

    Every call reads the file afresh; nothing is cached between calls.
    Mutations rewrite the whole file. Concurrent mutations are not
    coordinated, so overlapping calls may lose updates (last writer wins).
    """

    path: str | Path
    indent: int | None = 2
    encoding: str = "utf-8"
    _store: ListStore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._store = ListStore(self.path, indent=self.indent, encoding=self.encoding)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "ProductStore":
        return cls(config.products_file, indent=config.json_indent, encoding=config.encoding)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _validate(model: Type[ModelT], payload: Mapping[str, Any]) -> ModelT:
        if not isinstance(payload, Mapping):
            raise ValidationError(
                [{"loc": (), "msg": "payload must be a mapping", "type": "dict_type"}]
            )
        try:
            return model.model_validate(dict(payload))
        except PydanticValidationError as err:
            raise ValidationError(err.errors()) from err

    def _parse(self, items: List[Dict[str, Any]]) -> List[Product]:
        products: List[Product] = []
        for position, item in enumerate(items):
            try:
                products.append(Product.model_validate(item))
            except PydanticValidationError as err:
                raise StorageReadError(
                    self._store.path, f"record {position} is not a valid product"
                ) from err
        return products

    # ------------------------------------------------------------------
    # Basic CRUD operations
    # ------------------------------------------------------------------
    async def list_all(self) -> List[Product]:
        return self._parse(await self._store.load())

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product with ``product_id`` or ``None`` when absent."""
        _check_id(product_id)
        products = await self.list_all()
        index = _find_index(product_id, products)
        if index is None:
            logger.debug("Product %s not found in %s", product_id, self._store.path)
            return None
        return products[index]

    async def require(self, product_id: int) -> Product:
        product = await self.get_by_id(product_id)
        if product is None:
            raise NotFoundError(product_id)
        return product

    async def add(self, candidate: Mapping[str, Any]) -> Product:
        fields = self._validate(ProductCreate, candidate)

        def mutator(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
            products = self._parse(items)
            if not _is_code_unique(fields.code, products):
                raise ConflictError(fields.code)
            record = {"id": _next_id(products), **fields.model_dump()}
            return [*items, record]

        saved = await self._store.mutate(mutator)
        created = Product.model_validate(saved[-1])
        logger.info("Added product %s (code=%s)", created.id, created.code)
        return created

    async def update(self, product_id: int, partial: Mapping[str, Any]) -> Product:
        """Overwrite the supplied fields of an existing product.

        The id lookup runs before the payload is checked, so a missing
        product always raises ``NotFoundError``. ``id`` in ``partial`` is
        ignored. Raises ``ValidationError`` for malformed fields and
        ``ConflictError`` when the new code belongs to another product.
        """
        _check_id(product_id)
        updated: Optional[Product] = None
        changes: Dict[str, Any] = {}

        def mutator(items: List[Dict[str, Any]]) -> List[Dict[str, Any]] | None:
            nonlocal updated, changes
            products = self._parse(items)
            index = _find_index(product_id, products)
            if index is None:
                raise NotFoundError(product_id)
            changes = self._validate(ProductUpdate, partial).changes()
            current = products[index]
            new_code = changes.get("code")
            if new_code is not None and new_code != current.code:
                if not _is_code_unique(new_code, products):
                    raise ConflictError(new_code)
            updated = Product(**{**current.model_dump(), **changes, "id": current.id})
            if not changes:
                return None
            result = list(items)
            result[index] = updated.to_record()
            return result

        await self._store.mutate(mutator)
        if updated is None:
            raise NotFoundError(product_id)
        if changes:
            logger.info("Updated product %s (%s)", product_id, ", ".join(sorted(changes)))
        else:
            logger.debug("Update of product %s carried no changes", product_id)
        return updated

    async def delete(self, product_id: int) -> bool:
        """Remove a product. Returns ``False`` without writing when absent."""
        _check_id(product_id)
        removed = False

        def mutator(items: List[Dict[str, Any]]) -> List[Dict[str, Any]] | None:
            nonlocal removed
            products = self._parse(items)
            index = _find_index(product_id, products)
            if index is None:
                return None
            removed = True
            return [item for position, item in enumerate(items) if position != index]

        await self._store.mutate(mutator)
        if removed:
            logger.info("Deleted product %s", product_id)
        else:
            logger.debug("Product %s not found; nothing deleted", product_id)
        return removed
