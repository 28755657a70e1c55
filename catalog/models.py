"""Pydantic models describing product records and their payloads."""

from __future__ import annotations

import math
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

NonEmptyText = Annotated[StrictStr, Field(min_length=1)]
Number = Union[StrictInt, StrictFloat]

NUMERIC_FIELDS = ("price", "stock")


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; a JSON true/false is not a quantity.
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


def _require_finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class ProductCreate(BaseModel):
    """Fields a caller supplies when adding a product."""

    model_config = ConfigDict(extra="ignore")

    title: NonEmptyText
    description: NonEmptyText
    price: Number
    thumbnail: NonEmptyText
    code: NonEmptyText
    stock: Number

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def numbers_are_not_bools(cls, value):
        return _reject_bool(value)

    @field_validator(*NUMERIC_FIELDS)
    @classmethod
    def numbers_are_finite(cls, value):
        return _require_finite(value)


class Product(ProductCreate):
    """A persisted product, identified by a store-assigned ``id``."""

    id: Annotated[StrictInt, Field(ge=1)]

    def to_record(self) -> dict:
        """Return the on-disk representation with ``id`` leading."""
        return {"id": self.id, **self.model_dump(exclude={"id"})}


class ProductUpdate(BaseModel):
    """Partial payload for updates; ``None`` means "leave unchanged"."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[NonEmptyText] = None
    description: Optional[NonEmptyText] = None
    price: Optional[Number] = None
    thumbnail: Optional[NonEmptyText] = None
    code: Optional[NonEmptyText] = None
    stock: Optional[Number] = None

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def numbers_are_not_bools(cls, value):
        return _reject_bool(value)

    @field_validator(*NUMERIC_FIELDS)
    @classmethod
    def numbers_are_finite(cls, value):
        return _require_finite(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
