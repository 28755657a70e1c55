"""Shared persistence helpers for the product store."""

from .config import StoreConfig, load_store_config
from .storage import ListStore, StorageReadError, StoreError  # noqa: F401

__all__ = [
    "ListStore",
    "StoreError",
    "StorageReadError",
    "StoreConfig",
    "load_store_config",
]
