"""Configuration helpers for the product store.

Installers and tests prime these values through a ``.env`` file or the
process environment instead of passing paths around by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class StoreConfig:
    """Strongly typed configuration for the product store."""

    base_dir: Path
    products_file: Path
    json_indent: int | None
    encoding: str


def _coerce_indent(raw: str | None) -> int | None:
    if raw is None:
        return 2
    value = raw.strip().lower()
    if value in {"", "none", "compact"}:
        return None
    indent = int(value)
    if indent < 0:
        raise ValueError(f"PRODUCTS_JSON_INDENT must be >= 0, got {indent}")
    return indent


def _resolve_path(base_dir: Path, raw: str | None) -> Path:
    value = (raw or "").strip()
    if not value:
        return base_dir / "products.json"
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def load_store_config(base_dir: Path | str, env: Mapping[str, str] | None = None) -> StoreConfig:
    """Load store configuration from the given base directory and env mapping."""

    base_dir = Path(base_dir)
    load_dotenv(base_dir / ".env")
    env_map = dict(os.environ if env is None else env)

    return StoreConfig(
        base_dir=base_dir,
        products_file=_resolve_path(base_dir, env_map.get("PRODUCTS_FILE")),
        json_indent=_coerce_indent(env_map.get("PRODUCTS_JSON_INDENT")),
        encoding=env_map.get("PRODUCTS_FILE_ENCODING", "utf-8").strip() or "utf-8",
    )
