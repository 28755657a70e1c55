"""JSON list persistence shared by the catalog services.

The store treats a single file as the whole collection: every read loads the
full JSON array and every write replaces it. Writes go through a temporary
sibling file and ``os.replace`` so readers never observe a half-written
payload. There is no locking; overlapping read-modify-write cycles follow
"last writer wins".
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence
from uuid import uuid4

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a persistence operation fails."""


class StorageReadError(StoreError):
    """Raised when the backing file does not hold a JSON list of objects."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ListStore:
    """JSON list store with atomic whole-file writes."""

    def __init__(
        self,
        path: Path | str,
        *,
        indent: int | None = 2,
        encoding: str = "utf-8",
    ) -> None:
        self.path = Path(path)
        self.indent = indent
        self.encoding = encoding

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def exists(self) -> bool:
        return self.path.exists()

    def _decode(self, raw: str) -> List[Dict[str, Any]]:
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageReadError(self.path, f"invalid JSON ({exc.msg})") from exc
        if not isinstance(data, list):
            raise StorageReadError(self.path, "expected a JSON array")
        if not all(isinstance(item, dict) for item in data):
            raise StorageReadError(self.path, "expected an array of objects")
        return data

    def _encode(self, data: Sequence[Dict[str, Any]]) -> str:
        return json.dumps(list(data), indent=self.indent, ensure_ascii=False)

    def read(self) -> List[Dict[str, Any]]:
        if not self.exists():
            return []
        try:
            raw = self.path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as exc:
            raise StorageReadError(self.path, f"not valid {self.encoding} text") from exc
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        return self._decode(raw)

    def write(self, data: Sequence[Dict[str, Any]]) -> None:
        payload = self._encode(data)
        tmp_path = self.path.with_name(f"{self.path.name}.{uuid4().hex}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding=self.encoding) as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def load(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.read)

    async def save(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        snapshot = [dict(item) for item in items]
        await asyncio.to_thread(self.write, snapshot)
        logger.debug("Wrote %d record(s) to %s", len(snapshot), self.path)
        return snapshot

    async def mutate(
        self,
        mutator: Callable[[List[Dict[str, Any]]], Iterable[Dict[str, Any]] | None],
    ) -> List[Dict[str, Any]]:
        """Load, hand the snapshot to ``mutator`` and persist its result.

        A ``None`` outcome leaves the file untouched. Exceptions raised by the
        mutator propagate before anything is written.
        """
        snapshot = await self.load()
        outcome = mutator(snapshot)
        if outcome is None:
            return snapshot
        return await self.save(outcome)
