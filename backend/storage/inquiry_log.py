"""
JSON-array inquiry log.

Stores every accepted inquiry in a single JSON file holding an array of
records. Appends are read-modify-write, serialised per process through an
asyncio lock and swapped into place atomically.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from core.errors import PersistenceError

logger = logging.getLogger(__name__)


class InquiryLog:
    """
    File-backed inquiry store.

    The file is created on the first append, along with its directory.
    A missing file or one that does not hold a JSON array reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read_records(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning(f"Inquiry log {self.path} unreadable, starting fresh: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Inquiry log {self.path} is not a JSON array, starting fresh")
            return []
        return data

    def _write_records(self, records: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def _append_sync(self, record: Dict[str, Any]) -> None:
        records = self._read_records()
        records.append(record)
        self._write_records(records)

    async def append(self, record: Dict[str, Any]) -> None:
        """
        Append a record to the log.

        Raises:
            PersistenceError: If the directory or file cannot be written
        """
        async with self._lock:
            try:
                await asyncio.to_thread(self._append_sync, dict(record))
            except OSError as e:
                raise PersistenceError(
                    f"Failed to write inquiry log: {e}",
                    context={"path": str(self.path)},
                ) from e

    async def read_all(self) -> List[Dict[str, Any]]:
        async with self._lock:
            return await asyncio.to_thread(self._read_records)

    async def count(self) -> int:
        return len(await self.read_all())
