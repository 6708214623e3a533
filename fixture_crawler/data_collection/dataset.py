"""Dataset sink: keeps emitted records in memory and writes them as JSON lines.

The file is truncated when the dataset is created, so it holds one run only,
unless ``append=True`` is passed.
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Optional

import aiofiles

from ..common.logging_utils import get_logger


class Dataset:
    def __init__(self, path: Optional[str | Path] = None, append: bool = False):
        self.path = Path(path) if path else None
        self.items: list[dict[str, Any]] = []
        self.logger = get_logger(__name__)
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not append and self.path.exists():
                self.logger.info("Clearing previous dataset %s", self.path)
                self.path.write_text("", encoding="utf-8")

    async def push_data(self, record: dict[str, Any]) -> None:
        """Store one record. Records are kept in emission order."""
        self.items.append(record)
        if self.path is None:
            return
        async with aiofiles.open(self.path, "a", encoding="utf-8") as f:
            await f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def counts_by_type(self) -> dict[str, int]:
        return dict(Counter(str(r.get("type")) for r in self.items))

    def __len__(self) -> int:
        return len(self.items)


__all__ = ["Dataset"]
