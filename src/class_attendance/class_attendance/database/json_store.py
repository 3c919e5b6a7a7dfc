from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List

from ..core.constants import ATTENDANCE_KEY, CLASSES_KEY, STUDENTS_KEY

logger = logging.getLogger(__name__)

KEYS = (CLASSES_KEY, STUDENTS_KEY, ATTENDANCE_KEY)

Document = Dict[str, List[Dict[str, Any]]]


class JsonFileStore:
    """Local-file backing store: one JSON document with three arrays.

    Mirrors the browser local-storage layout (fixed keys, camelCase records).
    Each operation re-reads the file, so every write is visible to the next read.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._last_id = 0

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Document:
        if not self._path.exists():
            return {key: [] for key in KEYS}

        raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        return {key: list(raw.get(key) or []) for key in KEYS}

    def _dump(self, doc: Document) -> None:
        if not self._path.exists():
            logger.info("Creating local attendance store at %s", self._path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self._path.parent), prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read(self) -> Document:
        with self._lock:
            return self._load()

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """Read-modify-write cycle; the document is saved only if the block succeeds."""
        with self._lock:
            doc = self._load()
            yield doc
            self._dump(doc)

    def new_id(self, taken: Iterable[str] = ()) -> str:
        """Millisecond timestamp id, bumped past collisions within one millisecond."""
        taken_ids = set(taken)
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        while str(candidate) in taken_ids:
            candidate += 1
        self._last_id = candidate
        return str(candidate)
