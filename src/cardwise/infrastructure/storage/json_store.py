"""
JSON File Store - a small key-value store backed by one JSON file per key.

Writes are atomic (temp file + rename). Stores opened on the same
directory share a re-entrant lock so read-modify-write sequences can be
serialized with ``with store.lock:``.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from cardwise.domain.errors import StoreCorruptedError

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault(path, threading.RLock())


class JsonFileStore:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir).expanduser().resolve()
        self.lock = _lock_for(self.data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str, default: Any = None, strict: bool = False) -> Any:
        """
        Load the value stored under ``key``.

        Missing files yield ``default``. Unreadable files are logged and yield
        ``default``, or raise StoreCorruptedError when ``strict`` is set so a
        read-modify-write never overwrites data it could not read.
        """
        path = self.path_for(key)
        if not path.exists():
            return default

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading '{key}' from {path}: {e}")
            if strict:
                raise StoreCorruptedError(key, path) from e
            return default

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote '{key}' to {path}")
