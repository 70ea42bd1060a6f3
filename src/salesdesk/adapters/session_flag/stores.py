"""Key-value stores for the durable session indicator.

Only the login timestamp is ever written here. Identity data is never
persisted outside the in-memory IdentityStore.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()

SESSION_FLAG_KEY = "loginTime"


@runtime_checkable
class SessionFlagStore(Protocol):
    """Protocol for durable flag storage."""

    def set(self, key: str, timestamp: float) -> None:
        """Store a timestamp under key."""
        ...

    def get(self, key: str) -> float | None:
        """Return the stored timestamp, or None."""
        ...

    def remove(self, key: str) -> None:
        """Delete key if present."""
        ...


class MemorySessionFlagStore:
    """Non-durable store, for tests and short-lived processes."""

    def __init__(self) -> None:
        self._values: dict[str, float] = {}

    def set(self, key: str, timestamp: float) -> None:
        self._values[key] = timestamp

    def get(self, key: str) -> float | None:
        return self._values.get(key)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileSessionFlagStore:
    """JSON file store that survives process restarts."""

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file to keep flags in; created on first write.
        """
        self._path = Path(path).expanduser()

    def _read(self) -> dict[str, float]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("session_flag_file_corrupt", path=str(self._path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, float]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self._path)

    def set(self, key: str, timestamp: float) -> None:
        data = self._read()
        data[key] = timestamp
        self._write(data)

    def get(self, key: str) -> float | None:
        value = self._read().get(key)
        return float(value) if isinstance(value, int | float) else None

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
