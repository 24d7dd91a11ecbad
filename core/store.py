"""
Persisted state boundary.

A Store loads a whole collection on start and saves it after every
mutation. JsonFileStore keeps one JSON document per collection under the
data directory; MemoryStore keeps it in process.
"""
import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from core.exceptions import StoreError
from core.logger import get_logger

logger = get_logger("store")


class Store(ABC):
    """Serialize/deserialize boundary for one state document."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Return the saved state, or None when nothing was saved yet."""

    @abstractmethod
    def save(self, state: Dict[str, Any]) -> None:
        """Persist the full state."""


class JsonFileStore(Store):
    """UTF-8 JSON document on disk, replaced atomically on save."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted state file {self.path}: {e}")
            raise StoreError(f"Cannot parse {self.path.name}: {e}", str(self.path)) from e
        except OSError as e:
            logger.error(f"Cannot read state file {self.path}: {e}")
            raise StoreError(f"Cannot read {self.path.name}: {e}", str(self.path)) from e

        if not isinstance(data, dict):
            raise StoreError(f"{self.path.name} must hold a JSON object", str(self.path))
        return data

    def save(self, state: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.stem}_", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise StoreError(f"Cannot write {self.path.name}: {e}", str(self.path)) from e


class MemoryStore(Store):
    """In-process store; copies on the way in and out like a real round-trip."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._state = copy.deepcopy(initial) if initial is not None else None
        self.save_count = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._state)

    def save(self, state: Dict[str, Any]) -> None:
        self._state = copy.deepcopy(state)
        self.save_count += 1
