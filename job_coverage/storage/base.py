"""
Shared JSON-file persistence for the record stores.
"""

from pathlib import Path
from typing import Optional
import json
import logging
import os
import re

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def safe_name(key: str) -> str:
    """Turn a user or record id into a safe file name component."""
    name = _UNSAFE.sub("_", str(key).strip())
    if not name or name.strip(".") == "":
        raise ValueError(f"Invalid record key: {key!r}")
    return name


class JsonFileStore:
    """Reads and writes one JSON document per record under a directory."""

    def __init__(self, storage_path: str):
        self.storage_path = Path(storage_path).expanduser()
        self.storage_path.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _read(self, filepath: Path) -> Optional[dict]:
        """Load a record; unreadable or malformed files are logged and skipped."""
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading {filepath}: {e}")
            return None

        if not isinstance(data, dict):
            self.logger.error(f"Error loading {filepath}: expected a JSON object")
            return None

        return data

    def _write(self, filepath: Path, data: dict) -> None:
        """Replace a record as a whole."""
        filepath.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = filepath.with_suffix(".json.tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        os.replace(tmp_path, filepath)
