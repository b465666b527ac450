"""JSON documents on local disk, one file per record kind."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from backend.core.errors import StoreError
from backend.infrastructure.store import CLAIMS, USERS, RecordClaimStore

logger = logging.getLogger(__name__)

FILENAMES = {
    USERS: "users.json",
    CLAIMS: "claims.json",
}


class JsonFileClaimStore(RecordClaimStore):
    """Keeps users and claims as JSON arrays under ``data_dir``."""

    def __init__(self, data_dir: Path | str) -> None:
        self._root = Path(data_dir).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, kind: str) -> Path:
        return self._root / FILENAMES[kind]

    def _read_rows(self, kind: str) -> list[dict]:
        path = self._path(kind)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            raise StoreError(f"Cannot read {path.name}") from exc
        if not isinstance(data, list):
            raise StoreError(f"{path.name} does not hold a list of records")
        return data

    def _write_rows(self, kind: str, rows: list[dict]) -> None:
        path = self._path(kind)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fp:
                json.dump(rows, fp, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.warning("Failed to write %s: %s", path, exc)
            raise StoreError(f"Cannot write {path.name}") from exc
