"""Local-directory persistence: one JSON file per key."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

_SUFFIX = ".json"


class FilePersistenceBackend:
    """Stores each value as ``<base>/<key>.json``.

    Path separators in keys are flattened so a key can never escape the
    base directory. Writes go through a temp file and ``os.replace`` so a
    crashed write never leaves a truncated report behind.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _safe_key(key: str) -> str:
        return key.replace("/", "_").replace("\\", "_").replace("..", "_")

    def _key_path(self, key: str) -> Path:
        return self._base / f"{self._safe_key(key)}{_SUFFIX}"

    def save(self, key: str, data: str) -> None:
        path = self._key_path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._base, prefix=".tmp-", suffix=_SUFFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Saved %s to %s", key, path)

    def load(self, key: str) -> str:
        path = self._key_path(key)
        if not path.is_file():
            raise KeyError(f"Not found: {key} (path: {path})")
        return path.read_text(encoding="utf-8")

    def exists(self, key: str) -> bool:
        return self._key_path(key).is_file()

    def delete(self, key: str) -> None:
        self._key_path(key).unlink(missing_ok=True)

    def list_keys(self, prefix: str = "") -> list[str]:
        safe_prefix = self._safe_key(prefix)
        keys = [
            path.name[: -len(_SUFFIX)]
            for path in self._base.glob(f"*{_SUFFIX}")
            if not path.name.startswith(".tmp-")
        ]
        return sorted(k for k in keys if k.startswith(safe_prefix))
