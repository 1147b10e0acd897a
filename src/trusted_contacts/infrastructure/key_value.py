"""Key-value stores: one string-valued namespace each."""

import json
import os
import tempfile
from pathlib import Path


class InMemoryKeyValueStore:
    """Stores values in a dict (no disk). Used in tests and for throwaway sessions."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileKeyValueStore:
    """One JSON object per namespace at <directory>/<namespace>.json.

    Writes go to a temp file in the same directory and are moved into place,
    so readers see either the old or the new file.
    """

    def __init__(self, directory: Path | str, namespace: str) -> None:
        self._directory = Path(directory)
        self._namespace = namespace

    @property
    def path(self) -> Path:
        return self._directory / f"{self._namespace}.json"

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{self.path}: value under '{key}' must be a string")
        return value

    def set(self, key: str, value: str) -> None:
        values = self._read_all()
        values[key] = value
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory, prefix=f".{self._namespace}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
