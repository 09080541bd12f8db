import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

class JsonFileStorage:
    """
    String-keyed blob storage backed by a single JSON file.

    Works like browser local storage: values are opaque strings, and the
    whole file is rewritten on every change.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            logger.error(f"Storage file {self.path} is unreadable, treating it as empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Storage file {self.path} does not hold a key-value object, treating it as empty")
            return {}
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            # Someone wrote a raw object instead of a serialized blob
            return json.dumps(value)
        return value

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def has_item(self, key: str) -> bool:
        return key in self._read_all()
