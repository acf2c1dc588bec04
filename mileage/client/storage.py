"""Key/value stores backing the session (the browser's localStorage equivalent)."""

import json
from pathlib import Path
from typing import Dict, Optional


class MemoryStorage:
    """String-to-string store that lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)
        self._persist()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._persist()

    def clear(self) -> None:
        self._items.clear()
        self._persist()

    def _persist(self) -> None:
        pass


class FileStorage(MemoryStorage):
    """Durable store: a JSON object on disk, read once and rewritten on change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        initial: Dict[str, str] = {}
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
            initial = {str(k): str(v) for k, v in data.items()}
        super().__init__(initial)

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._items, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)
