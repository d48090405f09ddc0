import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

# This file holds the flat-file persistence helpers and the id allocator.
# Nothing here caches records: every call goes back to disk.

Record = Dict[str, Any]
PathLike = Union[str, Path]


def load(path: PathLike) -> List[Record]:
    path = Path(path)
    if not path.exists():
        return []
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []
    return json.loads(text)


def save(path: PathLike, records: List[Record]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(records, ensure_ascii=False, indent=2)
    # write next to the target so os.replace stays on one filesystem
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def next_id(records: List[Record]) -> int:
    if not records:
        return 1
    return int(records[-1]["id"]) + 1


class JsonFileStore:
    """Named collections, one JSON file each, under a data directory."""

    def __init__(self, data_dir: PathLike):
        self.data_dir = Path(data_dir)
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load(self, name: str) -> List[Record]:
        return load(self.path_for(name))

    def save(self, name: str, records: List[Record]) -> None:
        save(self.path_for(name), records)

    def _get_lock(self, name: str) -> threading.RLock:
        with self._locks_guard:
            if name not in self._locks:
                self._locks[name] = threading.RLock()
            return self._locks[name]

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        # only serializes writers inside this process
        lock = self._get_lock(name)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
