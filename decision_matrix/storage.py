import json
import os
import threading
import uuid
from typing import Any, Dict, List, Tuple

from .errors import StorageError
from .logging_utils import get_logger

logger = get_logger(__name__)


def new_id(prefix: str = "dec") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def append_jsonl(path: str, record: Dict) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")


def read_jsonl(path: str) -> List[Dict]:
    if not os.path.exists(path):
        return []
    rows: List[Dict] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning("Skipping unreadable line %d in %s", lineno, path)
    return rows


def overwrite_lines(path: str, lines: List[str]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = path + ".tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line.rstrip("\n") + "\n")
    os.replace(tmp_path, path)


def _line_id(line: str):
    try:
        record = json.loads(line)
    except json.JSONDecodeError:
        return None
    return record.get("id") if isinstance(record, dict) else None


class JsonlDocumentStore:
    """
    Document store with one JSON-lines file per collection.

    Each line is {"id": ..., "data": {...}}. Writes append; deletes rewrite
    the file without the removed record.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        self._lock = threading.Lock()

    def _path(self, collection: str) -> str:
        if not collection or os.sep in collection or collection.startswith("."):
            raise ValueError(f"Invalid collection name: {collection!r}")
        return os.path.join(self.root_dir, f"{collection}.jsonl")

    def create(self, collection: str, document: Dict[str, Any]) -> str:
        path = self._path(collection)
        doc_id = new_id()
        try:
            with self._lock:
                append_jsonl(path, {"id": doc_id, "data": document})
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError("create", str(exc)) from exc
        return doc_id

    def list_all(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        path = self._path(collection)
        try:
            with self._lock:
                rows = read_jsonl(path)
        except OSError as exc:
            raise StorageError("list", str(exc)) from exc

        out: List[Tuple[str, Dict[str, Any]]] = []
        for r in rows:
            if not isinstance(r, dict) or not r.get("id") or not isinstance(r.get("data"), dict):
                logger.warning("Skipping malformed record in %s", path)
                continue
            out.append((r["id"], r["data"]))
        return out

    def delete_by_id(self, collection: str, doc_id: str) -> bool:
        """Returns True if a record was removed, False if the id was not found."""
        path = self._path(collection)
        try:
            with self._lock:
                if not os.path.exists(path):
                    return False
                with open(path, "r", encoding="utf-8") as f:
                    lines = f.readlines()
                # unparseable lines are kept as they are
                kept = [line for line in lines if not line.strip() or _line_id(line) != doc_id]
                if len(kept) == len(lines):
                    return False
                overwrite_lines(path, [line for line in kept if line.strip()])
        except OSError as exc:
            raise StorageError("delete", str(exc)) from exc
        return True
