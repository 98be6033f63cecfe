"""
Document store interface and its in-process implementation.

Services never import a global client: they receive a `DocumentStore`
in their constructor, so tests and the app factory decide which one is used.
"""

from __future__ import annotations

import copy
import os
import pickle
import threading
import uuid
from typing import Any, Dict, List, Optional

from loguru import logger

from motorent.exceptions import NotFound, StoreUnavailable, WriteConflict
from motorent.utils.constants import Collections


class DocumentStore:
    """
    Asynchronous document-store contract.

    Documents are plain dicts; every returned document carries its key under
    "id". Transport failures must surface as StoreUnavailable.
    """

    async def get_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[dict]:
        raise NotImplementedError

    async def list_all(self, collection: str) -> List[dict]:
        raise NotImplementedError

    async def create(self, collection: str, data: dict, doc_id: Optional[str] = None) -> str:
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, partial: dict,
                     expect: Optional[dict] = None) -> dict:
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def batch(self) -> "WriteBatch":
        return WriteBatch(self)

    async def commit_batch(self, ops: List[tuple]) -> None:
        raise NotImplementedError


class WriteBatch:
    """Collects writes and applies them all-or-nothing on commit()."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self._ops: List[tuple] = []

    def create(self, collection: str, data: dict, doc_id: Optional[str] = None) -> str:
        doc_id = doc_id or self._store.new_id()
        self._ops.append(("create", collection, doc_id, dict(data), None))
        return doc_id

    def update(self, collection: str, doc_id: str, partial: dict,
               expect: Optional[dict] = None) -> "WriteBatch":
        self._ops.append(("update", collection, doc_id, dict(partial), expect))
        return self

    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(("delete", collection, doc_id, None, None))
        return self

    def __len__(self) -> int:
        return len(self._ops)

    async def commit(self) -> None:
        if self._ops:
            await self._store.commit_batch(list(self._ops))
        self._ops.clear()


def _check_expect(doc: dict, expect: Optional[dict], collection: str, doc_id: str) -> None:
    for key, wanted in (expect or {}).items():
        if doc.get(key) != wanted:
            raise WriteConflict(
                f"Error: {collection}/{doc_id} has {key}={doc.get(key)!r}, expected {wanted!r}")


class MemoryStore(DocumentStore):
    """
    Dict-of-dicts store. When `path` is given the whole data set is pickled
    to disk after every write (atomic replace) and loaded on start.
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path) if path else None
        self.data: Dict[str, Dict[str, dict]] = {name: {} for name in Collections.ALL}
        self._rw = threading.RLock()
        self._load()

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                payload = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("[Store] Load failed ({}); starting empty.", e)
            return

        if isinstance(payload, dict):
            for name, docs in payload.items():
                self.data[name] = dict(docs or {})
            logger.info("[Store] Loaded {}", {k: len(v) for k, v in self.data.items()})
        else:
            # Handle incompatible data format: backup the old file and start empty
            bak = self.path + ".bak"
            try:
                os.replace(self.path, bak)
                logger.warning("[Store] Incompatible store ({}); backed up to {}.",
                               type(payload).__name__, bak)
            except OSError as e:
                logger.error("[Store] Backup failed: {}", e)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        if not self.path:
            return
        tmp = self.path + ".tmp"
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(tmp, "wb") as f:
                pickle.dump(self.data, f, protocol=pickle.HIGHEST_PROTOCOL)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except (OSError, pickle.PicklingError) as e:
            logger.error("[Store] Saving to {} failed: {}", self.path, e)
            raise StoreUnavailable(f"Error: could not persist store ({e})")

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            self._dump()

    def clear(self):
        with self._rw:
            for docs in self.data.values():
                docs.clear()
            self._dump()

    def _docs(self, collection: str) -> Dict[str, dict]:
        return self.data.setdefault(collection, {})

    @staticmethod
    def _out(doc_id: str, doc: dict) -> dict:
        out = copy.deepcopy(doc)
        out["id"] = doc_id
        return out

    # ---------- Reads ----------
    async def get_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        with self._rw:
            doc = self._docs(collection).get(str(doc_id))
            return self._out(str(doc_id), doc) if doc is not None else None

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[dict]:
        with self._rw:
            return [self._out(k, d) for k, d in self._docs(collection).items()
                    if d.get(field) == value]

    async def list_all(self, collection: str) -> List[dict]:
        with self._rw:
            return [self._out(k, d) for k, d in self._docs(collection).items()]

    # ---------- Writes ----------
    async def create(self, collection: str, data: dict, doc_id: Optional[str] = None) -> str:
        """Insert `data`; a given doc_id that already exists is overwritten."""
        with self._rw:
            doc_id = str(doc_id or self.new_id())
            doc = dict(data)
            doc.pop("id", None)
            docs = self._docs(collection)
            previous = docs.get(doc_id)
            docs[doc_id] = doc
            try:
                self._dump()
            except StoreUnavailable:
                if previous is None:
                    docs.pop(doc_id, None)
                else:
                    docs[doc_id] = previous
                raise
            return doc_id

    async def update(self, collection: str, doc_id: str, partial: dict,
                     expect: Optional[dict] = None) -> dict:
        with self._rw:
            docs = self._docs(collection)
            doc = docs.get(str(doc_id))
            if doc is None:
                raise NotFound(f"Error: {collection}/{doc_id} not found")
            _check_expect(doc, expect, collection, doc_id)
            merged = dict(doc)
            merged.update({k: v for k, v in partial.items() if k != "id"})
            docs[str(doc_id)] = merged
            try:
                self._dump()
            except StoreUnavailable:
                docs[str(doc_id)] = doc
                raise
            return self._out(str(doc_id), merged)

    async def delete(self, collection: str, doc_id: str) -> bool:
        with self._rw:
            docs = self._docs(collection)
            doc = docs.pop(str(doc_id), None)
            if doc is None:
                return False
            try:
                self._dump()
            except StoreUnavailable:
                docs[str(doc_id)] = doc
                raise
            return True

    async def commit_batch(self, ops: List[tuple]) -> None:
        """Validate every op first, then apply them to a copy and swap it in."""
        with self._rw:
            staged = {name: dict(docs) for name, docs in self.data.items()}
            for op, collection, doc_id, payload, expect in ops:
                docs = staged.setdefault(collection, {})
                if op == "create":
                    payload.pop("id", None)
                    docs[doc_id] = payload
                elif op == "update":
                    current = docs.get(doc_id)
                    if current is None:
                        raise NotFound(f"Error: {collection}/{doc_id} not found")
                    _check_expect(current, expect, collection, doc_id)
                    merged = dict(current)
                    merged.update({k: v for k, v in payload.items() if k != "id"})
                    docs[doc_id] = merged
                elif op == "delete":
                    docs.pop(doc_id, None)
                else:
                    raise ValueError(f"unknown batch op {op!r}")

            previous, self.data = self.data, staged
            try:
                self._dump()
            except StoreUnavailable:
                self.data = previous
                raise
