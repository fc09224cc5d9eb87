from __future__ import annotations

import copy
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

import numpy as np

from .geo_index import geo_point, haversine_km, index_entry

logger = logging.getLogger(__name__)

Filter = tuple[str, str, Any]
Listener = Callable[["ChangeEvent"], Any]

_MISSING = object()


class BatchCommitError(RuntimeError):
    """Raised when a write batch cannot be applied. Nothing from it is visible."""


@dataclass(frozen=True)
class Document:
    id: str
    path: str
    data: dict[str, Any]

    def get(self, field_path: str, default: Any = None) -> Any:
        value = _resolve(self.data, field_path)
        return default if value is _MISSING else value


@dataclass(frozen=True)
class ChangeEvent:
    """A create/update/delete of one document, as seen by change listeners."""

    path: str
    params: dict[str, str]
    before: dict[str, Any] | None
    after: dict[str, Any] | None
    in_batch: bool = False

    @property
    def is_delete(self) -> bool:
        return self.before is not None and self.after is None


@dataclass
class _Listener:
    kind: str
    segments: tuple[str, ...]
    callback: Listener

    def match(self, path: str) -> dict[str, str] | None:
        parts = path.split("/")
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for pattern, part in zip(self.segments, parts):
            if pattern.startswith("{") and pattern.endswith("}"):
                params[pattern[1:-1]] = part
            elif pattern != part:
                return None
        return params


def _split(path: str) -> tuple[str, str]:
    parts = [p for p in path.split("/") if p]
    if not parts or len(parts) % 2:
        raise ValueError(f"Not a document path: {path!r}")
    return "/".join(parts[:-1]), parts[-1]


def _resolve(data: dict[str, Any], field_path: str) -> Any:
    value: Any = data
    for key in field_path.split("."):
        if not isinstance(value, dict) or key not in value:
            return _MISSING
        value = value[key]
    return value


def _deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "in": lambda a, b: a in b,
}


def _matches(data: dict[str, Any], filters: Iterable[Filter]) -> bool:
    for field_path, op, expected in filters:
        value = _resolve(data, field_path)
        if value is _MISSING:
            return False
        try:
            if not _OPERATORS[op](value, expected):
                return False
        except TypeError:
            return False
    return True


@dataclass
class WriteBatch:
    """Staged writes applied all-or-nothing by ``commit()``."""

    store: "InMemoryDocumentStore"
    _ops: list[tuple[str, str, dict[str, Any] | None, bool]] = field(default_factory=list)
    _committed: bool = False

    def set(self, path: str, data: dict[str, Any], merge: bool = False) -> "WriteBatch":
        _split(path)
        self._ops.append(("set", path, copy.deepcopy(data), merge))
        return self

    def update(self, path: str, data: dict[str, Any]) -> "WriteBatch":
        _split(path)
        self._ops.append(("update", path, copy.deepcopy(data), False))
        return self

    def delete(self, path: str) -> "WriteBatch":
        _split(path)
        self._ops.append(("delete", path, None, False))
        return self

    def __len__(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        if self._committed:
            raise BatchCommitError("Batch already committed")
        self.store._apply(self._ops, in_batch=True)
        self._committed = True


class InMemoryDocumentStore:
    """
    Thread-safe in-process document store.

    Documents live at slash-separated paths (``users/u1``,
    ``dating_recommendations/u1/recommendations/u2``). Change listeners
    registered with ``on_write`` / ``on_delete`` are called synchronously
    after a write has been applied and the store lock released, or when the
    enclosing ``deferred_notifications()`` block exits.
    """

    def __init__(self, max_query_results: int = 1000) -> None:
        self.max_query_results = max_query_results
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._listeners: list[_Listener] = []
        self._local = threading.local()

    # ── Reads ────────────────────────────────────────────────────────────

    def get(self, path: str) -> dict[str, Any] | None:
        collection, doc_id = _split(path)
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    def exists(self, path: str) -> bool:
        collection, doc_id = _split(path)
        with self._lock:
            return doc_id in self._collections.get(collection, {})

    def list_documents(self, collection: str) -> list[Document]:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [
                Document(doc_id, f"{collection}/{doc_id}", copy.deepcopy(data))
                for doc_id, data in docs.items()
            ]

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
        start_after: Document | None = None,
    ) -> list[Document]:
        """
        Filtered, optionally ordered page of a collection.

        Documents lacking the ``order_by`` field are excluded. Ties are broken
        by document id so ``start_after`` cursors are stable.
        """
        filters = list(filters)
        docs = [d for d in self.list_documents(collection) if _matches(d.data, filters)]

        if order_by is not None:
            docs = [d for d in docs if _resolve(d.data, order_by) is not _MISSING]
            docs.sort(key=lambda d: (_resolve(d.data, order_by), d.id), reverse=descending)
            if start_after is not None:
                cursor = (_resolve(start_after.data, order_by), start_after.id)
                if descending:
                    docs = [d for d in docs if (_resolve(d.data, order_by), d.id) < cursor]
                else:
                    docs = [d for d in docs if (_resolve(d.data, order_by), d.id) > cursor]
        elif start_after is not None:
            docs.sort(key=lambda d: d.id)
            docs = [d for d in docs if d.id > start_after.id]

        cap = self.max_query_results if limit is None else min(limit, self.max_query_results)
        return docs[offset:offset + cap]

    def near(
        self,
        collection: str,
        center: tuple[float, float],
        radius_km: float,
        filters: Iterable[Filter] = (),
    ) -> list[tuple[Document, float]]:
        """Indexed documents within ``radius_km`` of ``center``, nearest first."""
        filters = list(filters)
        docs = [
            d for d in self.list_documents(collection)
            if d.get("g.geopoint") is not None and _matches(d.data, filters)
        ]
        if not docs:
            return []

        lats = np.array([d.get("g.geopoint")["latitude"] for d in docs], dtype=float)
        lons = np.array([d.get("g.geopoint")["longitude"] for d in docs], dtype=float)
        distances = haversine_km(center[0], center[1], lats, lons)

        order = np.argsort(distances, kind="stable")
        results = [
            (docs[i], float(distances[i]))
            for i in order
            if distances[i] <= radius_km
        ]
        return results[: self.max_query_results]

    # ── Writes ───────────────────────────────────────────────────────────

    def set(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        self._apply([("set", path, copy.deepcopy(data), merge)])

    def update(self, path: str, data: dict[str, Any]) -> None:
        """Replace top-level fields of an existing document. Raises KeyError if absent."""
        if not self.exists(path):
            raise KeyError(path)
        self._apply([("update", path, copy.deepcopy(data), False)])

    def delete(self, path: str) -> None:
        self._apply([("delete", path, None, False)])

    def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self.set(f"{collection}/{doc_id}", data)
        return doc_id

    def set_geo_point(self, path: str, latitude: float, longitude: float) -> None:
        """Index a document's coordinates for ``near`` queries."""
        if not self.exists(path):
            raise KeyError(path)
        self._apply([(
            "update",
            path,
            {
                "coordinates": geo_point(latitude, longitude),
                "g": index_entry(latitude, longitude),
            },
            False,
        )])

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()

    # ── Change notifications ─────────────────────────────────────────────

    def on_write(self, pattern: str, callback: Listener) -> None:
        """Call ``callback`` on create, update and delete of matching documents."""
        self._listeners.append(_Listener("write", tuple(pattern.split("/")), callback))

    def on_delete(self, pattern: str, callback: Listener) -> None:
        self._listeners.append(_Listener("delete", tuple(pattern.split("/")), callback))

    def clear_listeners(self) -> None:
        self._listeners.clear()

    @contextmanager
    def deferred_notifications(self) -> Iterator["InMemoryDocumentStore"]:
        """
        Hold back change notifications for writes made by this thread.

        Listeners run once the outermost block exits, and see every write the
        block made. Other threads keep their immediate delivery.
        """
        depth = getattr(self._local, "depth", 0)
        if depth == 0:
            self._local.pending = []
        self._local.depth = depth + 1
        try:
            yield self
        finally:
            self._local.depth = depth
            if depth == 0:
                pending, self._local.pending = self._local.pending, []
                for changes, in_batch in pending:
                    self._deliver(changes, in_batch)

    # ── Internals ────────────────────────────────────────────────────────

    def _apply(
        self,
        ops: list[tuple[str, str, dict[str, Any] | None, bool]],
        in_batch: bool = False,
    ) -> None:
        changes: list[tuple[str, dict[str, Any] | None, dict[str, Any] | None]] = []

        with self._lock:
            # Stage against a view of the touched documents first, so a bad
            # op leaves the store untouched.
            staged: dict[str, dict[str, Any] | None] = {}
            originals: dict[str, dict[str, Any] | None] = {}

            def current(path: str) -> dict[str, Any] | None:
                if path in staged:
                    return staged[path]
                collection, doc_id = _split(path)
                return self._collections.get(collection, {}).get(doc_id)

            for op, path, data, merge in ops:
                before = current(path)
                originals.setdefault(path, copy.deepcopy(before))
                if op == "set":
                    staged[path] = _deep_merge(before, data) if merge and before else data
                elif op == "update":
                    if before is None:
                        raise BatchCommitError(f"Cannot update missing document {path}")
                    staged[path] = {**before, **data}
                elif op == "delete":
                    staged[path] = None
                else:
                    raise BatchCommitError(f"Unknown operation {op!r}")

            for path, data in staged.items():
                collection, doc_id = _split(path)
                docs = self._collections.setdefault(collection, {})
                if data is None:
                    docs.pop(doc_id, None)
                else:
                    docs[doc_id] = data
                before = originals[path]
                if before is not None or data is not None:
                    changes.append((path, before, copy.deepcopy(data)))

        self._notify(changes, in_batch)

    def _notify(
        self,
        changes: list[tuple[str, dict[str, Any] | None, dict[str, Any] | None]],
        in_batch: bool,
    ) -> None:
        if getattr(self._local, "depth", 0):
            self._local.pending.append((changes, in_batch))
            return
        self._deliver(changes, in_batch)

    def _deliver(
        self,
        changes: list[tuple[str, dict[str, Any] | None, dict[str, Any] | None]],
        in_batch: bool,
    ) -> None:
        for path, before, after in changes:
            for listener in list(self._listeners):
                params = listener.match(path)
                if params is None:
                    continue
                event = ChangeEvent(path, params, before, after, in_batch)
                if listener.kind == "delete" and not event.is_delete:
                    continue
                try:
                    listener.callback(event)
                except Exception:
                    logger.exception("Change listener failed for %s", path)


_store: InMemoryDocumentStore | None = None


def get_store() -> InMemoryDocumentStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = InMemoryDocumentStore()
    return _store


def reset_store() -> InMemoryDocumentStore:
    """Drop all documents and listeners of the process-wide store."""
    store = get_store()
    store.clear()
    store.clear_listeners()
    return store
