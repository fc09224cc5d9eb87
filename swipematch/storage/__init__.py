"""
Document storage for the matching engine.

Responsibilities:
- Define the document-store contract the core depends on (point reads,
  filtered/sorted queries with cursors, proximity queries, atomic batches,
  change notifications).
- Provide an in-process implementation used by the API and the tests.
"""
from __future__ import annotations

from .document_store import (
    BatchCommitError,
    ChangeEvent,
    Document,
    InMemoryDocumentStore,
    WriteBatch,
    get_store,
    reset_store,
)

__all__ = [
    "BatchCommitError",
    "ChangeEvent",
    "Document",
    "InMemoryDocumentStore",
    "WriteBatch",
    "get_store",
    "reset_store",
]
