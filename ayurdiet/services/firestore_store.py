"""Generic Firestore CRUD + subscribe helpers.

Every domain service goes through these functions so that documents are
stamped and returned the same way everywhere: ``{"id": doc.id, **data}``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from firebase_admin import firestore
from google.api_core.exceptions import FailedPrecondition
from google.cloud.firestore import FieldFilter

from ayurdiet.core import firebase
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import utcnow

logger = get_logger(__name__)

Filter = Tuple[str, str, Any]
OrderBy = Tuple[str, str]

ASCENDING = firestore.Query.ASCENDING
DESCENDING = firestore.Query.DESCENDING


class StoreError(Exception):
    """Raised when Firestore rejects an operation."""


class MissingIndexError(StoreError):
    """The query needs a composite index that has not been deployed yet."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


# -------------------------
# Helpers
# -------------------------
def _db():
    db = firebase.get_db()
    if db is None:
        raise StoreError("Firestore client not initialized")
    return db


def _snapshot_to_dict(doc) -> Dict[str, Any]:
    return {"id": doc.id, **(doc.to_dict() or {})}


def _build_query(
    collection: str,
    filters: Iterable[Filter] = (),
    order_by: Optional[OrderBy] = None,
    limit: Optional[int] = None,
):
    query = _db().collection(collection)
    for field, op, value in filters:
        query = query.where(filter=FieldFilter(field, op, value))
    if order_by:
        field, direction = order_by
        query = query.order_by(field, direction=direction)
    if limit:
        query = query.limit(limit)
    return query


def _reraise(action: str, collection: str, exc: Exception):
    logger.error("Error %s in %s: %s", action, collection, exc)
    if isinstance(exc, FailedPrecondition) and "index" in str(exc).lower():
        raise MissingIndexError(str(exc)) from exc
    if isinstance(exc, StoreError):
        raise exc
    raise StoreError(f"Error {action} in {collection}: {exc}") from exc


# -------------------------
# Core API
# -------------------------
def create(collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Add a document with a generated id and createdAt/updatedAt stamps."""
    now = utcnow()
    payload = {**data, "createdAt": data.get("createdAt") or now, "updatedAt": now}
    try:
        ref = _db().collection(collection).document()
        ref.set(payload)
    except Exception as exc:
        _reraise("creating document", collection, exc)
    return {"id": ref.id, **payload}


def set_document(collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> Dict[str, Any]:
    """Write a document under a caller-chosen id (e.g. users keyed by uid)."""
    now = utcnow()
    payload = {**data, "updatedAt": now}
    if not merge:
        payload.setdefault("createdAt", now)
    try:
        _db().collection(collection).document(doc_id).set(payload, merge=merge)
    except Exception as exc:
        _reraise(f"setting document {doc_id}", collection, exc)
    return {"id": doc_id, **payload}


def get_by_id(collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
    try:
        doc = _db().collection(collection).document(doc_id).get()
    except Exception as exc:
        _reraise(f"getting document {doc_id}", collection, exc)
    if not doc.exists:
        return None
    return _snapshot_to_dict(doc)


def get_all(
    collection: str,
    filters: Sequence[Filter] = (),
    order_by: Optional[OrderBy] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    try:
        docs = _build_query(collection, filters, order_by, limit).stream()
        return [_snapshot_to_dict(d) for d in docs]
    except Exception as exc:
        _reraise("getting documents", collection, exc)


def update(collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Merge fields into an existing document; raises DocumentNotFound if absent."""
    payload = {**data, "updatedAt": utcnow()}
    try:
        ref = _db().collection(collection).document(doc_id)
        if not ref.get().exists:
            raise DocumentNotFound(collection, doc_id)
        ref.update(payload)
    except Exception as exc:
        _reraise(f"updating document {doc_id}", collection, exc)
    return payload


def delete(collection: str, doc_id: str) -> None:
    try:
        _db().collection(collection).document(doc_id).delete()
    except Exception as exc:
        _reraise(f"deleting document {doc_id}", collection, exc)


# -------------------------
# Real-time listeners
# -------------------------
def subscribe_to_collection(
    collection: str,
    callback: Callable[[List[Dict[str, Any]]], None],
    filters: Sequence[Filter] = (),
    order_by: Optional[OrderBy] = None,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Callable[[], None]:
    """
    Attach a snapshot listener to a query. ``callback`` receives the full
    result list on every snapshot. Returns an ``unsubscribe()`` callable.
    """
    query = _build_query(collection, filters, order_by)

    def _on_snapshot(docs, changes, read_time):
        try:
            callback([_snapshot_to_dict(d) for d in docs])
        except Exception as exc:
            logger.error("Error in real-time listener for %s: %s", collection, exc)
            if on_error:
                on_error(exc)

    watch = query.on_snapshot(_on_snapshot)
    return watch.unsubscribe


def subscribe_to_document(
    collection: str,
    doc_id: str,
    callback: Callable[[Optional[Dict[str, Any]]], None],
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Callable[[], None]:
    ref = _db().collection(collection).document(doc_id)

    def _on_snapshot(docs, changes, read_time):
        try:
            doc = docs[0] if docs else None
            callback(_snapshot_to_dict(doc) if doc is not None and doc.exists else None)
        except Exception as exc:
            logger.error("Error in real-time listener for document %s in %s: %s", doc_id, collection, exc)
            if on_error:
                on_error(exc)

    watch = ref.on_snapshot(_on_snapshot)
    return watch.unsubscribe
