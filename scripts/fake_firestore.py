"""
In-memory stand-in for the Firestore client, used by the unit tests.

Supports the subset the services touch: collections, documents with
generated ids, set/merge/update/delete, ``where(filter=FieldFilter)``,
``order_by``, ``limit``, ``stream`` and ``on_snapshot``.
"""
import copy
import itertools
import unittest
from unittest import mock

from ayurdiet.core import firebase

_MISSING = object()
_ids = itertools.count(1)


def _lookup(data, path):
    value = data
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(data, field, op, expected):
    value = _lookup(data, field)
    if value is _MISSING:
        return False
    # ``== None`` reaches the query as the unary IS_NULL operator enum
    op = getattr(op, "name", op)
    if op == "IS_NULL":
        return value is None
    if op == "IS_NOT_NULL":
        return value is not None
    if op == "==":
        return value == expected
    if op == "!=":
        return value != expected
    if op == "array-contains":
        return isinstance(value, list) and expected in value
    if op == "in":
        return value in expected
    if value is None:
        return False
    if op == ">=":
        return value >= expected
    if op == "<=":
        return value <= expected
    if op == ">":
        return value > expected
    if op == "<":
        return value < expected
    raise ValueError(f"Unsupported operator {op}")


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeWatch:
    def __init__(self):
        self.unsubscribed = False

    def unsubscribe(self):
        self.unsubscribed = True


class FakeDocument:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._collection._docs

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def update(self, data):
        if self.id not in self._docs:
            raise KeyError(f"No document to update: {self.id}")
        self._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._docs.pop(self.id, None)

    def on_snapshot(self, callback):
        callback([self.get()], [], None)
        watch = FakeWatch()
        self._collection._client.watches.append(watch)
        return watch


class FakeQuery:
    def __init__(self, collection, filters=(), order=None, limit=None):
        self._collection = collection
        self._filters = list(filters)
        self._order = order
        self._limit = limit

    def where(self, filter=None):
        clause = (filter.field_path, filter.op_string, filter.value)
        return FakeQuery(self._collection, self._filters + [clause], self._order, self._limit)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._collection, self._filters, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._order, count)

    def stream(self):
        rows = [
            (doc_id, data)
            for doc_id, data in self._collection._docs.items()
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        if self._order:
            field, direction = self._order
            rows = [r for r in rows if _lookup(r[1], field) is not _MISSING]
            rows.sort(
                key=lambda r: (_lookup(r[1], field) is not None, _lookup(r[1], field)),
                reverse=direction == "DESCENDING",
            )
        if self._limit:
            rows = rows[: self._limit]
        return [FakeSnapshot(doc_id, copy.deepcopy(data)) for doc_id, data in rows]

    def on_snapshot(self, callback):
        callback(self.stream(), [], None)
        watch = FakeWatch()
        self._collection._client.watches.append(watch)
        return watch


class FakeCollection(FakeQuery):
    def __init__(self, client, name):
        super().__init__(self)
        self._client = client
        self.name = name
        self._docs = client.data.setdefault(name, {})

    def document(self, doc_id=None):
        return FakeDocument(self, doc_id or f"{self.name}-{next(_ids)}")


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.watches = []

    def collection(self, name):
        return FakeCollection(self, name)

    def seed(self, collection, doc_id, data):
        """Insert a raw document, bypassing the store's timestamps."""
        self.data.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def raw(self, collection, doc_id):
        return self.data.get(collection, {}).get(doc_id)


class FirestoreTestCase(unittest.TestCase):
    """Points the shared Firestore client at a fresh FakeFirestore per test."""

    def setUp(self):
        self.db = FakeFirestore()
        patcher = mock.patch.object(firebase, "db", self.db)
        patcher.start()
        self.addCleanup(patcher.stop)
