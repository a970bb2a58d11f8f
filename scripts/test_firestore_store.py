import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from google.api_core.exceptions import FailedPrecondition
from google.cloud.firestore_v1.types import StructuredQuery

from ayurdiet.core import firebase
from ayurdiet.services import firestore_store as store
from fake_firestore import FirestoreTestCase


class TestFirestoreStore(FirestoreTestCase):
    def test_create_stamps_timestamps_and_returns_id(self):
        doc = store.create("patients", {"name": "Asha"})
        self.assertIn("id", doc)
        self.assertEqual(doc["name"], "Asha")
        self.assertIsNotNone(doc["createdAt"])
        self.assertIsNotNone(doc["updatedAt"])
        self.assertEqual(self.db.raw("patients", doc["id"])["name"], "Asha")

    def test_get_by_id_missing_returns_none(self):
        self.assertIsNone(store.get_by_id("patients", "nope"))

    def test_get_all_filters_orders_and_limits(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in range(4):
            self.db.seed("vitals", f"v{i}", {"patientId": "p1", "date": base + timedelta(days=i)})
        self.db.seed("vitals", "other", {"patientId": "p2", "date": base})

        items = store.get_all(
            "vitals", [("patientId", "==", "p1")], order_by=("date", store.DESCENDING), limit=2
        )
        self.assertEqual([i["id"] for i in items], ["v3", "v2"])

    def test_null_equality_matches_only_null_fields(self):
        self.db.seed("notifications", "pending", {"sentAt": None})
        self.db.seed("notifications", "sent", {"sentAt": datetime(2024, 1, 1, tzinfo=timezone.utc)})
        self.db.seed("notifications", "unscheduled", {})

        self.assertEqual([n["id"] for n in store.get_all("notifications", [("sentAt", "==", None)])], ["pending"])

    def test_unary_null_operators(self):
        operator = StructuredQuery.UnaryFilter.Operator
        self.db.seed("notifications", "pending", {"sentAt": None})
        self.db.seed("notifications", "sent", {"sentAt": "2024-01-01"})
        collection = self.db.collection("notifications")

        is_null = collection.where(filter=SimpleNamespace(field_path="sentAt", op_string=operator.IS_NULL, value=None))
        not_null = collection.where(filter=SimpleNamespace(field_path="sentAt", op_string=operator.IS_NOT_NULL, value=None))

        self.assertEqual([d.id for d in is_null.stream()], ["pending"])
        self.assertEqual([d.id for d in not_null.stream()], ["sent"])

    def test_update_missing_raises_not_found(self):
        with self.assertRaises(store.DocumentNotFound):
            store.update("patients", "ghost", {"name": "x"})

    def test_update_merges_fields(self):
        self.db.seed("patients", "p1", {"name": "Asha", "age": 30})
        store.update("patients", "p1", {"age": 31})
        saved = self.db.raw("patients", "p1")
        self.assertEqual(saved["name"], "Asha")
        self.assertEqual(saved["age"], 31)
        self.assertIn("updatedAt", saved)

    def test_set_document_merge_keeps_existing_fields(self):
        self.db.seed("users", "u1", {"email": "a@b.com", "role": "patient"})
        store.set_document("users", "u1", {"role": "dietitian"}, merge=True)
        saved = self.db.raw("users", "u1")
        self.assertEqual(saved["email"], "a@b.com")
        self.assertEqual(saved["role"], "dietitian")
        self.assertNotIn("createdAt", saved)

    def test_delete(self):
        self.db.seed("patients", "p1", {"name": "Asha"})
        store.delete("patients", "p1")
        self.assertIsNone(self.db.raw("patients", "p1"))

    def test_subscribe_to_collection_delivers_snapshot_and_unsubscribes(self):
        self.db.seed("patients", "p1", {"dietitianId": "d1"})
        self.db.seed("patients", "p2", {"dietitianId": "d2"})
        received = []

        unsubscribe = store.subscribe_to_collection("patients", received.append, [("dietitianId", "==", "d1")])

        self.assertEqual(len(received), 1)
        self.assertEqual([p["id"] for p in received[0]], ["p1"])
        unsubscribe()
        self.assertTrue(self.db.watches[0].unsubscribed)

    def test_subscribe_to_document_missing_gives_none(self):
        received = []
        store.subscribe_to_document("patients", "ghost", received.append)
        self.assertEqual(received, [None])

    def test_listener_errors_go_to_on_error(self):
        self.db.seed("patients", "p1", {})
        errors = []

        def boom(_):
            raise RuntimeError("callback failed")

        store.subscribe_to_collection("patients", boom, on_error=errors.append)
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], RuntimeError)


class TestStoreErrors(unittest.TestCase):
    def test_uninitialized_client_raises_store_error(self):
        original = firebase.db
        firebase.db = None
        try:
            with self.assertRaises(store.StoreError):
                store.get_all("patients")
        finally:
            firebase.db = original

    def test_missing_index_is_reported(self):
        with self.assertRaises(store.MissingIndexError):
            store._reraise("getting documents", "vitals", FailedPrecondition("The query requires an index"))

    def test_other_errors_wrapped(self):
        with self.assertRaises(store.StoreError) as ctx:
            store._reraise("getting documents", "vitals", RuntimeError("boom"))
        self.assertNotIsInstance(ctx.exception, store.MissingIndexError)


if __name__ == '__main__':
    unittest.main()
