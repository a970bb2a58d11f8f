import unittest
from unittest import mock

from ayurdiet.services import diet_plan_service, notification_service
from fake_firestore import FirestoreTestCase


class TestDietPlanService(FirestoreTestCase):
    def _notifications(self, user_id):
        return notification_service.get_for_user(user_id)

    def test_create_defaults_active_and_notifies_patient(self):
        plan = diet_plan_service.create_plan(
            {"patientId": "p1", "dietitianId": "d1", "title": "Vata balance"}, dietitian_name="Dr. Rao"
        )
        self.assertTrue(plan["isActive"])

        notes = self._notifications("p1")
        self.assertEqual(len(notes), 1)
        self.assertEqual(notes[0]["type"], "diet_plan_delivery")
        self.assertEqual(notes[0]["data"], {"dietPlanId": plan["id"]})
        self.assertIn("by Dr. Rao", notes[0]["message"])

    def test_second_active_plan_leaves_first_active(self):
        first = diet_plan_service.create_plan({"patientId": "p1", "title": "One"})
        second = diet_plan_service.create_plan({"patientId": "p1", "title": "Two"})

        active_ids = {p["id"] for p in diet_plan_service.get_active_for_patient("p1")}
        self.assertEqual(active_ids, {first["id"], second["id"]})

    def test_activation_notifies_only_on_transition(self):
        plan = diet_plan_service.create_plan({"patientId": "p1", "title": "Draft", "isActive": False})
        diet_plan_service.activate_plan(plan["id"])
        diet_plan_service.activate_plan(plan["id"])

        kinds = [n["type"] for n in self._notifications("p1")]
        self.assertEqual(kinds.count("diet_plan_activation"), 1)

    def test_update_missing_plan_raises(self):
        with self.assertRaises(diet_plan_service.store.DocumentNotFound):
            diet_plan_service.update_plan("ghost", {"title": "x"})

    def test_notification_failure_does_not_fail_create(self):
        with mock.patch.object(notification_service, "create_diet_plan_delivery", side_effect=RuntimeError("down")):
            with self.assertLogs("ayurdiet.services.diet_plan_service", level="WARNING"):
                plan = diet_plan_service.create_plan({"patientId": "p1", "title": "Plan"})
        self.assertIsNotNone(diet_plan_service.get_plan(plan["id"]))

    def test_duplicate_creates_inactive_copy(self):
        plan = diet_plan_service.create_plan({"patientId": "p1", "dietitianId": "d1", "title": "Kapha"})
        copy = diet_plan_service.duplicate_plan(plan["id"], patient_id="p2", dietitian_id="d2")

        self.assertNotEqual(copy["id"], plan["id"])
        self.assertEqual(copy["title"], "Kapha (copy)")
        self.assertFalse(copy["isActive"])
        self.assertEqual(copy["patientId"], "p2")
        self.assertEqual(copy["dietitianId"], "d2")
        self.assertEqual(copy["duplicatedFrom"], plan["id"])

    def test_deactivate(self):
        plan = diet_plan_service.create_plan({"patientId": "p1", "title": "Plan"})
        updated = diet_plan_service.deactivate_plan(plan["id"])
        self.assertFalse(updated["isActive"])
        self.assertEqual(diet_plan_service.get_active_for_patient("p1"), [])


if __name__ == '__main__':
    unittest.main()
