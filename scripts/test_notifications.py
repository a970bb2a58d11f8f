import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from ayurdiet.services import notification_service as notifications
from ayurdiet.services.firestore_store import StoreError
from ayurdiet.workers import reminder_worker
from fake_firestore import FirestoreTestCase

DAY = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestNotificationService(FirestoreTestCase):
    def test_defaults(self):
        note = notifications.create_general("u1", "Hello", "World")
        self.assertFalse(note["isRead"])
        self.assertIsNone(note["sentAt"])
        self.assertEqual(note["priority"], "medium")
        self.assertEqual(note["type"], "general")

    def test_water_reminder_uses_default_target(self):
        note = notifications.create_water_reminder("u1", DAY)
        self.assertEqual(note["data"], {"waterTarget": 8})
        self.assertEqual(note["priority"], "low")

    def test_mark_all_as_read(self):
        notifications.create_general("u1", "a", "a")
        notifications.create_general("u1", "b", "b")
        notifications.create_general("u2", "c", "c")

        self.assertEqual(notifications.mark_all_as_read("u1"), 2)
        self.assertEqual(notifications.get_unread("u1"), [])
        self.assertEqual(len(notifications.get_unread("u2")), 1)

    def test_settings_upsert_starts_from_defaults(self):
        created = notifications.upsert_settings("u1", {"waterReminders": False})
        self.assertFalse(created["waterReminders"])
        self.assertTrue(created["mealReminders"])

        notifications.upsert_settings("u1", {"dietNotes": False})
        saved = notifications.get_settings("u1")
        self.assertEqual(saved["id"], created["id"])
        self.assertFalse(saved["dietNotes"])
        self.assertFalse(saved["waterReminders"])

    def test_schedule_needs_saved_settings(self):
        self.assertEqual(notifications.schedule_reminders("u1", now=DAY), [])
        self.assertNotIn("notifications", self.db.data)

    def test_schedule_whole_day(self):
        notifications.upsert_settings("u1", {})
        created = notifications.schedule_reminders("u1", now=DAY)
        meals = [n for n in created if n["type"] == "meal_reminder"]
        water = [n for n in created if n["type"] == "water_intake"]

        # breakfast, lunch, dinner + two snacks
        self.assertEqual(len(meals), 5)
        self.assertEqual(meals[0]["scheduledFor"], DAY.replace(hour=8))
        # every 120 minutes from 08:00 to 20:00
        self.assertEqual(len(water), 7)

    def test_schedule_skips_times_already_passed(self):
        notifications.upsert_settings("u1", {})
        now = DAY.replace(hour=15)

        created = notifications.schedule_reminders("u1", now=now)

        self.assertTrue(all(n["scheduledFor"] > now for n in created))
        meals = {n["data"]["mealType"]: n for n in created if n["type"] == "meal_reminder"}
        self.assertEqual(set(meals), {"snacks", "dinner"})
        self.assertEqual(meals["snacks"]["priority"], "low")
        self.assertEqual(meals["dinner"]["priority"], "medium")
        self.assertEqual(len([n for n in created if n["type"] == "water_intake"]), 3)

    def test_schedule_respects_disabled_categories(self):
        notifications.upsert_settings("u1", {"waterReminders": False, "reminderTimes": {"snacks": []}})
        created = notifications.schedule_reminders("u1", now=DAY)
        self.assertEqual([n["data"]["mealType"] for n in created], ["breakfast", "lunch", "dinner"])

        notifications.upsert_settings("u1", {"mealReminders": False})
        self.assertEqual(notifications.schedule_meal_reminders("u1", now=DAY), [])

    def test_due_excludes_future_and_sent(self):
        now = DAY.replace(hour=12)
        due = notifications.create_meal_reminder("u1", "breakfast", DAY.replace(hour=8))
        notifications.create_meal_reminder("u1", "dinner", DAY.replace(hour=19))
        sent = notifications.create_meal_reminder("u1", "lunch", DAY.replace(hour=11))
        notifications.mark_sent(sent["id"])
        notifications.create_general("u1", "no schedule", "x")

        self.assertEqual([n["id"] for n in notifications.get_due(now)], [due["id"]])


class TestReminderWorker(FirestoreTestCase):
    def test_dispatch_marks_due_notifications_sent(self):
        now = DAY.replace(hour=12)
        notifications.create_meal_reminder("u1", "breakfast", DAY.replace(hour=8))
        notifications.create_water_reminder("u1", DAY.replace(hour=10))
        notifications.create_meal_reminder("u1", "dinner", DAY + timedelta(hours=19))

        self.assertEqual(reminder_worker.dispatch_due_reminders(now), 2)
        self.assertEqual(reminder_worker.dispatch_due_reminders(now), 0)

    def test_nothing_due(self):
        self.assertEqual(reminder_worker.dispatch_due_reminders(DAY), 0)

    def test_next_daily_run(self):
        self.assertEqual(reminder_worker.next_daily_run(DAY.replace(hour=5)), DAY.replace(hour=6))
        self.assertEqual(reminder_worker.next_daily_run(DAY.replace(hour=6)), DAY.replace(hour=6) + timedelta(days=1))

    def test_daily_pass_covers_patient_accounts(self):
        self.db.seed("users", "pat-a", {"role": "patient"})
        self.db.seed("users", "pat-b", {"role": "patient"})
        self.db.seed("users", "diet-1", {"role": "dietitian"})
        notifications.upsert_settings("pat-a", {"waterReminders": False})
        notifications.upsert_settings("diet-1", {})

        self.assertEqual(reminder_worker.schedule_daily_reminders(DAY.replace(hour=6)), 2)

        users = {n["userId"] for n in self.db.data["notifications"].values()}
        self.assertEqual(users, {"pat-a"})

    def test_cycle_runs_daily_pass_once_due(self):
        self.db.seed("users", "pat-a", {"role": "patient"})
        notifications.upsert_settings("pat-a", {"waterReminders": False})
        first_run = DAY.replace(hour=6)

        with mock.patch.object(reminder_worker, "_next_daily_run", first_run):
            reminder_worker.run_cycle(DAY.replace(hour=5))
            self.assertEqual(self.db.data.get("notifications", {}), {})

            reminder_worker.run_cycle(DAY.replace(hour=7))
            self.assertEqual(len(self.db.data["notifications"]), 5)
            self.assertEqual(reminder_worker._next_daily_run, first_run + timedelta(days=1))

    def test_cycle_logs_store_errors_as_warnings(self):
        failure = StoreError("Error getting documents in notifications: 503 unavailable")
        with mock.patch.object(reminder_worker, "dispatch_due_reminders", side_effect=failure), \
                mock.patch.object(reminder_worker.logger, "warning") as warning, \
                mock.patch.object(reminder_worker.logger, "error") as error:
            reminder_worker.run_cycle(DAY)
        warning.assert_called_once()
        error.assert_not_called()


if __name__ == '__main__':
    unittest.main()
