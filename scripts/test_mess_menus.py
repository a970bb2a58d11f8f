import unittest
from datetime import timedelta

from ayurdiet.services import mess_menu_service as menus
from ayurdiet.services.time_utils import utcnow
from fake_firestore import FirestoreTestCase

MEALS = {
    "breakfast": [
        {"name": "Poha", "nutritionalData": {"calories": 250, "protein": 5, "carbohydrates": 45, "fat": 6}},
        {"name": "Upma", "isAvailable": False, "nutritionalData": {"calories": 300, "protein": 7}},
    ],
    "lunch": [
        {"name": "Khichdi", "nutritionalData": {"calories": 400.5, "protein": 12.25, "carbohydrates": 60, "fat": 10}},
    ],
    "dinner": [],
    "snacks": [{"name": "Fruit"}],
}


class TestMessMenus(FirestoreTestCase):
    def test_summary_skips_unavailable_items(self):
        summary = menus.nutritional_summary(MEALS)
        self.assertEqual(summary, {
            "totalCalories": 650.5,
            "totalProtein": 17.25,
            "totalCarbs": 105.0,
            "totalFat": 16.0,
        })

    def test_summary_of_nothing(self):
        self.assertEqual(menus.nutritional_summary(None)["totalCalories"], 0)

    def test_create_sets_version_and_summary(self):
        menu = menus.create_menu({"hospitalId": "h1", "meals": MEALS}, created_by="admin1")
        self.assertEqual(menu["version"], 1)
        self.assertTrue(menu["isActive"])
        self.assertEqual(menu["createdBy"], "admin1")
        self.assertEqual(menu["nutritionalSummary"]["totalCalories"], 650.5)

    def test_update_bumps_version_and_recomputes(self):
        menu = menus.create_menu({"hospitalId": "h1", "meals": MEALS})
        menus.update_menu(menu["id"], {"meals": {"lunch": MEALS["lunch"]}})
        menus.update_menu(menu["id"], {"title": "Week 2"})

        saved = self.db.raw("messMenus", menu["id"])
        self.assertEqual(saved["version"], 3)
        self.assertEqual(saved["nutritionalSummary"]["totalCalories"], 400.5)

    def test_update_missing_raises(self):
        with self.assertRaises(menus.store.DocumentNotFound):
            menus.update_menu("ghost", {"title": "x"})

    def test_set_active_menu_is_exclusive_per_hospital(self):
        first = menus.create_menu({"hospitalId": "h1"})
        second = menus.create_menu({"hospitalId": "h1", "isActive": False})
        other = menus.create_menu({"hospitalId": "h2"})

        menus.set_active_menu("h1", second["id"])

        self.assertFalse(self.db.raw("messMenus", first["id"])["isActive"])
        self.assertTrue(self.db.raw("messMenus", second["id"])["isActive"])
        self.assertTrue(self.db.raw("messMenus", other["id"])["isActive"])

    def test_today_menus(self):
        menus.create_menu({"hospitalId": "h1"})
        menus.create_menu({"hospitalId": "h1", "date": utcnow() - timedelta(days=3)})
        menus.create_menu({"hospitalId": "h1", "isActive": False})
        self.assertEqual(len(menus.get_today_menus("h1")), 1)


if __name__ == '__main__':
    unittest.main()
