import unittest
from datetime import timedelta

from ayurdiet.services import policy_service
from ayurdiet.services.time_utils import utcnow
from fake_firestore import FirestoreTestCase


class TestPolicyService(FirestoreTestCase):
    def setUp(self):
        super().setUp()
        self.meal_timing = policy_service.create_policy({
            "title": "Dinacharya meal timing",
            "category": "dietary_guidelines",
            "source": "ministry_of_ayush",
            "summary": "Largest meal at noon",
            "tags": ["agni", "timing"],
            "doshaRelevance": {"vata": True, "pitta": True, "kapha": True},
            "seasonalRelevance": ["summer", "winter"],
        })
        self.pitta = policy_service.create_policy({
            "title": "Cooling summer diet",
            "category": "seasonal_recommendations",
            "source": "classical_texts",
            "summary": "Avoid pungent excess",
            "applicableConditions": ["Acidity", "skin rashes"],
            "doshaRelevance": {"pitta": True},
            "seasonalRelevance": ["summer"],
        })
        self.retired = policy_service.create_policy({
            "title": "Old circular",
            "category": "dietary_guidelines",
            "source": "ministry_of_ayush",
            "isActive": False,
        })

    def test_search_free_text_matches_title_summary_and_tags(self):
        self.assertEqual([p["id"] for p in policy_service.search(query="NOON")], [self.meal_timing["id"]])
        self.assertEqual([p["id"] for p in policy_service.search(query="agni")], [self.meal_timing["id"]])

    def test_search_skips_inactive(self):
        ids = {p["id"] for p in policy_service.search(category="dietary_guidelines")}
        self.assertEqual(ids, {self.meal_timing["id"]})

    def test_search_by_dosha_and_season(self):
        ids = {p["id"] for p in policy_service.search(dosha_type="kapha")}
        self.assertEqual(ids, {self.meal_timing["id"]})
        ids = {p["id"] for p in policy_service.search(season="summer", dosha_type="pitta")}
        self.assertEqual(ids, {self.meal_timing["id"], self.pitta["id"]})

    def test_conditions_match_case_insensitive_substring(self):
        ids = [p["id"] for p in policy_service.get_by_conditions(["acid"])]
        self.assertEqual(ids, [self.pitta["id"]])

    def test_delete_is_soft(self):
        policy_service.delete_policy(self.pitta["id"])
        saved = policy_service.get_policy(self.pitta["id"])
        self.assertFalse(saved["isActive"])
        self.assertEqual(policy_service.get_by_season("summer")[0]["id"], self.meal_timing["id"])

    def test_compliance_lists_relevant_policies(self):
        self.db.seed("dietPlans", "plan1", {"patientId": "p1"})
        self.db.seed("patients", "p1", {"doshaType": "Pitta", "allergies": []})

        report = policy_service.check_compliance("plan1", "p1")

        self.assertEqual(report["overallCompliance"], "compliant")
        self.assertEqual(
            {c["policyId"] for c in report["policyChecks"]},
            {self.meal_timing["id"], self.pitta["id"]},
        )
        self.assertTrue(all(c["complianceStatus"] == "compliant" for c in report["policyChecks"]))

    def test_compliance_unknown_plan_raises(self):
        self.db.seed("patients", "p1", {"doshaType": "Vata"})
        with self.assertRaises(policy_service.store.DocumentNotFound):
            policy_service.check_compliance("ghost", "p1")

    def test_stats(self):
        self.db.data["policies"][self.pitta["id"]]["updatedAt"] = utcnow() - timedelta(days=90)
        stats = policy_service.get_stats()
        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["active"], 2)
        self.assertEqual(stats["byCategory"], {"dietary_guidelines": 1, "seasonal_recommendations": 1})
        self.assertEqual(stats["bySource"], {"ministry_of_ayush": 1, "classical_texts": 1})
        self.assertEqual(stats["recentUpdates"], 1)


if __name__ == '__main__':
    unittest.main()
