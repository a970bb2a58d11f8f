import json
import unittest
from types import SimpleNamespace
from unittest import mock

from ayurdiet.services import ai_flows
from ayurdiet.services.ai_flows import AIFlowError
from fake_firestore import FirestoreTestCase


def _model_replying(payload):
    text = payload if isinstance(payload, str) else json.dumps(payload)
    model = mock.Mock()
    model.generate_content.return_value = SimpleNamespace(text=text)
    return model


class AIFlowTestCase(FirestoreTestCase):
    def use_model(self, payload):
        model = _model_replying(payload)
        patcher = mock.patch.object(ai_flows, "_get_model", return_value=model)
        patcher.start()
        self.addCleanup(patcher.stop)
        return model


class TestDietChartFlows(AIFlowTestCase):
    CHART = {
        "dietChart": "## Day 1",
        "dietDays": [{"day": "Day 1", "meals": [{"time": "08:00", "name": "Breakfast", "items": ["Poha"]}]}],
        "recommendations": ["Warm water"],
        "warnings": [],
    }

    def test_generate_chart_adds_policy_compliance(self):
        self.db.seed("policies", "pol1", {
            "title": "Kapha guidance", "summary": "Light food", "keyPrinciples": ["Light"],
            "isActive": True, "doshaRelevance": {"kapha": True},
            "seasonalRelevance": ["spring", "summer", "autumn", "winter"],
        })
        model = self.use_model("```json\n" + json.dumps(self.CHART) + "\n```")

        chart = ai_flows.generate_initial_diet_chart({"name": "Ravi", "doshaType": "Kapha"}, {}, {})

        self.assertEqual(chart["dietChart"], "## Day 1")
        self.assertEqual(chart["policyCompliance"]["checkedPolicies"], "Relevant policies reviewed")
        prompt = model.generate_content.call_args[0][0]
        self.assertIn("Kapha guidance", prompt)

    def test_policies_unavailable_falls_back(self):
        with mock.patch.object(ai_flows.policy_service, "search", side_effect=RuntimeError("down")):
            self.assertEqual(ai_flows.relevant_policies_text({}), ai_flows.POLICIES_UNAVAILABLE)
        self.assertEqual(ai_flows.relevant_policies_text({"doshaType": "Vata"}), ai_flows.NO_POLICIES)

    def test_invalid_json_raises(self):
        self.use_model("not json at all")
        with self.assertRaises(AIFlowError):
            ai_flows.personal_diet_chatbot("Ravi", {}, "Can I eat curd?")

    def test_schema_mismatch_raises(self):
        self.use_model({"optimizedDietPlan": "x"})
        with self.assertRaises(AIFlowError):
            ai_flows.optimize_diet_plan({}, [], [], {})

    def test_missing_key_raises(self):
        with mock.patch.object(ai_flows, "_model", None), \
                mock.patch.object(ai_flows.settings, "GEMINI_API_KEY", ""), \
                mock.patch.object(ai_flows.settings, "GOOGLE_API_KEY", ""):
            with self.assertRaises(AIFlowError):
                ai_flows._get_model()


class TestRoleChatbot(AIFlowTestCase):
    def test_access_level_follows_role(self):
        self.use_model({"response": "ok", "suggestedActions": [], "dataAccessLevel": "hospital-wide"})
        result = ai_flows.role_based_chatbot("patient", "u1", "Ravi", "What should I eat?")
        self.assertEqual(result["dataAccessLevel"], "personal")
        self.assertFalse(result["requiresHumanReview"])

    def test_sensitive_query_needs_review(self):
        self.use_model({"response": "see a doctor", "requiresHumanReview": False})
        result = ai_flows.role_based_chatbot("dietitian", "d1", "Dr. Rao", "Patient had an allergic reaction")
        self.assertTrue(result["requiresHumanReview"])
        self.assertEqual(result["dataAccessLevel"], "patient-group")

    def test_unknown_role_does_not_call_model(self):
        model = self.use_model({})
        result = ai_flows.role_based_chatbot("nurse", "n1", "Nurse", "hello")
        self.assertIn("don't recognize your role", result["response"])
        model.generate_content.assert_not_called()

    def test_patient_context(self):
        self.db.seed("dietPlans", "plan1", {"patientId": "p1", "isActive": True, "createdAt": 1})
        context = ai_flows.build_role_context("patient", patient_id="p1")
        self.assertTrue(context["hasActiveDietPlan"])
        self.assertNotIn("recentVitals", context)

    def test_admin_context_counts(self):
        self.db.seed("patients", "p1", {"hospitalId": "h1"})
        self.db.seed("users", "d1", {"role": "dietitian", "hospitalId": "h1"})
        self.db.seed("users", "d2", {"role": "dietitian", "hospitalId": "h2"})
        self.db.seed("dietPlans", "plan1", {"isActive": True, "createdAt": 1})
        context = ai_flows.build_role_context("hospital-admin", hospital_id="h1")
        self.assertEqual(context["systemStats"], {"totalPatients": 1, "totalDietitians": 1, "activeDietPlans": 1})


class TestAdvisoryFlows(AIFlowTestCase):
    def test_analyze_dosha(self):
        self.use_model({"primaryDosha": "Pitta", "imbalanceScore": 6, "recommendations": ["Cool foods"]})
        result = ai_flows.analyze_dosha(["acid reflux"], ["irritable"], ["spicy food"])
        self.assertEqual(result["primaryDosha"], "Pitta")
        self.assertIsNone(result["secondaryDosha"])

    def test_imbalance_score_out_of_range(self):
        self.use_model({"primaryDosha": "Vata", "imbalanceScore": 14})
        with self.assertRaises(AIFlowError):
            ai_flows.analyze_dosha([], [], [])

    def test_alternatives_and_timings(self):
        self.use_model({"alternatives": [{"name": "Barley", "reason": "lighter"}]})
        self.assertEqual(ai_flows.suggest_alternatives("Wheat", "Kapha")["alternatives"][0]["name"], "Barley")

    def test_meal_timings(self):
        self.use_model({"schedule": [{"meal": "Lunch", "time": "12:30"}], "rationale": "Pitta peaks at noon"})
        result = ai_flows.generate_meal_timings("Pitta", "Office 9-5")
        self.assertEqual(result["schedule"][0]["time"], "12:30")


if __name__ == '__main__':
    unittest.main()
