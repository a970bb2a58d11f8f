import unittest
from types import SimpleNamespace
from unittest import mock

import requests

from ayurdiet.services import auth_service
from ayurdiet.services.auth_service import AuthError
from fake_firestore import FirestoreTestCase


def _response(status_code, payload):
    return SimpleNamespace(status_code=status_code, content=b"{}", json=lambda: payload)


class TestAuthService(FirestoreTestCase):
    def setUp(self):
        super().setUp()
        auth_patcher = mock.patch.object(auth_service, "auth")
        self.auth = auth_patcher.start()
        self.addCleanup(auth_patcher.stop)
        # keep the real exception type so ``except`` clauses still work
        self.auth.EmailAlreadyExistsError = type("EmailAlreadyExistsError", (Exception,), {})

        key_patcher = mock.patch.object(auth_service.settings, "FIREBASE_WEB_API_KEY", "test-key")
        key_patcher.start()
        self.addCleanup(key_patcher.stop)

    def test_sign_up_creates_profile_and_claim(self):
        self.auth.create_user.return_value = SimpleNamespace(uid="u1")

        profile = auth_service.sign_up("asha@example.com", "secret1", role="dietitian", hospital_id="h1")

        self.auth.set_custom_user_claims.assert_called_once_with("u1", {"role": "dietitian"})
        self.assertEqual(profile["id"], "u1")
        saved = self.db.raw("users", "u1")
        self.assertEqual(saved["displayName"], "asha")
        self.assertEqual(saved["hospitalId"], "h1")

    def test_patient_sign_up_creates_and_links_own_record(self):
        self.auth.create_user.return_value = SimpleNamespace(uid="u2")

        profile = auth_service.sign_up(
            "ravi@example.com", "secret1", display_name="Ravi", hospital_id="h1",
            patient_details={"age": 42, "gender": "Male", "allergies": ["nuts"]},
        )

        patient = self.db.raw("patients", profile["patientId"])
        self.assertEqual(patient["name"], "Ravi")
        self.assertEqual(patient["age"], 42)
        self.assertEqual(patient["code"], profile["patientCode"])
        self.assertRegex(profile["patientCode"], r"^PAT\d{6}$")
        self.assertNotIn("hospitalId", self.db.raw("users", "u2"))

    def test_sign_up_rejects_unknown_role(self):
        with self.assertRaises(AuthError):
            auth_service.sign_up("a@b.com", "secret1", role="nurse")
        self.auth.create_user.assert_not_called()

    def test_sign_up_duplicate_email_is_409(self):
        self.auth.create_user.side_effect = self.auth.EmailAlreadyExistsError("exists")
        with self.assertRaises(AuthError) as ctx:
            auth_service.sign_up("a@b.com", "secret1")
        self.assertEqual(ctx.exception.status_code, 409)

    def test_sign_in_returns_tokens_and_touches_last_login(self):
        self.db.seed("users", "u1", {"email": "a@b.com", "role": "patient"})
        ok = _response(200, {"localId": "u1", "idToken": "tok", "refreshToken": "ref", "expiresIn": "3600"})

        with mock.patch.object(auth_service.requests, "post", return_value=ok) as post:
            session = auth_service.sign_in("a@b.com", "pw")

        self.assertIn("accounts:signInWithPassword?key=test-key", post.call_args[0][0])
        self.assertEqual(session["idToken"], "tok")
        self.assertEqual(session["profile"]["role"], "patient")
        self.assertIn("lastLogin", self.db.raw("users", "u1"))

    def test_sign_in_bad_password_is_401(self):
        bad = _response(400, {"error": {"message": "INVALID_PASSWORD"}})
        with mock.patch.object(auth_service.requests, "post", return_value=bad):
            with self.assertRaises(AuthError) as ctx:
                auth_service.sign_in("a@b.com", "wrong")
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(str(ctx.exception), "INVALID_PASSWORD")

    def test_network_failure_is_503(self):
        with mock.patch.object(auth_service.requests, "post", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(AuthError) as ctx:
                auth_service.send_password_reset("a@b.com")
        self.assertEqual(ctx.exception.status_code, 503)

    def test_missing_api_key_is_500(self):
        with mock.patch.object(auth_service.settings, "FIREBASE_WEB_API_KEY", ""):
            with self.assertRaises(AuthError) as ctx:
                auth_service.sign_in("a@b.com", "pw")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_update_profile(self):
        self.db.seed("users", "u1", {"displayName": "old"})
        profile = auth_service.update_profile("u1", display_name="New Name")
        self.auth.update_user.assert_called_once_with("u1", display_name="New Name")
        self.assertEqual(profile["displayName"], "New Name")

    def test_set_role_mirrors_profile(self):
        auth_service.set_role("u1", "hospital-admin")
        self.auth.set_custom_user_claims.assert_called_once_with("u1", {"role": "hospital-admin"})
        self.assertEqual(self.db.raw("users", "u1")["role"], "hospital-admin")

    def test_current_user_view_prefers_claim(self):
        self.db.seed("users", "u1", {"role": "patient", "email": "a@b.com"})
        view = auth_service.current_user_view("u1", {"role": "dietitian"})
        self.assertEqual(view["role"], "dietitian")
        self.assertEqual(view["email"], "a@b.com")
        self.assertTrue(view["permissions"]["canEditDietPlans"])


if __name__ == '__main__':
    unittest.main()
