"""
Minimal RBAC tests: role-based access control.
- Alumni token hitting admin endpoint returns 403
- Batch Admin hitting Super Admin endpoint returns 403
- Login returns tokens and verification state
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.models import Organization


class RBACTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Test Org", short_code="TST")
        self.client = APIClient()

        self.super_admin = User.objects.create_user(
            email="super@test.org",
            password="pass12345",
            full_name="Super Admin",
            role=User.ROLE_SUPER_ADMIN,
            organization=self.org,
        )
        self.batch_admin = User.objects.create_user(
            email="batch@test.org",
            password="pass12345",
            full_name="Batch Admin",
            role=User.ROLE_BATCH_ADMIN,
            organization=self.org,
            batch=2014,
        )
        self.alumnus = User.objects.create_user(
            email="alumnus@test.org",
            password="pass12345",
            full_name="Alumnus",
            organization=self.org,
            batch=2014,
        )

    def _auth_header(self, user: User) -> dict:
        token = str(AccessToken.for_user(user))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def test_alumnus_hitting_admin_endpoint_returns_403(self):
        self.client.credentials(**self._auth_header(self.alumnus))
        res = self.client.get("/api/admin/verification/stats")
        self.assertEqual(res.status_code, 403)

    def test_batch_admin_hitting_stats_returns_200(self):
        self.client.credentials(**self._auth_header(self.batch_admin))
        res = self.client.get("/api/admin/verification/stats")
        self.assertEqual(res.status_code, 200)

    def test_batch_admin_hitting_bulk_verify_returns_403(self):
        self.client.credentials(**self._auth_header(self.batch_admin))
        res = self.client.post(
            "/api/admin/verification/bulk-verify", {"memberIds": [self.alumnus.pk]}, format="json",
        )
        self.assertEqual(res.status_code, 403)
        self.alumnus.refresh_from_db()
        self.assertTrue(self.alumnus.pending_verification)

    def test_batch_admin_hitting_blacklist_returns_403(self):
        self.client.credentials(**self._auth_header(self.batch_admin))
        res = self.client.get("/api/admin/blacklist/")
        self.assertEqual(res.status_code, 403)

    def test_super_admin_hitting_blacklist_returns_200(self):
        self.client.credentials(**self._auth_header(self.super_admin))
        res = self.client.get("/api/admin/blacklist/")
        self.assertEqual(res.status_code, 200)


class AuthTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Test Org", short_code="TST")
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="alumnus@test.org",
            password="pass12345",
            full_name="Alumnus",
            organization=self.org,
            batch=2014,
        )

    def test_login_returns_tokens_and_state(self):
        res = self.client.post("/api/auth/login", {"email": "alumnus@test.org", "password": "pass12345"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertIn("accessToken", res.data)
        self.assertIn("refreshToken", res.data)
        self.assertEqual(res.data["user"]["verificationStatus"], "PENDING")
        self.assertEqual(res.data["user"]["organizationCode"], "TST")

    def test_login_wrong_password_returns_401(self):
        res = self.client.post("/api/auth/login", {"email": "alumnus@test.org", "password": "nope"}, format="json")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "invalid_credentials")

    def test_login_disabled_account_returns_401(self):
        User.objects.filter(pk=self.user.pk).update(is_active=False)
        res = self.client.post("/api/auth/login", {"email": "alumnus@test.org", "password": "pass12345"}, format="json")
        self.assertEqual(res.status_code, 401)

    def test_me(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.user)}")
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["email"], "alumnus@test.org")
        self.assertEqual(res.data["role"], "USER")
        self.assertIsNone(res.data["serialId"])
