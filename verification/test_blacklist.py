"""
Per-organization email blacklist.
"""
from django.test import TestCase, override_settings
from rest_framework.exceptions import ValidationError

from accounts.models import User
from core.models import Organization
from core.tenancy import OrganizationNotConfigured, TenantScope
from verification import blacklist, services
from verification.exceptions import BulkLimitExceeded, InsufficientPrivilege
from verification.models import BlacklistedEmail, VerificationAuditLog


class BlacklistTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="ABC Alumni", short_code="ABC")
        self.scope = TenantScope(self.org)
        self.admin = User.objects.create_user(
            email="admin@abc.test",
            password="pass12345",
            full_name="Admin",
            role=User.ROLE_SUPER_ADMIN,
            organization=self.org,
        )

    def test_add_normalizes_email(self):
        entry, created = blacklist.add(self.scope, "  Spam@Example.COM ", "spam", self.admin)
        self.assertTrue(created)
        self.assertEqual(entry.email, "spam@example.com")
        self.assertTrue(blacklist.is_blacklisted(self.scope, "SPAM@example.com"))

    def test_add_is_idempotent(self):
        first, _ = blacklist.add(self.scope, "spam@example.com", "spam", self.admin)
        second, created = blacklist.add(self.scope, "spam@example.com", "still spam", self.admin)
        self.assertFalse(created)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(BlacklistedEmail.objects.filter(is_active=True).count(), 1)
        second.refresh_from_db()
        self.assertEqual(second.reason, "still spam")

    def test_remove_soft_deactivates(self):
        blacklist.add(self.scope, "spam@example.com", "spam", self.admin)
        removed = blacklist.remove(self.scope, "spam@example.com", acting_admin=self.admin, reason="appeal")
        self.assertEqual(removed, 1)
        entry = BlacklistedEmail.objects.get()
        self.assertFalse(entry.is_active)
        self.assertEqual(entry.removed_by, self.admin)
        self.assertEqual(entry.removed_reason, "appeal")
        self.assertIsNotNone(entry.removed_at)
        self.assertFalse(blacklist.is_blacklisted(self.scope, "spam@example.com"))
        self.assertEqual(blacklist.remove(self.scope, "spam@example.com"), 0)

    def test_email_status(self):
        self.assertEqual(blacklist.email_status(self.scope, "new@example.com")["status"], "ALLOWED")
        blacklist.add(self.scope, "spam@example.com", "spam", self.admin)
        status = blacklist.email_status(self.scope, "spam@example.com")
        self.assertEqual(status["status"], "BLACKLISTED")
        self.assertFalse(status["canRegister"])
        blacklist.remove(self.scope, "spam@example.com", reason="appeal")
        status = blacklist.email_status(self.scope, "spam@example.com")
        self.assertEqual(status["status"], "PREVIOUSLY_BLACKLISTED")
        self.assertTrue(status["canRegister"])
        self.assertEqual(status["details"]["removalReason"], "appeal")

    def test_entries_filter(self):
        blacklist.add(self.scope, "a@example.com", "spam", self.admin)
        blacklist.add(self.scope, "b@example.com", "fake profile", self.admin)
        blacklist.remove(self.scope, "a@example.com")
        self.assertEqual([e.email for e in blacklist.entries(self.scope)], ["b@example.com"])
        self.assertEqual([e.email for e in blacklist.entries(self.scope, active=False)], ["a@example.com"])
        self.assertEqual(blacklist.entries(self.scope, active=None).count(), 2)
        self.assertEqual([e.email for e in blacklist.entries(self.scope, active=None, search="fake")], ["b@example.com"])

    def test_bootstrap_scope_cannot_blacklist(self):
        with self.assertRaises(OrganizationNotConfigured):
            blacklist.add(TenantScope(None), "spam@example.com", "spam", self.admin)

    def test_admin_blacklist_operations_are_audited(self):
        services.blacklist_email(self.scope, self.admin, "spam@example.com", "spam")
        removed = services.unblacklist_email(self.scope, self.admin, "spam@example.com")
        self.assertEqual(removed, 1)
        actions = list(VerificationAuditLog.objects.order_by("id").values_list("action", flat=True))
        self.assertEqual(actions, [VerificationAuditLog.ACTION_BLACKLIST_ADDED, VerificationAuditLog.ACTION_BLACKLIST_REMOVED])

    def test_admin_blacklist_requires_reason_and_super_admin(self):
        with self.assertRaises(ValidationError):
            services.blacklist_email(self.scope, self.admin, "spam@example.com", "  ")
        batch_admin = User.objects.create_user(
            email="batch@abc.test", password="pass12345", full_name="Batch",
            role=User.ROLE_BATCH_ADMIN, organization=self.org, batch=2014,
        )
        with self.assertRaises(InsufficientPrivilege):
            services.blacklist_email(self.scope, batch_admin, "spam@example.com", "spam")

    def test_remove_many_reports_each_email(self):
        blacklist.add(self.scope, "a@example.com", "spam", self.admin)
        blacklist.add(self.scope, "b@example.com", "spam", self.admin)

        results = blacklist.remove_many(
            self.scope, ["A@example.com", "a@example.com", "b@example.com", "c@example.com"],
            acting_admin=self.admin, reason="cleanup",
        )

        self.assertEqual(results, [
            {"email": "a@example.com", "status": "REMOVED"},
            {"email": "b@example.com", "status": "REMOVED"},
            {"email": "c@example.com", "status": "NOT_FOUND"},
        ])
        self.assertFalse(BlacklistedEmail.objects.filter(is_active=True).exists())
        entry = BlacklistedEmail.objects.get(email="a@example.com")
        self.assertEqual(entry.removed_by, self.admin)
        self.assertEqual(entry.removed_reason, "cleanup")

    def test_remove_many_leaves_other_tenant_untouched(self):
        other_org = Organization.objects.create(name="XYZ Alumni", short_code="XYZ")
        other_scope = TenantScope(other_org)
        blacklist.add(other_scope, "a@example.com", "spam", None)

        results = blacklist.remove_many(self.scope, ["a@example.com"], acting_admin=self.admin)

        self.assertEqual(results, [{"email": "a@example.com", "status": "NOT_FOUND"}])
        self.assertTrue(blacklist.is_blacklisted(other_scope, "a@example.com"))

    def test_bulk_unblacklist_audits_each_removed_email(self):
        blacklist.add(self.scope, "a@example.com", "spam", self.admin)
        blacklist.add(self.scope, "b@example.com", "spam", self.admin)

        results = services.bulk_unblacklist_emails(
            self.scope, self.admin, ["a@example.com", "b@example.com", "c@example.com"],
        )

        self.assertEqual([r["status"] for r in results], ["REMOVED", "REMOVED", "NOT_FOUND"])
        logs = VerificationAuditLog.objects.filter(action=VerificationAuditLog.ACTION_BLACKLIST_REMOVED)
        self.assertEqual(sorted(log.details["email"] for log in logs), ["a@example.com", "b@example.com"])
        self.assertTrue(all(log.details["reason"] == "Bulk removal by admin" for log in logs))

    def test_bulk_unblacklist_validation(self):
        with self.assertRaises(ValidationError):
            services.bulk_unblacklist_emails(self.scope, self.admin, [" "])
        with override_settings(VERIFICATION_BULK_LIMIT=2):
            with self.assertRaises(BulkLimitExceeded):
                services.bulk_unblacklist_emails(
                    self.scope, self.admin, ["a@example.com", "b@example.com", "c@example.com"],
                )
        batch_admin = User.objects.create_user(
            email="batch@abc.test", password="pass12345", full_name="Batch",
            role=User.ROLE_BATCH_ADMIN, organization=self.org, batch=2014,
        )
        with self.assertRaises(InsufficientPrivilege):
            services.bulk_unblacklist_emails(self.scope, batch_admin, ["a@example.com"])

    def test_stats_counts_tenant_entries(self):
        blacklist.add(self.scope, "a@example.com", "spam", self.admin)
        blacklist.add(self.scope, "b@example.com", "spam", self.admin)
        blacklist.add(self.scope, "c@example.com", "fake profile", self.admin)
        blacklist.remove(self.scope, "c@example.com", reason="appeal")
        other_org = Organization.objects.create(name="XYZ Alumni", short_code="XYZ")
        blacklist.add(TenantScope(other_org), "x@example.com", "spam", None)

        result = blacklist.stats(self.scope)

        self.assertEqual(result["total"], 3)
        self.assertEqual(result["active"], 2)
        self.assertEqual(result["removed"], 1)
        self.assertEqual(result["addedLast7Days"], 3)
        self.assertEqual(result["addedLast30Days"], 3)
        self.assertEqual(result["removedLast7Days"], 1)
        self.assertEqual(result["topReasons"], [{"reason": "spam", "count": 2}])
