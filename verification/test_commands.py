"""
assign_pending_serials management command.
"""
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from accounts.models import User
from core.models import Organization
from core.tenancy import TenantScope
from verification import services


class AssignPendingSerialsTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="ABC Alumni", short_code="ABC")
        self.admin = User.objects.create_user(
            email="admin@abc.test", password="pass12345", full_name="Admin",
            role=User.ROLE_SUPER_ADMIN, organization=self.org,
        )
        self.member = User.objects.create_user(
            email="jane@abc.test", password="pass12345", full_name="Jane Doe", organization=self.org,
        )
        services.approve_member(TenantScope(self.org), self.admin, self.member.pk)
        User.objects.filter(pk=self.member.pk).update(batch=2014, admission_year=2010)

    def test_dry_run_changes_nothing(self):
        out = StringIO()
        call_command("assign_pending_serials", stdout=out)
        self.assertIn("DRY RUN", out.getvalue())
        self.member.refresh_from_db()
        self.assertIsNone(self.member.serial_id)
        self.assertTrue(self.member.needs_serial_assignment)

    def test_apply_assigns_serial(self):
        out = StringIO()
        call_command("assign_pending_serials", "--organization", "abc", "--apply", stdout=out)
        self.member.refresh_from_db()
        self.assertEqual(self.member.serial_id, "ABC0001JDX1014")
        self.assertFalse(self.member.needs_serial_assignment)
        self.assertIn("Assigned 1 serial ID(s), 0 failed", out.getvalue())

    def test_unknown_organization(self):
        with self.assertRaises(CommandError):
            call_command("assign_pending_serials", "--organization", "NOPE")
