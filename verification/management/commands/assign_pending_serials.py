"""
Mint serial IDs for members verified while serial generation was failing.
Run: python manage.py assign_pending_serials [--organization CODE] [--limit N] [--apply]
Without --apply only lists the members that would be assigned.
"""
from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from accounts.models import User
from core.models import Organization
from core.tenancy import TenantScope, resolve_tenant
from verification.services import assign_pending_serial, members


class Command(BaseCommand):
    help = "Assign serial IDs to verified members flagged with needs_serial_assignment."

    def add_arguments(self, parser):
        parser.add_argument("--organization", help="Organization short code (default: all active organizations)")
        parser.add_argument("--limit", type=int, default=None, help="Process at most N members per organization")
        parser.add_argument("--apply", action="store_true", help="Write serial IDs (default is a dry run)")

    def handle(self, *args, **options):
        code = options.get("organization")
        limit = options.get("limit")
        apply = options["apply"]

        if code:
            try:
                scopes = [resolve_tenant(code)]
            except APIException as exc:
                raise CommandError(f"{code}: {exc.detail}")
        else:
            scopes = [TenantScope(org) for org in Organization.objects.filter(is_active=True).order_by("short_code")]

        assigned = failed = 0
        for scope in scopes:
            qs = (
                members(scope)
                .filter(verification_status=User.STATUS_VERIFIED, serial_id__isnull=True)
                .order_by("verified_at", "id")
            )
            if limit:
                qs = qs[:limit]
            pending_ids = list(qs.values_list("id", flat=True))
            self.stdout.write(f"{scope}: {len(pending_ids)} member(s) without serial ID")

            for member_id in pending_ids:
                if not apply:
                    self.stdout.write(f"  would assign user_id={member_id}")
                    continue
                try:
                    allocation = assign_pending_serial(scope, member_id)
                except APIException as exc:
                    failed += 1
                    self.stdout.write(self.style.ERROR(f"  user_id={member_id}: {exc.detail}"))
                    continue
                if allocation is not None:
                    assigned += 1
                    self.stdout.write(f"  user_id={member_id} -> {allocation.serial_id}")

        if not apply:
            self.stdout.write(self.style.WARNING("DRY RUN: pass --apply to write serial IDs"))
            return
        style = self.style.SUCCESS if not failed else self.style.WARNING
        self.stdout.write(style(f"Assigned {assigned} serial ID(s), {failed} failed"))
