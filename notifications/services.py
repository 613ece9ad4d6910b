"""
Notification services: created after the verification transaction commits.
"""
import logging

from django.db import DatabaseError
from django.utils import timezone

from notifications.models import Notification

logger = logging.getLogger(__name__)


def notify_verification_approved(member, actor=None, notes=''):
    """
    Tell the member their account is active.
    Runs post-commit: a failure is logged and never reaches the approving admin.
    """
    try:
        return Notification.objects.create(
            user=member,
            type=Notification.TYPE_VERIFICATION_APPROVED,
            title="Account Activated - Welcome!",
            message=(
                "Congratulations! Your alumni status has been verified and your account is now active."
            ),
            payload={
                "adminId": getattr(actor, "pk", None),
                "verifiedAt": (member.verified_at or timezone.now()).isoformat(),
                "serialId": member.serial_id,
                "notes": notes or "Welcome to the community",
            },
            created_by=actor,
        )
    except DatabaseError:
        logger.exception("Failed to create verification notification for user_id=%s", member.pk)
        return None


def mark_read(user, notification_id):
    """Mark one of the user's notifications read. Returns False when it is not theirs."""
    updated = Notification.objects.filter(id=notification_id, user=user).update(is_read=True)
    return bool(updated)
