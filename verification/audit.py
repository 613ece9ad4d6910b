"""
Best-effort audit trail for verification actions.
"""
import logging

from django.db import DatabaseError, transaction

from verification.models import VerificationAuditLog

logger = logging.getLogger(__name__)


def record_audit(scope, actor, action, member=None, before=None, after=None, details=None, request_meta=None):
    """
    Write one VerificationAuditLog row in its own savepoint.
    A failed write is logged and never fails the caller's transition.
    """
    meta = request_meta or {}
    try:
        with transaction.atomic():
            return VerificationAuditLog.objects.create(
                organization=scope.organization,
                actor=actor,
                member=member,
                action=action,
                before_state=before or {},
                after_state=after or {},
                details=details or {},
                ip_address=meta.get('ip_address'),
                user_agent=meta.get('user_agent') or '',
            )
    except DatabaseError:
        logger.exception(
            'Audit write failed: action=%s member_id=%s actor_id=%s',
            action, getattr(member, 'pk', None), getattr(actor, 'pk', None),
        )
        return None


def member_history(scope, member):
    return scope.filter(VerificationAuditLog.objects.filter(member=member)).select_related('actor')
