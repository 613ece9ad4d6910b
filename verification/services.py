"""
Alumni verification workflow.

Every transition runs in one transaction: lock the member row (tenant-scoped),
check the state-machine precondition against the locked row, apply the change,
write blacklist/audit side records. A concurrent transition on the same member
therefore sees the committed state and fails with the matching error instead of
overwriting it.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Count, Q
from rest_framework.exceptions import APIException, ValidationError

from accounts.models import User
from core.models import Organization
from notifications.services import notify_verification_approved
from verification import blacklist, state
from verification.audit import member_history, record_audit
from verification.exceptions import (
    BulkLimitExceeded,
    InsufficientPrivilege,
    MemberNotFound,
    SerialGenerationFailed,
)
from verification.models import VerificationAuditLog
from verification.serial import allocate_serial

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    member_id: int
    serial_id: Optional[str]
    counter: Optional[int]
    verified_at: datetime
    needs_serial_assignment: bool

    def to_dict(self):
        return {
            'memberId': self.member_id,
            'serialId': self.serial_id,
            'counter': self.counter,
            'verifiedAt': self.verified_at.isoformat(),
            'needsSerialAssignment': self.needs_serial_assignment,
        }


@dataclass
class RejectionResult:
    member_id: int
    rejected_at: datetime
    blacklisted: bool
    blacklist_entry_id: int

    def to_dict(self):
        return {
            'memberId': self.member_id,
            'rejectedAt': self.rejected_at.isoformat(),
            'blacklisted': self.blacklisted,
            'blacklistEntryId': self.blacklist_entry_id,
        }


@dataclass
class UnblockResult:
    member_id: int
    reinstated_at: datetime
    blacklist_entries_removed: int

    def to_dict(self):
        return {
            'memberId': self.member_id,
            'reinstatedAt': self.reinstated_at.isoformat(),
            'blacklistEntriesRemoved': self.blacklist_entries_removed,
        }


@dataclass
class BulkApprovalResult:
    successful: List[ApprovalResult] = field(default_factory=list)
    failed: List[dict] = field(default_factory=list)

    def to_dict(self):
        return {
            'successful': [r.to_dict() for r in self.successful],
            'failed': self.failed,
            'verifiedCount': len(self.successful),
        }


def _require_super_admin(actor, action):
    if actor.role != User.ROLE_SUPER_ADMIN:
        raise InsufficientPrivilege(f'Only Super Admins can {action}.')


def _require_verification_admin(actor):
    if actor.role not in (User.ROLE_SUPER_ADMIN, User.ROLE_BATCH_ADMIN):
        raise InsufficientPrivilege('Admin access required.')


def members(scope):
    """Alumni accounts (role USER) of the tenant."""
    return scope.filter(User.objects.filter(role=User.ROLE_USER))


def _lock_member(scope, member_id):
    try:
        return members(scope).select_for_update().get(pk=member_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise MemberNotFound()


def approve_member(scope, actor, member_id, notes='', request_meta=None):
    """
    PENDING -> VERIFIED, minting a serial ID.
    If the serial cannot be generated the member is still verified and flagged
    for manual assignment; OrganizationNotConfigured aborts the approval.
    """
    _require_verification_admin(actor)
    scope.require_organization()
    notes = (notes or '').strip()

    with transaction.atomic():
        member = _lock_member(scope, member_id)
        if actor.role == User.ROLE_BATCH_ADMIN and (actor.batch is None or member.batch != actor.batch):
            raise InsufficientPrivilege('Batch Admins can only verify users of their own batch.')
        state.check_can_approve(member)
        before = state.snapshot(member)

        allocation = None
        if member.serial_id is None:
            try:
                with transaction.atomic():
                    allocation = allocate_serial(scope, member)
            except SerialGenerationFailed as exc:
                logger.warning(
                    'Verifying user_id=%s without serial ID, manual assignment required: %s',
                    member.pk, exc.detail,
                )

        state.apply_approve(member, actor, notes=notes, allocation=allocation)
        member.save(update_fields=state.APPROVE_FIELDS)
        action = (
            VerificationAuditLog.ACTION_APPROVED_WITHOUT_SERIAL
            if member.needs_serial_assignment
            else VerificationAuditLog.ACTION_APPROVED
        )
        record_audit(
            scope, actor, action,
            member=member,
            before=before,
            after=state.snapshot(member),
            details={'notes': notes, 'serialCounter': member.serial_counter},
            request_meta=request_meta,
        )
        transaction.on_commit(partial(notify_verification_approved, member, actor, notes), robust=True)

    logger.info('User %s verified by %s in %s (serial=%s)', member.pk, actor.pk, scope, member.serial_id)
    return ApprovalResult(
        member_id=member.pk,
        serial_id=member.serial_id,
        counter=member.serial_counter,
        verified_at=member.verified_at,
        needs_serial_assignment=member.needs_serial_assignment,
    )


def reject_member(scope, actor, member_id, reason, request_meta=None):
    """PENDING -> REJECTED and blacklist the member's email within the tenant."""
    _require_super_admin(actor, 'reject users')
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError('Rejection reason is required.')
    scope.require_organization()

    with transaction.atomic():
        member = _lock_member(scope, member_id)
        before = state.snapshot(member)
        state.apply_reject(member, actor, reason)
        member.save(update_fields=state.REJECT_FIELDS)
        entry, created = blacklist.add(scope, member.email, f'User verification rejected: {reason}', actor)
        record_audit(
            scope, actor, VerificationAuditLog.ACTION_REJECTED,
            member=member,
            before=before,
            after=state.snapshot(member),
            details={'reason': reason, 'blacklistEntryId': entry.pk, 'blacklistEntryCreated': created},
            request_meta=request_meta,
        )

    logger.info('User %s rejected by %s in %s', member.pk, actor.pk, scope)
    return RejectionResult(
        member_id=member.pk,
        rejected_at=member.rejected_at,
        blacklisted=True,
        blacklist_entry_id=entry.pk,
    )


def unblock_member(scope, actor, member_id, reason='', request_meta=None):
    """REJECTED -> PENDING and lift the tenant blacklist entry for the member's email."""
    _require_super_admin(actor, 'unblock users')
    reason = (reason or '').strip() or 'User unblocked by admin'
    scope.require_organization()

    with transaction.atomic():
        member = _lock_member(scope, member_id)
        before = state.snapshot(member)
        state.apply_unblock(member, actor, reason)
        member.save(update_fields=state.UNBLOCK_FIELDS)
        removed = blacklist.remove(scope, member.email, acting_admin=actor, reason=reason)
        record_audit(
            scope, actor, VerificationAuditLog.ACTION_UNBLOCKED,
            member=member,
            before=before,
            after=state.snapshot(member),
            details={
                'reason': reason,
                'blacklistEntriesRemoved': removed,
                'emailVerificationPreserved': member.is_email_verified,
            },
            request_meta=request_meta,
        )

    logger.info('User %s unblocked by %s in %s', member.pk, actor.pk, scope)
    return UnblockResult(
        member_id=member.pk,
        reinstated_at=member.unblocked_at,
        blacklist_entries_removed=removed,
    )


def bulk_approve(scope, actor, member_ids, notes='', request_meta=None):
    """
    Approve each member in its own transaction; failures are reported per member
    and never undo the approvals that succeeded.
    """
    _require_super_admin(actor, 'perform bulk verification')
    ids = list(dict.fromkeys(member_ids or []))
    if not ids:
        raise ValidationError('User IDs array is required.')
    limit = settings.VERIFICATION_BULK_LIMIT
    if len(ids) > limit:
        raise BulkLimitExceeded(f'At most {limit} users can be verified per request.')

    result = BulkApprovalResult()
    for member_id in ids:
        try:
            result.successful.append(
                approve_member(scope, actor, member_id, notes=notes, request_meta=request_meta)
            )
        except APIException as exc:
            result.failed.append({
                'memberId': member_id,
                'code': getattr(exc, 'default_code', 'error'),
                'detail': str(exc.detail),
            })
        except DatabaseError:
            logger.exception('Bulk verify failed for user_id=%s', member_id)
            result.failed.append({
                'memberId': member_id,
                'code': 'database_error',
                'detail': 'Database error while verifying user.',
            })

    logger.info(
        'Bulk verification in %s by %s: %s verified, %s failed',
        scope, actor.pk, len(result.successful), len(result.failed),
    )
    return result


def assign_pending_serial(scope, member_id, actor=None, request_meta=None):
    """
    Follow-up for degraded approvals: mint the missing serial ID of a verified member.
    Returns the SerialAllocation, or None when the member needs nothing.
    """
    scope.require_organization()
    with transaction.atomic():
        member = _lock_member(scope, member_id)
        if not member.is_alumni_verified or member.serial_id:
            return None
        allocation = allocate_serial(scope, member)
        member.serial_id = allocation.serial_id
        member.serial_counter = allocation.counter
        member.needs_serial_assignment = False
        member.save(update_fields=['serial_id', 'serial_counter', 'needs_serial_assignment', 'updated_at'])
        record_audit(
            scope, actor, VerificationAuditLog.ACTION_SERIAL_ASSIGNED,
            member=member,
            after={'serialId': allocation.serial_id, 'serialCounter': allocation.counter},
            request_meta=request_meta,
        )
    return allocation


def pending_members(scope, search=None, batch=None):
    qs = members(scope).filter(verification_status=User.STATUS_PENDING, is_active=True)
    if search:
        search = search.strip()
        qs = qs.filter(Q(full_name__icontains=search) | Q(email__icontains=search))
    if batch:
        qs = qs.filter(batch=batch)
    return qs.order_by('-date_joined', '-id')


def verification_stats(scope):
    counts = members(scope).filter(is_active=True).aggregate(
        pending=Count('id', filter=Q(verification_status=User.STATUS_PENDING)),
        verified=Count('id', filter=Q(verification_status=User.STATUS_VERIFIED)),
        rejected=Count('id', filter=Q(verification_status=User.STATUS_REJECTED)),
        awaiting_serial=Count('id', filter=Q(needs_serial_assignment=True)),
    )
    by_batch = (
        members(scope)
        .filter(is_active=True, verification_status=User.STATUS_PENDING, batch__isnull=False)
        .values('batch')
        .annotate(count=Count('id'))
        .order_by('-batch')
    )
    return {
        'pending': {
            'total': counts['pending'],
            'byBatch': [{'batch': row['batch'], 'count': row['count']} for row in by_batch],
        },
        'processed': {
            'approved': counts['verified'],
            'rejected': counts['rejected'],
            'total': counts['verified'] + counts['rejected'],
        },
        'awaitingSerialAssignment': counts['awaiting_serial'],
        'serialCounter': current_serial_counter(scope),
    }


def member_details(scope, member_id):
    """(member, audit history) for the admin detail view."""
    try:
        member = members(scope).select_related('verified_by', 'rejected_by').get(pk=member_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise MemberNotFound()
    return member, list(member_history(scope, member)[:50])


def current_serial_counter(scope):
    """Committed counter value (the scope's Organization instance may be stale)."""
    if scope.organization is None:
        return None
    return Organization.objects.filter(pk=scope.organization_id).values_list('serial_counter', flat=True).first()


def blacklist_email(scope, actor, email, reason, request_meta=None):
    """Manual blacklist entry by a Super Admin. Returns (entry, created)."""
    _require_super_admin(actor, 'manage the blacklist')
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError('Blacklist reason is required.')
    with transaction.atomic():
        entry, created = blacklist.add(scope, email, reason, actor)
        record_audit(
            scope, actor, VerificationAuditLog.ACTION_BLACKLIST_ADDED,
            details={'email': entry.email, 'reason': reason, 'entryId': entry.pk, 'created': created},
            request_meta=request_meta,
        )
    return entry, created


def unblacklist_email(scope, actor, email, reason='', request_meta=None):
    """Lift the tenant's active blacklist entry for email. Returns the number of entries deactivated."""
    _require_super_admin(actor, 'manage the blacklist')
    scope.require_organization()
    reason = (reason or '').strip() or 'Removed by admin'
    with transaction.atomic():
        removed = blacklist.remove(scope, email, acting_admin=actor, reason=reason)
        if removed:
            record_audit(
                scope, actor, VerificationAuditLog.ACTION_BLACKLIST_REMOVED,
                details={'email': blacklist.normalize_email(email), 'reason': reason},
                request_meta=request_meta,
            )
    return removed


def bulk_unblacklist_emails(scope, actor, emails, reason='', request_meta=None):
    """
    Lift the tenant's blacklist entries for several emails in one transaction.
    Emails without an active entry are reported as NOT_FOUND, not as errors.
    """
    _require_super_admin(actor, 'manage the blacklist')
    scope.require_organization()
    normalized = list(dict.fromkeys(
        blacklist.normalize_email(e) for e in emails or [] if blacklist.normalize_email(e)
    ))
    if not normalized:
        raise ValidationError('Emails array is required.')
    limit = settings.VERIFICATION_BULK_LIMIT
    if len(normalized) > limit:
        raise BulkLimitExceeded(f'At most {limit} emails can be removed per request.')
    reason = (reason or '').strip() or 'Bulk removal by admin'

    with transaction.atomic():
        results = blacklist.remove_many(scope, normalized, acting_admin=actor, reason=reason)
        for item in results:
            if item['status'] == 'REMOVED':
                record_audit(
                    scope, actor, VerificationAuditLog.ACTION_BLACKLIST_REMOVED,
                    details={'email': item['email'], 'reason': reason, 'bulk': True},
                    request_meta=request_meta,
                )
    return results
