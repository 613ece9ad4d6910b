"""
Alumni verification state machine.

    PENDING --approve--> VERIFIED
    PENDING --reject---> REJECTED --unblock--> PENDING

The apply_* functions are the only code that assigns User.verification_status.
They validate the transition against the member's current in-memory state and
update the verification fields; locking, persistence and side effects belong to
verification.services.
"""
from django.utils import timezone

from accounts.models import User
from verification.exceptions import (
    AlreadyRejected,
    AlreadyVerified,
    CannotRejectVerified,
    NotPending,
    NotRejected,
)

PENDING = User.STATUS_PENDING
VERIFIED = User.STATUS_VERIFIED
REJECTED = User.STATUS_REJECTED

# Columns written by the transitions (for save(update_fields=...)).
APPROVE_FIELDS = [
    'verification_status', 'verified_by', 'verified_at', 'verification_notes',
    'rejected_by', 'rejected_at', 'rejection_reason',
    'serial_id', 'serial_counter', 'needs_serial_assignment', 'updated_at',
]
REJECT_FIELDS = [
    'verification_status', 'rejected_by', 'rejected_at', 'rejection_reason', 'updated_at',
]
UNBLOCK_FIELDS = [
    'verification_status', 'rejected_by', 'rejected_at', 'rejection_reason',
    'unblocked_by', 'unblocked_at', 'unblock_reason', 'updated_at',
]


def snapshot(member):
    """Audit-friendly view of the verification state."""
    return {
        'status': member.verification_status,
        'pendingVerification': member.pending_verification,
        'isAlumniVerified': member.is_alumni_verified,
        'isRejected': member.is_rejected,
        'serialId': member.serial_id,
        'needsSerialAssignment': member.needs_serial_assignment,
    }


def check_can_approve(member):
    if member.verification_status == VERIFIED:
        raise AlreadyVerified()
    if member.verification_status != PENDING:
        raise NotPending()


def check_can_reject(member):
    if member.verification_status == VERIFIED:
        raise CannotRejectVerified()
    if member.verification_status == REJECTED:
        raise AlreadyRejected()


def check_can_unblock(member):
    if member.verification_status != REJECTED:
        raise NotRejected()


def apply_approve(member, actor, notes='', allocation=None, at=None):
    """
    PENDING -> VERIFIED. allocation is a SerialAllocation or None (degraded mode).
    A serial ID already on the member is kept.
    """
    check_can_approve(member)
    at = at or timezone.now()
    member.verification_status = VERIFIED
    member.verified_by = actor
    member.verified_at = at
    member.verification_notes = notes or ''
    member.rejected_by = None
    member.rejected_at = None
    member.rejection_reason = ''
    if member.serial_id is None and allocation is not None:
        member.serial_id = allocation.serial_id
        member.serial_counter = allocation.counter
    member.needs_serial_assignment = member.serial_id is None
    return member


def apply_reject(member, actor, reason, at=None):
    """PENDING -> REJECTED."""
    check_can_reject(member)
    member.verification_status = REJECTED
    member.rejected_by = actor
    member.rejected_at = at or timezone.now()
    member.rejection_reason = reason
    return member


def apply_unblock(member, actor, reason='', at=None):
    """REJECTED -> PENDING. is_email_verified is left untouched."""
    check_can_unblock(member)
    member.verification_status = PENDING
    member.rejected_by = None
    member.rejected_at = None
    member.rejection_reason = ''
    member.unblocked_by = actor
    member.unblocked_at = at or timezone.now()
    member.unblock_reason = reason or ''
    return member
