"""
Serial ID allocation.

Format: ORG_SHORT + COUNTER(>=4 digits) + NAME_CHARS(3) + ADMISSION_YY + PASSOUT_YY
Example: ABC0001JDX1014 (organization ABC, counter 1, Jane Doe, 2010-2014).

The per-organization counter is advanced with a single UPDATE ... SET
serial_counter = serial_counter + 1 inside a transaction, so two concurrent
allocations for one organization can never consume the same value.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import OperationalError, transaction
from django.db.models import F
from rest_framework.exceptions import ValidationError

from accounts.models import User
from core.models import Organization
from core.tenancy import OrganizationNotConfigured
from verification.audit import record_audit
from verification.exceptions import (
    InsufficientPrivilege,
    InvalidConfirmationToken,
    MemberNotFound,
    SerialGenerationFailed,
)
from verification.models import VerificationAuditLog

logger = logging.getLogger(__name__)

SERIAL_PATTERN = re.compile(
    r'^(?P<org>[A-Z]{2,10})(?P<counter>\d{4,})(?P<initials>[A-Z]{3})'
    r'(?P<suffix>\d{2})?(?P<admission>\d{2})(?P<passout>\d{2})$'
)
MAX_SUFFIX_ATTEMPTS = 99


@dataclass(frozen=True)
class SerialAllocation:
    serial_id: str
    counter: int


@dataclass(frozen=True)
class SerialComponents:
    organization_code: str
    counter: int
    initials: str
    admission_yy: int
    passout_yy: int
    suffix: Optional[int] = None


def name_initials(full_name):
    """
    First letter of first, middle and last name, upper-cased, padded with X to 3.
    "John Michael Doe" -> JMD, "Jane Doe" -> JDX, "Cher" -> CXX.
    """
    parts = (full_name or '').split()
    chars = ''
    if parts:
        chars += parts[0][:1]
        if len(parts) == 2:
            chars += parts[1][:1]
        elif len(parts) >= 3:
            chars += parts[1][:1] + parts[-1][:1]
    chars = re.sub(r'[^A-Z]', '', chars.upper())
    return (chars + 'XXX')[:3]


def member_years(member):
    """(admission_year, passout_year) for a member; batch is the passout year."""
    passout = member.passout_year or member.batch
    if not passout:
        raise SerialGenerationFailed('User has no batch/passout year; serial ID cannot be derived.')
    admission = member.admission_year or passout - settings.ADMISSION_YEARS_BEFORE_PASSOUT
    return admission, passout


def compose_serial_id(short_code, counter, full_name, admission_year, passout_year):
    return (
        f'{short_code}{counter:04d}{name_initials(full_name)}'
        f'{admission_year % 100:02d}{passout_year % 100:02d}'
    )


def parse_serial_id(serial_id):
    """SerialComponents for a well-formed serial ID, else None."""
    match = SERIAL_PATTERN.match(serial_id or '')
    if not match:
        return None
    suffix = match.group('suffix')
    return SerialComponents(
        organization_code=match.group('org'),
        counter=int(match.group('counter')),
        initials=match.group('initials'),
        admission_yy=int(match.group('admission')),
        passout_yy=int(match.group('passout')),
        suffix=int(suffix) if suffix else None,
    )


def next_counter(scope):
    """
    Atomically advance the tenant's serial counter and return the value consumed.
    Retries lock conflicts (deadlock / serialization failure) before giving up.
    """
    org = scope.require_organization()
    retries = max(1, settings.SERIAL_ALLOCATION_RETRIES)
    for attempt in range(1, retries + 1):
        try:
            with transaction.atomic():
                updated = Organization.objects.filter(pk=org.pk, is_active=True).update(
                    serial_counter=F('serial_counter') + 1,
                )
                if not updated:
                    raise OrganizationNotConfigured()
                return Organization.objects.filter(pk=org.pk).values_list('serial_counter', flat=True).get()
        except OperationalError as exc:
            logger.warning(
                'Serial counter conflict org=%s attempt=%s/%s: %s',
                org.short_code, attempt, retries, exc,
            )
    raise SerialGenerationFailed(f'Serial counter for {org.short_code} is busy; retry budget exhausted.')


def _unique_serial_id(scope, proposed):
    # Collisions only happen after a counter reset; insert a 2-digit suffix before the years.
    taken = scope.filter(User.objects.all())
    if not taken.filter(serial_id=proposed).exists():
        return proposed
    base, years = proposed[:-4], proposed[-4:]
    for attempt in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        candidate = f'{base}{attempt:02d}{years}'
        if not taken.filter(serial_id=candidate).exists():
            logger.warning('Serial ID %s already taken, using %s', proposed, candidate)
            return candidate
    raise SerialGenerationFailed(f'Could not generate unique serial ID after {MAX_SUFFIX_ATTEMPTS} attempts.')


def allocate_serial(scope, member):
    """Mint a serial ID for member within scope. Returns SerialAllocation."""
    org = scope.require_organization()
    if member.organization_id != org.pk:
        raise MemberNotFound()
    admission, passout = member_years(member)
    counter = next_counter(scope)
    serial_id = _unique_serial_id(
        scope, compose_serial_id(org.short_code, counter, member.full_name, admission, passout),
    )
    logger.info('Generated serial ID %s (counter %s) for user_id=%s', serial_id, counter, member.pk)
    return SerialAllocation(serial_id=serial_id, counter=counter)


def reset_serial_counter(scope, actor, new_value, confirmation_token, request_meta=None):
    """
    Overwrite the tenant's serial counter (data-migration recovery only).
    Takes the same row lock as allocation; duplicates are possible if misused.
    """
    if actor.role != User.ROLE_SUPER_ADMIN:
        raise InsufficientPrivilege('Only Super Admins can reset the serial counter.')
    if confirmation_token != settings.SERIAL_COUNTER_RESET_TOKEN:
        raise InvalidConfirmationToken()
    if not isinstance(new_value, int) or not 0 <= new_value <= settings.SERIAL_COUNTER_MAX:
        raise ValidationError(f'New counter must be between 0 and {settings.SERIAL_COUNTER_MAX}.')
    org = scope.require_organization()

    with transaction.atomic():
        locked = Organization.objects.select_for_update().get(pk=org.pk)
        previous = locked.serial_counter
        locked.serial_counter = new_value
        locked.save(update_fields=['serial_counter', 'updated_at'])
        record_audit(
            scope,
            actor,
            VerificationAuditLog.ACTION_SERIAL_COUNTER_RESET,
            before={'serialCounter': previous},
            after={'serialCounter': new_value},
            details={'confirmationProvided': True, 'warning': 'Critical operation - serial counter reset'},
            request_meta=request_meta,
        )

    logger.critical(
        'Serial counter reset org=%s %s -> %s by user_id=%s',
        org.short_code, previous, new_value, actor.pk,
    )
    return {'previousValue': previous, 'newValue': new_value}
