"""
Per-organization email blacklist.
An email is blacklisted iff an active entry exists for that exact (organization, email) pair.
"""
import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from verification.models import BlacklistedEmail

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or '').strip().lower()


def add(scope, email, reason, acting_admin):
    """
    Blacklist email within the tenant. Idempotent per (organization, email):
    an existing active entry keeps its row and takes the new reason.
    Returns (entry, created).
    """
    org = scope.require_organization()
    email = normalize_email(email)
    with transaction.atomic():
        entry = (
            scope.filter(BlacklistedEmail.objects.select_for_update())
            .filter(email=email, is_active=True)
            .first()
        )
        if entry is None:
            try:
                with transaction.atomic():
                    entry = BlacklistedEmail.objects.create(
                        organization=org,
                        email=email,
                        reason=reason or '',
                        blacklisted_by=acting_admin,
                    )
                logger.info('Blacklisted %s in %s', email, scope)
                return entry, True
            except IntegrityError:
                # A concurrent add created the active row first.
                entry = scope.filter(BlacklistedEmail.objects.select_for_update()).get(
                    email=email, is_active=True,
                )
        if reason and entry.reason != reason:
            entry.reason = reason
            entry.save(update_fields=['reason'])
        return entry, False


def remove(scope, email, acting_admin=None, reason=''):
    """Deactivate the active entry for email in the tenant. Returns the number of rows deactivated."""
    email = normalize_email(email)
    removed = scope.filter(BlacklistedEmail.objects.filter(email=email, is_active=True)).update(
        is_active=False,
        removed_by=acting_admin,
        removed_at=timezone.now(),
        removed_reason=reason or '',
    )
    if removed:
        logger.info('Removed %s from blacklist in %s', email, scope)
    return removed


def remove_many(scope, emails, acting_admin=None, reason=''):
    """
    Deactivate the active entries for several emails at once.
    Returns one {email, status} item per distinct email, status REMOVED or NOT_FOUND.
    """
    normalized = list(dict.fromkeys(normalize_email(e) for e in emails if normalize_email(e)))
    with transaction.atomic():
        active = set(
            scope.filter(BlacklistedEmail.objects.select_for_update())
            .filter(email__in=normalized, is_active=True)
            .values_list('email', flat=True)
        )
        if active:
            scope.filter(BlacklistedEmail.objects.filter(email__in=active, is_active=True)).update(
                is_active=False,
                removed_by=acting_admin,
                removed_at=timezone.now(),
                removed_reason=reason or '',
            )
    logger.info('Bulk removed %s of %s emails from blacklist in %s', len(active), len(normalized), scope)
    return [
        {'email': email, 'status': 'REMOVED' if email in active else 'NOT_FOUND'}
        for email in normalized
    ]


def is_blacklisted(scope, email):
    return scope.filter(BlacklistedEmail.objects.all()).filter(
        email=normalize_email(email), is_active=True,
    ).exists()


def entries(scope, active=True, search=None):
    qs = scope.filter(BlacklistedEmail.objects.all()).select_related('blacklisted_by', 'removed_by')
    if active is not None:
        qs = qs.filter(is_active=active)
    if search:
        qs = qs.filter(Q(email__icontains=search.strip()) | Q(reason__icontains=search.strip()))
    return qs.order_by('-blacklisted_at', '-id')


def email_status(scope, email):
    """ALLOWED, BLACKLISTED or PREVIOUSLY_BLACKLISTED for the registration check endpoint."""
    email = normalize_email(email)
    latest = entries(scope, active=None).filter(email=email).order_by('-is_active', '-blacklisted_at', '-id').first()
    if latest is None:
        return {'email': email, 'isBlacklisted': False, 'canRegister': True, 'status': 'ALLOWED'}
    return {
        'email': email,
        'isBlacklisted': latest.is_active,
        'canRegister': not latest.is_active,
        'status': 'BLACKLISTED' if latest.is_active else 'PREVIOUSLY_BLACKLISTED',
        'details': {
            'reason': latest.reason,
            'blacklistedAt': latest.blacklisted_at.isoformat() if latest.blacklisted_at else None,
            'removedAt': latest.removed_at.isoformat() if latest.removed_at else None,
            'removalReason': latest.removed_reason or None,
        },
    }


def stats(scope):
    """Blacklist counts for the admin dashboard."""
    now = timezone.now()
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)
    qs = scope.filter(BlacklistedEmail.objects.all())
    counts = qs.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_active=True)),
        removed=Count('id', filter=Q(is_active=False)),
        added_week=Count('id', filter=Q(blacklisted_at__gte=week_ago)),
        added_month=Count('id', filter=Q(blacklisted_at__gte=month_ago)),
        removed_week=Count('id', filter=Q(removed_at__gte=week_ago)),
    )
    top_reasons = (
        qs.filter(is_active=True)
        .values('reason')
        .annotate(count=Count('id'))
        .order_by('-count', 'reason')[:5]
    )
    return {
        'total': counts['total'],
        'active': counts['active'],
        'removed': counts['removed'],
        'addedLast7Days': counts['added_week'],
        'addedLast30Days': counts['added_month'],
        'removedLast7Days': counts['removed_week'],
        'topReasons': [{'reason': row['reason'], 'count': row['count']} for row in top_reasons],
    }
