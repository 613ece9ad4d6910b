"""
Admin verification API views
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsSuperAdmin, IsVerificationAdmin
from accounts.models import User
from core.serializers import OrganizationSerializer
from core.tenancy import ensure_actor_in_scope, get_tenant_scope
from core.utils import client_meta
from verification import blacklist, services
from verification.serial import reset_serial_counter
from verification.serializers import (
    AuditLogSerializer,
    BlacklistAddSerializer,
    BlacklistBulkRemoveSerializer,
    BlacklistEntrySerializer,
    BlacklistRemoveSerializer,
    BulkVerifySerializer,
    MemberDetailSerializer,
    PendingMemberSerializer,
    RejectSerializer,
    SerialCounterResetSerializer,
    UnblockSerializer,
    VerifySerializer,
)


class VerificationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _scope(request):
    scope = get_tenant_scope(request)
    ensure_actor_in_scope(request.user, scope)
    return scope


def _int_param(request, name):
    value = request.query_params.get(name)
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


# ---------- Pending queue and stats ----------

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def pending_members_view(request):
    """
    GET /api/admin/verification/pending?search=&batch=&page=&page_size=
    Batch Admins only see their own batch.
    """
    scope = _scope(request)
    batch = _int_param(request, 'batch')
    if request.user.role == User.ROLE_BATCH_ADMIN:
        batch = request.user.batch
    qs = services.pending_members(scope, search=request.query_params.get('search'), batch=batch)
    if request.user.role == User.ROLE_BATCH_ADMIN and batch is None:
        qs = qs.none()
    paginator = VerificationPagination()
    page = paginator.paginate_queryset(qs, request)
    return paginator.get_paginated_response(PendingMemberSerializer(page, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def verification_stats_view(request):
    """GET /api/admin/verification/stats"""
    return Response(services.verification_stats(_scope(request)))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def member_detail_view(request, member_id):
    """
    GET /api/admin/verification/users/{id}
    Member verification state plus the latest audit history.
    """
    member, history = services.member_details(_scope(request), member_id)
    return Response({
        'user': MemberDetailSerializer(member).data,
        'history': AuditLogSerializer(history, many=True).data,
    })


# ---------- Transitions ----------

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def verify_member_view(request, member_id):
    """
    POST /api/admin/verification/users/{id}/verify
    Body: {notes?}
    200 with the minted serial ID; 409 already_verified / not_pending.
    """
    scope = _scope(request)
    serializer = VerifySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.approve_member(
        scope, request.user, member_id,
        notes=serializer.validated_data['notes'],
        request_meta=client_meta(request),
    )
    detail = 'User verified successfully.'
    if result.needs_serial_assignment:
        detail = 'User verified; serial ID generation failed and needs manual assignment.'
    return Response({'detail': detail, **result.to_dict()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def reject_member_view(request, member_id):
    """
    POST /api/admin/verification/users/{id}/reject
    Body: {reason}
    Rejects and blacklists the member's email in this organization.
    """
    scope = _scope(request)
    serializer = RejectSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.reject_member(
        scope, request.user, member_id,
        reason=serializer.validated_data['reason'],
        request_meta=client_meta(request),
    )
    return Response({'detail': 'User rejected and email blacklisted.', **result.to_dict()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def unblock_member_view(request, member_id):
    """
    POST /api/admin/verification/users/{id}/unblock
    Body: {reason?}
    """
    scope = _scope(request)
    serializer = UnblockSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.unblock_member(
        scope, request.user, member_id,
        reason=serializer.validated_data['reason'],
        request_meta=client_meta(request),
    )
    return Response({'detail': 'User unblocked and returned to the pending queue.', **result.to_dict()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def bulk_verify_view(request):
    """
    POST /api/admin/verification/bulk-verify
    Body: {memberIds: [int], notes?}
    Always 200 once the batch ran; per-member failures are listed in "failed".
    """
    scope = _scope(request)
    serializer = BulkVerifySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = services.bulk_approve(
        scope, request.user, serializer.validated_data['memberIds'],
        notes=serializer.validated_data['notes'],
        request_meta=client_meta(request),
    )
    data = result.to_dict()
    data['detail'] = f"{data['verifiedCount']} users verified, {len(data['failed'])} failed."
    return Response(data)


# ---------- Blacklist ----------

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def blacklist_view(request):
    """
    GET /api/admin/blacklist/?status=active|removed|all&search=
    POST /api/admin/blacklist/
    Body: {email, reason}
    """
    scope = _scope(request)
    if request.method == 'GET':
        status_filter = request.query_params.get('status', 'active')
        active = {'active': True, 'removed': False}.get(status_filter)
        qs = blacklist.entries(scope, active=active, search=request.query_params.get('search'))
        paginator = VerificationPagination()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(BlacklistEntrySerializer(page, many=True).data)

    serializer = BlacklistAddSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    entry, created = services.blacklist_email(
        scope, request.user,
        serializer.validated_data['email'],
        serializer.validated_data['reason'],
        request_meta=client_meta(request),
    )
    return Response(
        BlacklistEntrySerializer(entry).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def blacklist_remove_view(request):
    """
    POST /api/admin/blacklist/remove
    Body: {email, reason?}
    """
    scope = _scope(request)
    serializer = BlacklistRemoveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    removed = services.unblacklist_email(
        scope, request.user,
        serializer.validated_data['email'],
        reason=serializer.validated_data['reason'],
        request_meta=client_meta(request),
    )
    if not removed:
        return Response(
            {'detail': 'Email is not blacklisted.', 'code': 'not_found'},
            status=status.HTTP_404_NOT_FOUND,
        )
    return Response({'detail': 'Email removed from blacklist.', 'removed': removed})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def blacklist_bulk_remove_view(request):
    """
    POST /api/admin/blacklist/bulk-remove
    Body: {emails: [str], reason?}
    Emails that are not blacklisted come back with status NOT_FOUND.
    """
    scope = _scope(request)
    serializer = BlacklistBulkRemoveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    results = services.bulk_unblacklist_emails(
        scope, request.user,
        serializer.validated_data['emails'],
        reason=serializer.validated_data['reason'],
        request_meta=client_meta(request),
    )
    removed = sum(1 for item in results if item['status'] == 'REMOVED')
    return Response({
        'detail': f'{removed} emails removed from blacklist.',
        'results': results,
        'removedCount': removed,
        'notFoundCount': len(results) - removed,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def blacklist_stats_view(request):
    """GET /api/admin/blacklist/stats"""
    return Response(blacklist.stats(_scope(request)))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def blacklist_check_view(request):
    """GET /api/admin/blacklist/check?email="""
    scope = _scope(request)
    email = (request.query_params.get('email') or '').strip()
    if not email:
        return Response(
            {'detail': 'email query parameter is required.', 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return Response(blacklist.email_status(scope, email))


# ---------- Organization ----------

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsVerificationAdmin])
def organization_view(request):
    """GET /api/admin/organization: current tenant with its committed serial counter."""
    scope = _scope(request)
    org = scope.require_organization()
    org.refresh_from_db(fields=['serial_counter'])
    return Response(OrganizationSerializer(org).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def serial_counter_reset_view(request):
    """
    POST /api/admin/organization/serial-counter/reset
    Body: {newCounterValue, confirmationToken}
    Recovery tool after data migrations; audited and logged at CRITICAL.
    """
    scope = _scope(request)
    serializer = SerialCounterResetSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = reset_serial_counter(
        scope, request.user,
        serializer.validated_data['newCounterValue'],
        serializer.validated_data['confirmationToken'],
        request_meta=client_meta(request),
    )
    return Response({
        'detail': 'Serial counter reset. Future serial IDs may collide with existing ones.',
        **result,
    })
