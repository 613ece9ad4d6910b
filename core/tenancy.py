"""
Tenant resolution and scoping.

A TenantScope is resolved once per request (config.middleware.TenantMiddleware)
and passed explicitly to every data-access function of the verification workflow.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

from core.models import Organization

logger = logging.getLogger(__name__)


class TenantNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Organization not found. Please check your organization code.'
    default_code = 'tenant_not_found'


class TenantInactive(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'This organization is currently inactive. Please contact support.'
    default_code = 'tenant_inactive'


class TenantCodeRequired(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'X-Tenant-Code header is required for multi-tenant access.'
    default_code = 'tenant_code_required'


class TenantAccessDenied(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Access denied. Your account belongs to a different organization.'
    default_code = 'tenant_access_denied'


class OrganizationNotConfigured(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Organization details not found. Please configure the organization first.'
    default_code = 'organization_not_configured'


@dataclass(frozen=True)
class TenantScope:
    """
    Resolved tenant. organization is None only in bootstrap mode (no organizations yet).
    """
    organization: Optional[Organization]

    @property
    def organization_id(self):
        return self.organization.pk if self.organization is not None else None

    @property
    def is_bootstrap(self):
        return self.organization is None

    def filter(self, queryset, field='organization'):
        """Restrict queryset to this tenant. Bootstrap scope only sees unassigned rows."""
        if self.organization is None:
            return queryset.filter(**{f'{field}__isnull': True})
        return queryset.filter(**{f'{field}_id': self.organization.pk})

    def require_organization(self):
        if self.organization is None:
            raise OrganizationNotConfigured()
        return self.organization

    def __str__(self):
        if self.organization is None:
            return 'tenant:<bootstrap>'
        return f'tenant:{self.organization.short_code}'


def resolve_tenant(code=None):
    """
    Resolve the acting organization from an explicit tenant code.
    - code given: matching organization (case-insensitive), must be active.
    - no code, one organization: auto-select it (single-tenant deployments).
    - no code, no organizations: bootstrap scope.
    - no code, several organizations: TenantCodeRequired.
    """
    code = (code or '').strip()
    if code:
        org = Organization.objects.filter(short_code__iexact=code).first()
        if org is None:
            raise TenantNotFound()
        if not org.is_active:
            raise TenantInactive()
        return TenantScope(org)

    orgs = list(Organization.objects.order_by('pk')[:2])
    if not orgs:
        return TenantScope(None)
    if len(orgs) > 1:
        raise TenantCodeRequired()
    org = orgs[0]
    if not org.is_active:
        raise TenantInactive()
    return TenantScope(org)


def get_tenant_scope(request):
    """Scope stored by TenantMiddleware; resolved here when the middleware skipped the path."""
    scope = getattr(request, 'tenant_scope', None)
    if scope is None:
        scope = resolve_tenant(request.META.get(settings.TENANT_HEADER))
        request.tenant_scope = scope
    return scope


def ensure_actor_in_scope(user, scope):
    """The acting user must belong to the resolved tenant."""
    if scope.organization is None:
        return
    if getattr(user, 'organization_id', None) != scope.organization_id:
        logger.warning(
            'Tenant access denied: user_id=%s org_id=%s %s',
            getattr(user, 'pk', None), getattr(user, 'organization_id', None), scope,
        )
        raise TenantAccessDenied()
