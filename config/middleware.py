"""
Custom middleware for the alumni verification API.
"""
import logging

from django.conf import settings
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework.exceptions import APIException

from core.tenancy import resolve_tenant

logger = logging.getLogger(__name__)


class TenantMiddleware(MiddlewareMixin):
    """
    Resolve the X-Tenant-Code header into request.tenant_scope for /api/ paths.
    Resolution failures are answered here with the standard {detail, code} body.
    """

    def _is_exempt(self, path):
        if not path.startswith('/api/') or path == '/api/':
            return True
        return any(path.startswith(prefix) for prefix in settings.TENANT_EXEMPT_PREFIXES)

    def process_request(self, request):
        if self._is_exempt(request.path):
            return None
        try:
            request.tenant_scope = resolve_tenant(request.META.get(settings.TENANT_HEADER))
        except APIException as exc:
            logger.info('Tenant resolution failed for %s: %s', request.path, exc.default_code)
            return JsonResponse(
                {'detail': str(exc.detail), 'code': exc.default_code},
                status=exc.status_code,
            )
        return None
