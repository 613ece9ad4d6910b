"""
URL configuration for the alumni verification API
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check with database connectivity. No auth required."""
    from django.db import connection
    result = {'status': 'ok', 'service': 'alumni-verification', 'db': 'ok'}
    try:
        connection.ensure_connection()
    except Exception as e:
        result['status'] = 'degraded'
        result['db'] = f'error: {str(e)[:80]}'
    return JsonResponse(result)


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'Alumni Verification API',
        'version': '1.0.0',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'verification': '/api/admin/verification/',
            'blacklist': '/api/admin/blacklist/',
            'organization': '/api/admin/organization',
            'notifications': '/api/notifications/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api', RedirectView.as_view(url='/api/', permanent=False)),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('accounts.urls')),
    path('api/admin/verification/', include('verification.urls')),
    path('api/admin/blacklist/', include('verification.urls_blacklist')),
    path('api/admin/', include('verification.urls_organization')),
    path('api/notifications/', include('notifications.urls')),
]
