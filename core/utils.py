"""
Core utilities: request metadata for audit records.
"""


def client_meta(request):
    """IP address and user agent of the calling client (None-safe for non-HTTP callers)."""
    if request is None:
        return {}
    meta = getattr(request, 'META', {}) or {}
    forwarded = (meta.get('HTTP_X_FORWARDED_FOR') or '').split(',')[0].strip()
    return {
        'ip_address': forwarded or meta.get('REMOTE_ADDR') or None,
        'user_agent': (meta.get('HTTP_USER_AGENT') or '')[:512],
    }
