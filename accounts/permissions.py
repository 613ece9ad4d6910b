"""
Custom permissions for role-based access
"""
from rest_framework import permissions


class IsSuperAdmin(permissions.BasePermission):
    """Highest-privilege role: reject, unblock, bulk verify, counter reset."""
    message = 'Only Super Admins can perform this action.'
    code = 'insufficient_privilege'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role == 'SUPER_ADMIN'
        )


class IsVerificationAdmin(permissions.BasePermission):
    """Super Admin or Batch Admin (batch admins are further limited to their batch)."""
    message = 'Admin access required.'
    code = 'insufficient_privilege'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role in ('SUPER_ADMIN', 'BATCH_ADMIN')
        )
