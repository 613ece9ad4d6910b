from django.contrib import admin

from verification.models import BlacklistedEmail, VerificationAuditLog


@admin.register(BlacklistedEmail)
class BlacklistedEmailAdmin(admin.ModelAdmin):
    list_display = ['email', 'organization', 'is_active', 'blacklisted_by', 'blacklisted_at', 'removed_at']
    list_filter = ['is_active', 'organization']
    search_fields = ['email', 'reason']
    readonly_fields = ['blacklisted_at', 'removed_at']


@admin.register(VerificationAuditLog)
class VerificationAuditLogAdmin(admin.ModelAdmin):
    """Audit log is append-only."""
    list_display = ['action', 'organization', 'actor', 'member', 'ip_address', 'created_at']
    list_filter = ['action', 'organization']
    search_fields = ['member__email', 'actor__email']
    readonly_fields = [f.name for f in VerificationAuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
