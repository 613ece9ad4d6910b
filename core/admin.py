from django.contrib import admin

from core.models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """serial_counter is read-only; use the audited reset endpoint to change it."""
    list_display = ['name', 'short_code', 'foundation_year', 'serial_counter', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'short_code', 'official_email']
    readonly_fields = ['serial_counter', 'created_at', 'updated_at']
