"""
Admin configuration for accounts app
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserCreationForm, ReadOnlyPasswordHashField
from django import forms
from .models import User


def _validate_org_for_role(cleaned_data):
    role = cleaned_data.get('role')
    org = cleaned_data.get('organization')
    if role in (User.ROLE_USER, User.ROLE_BATCH_ADMIN) and not org:
        raise forms.ValidationError(
            {'organization': 'Alumni and Batch Admin accounts must belong to an organization.'}
        )


class UserAdminForm(forms.ModelForm):
    """
    Change form with proper password handling.
    Password is read-only (hash display only). Use "Change password" link to set new password.
    """
    password = ReadOnlyPasswordHashField(
        label='Password',
        help_text='Raw passwords are not stored. Use the "Change password" link to set a new one.',
    )

    class Meta:
        model = User
        fields = '__all__'

    def clean(self):
        cleaned = super().clean()
        _validate_org_for_role(cleaned)
        return cleaned


class UserAddForm(UserCreationForm):
    """Add form with org validation."""

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('email', 'full_name', 'role', 'organization', 'batch', 'phone')

    def clean(self):
        cleaned = super().clean()
        _validate_org_for_role(cleaned)
        return cleaned


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom User Admin.
    Verification state and serial IDs are read-only here; they change only
    through the verification API so every transition is audited.
    """
    form = UserAdminForm
    add_form = UserAddForm
    list_display = ['email', 'full_name', 'role', 'organization', 'batch', 'verification_status', 'serial_id', 'is_active']
    list_filter = ['role', 'verification_status', 'needs_serial_assignment', 'is_active', 'organization', 'batch']
    search_fields = ['email', 'full_name', 'serial_id']
    ordering = ['-date_joined']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal Info', {'fields': ('full_name', 'role', 'organization', 'phone')}),
        ('Alumni', {'fields': ('batch', 'admission_year', 'passout_year', 'is_email_verified')}),
        ('Verification', {'fields': (
            'verification_status', 'verified_by', 'verified_at', 'verification_notes',
            'rejected_by', 'rejected_at', 'rejection_reason',
            'unblocked_by', 'unblocked_at', 'unblock_reason',
            'serial_id', 'serial_counter', 'needs_serial_assignment',
        )}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'role', 'organization', 'batch', 'phone', 'password1', 'password2', 'is_active', 'is_staff'),
        }),
    )

    readonly_fields = [
        'verification_status', 'verified_by', 'verified_at', 'verification_notes',
        'rejected_by', 'rejected_at', 'rejection_reason',
        'unblocked_by', 'unblocked_at', 'unblock_reason',
        'serial_id', 'serial_counter', 'needs_serial_assignment',
        'date_joined', 'updated_at', 'last_login',
    ]

    def get_form(self, request, obj=None, **kwargs):
        if obj is None:
            kwargs['form'] = self.add_form
        return super().get_form(request, obj, **kwargs)
