"""
Verification models: per-tenant email blacklist and the append-only audit log.
"""
from django.db import models
from accounts.models import User


class BlacklistedEmail(models.Model):
    """
    Email barred from fresh registration within one organization.
    Created on rejection, deactivated (never deleted) on unblock or manual removal.
    At most one active row per (organization, email).
    """
    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.PROTECT,
        related_name='blacklisted_emails',
    )
    email = models.EmailField(db_index=True, help_text='Stored lower-cased')
    reason = models.TextField(blank=True, default='')
    blacklisted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blacklist_entries_created',
    )
    blacklisted_at = models.DateTimeField(auto_now_add=True, db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)
    removed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blacklist_entries_removed',
    )
    removed_at = models.DateTimeField(null=True, blank=True)
    removed_reason = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'blacklisted_emails'
        verbose_name = 'Blacklisted Email'
        verbose_name_plural = 'Blacklisted Emails'
        ordering = ['-blacklisted_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'email'],
                condition=models.Q(is_active=True),
                name='unique_active_blacklist_per_org_email',
            ),
        ]
        indexes = [
            models.Index(fields=['organization', 'email', 'is_active'], name='blacklist_org_email_act_idx'),
        ]

    def __str__(self):
        state = 'active' if self.is_active else 'removed'
        return f"{self.email} ({state})"


class VerificationAuditLog(models.Model):
    """
    Append-only record of every verification state change and counter reset.
    """
    ACTION_APPROVED = 'USER_VERIFIED'
    ACTION_APPROVED_WITHOUT_SERIAL = 'USER_VERIFIED_WITHOUT_SERIAL'
    ACTION_REJECTED = 'USER_REJECTED'
    ACTION_UNBLOCKED = 'USER_UNBLOCKED'
    ACTION_SERIAL_ASSIGNED = 'SERIAL_ASSIGNED'
    ACTION_SERIAL_COUNTER_RESET = 'SERIAL_COUNTER_RESET'
    ACTION_BLACKLIST_ADDED = 'BLACKLIST_ADDED'
    ACTION_BLACKLIST_REMOVED = 'BLACKLIST_REMOVED'

    ACTION_CHOICES = [
        (ACTION_APPROVED, 'User verified'),
        (ACTION_APPROVED_WITHOUT_SERIAL, 'User verified (serial pending)'),
        (ACTION_REJECTED, 'User rejected'),
        (ACTION_UNBLOCKED, 'User unblocked'),
        (ACTION_SERIAL_ASSIGNED, 'Serial ID assigned'),
        (ACTION_SERIAL_COUNTER_RESET, 'Serial counter reset'),
        (ACTION_BLACKLIST_ADDED, 'Email blacklisted'),
        (ACTION_BLACKLIST_REMOVED, 'Email removed from blacklist'),
    ]

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='verification_audit_logs',
    )
    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verification_actions',
    )
    member = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verification_history',
    )
    action = models.CharField(max_length=40, choices=ACTION_CHOICES, db_index=True)
    before_state = models.JSONField(default=dict, blank=True)
    after_state = models.JSONField(default=dict, blank=True)
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'verification_audit_logs'
        verbose_name = 'Verification Audit Log'
        verbose_name_plural = 'Verification Audit Logs'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['organization', 'created_at'], name='vaudit_org_created_idx'),
            models.Index(fields=['member', 'created_at'], name='vaudit_member_created_idx'),
        ]

    def __str__(self):
        return f"{self.action} by {self.actor_id} on {self.member_id} at {self.created_at}"
