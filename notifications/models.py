"""
In-app notifications for members (verification outcome, etc.)
"""
from django.db import models
from accounts.models import User


class Notification(models.Model):
    """
    Member notifications. Delivery beyond the in-app list (push, email) is not handled here.
    """
    TYPE_VERIFICATION_APPROVED = "VERIFICATION_APPROVED"

    TYPE_CHOICES = [
        (TYPE_VERIFICATION_APPROVED, "Verification Approved"),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=50, choices=TYPE_CHOICES, db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    payload = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_notifications",
    )

    class Meta:
        db_table = "notifications"
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notif_user_is_read_idx"),
        ]

    def __str__(self):
        return f"{self.type} - {self.user.full_name} - {self.created_at}"
