"""
Core models: Organization (tenant boundary, owner of the serial counter).
"""
from django.core.validators import RegexValidator
from django.db import models


short_code_validator = RegexValidator(
    regex=r'^[A-Z]{2,10}$',
    message='Short code must be 2-10 uppercase letters.',
)


class Organization(models.Model):
    """
    Alumni organization / tenant.
    short_code is both the X-Tenant-Code value and the serial ID prefix.
    serial_counter is written only by verification.serial (allocation and audited reset).
    """
    name = models.CharField(max_length=255)
    short_code = models.CharField(max_length=10, unique=True, validators=[short_code_validator])
    foundation_year = models.PositiveIntegerField(null=True, blank=True)
    serial_counter = models.PositiveIntegerField(
        default=0,
        help_text='Last allocated member serial number',
    )
    official_email = models.EmailField(blank=True, default='')
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organizations'
        verbose_name = 'Organization'
        verbose_name_plural = 'Organizations'
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(serial_counter__gte=0),
                name='organization_serial_counter_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.short_code})"

    def save(self, *args, **kwargs):
        if self.short_code:
            self.short_code = self.short_code.strip().upper()
        super().save(*args, **kwargs)
