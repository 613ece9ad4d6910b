"""
Custom User Model with Roles and alumni verification state.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Custom user manager where email is the unique identifier"""

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular user with email and password"""
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a superuser"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.ROLE_SUPER_ADMIN)
        extra_fields.setdefault('verification_status', 'VERIFIED')

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User Model
    Email-based authentication (no username). Alumni (role=USER) move through
    PENDING -> VERIFIED | REJECTED; see verification.state for the transitions.
    """
    ROLE_SUPER_ADMIN = 'SUPER_ADMIN'
    ROLE_BATCH_ADMIN = 'BATCH_ADMIN'
    ROLE_USER = 'USER'
    ROLE_CHOICES = [
        (ROLE_SUPER_ADMIN, 'Super Admin'),
        (ROLE_BATCH_ADMIN, 'Batch Admin'),
        (ROLE_USER, 'Alumni'),
    ]

    STATUS_PENDING = 'PENDING'
    STATUS_VERIFIED = 'VERIFIED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_VERIFIED, 'Verified'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='users',
        db_column='organization_id',
    )
    email = models.EmailField(unique=True, db_index=True)
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER, db_index=True)

    # Batch = passout year. admission_year is optional; derived from batch when missing.
    batch = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    admission_year = models.PositiveIntegerField(null=True, blank=True)
    passout_year = models.PositiveIntegerField(null=True, blank=True)

    # Alumni verification (mutated only by verification.state)
    verification_status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    is_email_verified = models.BooleanField(default=False)
    verified_by = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='+',
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    verification_notes = models.TextField(blank=True, default='')
    rejected_by = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='+',
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default='')
    unblocked_by = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='+',
    )
    unblocked_at = models.DateTimeField(null=True, blank=True)
    unblock_reason = models.TextField(blank=True, default='')

    # Serial ID (immutable once assigned)
    serial_id = models.CharField(max_length=32, unique=True, null=True, blank=True)
    serial_counter = models.PositiveIntegerField(null=True, blank=True)
    needs_serial_assignment = models.BooleanField(
        default=False,
        db_index=True,
        help_text='Verified without a serial ID; pick up with assign_pending_serials',
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    is_superuser = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['full_name']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-date_joined']
        indexes = [
            models.Index(fields=['organization', 'verification_status'], name='users_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.email})"

    # Legacy boolean triple, derived from the single status column.
    @property
    def pending_verification(self):
        return self.verification_status == self.STATUS_PENDING

    @property
    def is_alumni_verified(self):
        return self.verification_status == self.STATUS_VERIFIED

    @property
    def is_rejected(self):
        return self.verification_status == self.STATUS_REJECTED

    @property
    def is_super_admin(self):
        return self.role == self.ROLE_SUPER_ADMIN

    @property
    def is_verification_admin(self):
        return self.role in (self.ROLE_SUPER_ADMIN, self.ROLE_BATCH_ADMIN)

    def has_perm(self, perm, obj=None):
        """Check if user has specific permission"""
        return self.is_superuser or self.is_staff

    def has_module_perms(self, app_label):
        """Check if user has permission to view app"""
        return self.is_superuser or self.is_staff
