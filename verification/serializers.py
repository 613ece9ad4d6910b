"""
Serializers for verification app
"""
from rest_framework import serializers

from accounts.models import User
from verification.models import BlacklistedEmail, VerificationAuditLog
from verification.serial import parse_serial_id


class VerifySerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=2000)


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000, error_messages={
        'required': 'Rejection reason is required.',
        'blank': 'Rejection reason is required.',
    })


class UnblockSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)


class BulkVerifySerializer(serializers.Serializer):
    """Upper bound is enforced by the service (VERIFICATION_BULK_LIMIT)."""
    memberIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        error_messages={'empty': 'User IDs array is required.'},
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=2000)


class BlacklistAddSerializer(serializers.Serializer):
    email = serializers.EmailField()
    reason = serializers.CharField(max_length=1000)


class BlacklistRemoveSerializer(serializers.Serializer):
    email = serializers.EmailField()
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)


class BlacklistBulkRemoveSerializer(serializers.Serializer):
    emails = serializers.ListField(
        child=serializers.EmailField(),
        allow_empty=False,
        error_messages={'empty': 'Emails array is required.'},
    )
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)


class SerialCounterResetSerializer(serializers.Serializer):
    newCounterValue = serializers.IntegerField(min_value=0)
    confirmationToken = serializers.CharField()


class PendingMemberSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source='full_name', read_only=True)
    admissionYear = serializers.IntegerField(source='admission_year', read_only=True)
    passoutYear = serializers.IntegerField(source='passout_year', read_only=True)
    isEmailVerified = serializers.BooleanField(source='is_email_verified', read_only=True)
    registeredAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'fullName', 'phone', 'batch',
            'admissionYear', 'passoutYear', 'isEmailVerified', 'registeredAt',
        ]


class MemberDetailSerializer(PendingMemberSerializer):
    """Full verification state of one member, including the decoded serial ID."""
    status = serializers.CharField(source='verification_status', read_only=True)
    pendingVerification = serializers.BooleanField(source='pending_verification', read_only=True)
    isAlumniVerified = serializers.BooleanField(source='is_alumni_verified', read_only=True)
    isRejected = serializers.BooleanField(source='is_rejected', read_only=True)
    serialId = serializers.CharField(source='serial_id', read_only=True)
    serialCounter = serializers.IntegerField(source='serial_counter', read_only=True)
    serialComponents = serializers.SerializerMethodField()
    needsSerialAssignment = serializers.BooleanField(source='needs_serial_assignment', read_only=True)
    verifiedAt = serializers.DateTimeField(source='verified_at', read_only=True)
    verifiedBy = serializers.SerializerMethodField()
    verificationNotes = serializers.CharField(source='verification_notes', read_only=True)
    rejectedAt = serializers.DateTimeField(source='rejected_at', read_only=True)
    rejectionReason = serializers.CharField(source='rejection_reason', read_only=True)
    unblockedAt = serializers.DateTimeField(source='unblocked_at', read_only=True)

    class Meta(PendingMemberSerializer.Meta):
        fields = PendingMemberSerializer.Meta.fields + [
            'status', 'pendingVerification', 'isAlumniVerified', 'isRejected',
            'serialId', 'serialCounter', 'serialComponents', 'needsSerialAssignment',
            'verifiedAt', 'verifiedBy', 'verificationNotes',
            'rejectedAt', 'rejectionReason', 'unblockedAt',
        ]

    def get_serialComponents(self, obj):
        components = parse_serial_id(obj.serial_id)
        if components is None:
            return None
        return {
            'organizationCode': components.organization_code,
            'counter': components.counter,
            'initials': components.initials,
            'admissionYear': components.admission_yy,
            'passoutYear': components.passout_yy,
            'suffix': components.suffix,
        }

    def get_verifiedBy(self, obj):
        if not obj.verified_by_id:
            return None
        return {'id': obj.verified_by_id, 'fullName': obj.verified_by.full_name}


class AuditLogSerializer(serializers.ModelSerializer):
    actorId = serializers.IntegerField(source='actor_id', read_only=True)
    actorName = serializers.SerializerMethodField()
    before = serializers.JSONField(source='before_state', read_only=True)
    after = serializers.JSONField(source='after_state', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = VerificationAuditLog
        fields = ['id', 'action', 'actorId', 'actorName', 'before', 'after', 'details', 'createdAt']

    def get_actorName(self, obj):
        return obj.actor.full_name if obj.actor_id else None


class BlacklistEntrySerializer(serializers.ModelSerializer):
    blacklistedAt = serializers.DateTimeField(source='blacklisted_at', read_only=True)
    blacklistedBy = serializers.SerializerMethodField()
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    removedAt = serializers.DateTimeField(source='removed_at', read_only=True)
    removedReason = serializers.CharField(source='removed_reason', read_only=True)

    class Meta:
        model = BlacklistedEmail
        fields = ['id', 'email', 'reason', 'blacklistedAt', 'blacklistedBy', 'isActive', 'removedAt', 'removedReason']

    def get_blacklistedBy(self, obj):
        if not obj.blacklisted_by_id:
            return None
        return {'id': obj.blacklisted_by_id, 'fullName': obj.blacklisted_by.full_name}
