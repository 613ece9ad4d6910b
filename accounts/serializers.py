"""
Serializers for accounts app
"""
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """User serializer for API responses"""
    fullName = serializers.CharField(source='full_name', read_only=True)
    organizationCode = serializers.SerializerMethodField()
    verificationStatus = serializers.CharField(source='verification_status', read_only=True)
    serialId = serializers.CharField(source='serial_id', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'fullName', 'role', 'batch', 'organizationCode', 'verificationStatus', 'serialId']
        read_only_fields = fields

    def get_organizationCode(self, obj):
        return obj.organization.short_code if obj.organization_id else None


class LoginSerializer(serializers.Serializer):
    """Login serializer"""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        email = User.objects.normalize_email(attrs.get('email'))
        password = attrs.get('password')

        # Custom User model uses email as USERNAME_FIELD
        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            raise AuthenticationFailed('Invalid email or password.')
        if not user.is_active:
            raise AuthenticationFailed('User account is disabled.')

        attrs['user'] = user
        return attrs
