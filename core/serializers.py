"""
Serializers for core app
"""
from rest_framework import serializers

from core.models import Organization


class OrganizationSerializer(serializers.ModelSerializer):
    shortCode = serializers.CharField(source='short_code', read_only=True)
    foundationYear = serializers.IntegerField(source='foundation_year', read_only=True)
    officialEmail = serializers.EmailField(source='official_email', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    currentSerialCounter = serializers.IntegerField(source='serial_counter', read_only=True)

    class Meta:
        model = Organization
        fields = ['id', 'name', 'shortCode', 'foundationYear', 'officialEmail', 'isActive', 'currentSerialCounter']
