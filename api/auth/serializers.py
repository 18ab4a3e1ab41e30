"""
Serializers for auth API endpoints.
"""

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    """Login form; both fields may be missing, the view redirects then."""

    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class SignUpRequestSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)
    full_name = serializers.CharField(required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=["admin", "staff"], default="staff")


class UpdateProfileRequestSerializer(serializers.Serializer):
    full_name = serializers.CharField()


class ProfileSerializer(serializers.Serializer):
    """Serializer for Profile."""

    id = serializers.IntegerField()
    email = serializers.CharField()
    full_name = serializers.CharField()
    role = serializers.CharField()
    role_label = serializers.CharField()
    is_admin = serializers.BooleanField()
    created_at = serializers.DateTimeField(allow_null=True)
