"""
Serializers for user registration and user representation.
"""

import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import CustomUser

logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    """
    Public representation of a user. Never exposes credentials.
    """

    created_at = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = CustomUser
        fields = ["id", "role", "email", "first_name", "last_name", "created_at"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Validates registration payloads.

    Uniqueness of the email is enforced by UserService so that a duplicate
    is reported as a conflict rather than a field error.
    """

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")

    def validate_password(self, value):
        """Run Django's configured password validators."""
        try:
            validate_password(value)
        except DjangoValidationError as e:
            logger.info(
                "Registration password rejected by validators",
                extra={
                    "error_count": len(e.messages),
                    "action": "registration_password_invalid",
                    "component": "RegisterSerializer",
                },
            )
            raise serializers.ValidationError(list(e.messages))
        return value
