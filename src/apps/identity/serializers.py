"""Request serializers for session endpoints."""

from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    """Validate the login payload shape; role membership is checked by the session store."""

    role = serializers.CharField(max_length=128, trim_whitespace=True)
