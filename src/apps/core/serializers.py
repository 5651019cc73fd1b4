"""Request serializers for core authorization endpoints."""

from rest_framework import serializers


class AuthorizeSerializer(serializers.Serializer):
    # Unknown resource types and actions are policy misses, not validation errors.
    resource_type = serializers.CharField(max_length=128)
    action = serializers.CharField(max_length=32, required=False, default="view")
    record = serializers.DictField(required=False, allow_null=True, default=None)
