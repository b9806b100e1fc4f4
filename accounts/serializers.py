"""Serializers and payload helpers for user documents."""

from __future__ import annotations

from rest_framework import serializers


class UserPublicSerializer(serializers.Serializer):
    """Public shape of a user document (never includes the password)."""
    id = serializers.IntegerField()
    email = serializers.EmailField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


def user_payload(user) -> dict:
    """Format a user like any other content document."""
    return {
        "id": user.pk,
        "email": user.email,
        "created_at": user.date_joined,
        "updated_at": user.updated_at,
    }
