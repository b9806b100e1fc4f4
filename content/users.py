"""
The auth collection (`users`) backed by `accounts.User`.

User documents are Django users, not `Document` rows: passwords are hashed by
`set_password()` and never returned. Only `email` and `password` are writable
through the content API; staff flags stay an admin concern.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework.exceptions import ValidationError

from accounts.serializers import user_payload

from .exceptions import DocumentNotFound

User = get_user_model()


def get_user(pk):
    try:
        return User.objects.get(pk=pk)
    except (User.DoesNotExist, ValueError, TypeError):
        raise DocumentNotFound(f"No user with id {pk}.")


def list_users() -> list[dict]:
    return [user_payload(u) for u in User.objects.order_by("-date_joined", "-id")]


def create_user(values: dict):
    password = values.get("password")
    if not password:
        raise ValidationError({"password": ["This field is required."]})
    _check_email_free(values["email"])
    return User.objects.create_user(email=values["email"], password=password)


def update_user(user, values: dict):
    fields = ["updated_at"]
    if values.get("email") and values["email"] != user.email:
        _check_email_free(values["email"], exclude=user.pk)
        user.email = User.objects.normalize_email(values["email"])
        fields.append("email")
    if values.get("password"):
        user.set_password(values["password"])
        fields.append("password")
    user.save(update_fields=fields)
    return user


def _check_email_free(email: str, exclude=None) -> None:
    qs = User.objects.filter(email__iexact=email)
    if exclude is not None:
        qs = qs.exclude(pk=exclude)
    if qs.exists():
        raise ValidationError({"email": ["A user with that email already exists."]})
