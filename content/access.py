"""
Reusable access callables for `content.config.Access`.

Access rules are plain callables invoked with keyword arguments:

    rule(user=<request user or None>, id=<document id or None>) -> bool

Rules must accept and ignore keywords they do not use so new context can be
passed later without touching every declared rule.
"""

from __future__ import annotations


def anyone(**kwargs) -> bool:
    """Unrestricted: every caller, including anonymous ones."""
    return True


def authenticated(user=None, **kwargs) -> bool:
    """Default rule: any signed-in user."""
    return bool(user is not None and getattr(user, "is_authenticated", False))
