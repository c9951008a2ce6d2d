"""
Pluggable authorization predicate for supplier creation.

This is a capability check, not access control: tokens are static strings
from configuration and nothing ties them to an identity. With no tokens
configured every caller is allowed.
"""
from typing import Callable, Iterable, Optional

from fastapi import Header

from chanakya.config import get_settings
from chanakya.exceptions import AuthorizationError

AuthorizationPredicate = Callable[[Optional[str]], bool]


def allow_all(token: Optional[str]) -> bool:
    return True


def capability_token_predicate(tokens: Iterable[str]) -> AuthorizationPredicate:
    allowed = frozenset(t for t in tokens if t)
    if not allowed:
        return allow_all

    def check(token: Optional[str]) -> bool:
        return token in allowed

    return check


def get_create_predicate() -> AuthorizationPredicate:
    """Dependency; override in tests or deployments to swap the policy"""
    return capability_token_predicate(get_settings().CREATE_CAPABILITY_TOKENS)


def ensure_authorized(predicate: AuthorizationPredicate, token: Optional[str]) -> None:
    if not predicate(token):
        raise AuthorizationError("Missing or invalid capability token")


def capability_token(x_capability_token: Optional[str] = Header(default=None)) -> Optional[str]:
    return x_capability_token
