# shopapi/utils/security.py
"""Bearer token authentication and role based authorization.

The identity is produced once per request by :class:`TokenAuthenticator` and
then handed explicitly to :func:`require_access` and to the services; nothing
here keeps per-request state.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

import jwt

from ..constants import OPERATION_ACCESS, AccessRule
from ..exceptions import (
    ForbiddenError,
    InvalidTokenError,
    UnauthenticatedError,
    UnsupportedSchemeError,
)

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller"""
    subject: str
    roles: FrozenSet[str] = field(default_factory=frozenset)


class TokenAuthenticator:
    """Verifies HS256 bearer tokens against a fixed key"""

    def __init__(self, key: str):
        self._key = key

    def authenticate(self, authorization_header: Optional[str]) -> Optional[Identity]:
        """Turn the Authorization header into an identity.

        Returns None when the header is missing. Raises UnsupportedSchemeError
        for a non-Bearer header and InvalidTokenError for anything wrong with
        the token itself.
        """
        if authorization_header is None:
            return None

        if not authorization_header.startswith(BEARER_PREFIX):
            raise UnsupportedSchemeError("unsupported auth-scheme")

        token = authorization_header[len(BEARER_PREFIX):]
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                options={"verify_iat": False},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"invalid JWT: {e}") from e

        subject = claims.get("sub")
        if subject is None:
            raise InvalidTokenError("invalid JWT: missing subject")
        if not isinstance(subject, str):
            raise InvalidTokenError("invalid JWT: subject is not a string")

        return Identity(subject=subject, roles=_parse_realm_access_roles(claims))


def _parse_realm_access_roles(claims: dict) -> FrozenSet[str]:
    realm_access = claims.get("realm_access")
    if realm_access is None:
        # no realm_access means the user has no roles
        return frozenset()
    if not isinstance(realm_access, dict):
        raise InvalidTokenError("invalid JWT: claim realm_access has invalid format")

    roles: Any = realm_access.get("roles")
    if roles is None:
        return frozenset()
    if not isinstance(roles, list):
        raise InvalidTokenError("invalid JWT: malformed roles claim")
    if not all(isinstance(role, str) for role in roles):
        raise InvalidTokenError("invalid JWT: malformed roles claim, list contains invalid value")

    return frozenset(roles)


class AccessDecision(str, Enum):
    GRANTED = "granted"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def has_any_role(identity: Identity, roles: Iterable[str]) -> bool:
    """True when the identity has at least one of the roles"""
    return any(role in identity.roles for role in roles)


def has_all_roles(identity: Identity, roles: Iterable[str]) -> bool:
    """True when the identity has every one of the roles"""
    return identity.roles.issuperset(roles)


def check_access(identity: Optional[Identity], rule: AccessRule) -> AccessDecision:
    """Decide whether the identity satisfies the rule, without side effects"""
    if rule.is_public:
        return AccessDecision.GRANTED
    if identity is None:
        return AccessDecision.UNAUTHENTICATED
    if rule.roles and not has_any_role(identity, rule.roles):
        return AccessDecision.FORBIDDEN
    return AccessDecision.GRANTED


def require_access(identity: Optional[Identity], operation: str) -> Optional[Identity]:
    """Gate an operation from OPERATION_ACCESS, raising on denial"""
    rule = OPERATION_ACCESS[operation]
    decision = check_access(identity, rule)

    if decision is AccessDecision.UNAUTHENTICATED:
        raise UnauthenticatedError(f"operation {operation} requires authentication")
    if decision is AccessDecision.FORBIDDEN:
        raise ForbiddenError(
            f"user={identity.subject} lacks any of the roles {sorted(rule.roles)} for {operation}"
        )
    return identity
