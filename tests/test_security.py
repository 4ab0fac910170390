# tests/test_security.py
from datetime import datetime, timedelta, timezone

import pytest

from conftest import JWT_KEY, make_token
from shopapi.constants import AUTHENTICATED, OPERATION_ACCESS, PUBLIC, Roles, any_of
from shopapi.exceptions import (
    ForbiddenError,
    InvalidTokenError,
    UnauthenticatedError,
    UnsupportedSchemeError,
)
from shopapi.utils.security import (
    AccessDecision,
    Identity,
    check_access,
    has_all_roles,
    has_any_role,
    require_access,
)


def test_missing_header_is_anonymous(authenticator):
    assert authenticator.authenticate(None) is None


def test_valid_token_gives_subject_and_roles(authenticator):
    token = make_token("alice", [Roles.CREATE_PRODUCT, Roles.MANAGE_CATEGORY])

    identity = authenticator.authenticate(f"Bearer {token}")

    assert identity == Identity("alice", frozenset({Roles.CREATE_PRODUCT, Roles.MANAGE_CATEGORY}))


def test_issued_at_is_not_checked(authenticator):
    future = datetime.now(timezone.utc) + timedelta(days=1)
    token = make_token("alice", iat=future)

    assert authenticator.authenticate(f"Bearer {token}").subject == "alice"


@pytest.mark.parametrize("header", ["Basic YWxpY2U6c2VjcmV0", "bearer abc", "Token abc", ""])
def test_non_bearer_scheme_is_rejected(authenticator, header):
    with pytest.raises(UnsupportedSchemeError):
        authenticator.authenticate(header)


def test_wrong_signature_is_rejected(authenticator):
    token = make_token("alice", key=JWT_KEY + "-other")

    with pytest.raises(InvalidTokenError):
        authenticator.authenticate(f"Bearer {token}")


def test_expired_token_is_rejected(authenticator):
    token = make_token("alice", exp=datetime.now(timezone.utc) - timedelta(minutes=1))

    with pytest.raises(InvalidTokenError):
        authenticator.authenticate(f"Bearer {token}")


def test_garbage_token_is_rejected(authenticator):
    with pytest.raises(InvalidTokenError):
        authenticator.authenticate("Bearer not-a-jwt")


def test_missing_subject_is_rejected(authenticator):
    token = make_token(subject=None)

    with pytest.raises(InvalidTokenError, match="missing subject"):
        authenticator.authenticate(f"Bearer {token}")


def test_token_without_realm_access_has_no_roles(authenticator):
    token = make_token("alice", roles=None)

    assert authenticator.authenticate(f"Bearer {token}").roles == frozenset()


def test_realm_access_without_roles_has_no_roles(authenticator):
    token = make_token("alice", roles=None, realm_access={})

    assert authenticator.authenticate(f"Bearer {token}").roles == frozenset()


@pytest.mark.parametrize("realm_access", [
    "admin",
    {"roles": "ecommerce_create_product"},
    {"roles": ["ecommerce_create_product", 42]},
    {"roles": [None]},
])
def test_malformed_roles_are_rejected(authenticator, realm_access):
    token = make_token("alice", roles=None, realm_access=realm_access)

    with pytest.raises(InvalidTokenError):
        authenticator.authenticate(f"Bearer {token}")


def test_public_rule_grants_anonymous():
    assert check_access(None, PUBLIC) is AccessDecision.GRANTED


def test_authenticated_rule():
    assert check_access(None, AUTHENTICATED) is AccessDecision.UNAUTHENTICATED
    assert check_access(Identity("alice"), AUTHENTICATED) is AccessDecision.GRANTED


def test_role_rule_needs_any_one_role():
    rule = any_of(Roles.CREATE_PRODUCT, Roles.UPDATE_PRODUCT)

    assert check_access(None, rule) is AccessDecision.UNAUTHENTICATED
    assert check_access(Identity("alice"), rule) is AccessDecision.FORBIDDEN
    assert check_access(Identity("alice", frozenset({Roles.DELETE_PRODUCT})), rule) \
        is AccessDecision.FORBIDDEN
    assert check_access(Identity("alice", frozenset({Roles.UPDATE_PRODUCT})), rule) \
        is AccessDecision.GRANTED


def test_role_helpers():
    identity = Identity("alice", frozenset({Roles.SEARCH_ORDER, Roles.UPDATE_ORDER}))

    assert has_any_role(identity, [Roles.SEARCH_ORDER, Roles.MANAGE_COUNTRY])
    assert not has_any_role(identity, [])
    assert has_all_roles(identity, [Roles.SEARCH_ORDER, Roles.UPDATE_ORDER])
    assert not has_all_roles(identity, [Roles.SEARCH_ORDER, Roles.MANAGE_COUNTRY])


def test_require_access_raises_per_decision():
    with pytest.raises(UnauthenticatedError):
        require_access(None, "create_order")
    with pytest.raises(ForbiddenError):
        require_access(Identity("alice"), "delete_product")

    identity = Identity("alice", frozenset({Roles.UPDATE_ORDER}))
    assert require_access(identity, "complete_order") is identity
    assert require_access(None, "list_products") is None


def test_every_protected_operation_names_known_roles():
    known_roles = {value for name, value in vars(Roles).items() if not name.startswith("_")}

    for operation, rule in OPERATION_ACCESS.items():
        assert rule.roles <= known_roles, operation
