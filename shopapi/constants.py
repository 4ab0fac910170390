# shopapi/constants.py
from dataclasses import dataclass, field
from typing import Dict, FrozenSet


class Roles:
    """Role names carried in the realm_access.roles claim"""
    CREATE_PRODUCT = "ecommerce_create_product"
    UPDATE_PRODUCT = "ecommerce_update_product"
    DELETE_PRODUCT = "ecommerce_delete_product"

    MANAGE_CATEGORY = "ecommerce_manage_category"
    MANAGE_COUNTRY = "ecommerce_manage_country"
    MANAGE_PAYMENT_METHOD = "ecommerce_manage_payment_method"

    SEARCH_ORDER = "ecommerce_search_order"
    UPDATE_ORDER = "ecommerce_update_order"
    UPDATE_ORDER_COMPLETED_AT = "ecommerce_update_order_completed_at"


@dataclass(frozen=True)
class AccessRule:
    """Who may run an operation.

    An empty role set without ``authenticated`` makes the operation public.
    A non-empty role set implies authentication and is satisfied by any one
    of the roles.
    """
    roles: FrozenSet[str] = field(default_factory=frozenset)
    authenticated: bool = False

    @property
    def is_public(self) -> bool:
        return not self.roles and not self.authenticated


PUBLIC = AccessRule()
AUTHENTICATED = AccessRule(authenticated=True)


def any_of(*roles: str) -> AccessRule:
    return AccessRule(roles=frozenset(roles), authenticated=True)


# Roles that let a user see and edit orders of other users
ORDER_PRIVILEGED_ROLES = frozenset({Roles.SEARCH_ORDER, Roles.UPDATE_ORDER})

OPERATION_ACCESS: Dict[str, AccessRule] = {
    # products
    "list_products": PUBLIC,
    "get_product": PUBLIC,
    "create_product": any_of(Roles.CREATE_PRODUCT),
    "update_product": any_of(Roles.CREATE_PRODUCT, Roles.UPDATE_PRODUCT),
    "delete_product": any_of(Roles.DELETE_PRODUCT),

    # categories
    "list_categories": PUBLIC,
    "create_category": any_of(Roles.MANAGE_CATEGORY),
    "update_category": any_of(Roles.MANAGE_CATEGORY),
    "delete_category": any_of(Roles.MANAGE_CATEGORY),

    # countries
    "list_countries": PUBLIC,
    "get_country": PUBLIC,
    "create_country": any_of(Roles.MANAGE_COUNTRY),
    "delete_country": any_of(Roles.MANAGE_COUNTRY),

    # payment methods
    "list_payment_methods": PUBLIC,
    "get_payment_method": PUBLIC,
    "create_payment_method": any_of(Roles.MANAGE_PAYMENT_METHOD),
    "update_payment_method": any_of(Roles.MANAGE_PAYMENT_METHOD),
    "delete_payment_method": any_of(Roles.MANAGE_PAYMENT_METHOD),

    # orders
    "list_orders": AUTHENTICATED,
    "get_order": AUTHENTICATED,
    "create_order": AUTHENTICATED,
    "update_order_address": AUTHENTICATED,
    "complete_order": any_of(Roles.UPDATE_ORDER_COMPLETED_AT, Roles.UPDATE_ORDER),
    "complete_order_payment": any_of(Roles.UPDATE_ORDER_COMPLETED_AT, Roles.UPDATE_ORDER),
}
