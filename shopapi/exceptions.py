# shopapi/exceptions.py
"""Application-wide exception hierarchy.

Every error maps to one HTTP status; the message is written to the log and
never sent to the client.
"""


class ShopError(Exception):
    """Base application error"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ShopError):
    """Requested entity does not exist or is inactive"""

    status_code = 404

    @classmethod
    def product(cls, product_id: int) -> "NotFoundError":
        return cls(f"product with id={product_id} not found")

    @classmethod
    def category(cls, category_id: int) -> "NotFoundError":
        return cls(f"category with id={category_id} not found")

    @classmethod
    def country(cls, country_id: int) -> "NotFoundError":
        return cls(f"country with id={country_id} not found")

    @classmethod
    def payment_method(cls, payment_method_id: int) -> "NotFoundError":
        return cls(f"payment method with id={payment_method_id} not found")

    @classmethod
    def order(cls, order_id: int) -> "NotFoundError":
        return cls(f"order with id={order_id} not found")

    @classmethod
    def order_of_user(cls, order_id: int, username: str) -> "NotFoundError":
        return cls(
            f"order with id={order_id} does not exist or does not belong to user={username}"
        )


class ConflictError(ShopError):
    """Request conflicts with the current state of an entity"""

    status_code = 409

    @classmethod
    def order_already_completed(cls, order_id: int) -> "ConflictError":
        return cls(f"order with id={order_id} has already been completed")

    @classmethod
    def payment_already_completed(cls, order_id: int) -> "ConflictError":
        return cls(f"payment of order with id={order_id} has already been completed")


class ValidationError(ShopError):
    """Input is well-formed but not acceptable"""

    status_code = 400


class UnauthenticatedError(ShopError):
    """Operation requires an identity and the request has none"""

    status_code = 401


class ForbiddenError(ShopError):
    """Identity lacks every role the operation accepts"""

    status_code = 403


class AuthenticationError(Exception):
    """Bearer token could not be turned into an identity.

    Never surfaced to the client: the request continues as anonymous.
    """


class UnsupportedSchemeError(AuthenticationError):
    """Authorization header does not use the Bearer scheme"""


class InvalidTokenError(AuthenticationError):
    """Token failed verification or carries malformed claims"""
