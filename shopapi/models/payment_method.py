# shopapi/models/payment_method.py
from typing import Optional

from .base import ApiModel, NonBlankStr


class PaymentMethodIn(ApiModel):
    name: NonBlankStr
    description: NonBlankStr


class PaymentMethodPatch(ApiModel):
    name: Optional[NonBlankStr] = None
    description: Optional[NonBlankStr] = None


class PaymentMethodOut(ApiModel):
    id: int
    name: str
    description: str
