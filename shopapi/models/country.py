# shopapi/models/country.py
from .base import ApiModel, NonBlankStr


class CountryIn(ApiModel):
    name: NonBlankStr


class CountryOut(ApiModel):
    id: int
    name: str
