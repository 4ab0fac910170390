# shopapi/models/base.py
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

# Text that must contain something other than whitespace
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ApiModel(BaseModel):
    """Base model for request and response bodies"""

    model_config = ConfigDict(from_attributes=True)
