# shopapi/handlers/base_handler.py
"""Request dependencies shared by all route handlers"""
import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from ..database import Database
from ..exceptions import AuthenticationError
from ..utils.security import Identity

logger = logging.getLogger(__name__)


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_identity(
    request: Request,
    authorization: Annotated[Optional[str], Header()] = None,
) -> Optional[Identity]:
    """Authenticate the request once; any token problem means anonymous"""
    authenticator = request.app.state.authenticator
    try:
        identity = authenticator.authenticate(authorization)
    except AuthenticationError as e:
        logger.warning(f"{e}")
        return None

    if identity is not None:
        logger.debug(f"user={identity.subject}")
    return identity


DatabaseDep = Annotated[Database, Depends(get_db)]
IdentityDep = Annotated[Optional[Identity], Depends(get_identity)]
