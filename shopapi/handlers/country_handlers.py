# shopapi/handlers/country_handlers.py
from typing import List

from fastapi import APIRouter, Response, status

from ..models.country import CountryIn, CountryOut
from ..services.country_service import CountryService
from ..utils.security import require_access
from .base_handler import DatabaseDep, IdentityDep

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get("", response_model=List[CountryOut])
async def list_countries(identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "list_countries")
    return await CountryService(db).get_countries()


@router.get("/{country_id}", response_model=CountryOut)
async def get_country(country_id: int, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "get_country")
    return await CountryService(db).get_country(country_id)


@router.post("", response_model=CountryOut)
async def create_country(country: CountryIn, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "create_country")
    return await CountryService(db).add_country(country)


@router.delete("/{country_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_country(country_id: int, identity: IdentityDep, db: DatabaseDep):
    require_access(identity, "delete_country")
    await CountryService(db).delete_country(country_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
