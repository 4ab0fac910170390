# shopapi/services/country_service.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.entities import Country
from ..exceptions import ConflictError, NotFoundError
from ..models.country import CountryIn, CountryOut


class CountryService:
    """Countries orders can be shipped to"""

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def find_active_country(self, session: AsyncSession, country_id: int) -> Country:
        """Load an active country or raise NotFoundError"""
        country = await session.scalar(
            select(Country).where(Country.id == country_id, Country.active.is_(True))
        )
        if country is None:
            raise NotFoundError.country(country_id)
        return country

    async def get_country(self, country_id: int) -> CountryOut:
        async with self.db.session() as session:
            country = await self.find_active_country(session, country_id)
            self.logger.info(f"found country with id={country_id}")
            return CountryOut.model_validate(country)

    async def get_countries(self) -> List[CountryOut]:
        """All active countries"""
        async with self.db.session() as session:
            countries = (await session.scalars(
                select(Country).where(Country.active.is_(True)).order_by(Country.id)
            )).all()
            self.logger.info(f"found countries count={len(countries)}")
            return [CountryOut.model_validate(country) for country in countries]

    async def add_country(self, country_in: CountryIn) -> CountryOut:
        """Create a country, or reactivate a deleted one with the same name"""
        self.logger.debug(f"{country_in!r}")

        async with self.db.session() as session:
            country = await session.scalar(select(Country).where(Country.name == country_in.name))

            if country is not None and country.active:
                raise ConflictError(f"country with name={country_in.name} and active=true already exists")

            if country is not None:
                country.active = True
                self.logger.info(f"reactivated country with id={country.id}")
                return CountryOut.model_validate(country)

            country = Country(name=country_in.name, active=True)
            session.add(country)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError(f"country with name={country_in.name} already exists") from e

            self.logger.info(f"created country with id={country.id}")
            return CountryOut.model_validate(country)

    async def delete_country(self, country_id: int) -> None:
        """Mark the country inactive"""
        async with self.db.session() as session:
            country = await self.find_active_country(session, country_id)
            country.active = False
            self.logger.info(f"deleted country with id={country_id}")
