"""
SQLAlchemy-backed emission factor provider - async version.

Reads factors from the emission_factors table; never writes.
"""

import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories import EmissionFactorRepository
from app.database.schemas import EmissionFactorDBModel
from app.pydantic_models.emission_factor import EmissionFactor
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.provider import FactorLookupError
from app.utils.constants import FuelType, TransportMode

logger = logging.getLogger(__name__)


class SQLAlchemyFactorProvider:
    """FactorProvider reading the externally maintained factor store."""

    def __init__(self, session: AsyncSession):
        """
        Initialize provider with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self.session = session
        self.repository = EmissionFactorRepository(session)

    async def lookup(
        self,
        transport_mode: TransportMode,
        vehicle_type: str | None,
        fuel_type: FuelType | None,
    ) -> list[EmissionFactor]:
        """
        Fetch matching factors, newest first.

        Raises:
            FactorLookupError: If the query fails
        """
        try:
            rows = await self.repository.get_matching(
                transport_mode.value,
                vehicle_type=vehicle_type,
                fuel_type=fuel_type.value if fuel_type else None,
            )
        except SQLAlchemyError as e:
            raise FactorLookupError(f"Database error: {e}") from e

        logger.debug(
            f"Database returned {len(rows)} factors for "
            f"{transport_mode.value}/{vehicle_type}/{fuel_type}"
        )
        factors = []
        for row in rows:
            try:
                factors.append(self.to_emission_factor(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid emission factor row {row.id}: "
                    f"{e.error_count()} validation errors"
                )
        return factors

    @staticmethod
    def to_emission_factor(row: EmissionFactorDBModel) -> EmissionFactor:
        """Map a database row onto the engine's EmissionFactor value."""
        return EmissionFactor(
            id=str(row.id),
            transport_mode=row.transport_mode,
            vehicle_type=row.vehicle_type,
            fuel_type=row.fuel_type,
            co2_factor=UnitConverter.normalize_number(row.co2_factor),
            ch4_factor=(
                UnitConverter.normalize_number(row.ch4_factor)
                if row.ch4_factor is not None
                else None
            ),
            n2o_factor=(
                UnitConverter.normalize_number(row.n2o_factor)
                if row.n2o_factor is not None
                else None
            ),
            unit=row.unit,
            scope=row.scope,
            source=row.source,
            version=row.version,
            region=row.region,
            updated_at=row.updated_at,
        )
