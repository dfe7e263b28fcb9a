"""
Repository for EmissionFactor database operations.

Handles all database interactions for emission factors.
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.schemas import EmissionFactorDBModel


class EmissionFactorRepository:
    """Repository for emission factor operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize emission factor repository.

        Args:
            session: Async database session
        """
        self.model = EmissionFactorDBModel
        self.session = session

    async def get_matching(
        self,
        transport_mode: str,
        vehicle_type: Optional[str] = None,
        fuel_type: Optional[str] = None,
    ) -> List[EmissionFactorDBModel]:
        """
        Get emission factors for a transport mode, newest first.

        Args:
            transport_mode: Transport mode (road, rail, sea, air)
            vehicle_type: Optional vehicle type filter (case-insensitive)
            fuel_type: Optional fuel type filter

        Returns:
            List of matching emission factors ordered by updated_at descending
        """
        stmt = select(self.model).where(self.model.transport_mode == transport_mode)

        if vehicle_type:
            stmt = stmt.where(func.lower(self.model.vehicle_type) == vehicle_type.lower())
        if fuel_type:
            stmt = stmt.where(self.model.fuel_type == fuel_type)

        stmt = stmt.order_by(self.model.updated_at.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
