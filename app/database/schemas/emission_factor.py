"""
EmissionFactor SQLAlchemy model.

Read-only view of the externally maintained GLEC factor store.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Numeric, String
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class EmissionFactorDBModel(Base):
    """
    Emission factor lookup table.

    Maps transport mode, vehicle type and fuel type to per-gas emission factors.
    """

    __tablename__ = "emission_factors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    transport_mode = Column(
        String(20),
        nullable=False,
        index=True,
        comment="Transport mode (road, rail, sea, air)",
    )

    vehicle_type = Column(
        String(100),
        nullable=False,
        comment="Vehicle type (e.g., 'truck', 'container_ship')",
    )

    fuel_type = Column(
        String(20),
        nullable=False,
        comment="Fuel type (e.g., 'diesel', 'hfo', 'jet_fuel')",
    )

    co2_factor = Column(
        Numeric(12, 6),
        nullable=False,
        comment="kg CO2e per unit",
    )

    ch4_factor = Column(Numeric(12, 8), nullable=True, comment="kg CH4 per unit")

    n2o_factor = Column(Numeric(12, 8), nullable=True, comment="kg N2O per unit")

    unit = Column(
        String(20),
        nullable=False,
        comment="Functional unit (km, tkm, kg_fuel, kwh)",
    )

    scope = Column(
        String(3),
        nullable=False,
        default="wtw",
        comment="Emission boundary (ttw or wtw)",
    )

    source = Column(
        String(200),
        nullable=False,
        comment="Source of the emission factor (e.g., 'GLEC Framework v3.1')",
    )

    version = Column(String(20), nullable=False)

    region = Column(String(100), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index(
            "ix_emission_factors_mode_vehicle_fuel",
            "transport_mode",
            "vehicle_type",
            "fuel_type",
        ),
        {"comment": "GLEC emission factors by transport mode, vehicle and fuel"},
    )

    def __repr__(self):
        return (
            f"<EmissionFactorDBModel: {self.transport_mode} - "
            f"{self.vehicle_type} - {self.fuel_type}>"
        )
