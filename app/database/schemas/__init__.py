"""
SQLAlchemy database models (schemas).
"""
from app.database.schemas.emission_factor import EmissionFactorDBModel

__all__ = ["EmissionFactorDBModel"]
