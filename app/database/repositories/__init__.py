"""
Database repositories for data access layer.
"""
from app.database.repositories.emission_factor import EmissionFactorRepository

__all__ = ["EmissionFactorRepository"]
