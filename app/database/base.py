"""
Database base configuration.

Builds the asyncpg URL and engine options for the read-only factor store.
"""
from sqlalchemy.engine.url import URL

from app.core.config import Config

engine_kw = {
    "pool_pre_ping": True,
    "pool_size": 2,  # connections kept open
    "max_overflow": 4,  # connections allowed above pool_size
    "connect_args": {
        "prepared_statement_cache_size": 0,
        "statement_cache_size": 0,
    },
}


def get_db_url(config: Config) -> URL:
    """
    Construct database URL from the [db] config table.
    """
    config_db = config.data["db"]
    return URL.create(drivername="postgresql+asyncpg", **config_db)
