"""
Storage layer of the business directory.

- interface / sqlite_adapter: backend-specific engine construction
- session: the process engine and the per-request session dependency
- models: businesses and their locations, hours, services and reviews
- seed: sample businesses for development and tests
"""

from business_api.db.interface import DatabaseAdapter
from business_api.db.session import async_session_maker, engine, get_session

__all__ = [
    "DatabaseAdapter",
    "async_session_maker",
    "engine",
    "get_session",
]
