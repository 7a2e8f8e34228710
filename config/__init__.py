from .settings import settings
from .database import engine, create_db_and_tables, get_session

__all__ = [
    "settings",
    "engine",
    "create_db_and_tables",
    "get_session",
]
