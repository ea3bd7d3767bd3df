"""Engine and session helpers."""

from obravista.database.db import get_db, get_db_session, get_engine, init_db, reset_engine

__all__ = ["get_db", "get_db_session", "get_engine", "init_db", "reset_engine"]
