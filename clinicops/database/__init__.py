from clinicops.database.async_db import dispose_engine, get_async_db

__all__ = ["get_async_db", "dispose_engine"]
