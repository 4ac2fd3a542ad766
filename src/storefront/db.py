from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url


def create_storage_engine(url: str, echo: bool = False) -> Engine:
    """Engine for the local cart database. Creates the folder of a SQLite file if needed."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(url, echo=echo)
