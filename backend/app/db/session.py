import os
from functools import lru_cache

from sqlmodel import Session, create_engine

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:postgres@db:5432/print_pricing")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "").lower() in ("1", "true", "yes")


@lru_cache(maxsize=None)
def _engine_for(url: str, echo: bool):
    # one engine (and connection pool) per database URL
    return create_engine(url, echo=echo)


def get_engine():
    return _engine_for(DATABASE_URL, DATABASE_ECHO)


def get_session() -> Session:
    engine = get_engine()
    return Session(engine)
