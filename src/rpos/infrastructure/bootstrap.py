"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from rpos.infrastructure.config import get_settings
from rpos.infrastructure.persistence.sqlalchemy_unit_of_work import (
    SqlAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
)


@lru_cache
def engine() -> Engine:
    url = get_settings().DATABASE_URL
    database = make_url(url).database
    if url.startswith("sqlite") and database and database != ":memory:":
        # SQLite will not create missing parent directories itself.
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    return build_engine(url)


@lru_cache
def session_factory() -> sessionmaker[Session]:
    return build_session_factory(engine())


def unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory(), currency=get_settings().CURRENCY)
