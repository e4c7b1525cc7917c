"""SQLAlchemy engine setup and the transactional unit of work.

PostgreSQL runs at READ COMMITTED; the coordinator's explicit
``FOR UPDATE`` locks provide the stronger guarantee where stock is
read, validated and written.  SQLite ignores ``FOR UPDATE`` and is
meant for development and tests only.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rpos.domain.exceptions import InternalError
from rpos.domain.repository.unit_of_work import UnitOfWork
from rpos.infrastructure.persistence.orm import Base
from rpos.infrastructure.persistence.sqlalchemy_repositories import (
    SqlAlchemyIngredientRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyRecipeRepository,
)

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        isolation_level="READ COMMITTED",
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    Base.metadata.create_all(engine)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """One Session, one transaction, per ``with`` block."""

    def __init__(self, session_factory: sessionmaker[Session], currency: str = "USD") -> None:
        self._session_factory = session_factory
        self._currency = currency
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.products = SqlAlchemyProductRepository(self._session, self._currency)
        self.ingredients = SqlAlchemyIngredientRepository(self._session, self._currency)
        self.recipes = SqlAlchemyRecipeRepository(self._session, self._currency)
        self.orders = SqlAlchemyOrderRepository(self._session)
        logger.debug("Unit of work started")
        return self

    def __exit__(self, *args) -> None:
        try:
            super().__exit__(*args)
        finally:
            self.session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work used outside of a 'with' block")
        return self._session

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Commit failed; unit of work rolled back", exc_info=True)
            raise InternalError(f"Could not commit unit of work: {exc}") from exc
        logger.debug("Unit of work committed")

    def rollback(self) -> None:
        if self.session.in_transaction():
            self.session.rollback()
            logger.debug("Unit of work rolled back")
