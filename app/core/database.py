from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import get_settings


logger = logging.getLogger("app.lifecycle")


class Base(DeclarativeBase):
    pass


engine = create_engine(get_settings().sqlalchemy_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db() -> None:
    from app.subscriptions import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("database.migrated", extra={"tables": sorted(Base.metadata.tables)})
