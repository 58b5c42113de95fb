# tenantguard/core/db.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .errors import StoreUnavailable


def _make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url)
    return create_engine(url, pool_size=5, max_overflow=10, pool_pre_ping=True)


_engine: Engine = _make_engine(settings.database_url)
_SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def bind_engine(engine: Engine) -> None:
    """Point the session factory at another engine (tests, alternate deployments)."""
    global _engine
    _engine = engine
    _SessionLocal.configure(bind=engine)


def create_schema() -> None:
    from tenantguard.domain.sqlalchemy_models import Base
    Base.metadata.create_all(_engine)


@contextmanager
def transaction() -> Iterator[Session]:
    """
    One atomic unit of work against the credential store.

    Commits on clean exit, rolls back on any exception. Driver failures that are not
    constraint violations surface as StoreUnavailable; IntegrityError is left for the
    repositories to translate into the matching AlreadyExists failure.
    """
    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except DBAPIError as exc:
        session.rollback()
        raise StoreUnavailable() from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
