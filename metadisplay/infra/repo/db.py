"""DB utilities for SQLAlchemy sessions/engine.

Uses `DATABASE_URL` env var or falls back to `sqlite+pysqlite:///:memory:` for tests.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from metadisplay.domain.errors import StorageUnavailable
from metadisplay.infra.repo.models import Base

MEMORY_URL = "sqlite+pysqlite:///:memory:"


def get_engine(url: str | None = None, echo: bool = False) -> Engine:
    """Crée un moteur SQLAlchemy à partir de l'URL de base de données.

    Une base SQLite en mémoire partage une connexion unique (StaticPool), sinon chaque connexion
    verrait une base vide.
    """
    db_url = url or os.getenv("DATABASE_URL") or MEMORY_URL
    kwargs: dict = {}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in db_url or db_url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
    return create_engine(db_url, future=True, echo=echo, **kwargs)


def init_schema(engine: Engine) -> None:
    """Crée les tables manquantes (dev/tests; la prod passe par Alembic)."""
    Base.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> sessionmaker:
    """Crée une factory de sessions SQLAlchemy."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Contexte de session SQLAlchemy avec gestion automatique des transactions.

    Une opération logique = une transaction: commit en sortie normale, rollback sur toute
    exception. Les erreurs de connexion du moteur sont converties en `StorageUnavailable`.
    """
    SessionLocal = get_session_factory(engine)
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except (OperationalError, InterfaceError) as err:
        session.rollback()
        raise StorageUnavailable(str(err.orig or err)) from err
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
