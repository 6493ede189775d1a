from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import MetaData

from radiocore.infra.settings import settings

# Deterministic constraint/index names
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


_engines: dict[str, Engine] = {}


def get_engine(db_url: str | None = None) -> Engine:
    """Get or create a database engine.

    Engines are cached per URL. In-memory SQLite URLs share a single
    connection so every session sees the same database.
    """
    chosen_url = db_url or settings.database_url
    engine = _engines.get(chosen_url)
    if engine is not None:
        return engine

    kwargs: dict[str, object] = {"echo": settings.echo_sql, "future": True}
    if chosen_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in chosen_url or chosen_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(chosen_url, **kwargs)
    _engines[chosen_url] = engine
    return engine


def get_sessionmaker(db_url: str | None = None) -> sessionmaker:
    """Get a session factory bound to the configured (or given) database."""
    return sessionmaker(
        bind=get_engine(db_url),
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )
