from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from library_ledger.config import settings

Base = declarative_base()

def build_engine(database_url: str = None) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    url = database_url or settings.database_url
    engine_kwargs = {"echo": False}
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _register_unicode_lower)
    return engine

def _register_unicode_lower(dbapi_connection, connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII; ilike compiles to lower() on both sides
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value

def init_db(engine: Engine) -> None:
    # Register all tables on Base.metadata before creating them
    import library_ledger.models  # noqa: F401
    Base.metadata.create_all(bind=engine)

def create_session(engine: Engine) -> Session:
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    return SessionLocal()
