from fastapi import Depends
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from config.settings import Settings
from core.container import Container, get_container


# ---------------------------------------------------------------------
# Database Engine Configuration
# ---------------------------------------------------------------------
def create_db_engine(settings: Settings) -> Engine:
    """
    Build the shared connection pool.

    Every storage operation is bounded by ``settings.db_query_timeout``:
    PostgreSQL gets a server-side statement_timeout, SQLite a busy timeout,
    and waiting for a pooled connection uses the same bound.
    """
    url = make_url(settings.database_url)

    if url.get_backend_name() == "sqlite":
        kwargs = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.db_query_timeout,
            },
        }
        # In-memory databases live and die with a single connection
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)

    connect_args = {}
    if url.get_backend_name() == "postgresql":
        timeout_ms = int(settings.db_query_timeout * 1000)
        connect_args["options"] = f"-c statement_timeout={timeout_ms}"

    return create_engine(
        url,
        echo=False,                                     # Set to True for SQL query debugging
        pool_size=settings.db_max_idle_conns,           # Connections kept open in the pool
        max_overflow=max(settings.db_max_open_conns - settings.db_max_idle_conns, 0),
        pool_recycle=settings.db_max_idle_time,         # Recycle idle connections
        pool_pre_ping=True,                             # Verify connection health before use
        pool_timeout=settings.db_query_timeout,         # Wait this long for a free connection
        connect_args=connect_args,
    )


# ---------------------------------------------------------------------
# Database Initialization
# ---------------------------------------------------------------------
def create_db_and_tables(engine: Engine):
    """
    Create all database tables defined in SQLModel models.
    Called once at app startup (see main.lifespan).
    """
    import database.models  # noqa: F401  (registers tables on the metadata)

    SQLModel.metadata.create_all(engine)


# ---------------------------------------------------------------------
# Dependency for FastAPI Routes (context-managed)
# ---------------------------------------------------------------------
def get_session(container: Container = Depends(get_container)):
    """
    Dependency for FastAPI endpoints: provides a request-scoped SQLModel session.
    Example:
        @router.get("/movies")
        def list_movies(session: Session = Depends(get_session)):
            ...
    """
    with Session(container.engine) as session:
        yield session

