from contextlib import contextmanager
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, create_engine, Session
from config.settings import DATABASE_URL


# ---------------------------------------------------------------------
# Database Engine Configuration
# ---------------------------------------------------------------------
def build_engine(url: str = DATABASE_URL):
    """Create the SQLModel engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},  # FastAPI runs sync routes in a threadpool
        )

    return create_engine(
        url,
        echo=False,           # Set to True for SQL query debugging
        pool_size=10,         # Max number of DB connections in pool
        max_overflow=5,       # Allow 5 extra connections during peak load
        pool_recycle=300,     # Recycle connections every 5 min
        pool_pre_ping=True,   # Verify connection health before use
        pool_timeout=60       # Wait up to 60 seconds for a connection
    )


engine = build_engine()


# ---------------------------------------------------------------------
# Database Initialization
# ---------------------------------------------------------------------
def create_db_and_tables():
    """
    Create all database tables defined in SQLModel models.
    Should be called once at app startup (e.g., in main.py).
    """
    import database.models  # noqa: F401  (registers every table on SQLModel.metadata)

    SQLModel.metadata.create_all(engine)


# ---------------------------------------------------------------------
# Dependency for FastAPI Routes (context-managed)
# ---------------------------------------------------------------------
def get_session():
    """
    Dependency for FastAPI endpoints, provides a scoped SQLModel session.
    Example:
        @router.get("/roles")
        def list_roles(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session



# ---------------------------------------------------------------------
# Unique index violations
# ---------------------------------------------------------------------
@contextmanager
def commit_or_conflict(session: Session, conflict_detail: str):
    """Run the block and commit; a unique index violation becomes a 422 with conflict_detail."""
    try:
        yield
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=conflict_detail,
        )
