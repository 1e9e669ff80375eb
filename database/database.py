"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and an `init_db` helper that creates
tables and seeds the exercise-type catalogue (and, when configured, a first
nutritionist account) on an empty database.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings
from core.logger import get_logger
from core.security import hash_password
from data.exercise_types import EXERCISE_TYPES
from .models import Base, ExerciseType, Role, User

logger = get_logger("database.database")


def make_engine(url: str) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


# Read/Write partitioning pattern
# In production, set DATABASE_URL and READ_DATABASE_URL to different DB instances.
# For SQLite/demo both point at the same file but the interfaces are separated.
write_engine = make_engine(settings.database_url)
read_engine = (
    write_engine
    if settings.read_database_url == settings.database_url
    else make_engine(settings.read_database_url)
)

# Session factories
WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def seed_exercise_types(session: Session) -> int:
    """Insert the default exercise types that are missing, by name."""
    existing = {name for (name,) in session.query(ExerciseType.name).all()}
    added = 0
    for item in EXERCISE_TYPES:
        if item["name"] in existing:
            continue
        session.add(ExerciseType(**item))
        added += 1
    if added:
        session.commit()
    return added


def seed_nutritionist(session: Session) -> bool:
    """Create the configured first nutritionist when it does not exist yet."""
    email = settings.seed_nutritionist_email
    password = settings.seed_nutritionist_password
    if not email or not password:
        return False
    email = email.lower()
    if session.query(User).filter(User.email == email).first():
        return False
    session.add(User(
        email=email,
        password=hash_password(password),
        name=settings.seed_nutritionist_name,
        role=Role.NUTRITIONIST.value,
        nutritionist_id=None,
        active=True,
    ))
    session.commit()
    logger.info("Seeded nutritionist account %s", email)
    return True


def init_db(engine: Engine = None):
    """Initialize database schema and seed reference data.

    Creates all tables using SQLAlchemy models, seeds exercise types and
    the optional nutritionist account. Safe to call repeatedly.

    Args:
        engine: Engine to initialize; defaults to the write engine.
    """
    engine = engine or write_engine
    Base.metadata.create_all(bind=engine)
    session = Session(bind=engine)
    try:
        added = seed_exercise_types(session)
        if added:
            logger.info("Seeded %s exercise types", added)
        seed_nutritionist(session)
    finally:
        session.close()


# Convenience generators for dependency injection
def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope.

    Use this generator as a FastAPI dependency to ensure the session is
    properly closed after the request completes.
    """
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope.

    Used for read endpoints where routing reads to a replica may be desired.
    """
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
