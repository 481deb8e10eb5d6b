import importlib
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from solestyle.config import settings

log = logging.getLogger("solestyle.db")

DATABASE_URL = settings.DATABASE_URL
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# model modules must be imported before create_all so metadata is populated
MODEL_MODULES = [
    "solestyle.models.client_storage",
]


def init_db(reset: bool = None):
    """
    Initialize DB schema.

    Behavior:
      - If ``reset`` is true (or RESET_DB is set when ``reset`` is None),
        drop & recreate tables.
      - Otherwise leave existing tables in place.
    """
    if reset is None:
        reset = settings.RESET_DB

    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset:
        log.info("Resetting database (RESET_DB set)...")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized at %s", DATABASE_URL)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
