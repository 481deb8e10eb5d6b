from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """
    Commit everything written inside the block at once, or roll all of it
    back if the block raises.
    Usage:
        with atomic(db):
            ... storage writes ...
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
