import enum
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Integer,
    String,
    UniqueConstraint,
)

from solestyle.db import Base


def utcnow() -> datetime:
    # naive UTC, so SQLite round-trips compare cleanly
    return datetime.now(timezone.utc).replace(tzinfo=None)


class StorageScope(enum.Enum):
    LOCAL = "local"  # survives across visits, keyed by the client_id cookie
    SESSION = "session"  # one browsing session, keyed by the session_id cookie


class ClientStorageEntry(Base):
    __tablename__ = "client_storage"
    __table_args__ = (
        UniqueConstraint("owner_id", "scope", "key", name="uq_storage_owner_scope_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=False, index=True)
    scope = Column(Enum(StorageScope), nullable=False, default=StorageScope.LOCAL)
    key = Column(String(128), nullable=False)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=True)  # NULL for local scope

    def __repr__(self):
        return f"<ClientStorageEntry owner={self.owner_id} scope={self.scope.value} key={self.key}>"
