from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from solestyle.models.client_storage import ClientStorageEntry, StorageScope, utcnow

# storage keys shared with the storefront pages
CART_KEY = "solestyleCart"
ORDERS_KEY = "solestyleOrders"
CHECKOUT_CART_KEY = "checkoutCart"
LAST_ORDER_ID_KEY = "lastOrderId"


class ClientStorageRepository:
    """
    Key/value storage owned by one client in one scope, the server-side
    counterpart of the browser's localStorage / sessionStorage.

    Session-scope entries carry an expiry; every write pushes it forward by
    ``ttl_seconds``. Expired entries read as absent.
    """

    def __init__(
        self,
        db: Session,
        owner_id: str,
        scope: StorageScope = StorageScope.LOCAL,
        ttl_seconds: Optional[int] = None,
    ):
        self.db = db
        self.owner_id = owner_id
        self.scope = scope
        self.ttl_seconds = ttl_seconds

    def _query(self, key: str):
        return self.db.query(ClientStorageEntry).filter(
            ClientStorageEntry.owner_id == self.owner_id,
            ClientStorageEntry.scope == self.scope,
            ClientStorageEntry.key == key,
        )

    def get_item(self, key: str) -> Optional[Any]:
        qry = self._query(key).filter(
            or_(ClientStorageEntry.expires_at.is_(None), ClientStorageEntry.expires_at > utcnow())
        )
        entry = qry.first()
        return entry.value if entry else None

    def set_item(self, key: str, value: Any) -> ClientStorageEntry:
        expires_at = None
        if self.ttl_seconds:
            expires_at = utcnow() + timedelta(seconds=self.ttl_seconds)
        entry = self._query(key).first()
        if entry:
            entry.value = value
            entry.expires_at = expires_at
        else:
            entry = ClientStorageEntry(
                owner_id=self.owner_id,
                scope=self.scope,
                key=key,
                value=value,
                expires_at=expires_at,
            )
            self.db.add(entry)
        self.db.flush()
        return entry


def purge_expired(db: Session) -> int:
    """Delete session entries past their expiry. Returns the number removed."""
    removed = (
        db.query(ClientStorageEntry)
        .filter(
            ClientStorageEntry.expires_at.is_not(None),
            ClientStorageEntry.expires_at <= utcnow(),
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed
