from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from solestyle.api.deps import ClientContext, get_client
from solestyle.db import get_db
from solestyle.services.checkout_service import CheckoutService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", summary="Order history")
def list_orders(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    svc = CheckoutService(db, client.client_id, client.session_id)
    return {"items": [o.to_storage() for o in svc.list_orders()]}


@router.get("/last", summary="Order shown on the confirmation page")
def last_order(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    svc = CheckoutService(db, client.client_id, client.session_id)
    order = svc.last_order()
    if not order:
        raise HTTPException(status_code=404, detail="No recent order")
    return order.to_storage()
