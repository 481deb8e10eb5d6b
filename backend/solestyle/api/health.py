from fastapi import APIRouter
from sqlalchemy import text

from solestyle.adapters.mock_payment import MockPaymentAdapter
from solestyle.db import engine

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception:
        db_ok = False
    payment_ok = MockPaymentAdapter().health_check()

    return {
        "status": "ok" if db_ok and payment_ok else "degraded",
        "db": db_ok,
        "payment_adapter": payment_ok,
    }
