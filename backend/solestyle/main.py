import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from solestyle.api.health import router as health_router
from solestyle.api.routes_cart import router as cart_router
from solestyle.api.routes_checkout import router as checkout_router
from solestyle.api.routes_order import router as order_router
from solestyle.config import settings
from solestyle.db import SessionLocal, init_db
from solestyle.logging_config import setup_logging
from solestyle.repositories.storage_repo import purge_expired

log = logging.getLogger("solestyle.main")


def purge_session_storage():
    db = SessionLocal()
    try:
        removed = purge_expired(db)
        if removed:
            log.info("purged %d expired session entries", removed)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    setup_logging()
    init_db()

    # scheduler for expiring session storage (checkout snapshots, last order id)
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        purge_session_storage,
        "interval",
        seconds=settings.SESSION_PURGE_INTERVAL_SECONDS,
        id="purge_session_storage",
    )
    scheduler.start()

    try:
        yield
    finally:
        scheduler.shutdown(wait=False)


app = FastAPI(title="SoleStyle - Cart & Checkout", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(cart_router, tags=["cart"])

app.include_router(checkout_router, tags=["checkout"])

app.include_router(order_router, tags=["orders"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("solestyle.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
