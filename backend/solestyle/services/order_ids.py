import random
import time
from typing import Callable, Container, Optional


def generate_order_id(now: Optional[Callable[[], float]] = None) -> str:
    """SS-<epoch seconds>-<0..999>. Unique only with high probability."""
    ts = int((now or time.time)())
    return f"SS-{ts}-{random.randint(0, 999)}"


def generate_unused_order_id(taken: Container[str], max_attempts: int = 20) -> str:
    for _ in range(max_attempts):
        oid = generate_order_id()
        if oid not in taken:
            return oid
    raise RuntimeError("Could not generate an unused order id")
