"""Helpers for product details scraped from storefront page text."""
import re
from decimal import Decimal, InvalidOperation

from solestyle.domain import CartError

_PRICE_RE = re.compile(r"\$(\d+\.\d+)")
_WS_RE = re.compile(r"\s+")


def parse_price_text(text: str) -> Decimal:
    """
    "$89.99" -> 89.99. For sale prices such as "$59.99 $89.99" the first
    amount wins. Text without a ``$d.dd`` amount falls back to stripping "$".
    """
    text = str(text).strip()
    m = _PRICE_RE.search(text)
    raw = m.group(1) if m else text.replace("$", "").strip()
    try:
        price = Decimal(raw)
    except InvalidOperation:
        raise CartError(f"Unparseable price: {text!r}")
    if not price.is_finite():
        raise CartError(f"Unparseable price: {text!r}")
    return price


def product_id_from_link(href: str) -> str:
    return href.replace(".html", "")


def product_id_from_name(name: str) -> str:
    return _WS_RE.sub("-", name.lower())
