class CartError(ValueError):
    """Raised for a cart operation the cart cannot accept (e.g. quantity < 1)."""
    pass


class CheckoutError(Exception):
    """Raised when checkout cannot start or an order cannot be placed."""
    pass
