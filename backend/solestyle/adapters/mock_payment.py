import logging
from decimal import Decimal

from solestyle.domain.checkout_form import CASH_ON_DELIVERY, CREDIT_CARD
from solestyle.domain.order import PaymentInfo, payment_status_for

log = logging.getLogger("solestyle.payment")


class PaymentDeclined(Exception):
    """Raised for a payment method the demo store does not accept."""
    pass


class MockPaymentAdapter:
    """
    Stand-in for a gateway: no money moves. Card payments settle as "paid"
    immediately, cash on delivery stays "pending" until the parcel arrives.
    """

    accepted_methods = (CREDIT_CARD, CASH_ON_DELIVERY)

    def settle(self, method: str, amount: Decimal) -> PaymentInfo:
        if method not in self.accepted_methods:
            raise PaymentDeclined(f"Unsupported payment method: {method}")
        info = PaymentInfo(method=method, status=payment_status_for(method))
        log.info("payment %s for %s -> %s", method, amount, info.status)
        return info

    def health_check(self) -> bool:
        return True
