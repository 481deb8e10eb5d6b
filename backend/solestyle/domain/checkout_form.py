"""
Checkout form rules: required fields, email / card / CVV checks, the
payment-method field toggle and card number formatting.
"""
import re
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

CREDIT_CARD = "credit-card"
CASH_ON_DELIVERY = "cod"

REQUIRED_FIELDS = [
    "first-name",
    "last-name",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "zip",
    "country",
]
CARD_FIELDS = ["card-name", "card-number", "expiry", "cvv"]

MSG_REQUIRED = "This field is required"
MSG_EMAIL = "Please enter a valid email address"
MSG_CARD_NUMBER = "Please enter a valid 16-digit card number"
MSG_CVV = "Please enter a valid CVV"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CARD_NUMBER_RE = re.compile(r"^\d{16}$")
CVV_RE = re.compile(r"^\d{3,4}$")


class ValidationResult(BaseModel):
    valid: bool = True
    errors: Dict[str, str] = Field(default_factory=dict)
    invalid_fields: List[str] = Field(default_factory=list)

    @property
    def first_invalid(self) -> Optional[str]:
        return self.invalid_fields[0] if self.invalid_fields else None

    def mark(self, field: str, message: str):
        # first message recorded for a field wins, like the inline error span
        if field not in self.errors:
            self.errors[field] = message
            self.invalid_fields.append(field)
        self.valid = False


class PaymentFieldVisibility(BaseModel):
    card_fields: bool = False
    cod_fields: bool = False


def _value(fields: Mapping[str, Optional[str]], name: str) -> str:
    return (fields.get(name) or "").strip()


def validate_checkout_form(
    fields: Mapping[str, Optional[str]],
    payment_method: Optional[str],
) -> ValidationResult:
    result = ValidationResult()
    for name in REQUIRED_FIELDS:
        if not _value(fields, name):
            result.mark(name, MSG_REQUIRED)

    email = _value(fields, "email")
    if email and not EMAIL_RE.match(fields.get("email")):
        result.mark("email", MSG_EMAIL)

    if payment_method == CREDIT_CARD:
        for name in CARD_FIELDS:
            if not _value(fields, name):
                result.mark(name, MSG_REQUIRED)

        card_number = _value(fields, "card-number")
        if card_number and not CARD_NUMBER_RE.match(re.sub(r"\s", "", card_number)):
            result.mark("card-number", MSG_CARD_NUMBER)

        cvv = _value(fields, "cvv")
        if cvv and not CVV_RE.match(fields.get("cvv")):
            result.mark("cvv", MSG_CVV)

    return result


def clear_field_error(result: ValidationResult, field: str) -> ValidationResult:
    """Typing into a field drops that field's marker only."""
    errors = {k: v for k, v in result.errors.items() if k != field}
    invalid = [f for f in result.invalid_fields if f != field]
    return ValidationResult(valid=not invalid, errors=errors, invalid_fields=invalid)


def payment_field_visibility(payment_method: Optional[str]) -> PaymentFieldVisibility:
    return PaymentFieldVisibility(
        card_fields=payment_method == CREDIT_CARD,
        cod_fields=payment_method == CASH_ON_DELIVERY,
    )


def format_card_number(text: str) -> str:
    digits = re.sub(r"[^0-9]", "", text or "")
    groups = [digits[i:i + 4] for i in range(0, len(digits), 4)]
    return " ".join(groups)[:19]
