import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from solestyle.api.deps import ClientContext, get_client
from solestyle.db import get_db
from solestyle.domain.checkout_form import (
    ValidationResult,
    clear_field_error,
    format_card_number,
    payment_field_visibility,
)
from solestyle.domain import CheckoutError
from solestyle.services.checkout_service import (
    CONFIRMATION_PAGE,
    CheckoutFormInvalid,
    CheckoutService,
)

log = logging.getLogger("solestyle.api.checkout")

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


class CheckoutIn(BaseModel):
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    # form field name -> submitted value, e.g. {"first-name": "Ada"}
    form_fields: Dict[str, Optional[str]] = Field(default_factory=dict, alias="fields")


class ClearFieldIn(BaseModel):
    field: str
    errors: Dict[str, str] = {}
    invalid_fields: List[str] = Field(default_factory=list, alias="invalidFields")


def _result_body(result: ValidationResult) -> dict:
    return {
        "valid": result.valid,
        "errors": result.errors,
        "invalidFields": result.invalid_fields,
        "firstInvalid": result.first_invalid,
    }


def _service(db: Session, client: ClientContext) -> CheckoutService:
    return CheckoutService(db, client.client_id, client.session_id)


@router.get("/summary", summary="Order summary from the checkout snapshot")
def get_summary(client: ClientContext = Depends(get_client), db: Session = Depends(get_db)):
    return _service(db, client).summary().model_dump(by_alias=True)


@router.get("/payment-fields", summary="Which payment field groups to show")
def get_payment_fields(method: Optional[str] = Query(None)):
    vis = payment_field_visibility(method)
    return {"cardFields": vis.card_fields, "codFields": vis.cod_fields}


@router.get("/format-card", summary="Group a typed card number by four digits")
def get_formatted_card(value: str = Query("")):
    return {"value": format_card_number(value)}


@router.post("/validate", summary="Validate the checkout form without placing an order")
def validate_form(
    payload: CheckoutIn,
    client: ClientContext = Depends(get_client),
    db: Session = Depends(get_db),
):
    result = _service(db, client).validate(payload.form_fields, payload.payment_method)
    return _result_body(result)


@router.post("/validate/clear", summary="Clear one field's error after input")
def clear_field(payload: ClearFieldIn):
    result = ValidationResult(
        valid=not payload.invalid_fields,
        errors=payload.errors,
        invalid_fields=payload.invalid_fields,
    )
    return _result_body(clear_field_error(result, payload.field))


@router.post("", summary="Place order", status_code=status.HTTP_201_CREATED)
def place_order(
    payload: CheckoutIn,
    response: Response,
    client: ClientContext = Depends(get_client),
    db: Session = Depends(get_db),
):
    svc = _service(db, client)
    try:
        order = svc.place_order(payload.form_fields, payload.payment_method)
    except CheckoutFormInvalid as e:
        response.status_code = 422
        return _result_body(e.result)
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("order placement failed for client=%s", client.client_id)
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"orderId": order.order_id, "redirect": CONFIRMATION_PAGE, "order": order.to_storage()}
