"""PIX charges - POST /v1/pix/charges, GET /v1/pix/charges/{charge_id}"""

import time
import uuid
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from pix_checkout.api.dependencies import get_request_id, get_webhook_client
from pix_checkout.api.v1.checkout import build_quote
from pix_checkout.api.v1.schemas import ChargeRequest, ChargeResponse
from pix_checkout.config import settings
from pix_checkout.domain.exceptions import MissingMerchantKey
from pix_checkout.domain.models import MerchantProfile, PaymentRequest
from pix_checkout.domain.pix import encode, sanitize_transaction_id
from pix_checkout.infrastructure.clients.webhook import OrderWebhookClient
from pix_checkout.infrastructure.database.models import PixCharge
from pix_checkout.infrastructure.database.repositories import PixChargeRepository
from pix_checkout.infrastructure.database.session import get_db
from pix_checkout.infrastructure.observability.logging import log_charge
from pix_checkout.infrastructure.observability.metrics import record_charge
from pix_checkout.utils.money import format_brl, from_cents

router = APIRouter()


def to_charge_response(charge: PixCharge) -> ChargeResponse:
    return ChargeResponse(
        charge_id=str(charge.id),
        order_id=charge.order_id,
        transaction_id=charge.transaction_id,
        amount=from_cents(charge.amount_cents),
        amount_display=format_brl(from_cents(charge.amount_cents)),
        subtotal=from_cents(charge.subtotal_cents),
        delivery_fee=from_cents(charge.delivery_fee_cents),
        discount=from_cents(charge.discount_cents),
        payload=charge.payload,
        status=charge.status,
        created_at=charge.created_at.isoformat() if charge.created_at else None,
    )


@router.post("/pix/charges", response_model=ChargeResponse, status_code=201)
def create_charge(
    body: ChargeRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    webhook_client: OrderWebhookClient = Depends(get_webhook_client),
):
    """
    Price the order and issue a PIX payload for its total.

    Flow:
    1. Quote the cart (fee, coupon, pricing)
    2. Encode the BR Code for the total, order id as transaction id
    3. Persist the charge
    4. Schedule the order webhook
    """
    start_time = time.time()
    request_id = get_request_id(request)

    # 1. Quote
    quote = build_quote(body, request_id)
    if quote.totals.total <= 0:
        record_charge("rejected")
        raise HTTPException(status_code=422, detail={"error": "nothing_to_charge"})

    # 2. Encode
    merchant = MerchantProfile(
        pix_key=body.merchant.pix_key,
        display_name=body.merchant.display_name,
        city=body.merchant.city,
    )
    transaction_id = sanitize_transaction_id(body.order_id)
    try:
        payload = encode(
            merchant,
            PaymentRequest(amount=quote.totals.total, transaction_id=transaction_id),
            single_use=settings.pix_single_use,
        )
    except MissingMerchantKey as e:
        record_charge("missing_key")
        logging.warning(
            f"PIX unavailable: {e}",
            extra={"request_id": request_id, "establishment_id": body.establishment_id},
        )
        raise HTTPException(status_code=422, detail={"error": "pix_unavailable", "message": str(e)})
    except ValueError as e:
        # Key too long to fit the merchant account template
        record_charge("rejected")
        raise HTTPException(status_code=422, detail={"error": "invalid_merchant", "message": str(e)})

    try:
        # 3. Persist
        repo = PixChargeRepository(db)
        charge = repo.create_charge(
            establishment_id=body.establishment_id,
            order_id=body.order_id,
            transaction_id=transaction_id,
            quote=quote,
            payload=payload,
        )
        db.commit()
        db.refresh(charge)
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to persist PIX charge: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    # 4. Notify
    if webhook_client.enabled:
        background_tasks.add_task(
            webhook_client.send_charge_event,
            {
                "event": "PIX_CHARGE_CREATED",
                "charge_id": str(charge.id),
                "establishment_id": body.establishment_id,
                "order_id": body.order_id,
                "amount_cents": charge.amount_cents,
            },
        )

    duration_ms = (time.time() - start_time) * 1000
    record_charge("created", charge.amount_cents)
    log_charge(
        request_id,
        str(charge.id),
        body.establishment_id,
        charge.amount_cents,
        quote.fulfillment.value,
        duration_ms,
    )

    return to_charge_response(charge)


@router.get("/pix/charges/{charge_id}", response_model=ChargeResponse)
def get_charge(charge_id: str, db: Session = Depends(get_db)):
    """Retrieve an issued charge with its payload"""
    try:
        charge_uuid = uuid.UUID(charge_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid charge ID format")

    charge = PixChargeRepository(db).get_charge_by_id(charge_uuid)
    if not charge:
        raise HTTPException(status_code=404, detail="Charge not found")

    return to_charge_response(charge)
