"""Data access layer for PIX charges"""

import uuid
from typing import Optional
from sqlalchemy.orm import Session
from pix_checkout.infrastructure.database.models import PixCharge
from pix_checkout.domain.models import CheckoutQuote
from pix_checkout.utils.money import to_cents


class PixChargeRepository:
    """Repository for issued PIX charges"""

    def __init__(self, db: Session):
        self.db = db

    def create_charge(
        self,
        establishment_id: str,
        order_id: str,
        transaction_id: str,
        quote: CheckoutQuote,
        payload: str,
    ) -> PixCharge:
        """Persist charge with its price breakdown"""
        totals = quote.totals
        db_charge = PixCharge(
            establishment_id=establishment_id,
            order_id=order_id,
            transaction_id=transaction_id,
            fulfillment=quote.fulfillment.value,
            coupon_code=quote.coupon_code,
            subtotal_cents=to_cents(totals.subtotal),
            delivery_fee_cents=to_cents(totals.delivery_fee),
            discount_cents=to_cents(totals.discount),
            amount_cents=to_cents(totals.total),
            payload=payload,
        )
        self.db.add(db_charge)
        self.db.flush()  # Get ID without committing
        return db_charge

    def get_charge_by_id(self, charge_id: uuid.UUID) -> Optional[PixCharge]:
        return (
            self.db.query(PixCharge)
            .filter(PixCharge.id == charge_id)
            .first()
        )
