"""SQLAlchemy ORM models for issued PIX charges"""

import uuid
from sqlalchemy import Column, BigInteger, DateTime, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PixCharge(Base):
    """PIX payload issued for one checkout attempt"""

    __tablename__ = "pix_charge"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    establishment_id = Column(Text, nullable=False, index=True)
    order_id = Column(Text, nullable=False, index=True)
    transaction_id = Column(Text, nullable=False)
    fulfillment = Column(Text, nullable=False)
    coupon_code = Column(Text, nullable=True)
    subtotal_cents = Column(BigInteger, nullable=False)
    delivery_fee_cents = Column(BigInteger, nullable=False)
    discount_cents = Column(BigInteger, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    payload = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
