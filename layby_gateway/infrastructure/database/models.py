"""SQLAlchemy ORM models for bookings and their payment plans"""

import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Date, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Booking(Base):
    """Confirmed flight booking"""

    __tablename__ = "booking"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reference = Column(String(16), nullable=False, unique=True)
    customer_email = Column(Text, nullable=False, index=True)
    origin_iata = Column(String(3), nullable=False)
    destination_iata = Column(String(3), nullable=False)
    travel_date = Column(Date, nullable=False)
    passenger_count = Column(Integer, nullable=False, default=1)
    base_cost = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(Text, nullable=False, default="confirmed")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payment_plan = relationship(
        "PaymentPlan", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )


class PaymentPlan(Base):
    """How a booking is paid: in full or deposit plus weekly installments"""

    __tablename__ = "payment_plan"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid(as_uuid=True), ForeignKey("booking.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)  # full | installments
    deposit_amount = Column(Numeric(12, 2), nullable=True)
    installment_amount = Column(Numeric(12, 2), nullable=True)
    installment_count = Column(Integer, nullable=True)
    installment_frequency = Column(Text, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    booking = relationship("Booking", back_populates="payment_plan")
    installments = relationship(
        "Installment",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="Installment.payment_number",
    )


class Installment(Base):
    """Scheduled charge within a payment plan (payment 1 is the deposit)"""

    __tablename__ = "installment"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("payment_plan.id", ondelete="CASCADE"), nullable=False)
    payment_number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="scheduled")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    plan = relationship("PaymentPlan", back_populates="installments")
