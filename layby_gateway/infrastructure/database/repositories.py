"""Data access layer for bookings and payment plans"""

import uuid
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from layby_gateway.infrastructure.database.models import Booking, PaymentPlan, Installment
from layby_gateway.domain.bookings import format_booking_reference
from layby_gateway.domain.exceptions import BookingReferenceConflictError
from layby_gateway.domain.models import BookingPlan, BookingRequest
from layby_gateway.domain.payment_plan import to_money


class BookingRepository:
    """Repository for bookings"""

    def __init__(self, db: Session):
        self.db = db

    def create_booking(self, request: BookingRequest, total_price, max_attempts: int = 5) -> Booking:
        """
        Persist booking with the next free FP reference.

        Must be the first write of the unit of work: a reference clash
        (concurrent insert) rolls the session back and moves on to the
        next number.

        Raises:
            BookingReferenceConflictError: No free reference within max_attempts
        """
        sequence = (self.db.query(func.count(Booking.id)).scalar() or 0) + 1

        for attempt in range(max_attempts):
            db_booking = Booking(
                reference=format_booking_reference(sequence + attempt),
                customer_email=request.customer_email,
                origin_iata=request.origin,
                destination_iata=request.destination,
                travel_date=request.travel_date,
                passenger_count=request.passenger_count,
                base_cost=to_money(request.base_cost),
                total_price=total_price,
                currency=request.currency,
            )
            self.db.add(db_booking)
            try:
                self.db.flush()  # Get ID without committing
            except IntegrityError:
                self.db.rollback()
                continue
            return db_booking

        raise BookingReferenceConflictError(
            f"No free booking reference after {max_attempts} attempts from FP{sequence:06d}"
        )

    def get_booking_by_id(self, booking_id: uuid.UUID) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_bookings_by_customer(self, customer_email: str, limit: int = 10) -> List[Booking]:
        """Fetch recent bookings for a customer"""
        return (
            self.db.query(Booking)
            .filter(Booking.customer_email == customer_email)
            .order_by(Booking.created_at.desc())
            .limit(limit)
            .all()
        )


class PlanRepository:
    """Repository for payment plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_plan(self, booking_id: uuid.UUID, plan: BookingPlan, currency: str) -> PaymentPlan:
        """Create payment plan with one installment row per schedule item"""
        db_plan = PaymentPlan(
            booking_id=booking_id,
            type=plan.payment_type,
            deposit_amount=plan.deposit_amount,
            installment_amount=plan.installment_amount,
            installment_count=plan.installment_count,
            installment_frequency=plan.installment_frequency,
            total_amount=plan.total_amount,
            currency=currency,
        )
        self.db.add(db_plan)
        self.db.flush()

        for item in plan.schedule:
            db_installment = Installment(
                plan_id=db_plan.id,
                payment_number=item.payment_number,
                due_date=item.due_date,
                amount=item.amount,
                currency=currency,
                description=item.description,
            )
            self.db.add(db_installment)

        return db_plan

    def get_plan_by_id(self, plan_id: uuid.UUID) -> Optional[PaymentPlan]:
        """Fetch plan with installments"""
        return (
            self.db.query(PaymentPlan)
            .filter(PaymentPlan.id == plan_id)
            .first()
        )
