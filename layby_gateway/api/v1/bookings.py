"""POST /v1/bookings, GET /v1/bookings/{booking_id} - booking with its payment schedule"""

import time
import uuid
import logging
from datetime import date
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.orm import Session

from layby_gateway.api.v1.plan import to_plan_response
from layby_gateway.api.v1.schemas import BookingCreateRequest, BookingResponse
from layby_gateway.api.dependencies import (
    get_payment_processor_client,
    get_plan_policy,
    get_request_id,
    get_today,
)
from layby_gateway.infrastructure.database.models import Booking, PaymentPlan
from layby_gateway.infrastructure.database.session import get_db
from layby_gateway.infrastructure.database.repositories import BookingRepository, PlanRepository
from layby_gateway.infrastructure.clients.payment_processor import PaymentProcessorClient
from layby_gateway.domain.bookings import build_booking_plan
from layby_gateway.domain.exceptions import (
    BookingReferenceConflictError,
    InvalidPlanInputError,
    PlanNotAvailableError,
)
from layby_gateway.domain.models import BookingRequest, PlanPolicy
from layby_gateway.infrastructure.observability.metrics import record_booking
from layby_gateway.infrastructure.observability.logging import log_booking_created

router = APIRouter()


def to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        booking_id=str(booking.id),
        reference=booking.reference,
        customer_email=booking.customer_email,
        origin=booking.origin_iata,
        destination=booking.destination_iata,
        travel_date=booking.travel_date,
        passenger_count=booking.passenger_count,
        base_cost=booking.base_cost,
        total_price=booking.total_price,
        currency=booking.currency,
        status=booking.status,
        created_at=booking.created_at.isoformat(),
        payment_plan=to_plan_response(booking.payment_plan),
    )


def build_booking_event(booking: Booking, plan: PaymentPlan) -> Dict[str, Any]:
    """Charge instructions for the payment processor: first item now, the rest on their due dates"""
    return {
        "event": "BOOKING_CONFIRMED",
        "booking_id": str(booking.id),
        "booking_reference": booking.reference,
        "plan_id": str(plan.id),
        "customer_email": booking.customer_email,
        "payment_type": plan.type,
        "currency": plan.currency,
        "total_amount": str(plan.total_amount),
        "charges": [
            {
                "payment_number": inst.payment_number,
                "due_date": inst.due_date.isoformat(),
                "amount": str(inst.amount),
            }
            for inst in plan.installments
        ],
    }


@router.post("/bookings", response_model=BookingResponse, response_model_exclude_none=True, status_code=201)
async def create_booking(
    request_body: BookingCreateRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    policy: PlanPolicy = Depends(get_plan_policy),
    processor_client: PaymentProcessorClient = Depends(get_payment_processor_client),
):
    """
    Book a flight and fix its payment schedule.

    Flow:
    1. Recompute the plan for the chosen payment option
    2. Persist booking + plan + schedule items
    3. Send the schedule to the payment processor in the background
    4. Return the stored booking
    """
    start_time = time.time()
    request_id = get_request_id(request)

    booking_request = BookingRequest(
        customer_email=request_body.customer_email,
        origin=request_body.origin.upper(),
        destination=request_body.destination.upper(),
        travel_date=request_body.travel_date,
        base_cost=request_body.base_cost,
        currency=request_body.currency.upper(),
        passenger_count=request_body.passenger_count,
        payment_type=request_body.payment_type,
        booking_date=request_body.booking_date or today,
    )

    try:
        # 1. Decide the plan
        booking_plan = build_booking_plan(booking_request, policy)

        # 2. Persist booking and plan
        booking_repo = BookingRepository(db)
        db_booking = booking_repo.create_booking(booking_request, total_price=booking_plan.total_amount)

        plan_repo = PlanRepository(db)
        plan_repo.create_plan(db_booking.id, booking_plan, currency=booking_request.currency)

        db.commit()
        db.refresh(db_booking)

    except PlanNotAvailableError as e:
        db.rollback()
        logging.warning(f"Plan not available: {e.reason}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=e.reason)

    except InvalidPlanInputError as e:
        db.rollback()
        logging.warning(f"Invalid booking input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except BookingReferenceConflictError as e:
        db.rollback()
        logging.error(f"Booking reference conflict: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Could not allocate a booking reference, please retry")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    # 3. Hand the schedule to the payment processor
    background_tasks.add_task(
        processor_client.send_booking_event,
        build_booking_event(db_booking, db_booking.payment_plan),
    )

    duration_ms = (time.time() - start_time) * 1000
    record_booking(booking_plan.payment_type)
    log_booking_created(
        request_id,
        db_booking.reference,
        booking_plan.payment_type,
        str(booking_plan.total_amount),
        duration_ms,
    )

    return to_booking_response(db_booking)


@router.get("/bookings/{booking_id}", response_model=BookingResponse, response_model_exclude_none=True)
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    """Retrieve a booking with its stored payment schedule"""
    try:
        booking_uuid = uuid.UUID(booking_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid booking ID format")

    booking = BookingRepository(db).get_booking_by_id(booking_uuid)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    return to_booking_response(booking)
