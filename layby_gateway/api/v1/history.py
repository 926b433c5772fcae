"""GET /v1/bookings - Fetch a customer's booking history"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from layby_gateway.api.v1.schemas import BookingHistoryResponse, BookingSummary
from layby_gateway.infrastructure.database.session import get_db
from layby_gateway.infrastructure.database.repositories import BookingRepository

router = APIRouter()


@router.get("/bookings", response_model=BookingHistoryResponse)
def get_booking_history(
    customer_email: str = Query(..., alias="customerEmail", description="Customer email address"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent bookings for a customer.

    Returns:
        Bookings with their total price and how they are being paid
    """
    booking_repo = BookingRepository(db)
    bookings = booking_repo.get_bookings_by_customer(customer_email, limit=20)

    summaries = [
        BookingSummary(
            booking_id=str(b.id),
            reference=b.reference,
            travel_date=b.travel_date,
            total_price=b.total_price,
            currency=b.currency,
            payment_type=b.payment_plan.type,
            created_at=b.created_at.isoformat(),
        )
        for b in bookings
    ]

    return BookingHistoryResponse(customer_email=customer_email, bookings=summaries)
