"""Booking payment plan selection"""

from layby_gateway.domain.exceptions import PlanNotAvailableError
from layby_gateway.domain.models import BookingPlan, BookingRequest, PaymentScheduleItem, PlanPolicy
from layby_gateway.domain.payment_plan import DEFAULT_POLICY, calculate_payment_plan

PAYMENT_TYPE_INSTALLMENTS = "installments"
PAYMENT_TYPE_FULL = "full"


def build_booking_plan(request: BookingRequest, policy: PlanPolicy = DEFAULT_POLICY) -> BookingPlan:
    """
    Recompute the plan server-side for the payment option the traveler chose.

    Full payment is always allowed and is a single item due on the booking
    date. Installments are only allowed when the calculator says the flight
    qualifies.
    """
    plan = calculate_payment_plan(request.base_cost, request.travel_date, request.booking_date, policy)

    if request.payment_type == PAYMENT_TYPE_FULL:
        total = plan.fee_breakdown.flight_price
        return BookingPlan(
            payment_type=PAYMENT_TYPE_FULL,
            total_amount=total,
            schedule=[
                PaymentScheduleItem(
                    payment_number=1,
                    due_date=request.booking_date,
                    amount=total,
                    description="Full Payment - Due immediately",
                )
            ],
        )

    if not plan.eligible:
        raise PlanNotAvailableError(plan.reason)

    return BookingPlan(
        payment_type=PAYMENT_TYPE_INSTALLMENTS,
        total_amount=plan.total_amount,
        schedule=plan.schedule,
        deposit_amount=plan.deposit_amount,
        installment_amount=plan.installment_amount,
        installment_count=plan.installment_count,
        installment_frequency=plan.cadence,
    )


def format_booking_reference(sequence: int) -> str:
    """FP000042 style reference shown to travelers"""
    return f"FP{sequence:06d}"
