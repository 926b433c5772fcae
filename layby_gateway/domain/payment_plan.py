"""Lay-by payment plan calculator - fees, eligibility and weekly schedule"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import List, Tuple
from layby_gateway.domain.exceptions import InvalidPlanInputError
from layby_gateway.domain.models import (
    FeeBreakdown,
    PaymentPlanResult,
    PaymentScheduleItem,
    PlanPolicy,
)
from layby_gateway.utils.date_utils import add_weeks, days_between, format_long_date

ADMIN_FEE_RATE = Decimal("0.0")
LAY_BY_FEE_RATE = Decimal("0.0")
DEPOSIT_PERCENTAGE = Decimal("0.20")
MINIMUM_ADVANCE_DAYS = 14
MAX_INSTALLMENT_WEEKS = 26
MIN_GAP_BEFORE_TRAVEL_DAYS = 14

CADENCE_WEEKLY = "weekly"
REASON_TRAVEL_TOO_SOON = "TRAVEL_TOO_SOON"

DEFAULT_POLICY = PlanPolicy(
    admin_fee_rate=ADMIN_FEE_RATE,
    lay_by_fee_rate=LAY_BY_FEE_RATE,
    deposit_percentage=DEPOSIT_PERCENTAGE,
    minimum_advance_days=MINIMUM_ADVANCE_DAYS,
    max_installment_weeks=MAX_INSTALLMENT_WEEKS,
    min_gap_before_travel_days=MIN_GAP_BEFORE_TRAVEL_DAYS,
)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to the minor currency unit, rounding half up"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_fees(
    base_cost,
    travel_date: date,
    today: date,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> Tuple[FeeBreakdown, int]:
    """
    Turn a base fare into the full flight price.

    The lay-by fee only applies when the flight is far enough out to
    qualify for a plan. Returns the breakdown and the days until travel,
    which may be negative for past-dated flights.
    """
    base = to_money(base_cost)
    if base < 0:
        raise InvalidPlanInputError(f"base cost must not be negative, got {base}")

    days_until_travel = days_between(today, travel_date)

    admin_fee = to_money(base * policy.admin_fee_rate)
    if days_until_travel > policy.minimum_advance_days:
        lay_by_fee = to_money(base * policy.lay_by_fee_rate)
    else:
        lay_by_fee = to_money(0)

    breakdown = FeeBreakdown(
        base_cost=base,
        admin_fee=admin_fee,
        lay_by_fee=lay_by_fee,
        flight_price=base + admin_fee + lay_by_fee,
    )
    return breakdown, days_until_travel


def check_eligibility(days_until_travel: int, policy: PlanPolicy = DEFAULT_POLICY) -> Tuple[bool, str | None]:
    """Plans require travel strictly more than the advance window away"""
    if days_until_travel > policy.minimum_advance_days:
        return True, None
    return False, f"Payment plans not available for flights within {policy.minimum_advance_days} days"


def installment_count_for(days_until_travel: int, policy: PlanPolicy = DEFAULT_POLICY) -> int:
    """Weekly installments that fit before the two-week buffer, capped"""
    weeks_until_travel = days_until_travel // 7
    weeks_until_two_weeks_before = max(0, weeks_until_travel - 2)
    return min(policy.max_installment_weeks, weeks_until_two_weeks_before)


def generate_schedule(
    flight_price: Decimal,
    days_until_travel: int,
    booking_date: date,
    travel_date: date,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> List[PaymentScheduleItem]:
    """
    Build the deposit + weekly installment schedule for an eligible plan.

    Requirements:
    - Deposit due on the booking date
    - Installment i due booking_date + i weeks, clamped to the cutoff
      (travel date minus the minimum gap); several trailing installments
      may land on the cutoff itself
    - Last installment absorbs rounding remainder so the schedule sums
      exactly to the flight price
    - A plan too short for a full week still gets one final installment
      for the balance instead of dropping it

    Example:
        $1000.00, 180 days out -> $200.00 deposit, 22 x $34.78, final $34.84
    """
    deposit_amount = to_money(flight_price * policy.deposit_percentage)
    remaining = flight_price - deposit_amount

    count = installment_count_for(days_until_travel, policy) or 1
    installment_amount = to_money(remaining / count)
    # Half-up rounding can overshoot on tiny balances and push the final payment below zero
    if installment_amount * (count - 1) > remaining:
        installment_amount = (remaining / count).quantize(CENT, rounding=ROUND_DOWN)

    # Never before the deposit, even when the gap outgrows the advance window
    cutoff = max(travel_date - timedelta(days=policy.min_gap_before_travel_days), booking_date)

    schedule = [
        PaymentScheduleItem(
            payment_number=1,
            due_date=booking_date,
            amount=deposit_amount,
            description="Deposit - Due immediately",
        )
    ]
    for i in range(1, count + 1):
        due_date = min(add_weeks(booking_date, i), cutoff)

        if i == count:
            amount = remaining - installment_amount * (count - 1)
            label = "Final Payment"
        else:
            amount = installment_amount
            label = f"Weekly Payment {i}"

        schedule.append(
            PaymentScheduleItem(
                payment_number=i + 1,
                due_date=due_date,
                amount=amount,
                description=f"{label} - Due {format_long_date(due_date)}",
            )
        )

    return schedule


def calculate_payment_plan(
    base_cost,
    travel_date: date,
    booking_date: date,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> PaymentPlanResult:
    """
    Decide lay-by eligibility and compute the payment schedule.

    Pure function: the booking date doubles as "today" and must be supplied
    by the caller, so identical inputs always give identical results.
    Ineligibility is a normal result carrying the fee breakdown and a reason.
    """
    fee_breakdown, days_until_travel = calculate_fees(base_cost, travel_date, booking_date, policy)

    eligible, reason = check_eligibility(days_until_travel, policy)
    if not eligible:
        return PaymentPlanResult(
            eligible=False,
            reason=reason,
            reason_code=REASON_TRAVEL_TOO_SOON,
            fee_breakdown=fee_breakdown,
            days_until_travel=days_until_travel,
        )

    schedule = generate_schedule(
        fee_breakdown.flight_price,
        days_until_travel,
        booking_date,
        travel_date,
        policy,
    )
    installments = schedule[1:]

    return PaymentPlanResult(
        eligible=True,
        fee_breakdown=fee_breakdown,
        days_until_travel=days_until_travel,
        deposit_amount=schedule[0].amount,
        installment_amount=installments[0].amount,
        installment_count=len(installments),
        cadence=CADENCE_WEEKLY,
        schedule=schedule,
    )


def is_eligible_for_payment_plan(
    base_cost,
    travel_date: date,
    today: date,
    policy: PlanPolicy = DEFAULT_POLICY,
) -> bool:
    return calculate_payment_plan(base_cost, travel_date, today, policy).eligible
