"""Unit tests for the lay-by payment plan calculator"""

import pytest
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from layby_gateway.domain.exceptions import InvalidPlanInputError
from layby_gateway.domain.payment_plan import (
    DEFAULT_POLICY,
    calculate_fees,
    calculate_payment_plan,
    check_eligibility,
    installment_count_for,
    is_eligible_for_payment_plan,
)
from layby_gateway.utils.date_utils import format_long_date

BOOKING_DATE = date(2025, 1, 15)


def travel_in(days: int) -> date:
    return BOOKING_DATE + timedelta(days=days)


def installment_total(plan) -> Decimal:
    return sum((item.amount for item in plan.schedule[1:]), Decimal("0"))


def test_long_horizon_plan():
    """$1000, 180 days out: 20% deposit and 23 weekly payments"""
    plan = calculate_payment_plan(1000, travel_in(180), BOOKING_DATE)

    assert plan.eligible is True
    assert plan.reason is None
    assert plan.days_until_travel == 180
    assert plan.deposit_amount == Decimal("200.00")
    assert plan.installment_count == 23
    assert plan.installment_amount == Decimal("34.78")
    assert plan.cadence == "weekly"
    assert len(plan.schedule) == 24
    assert all(item.amount == Decimal("34.78") for item in plan.schedule[1:-1])
    assert plan.schedule[-1].amount == Decimal("34.84")  # Last absorbs rounding
    assert installment_total(plan) == Decimal("800.00")


def test_short_notice_is_ineligible_but_priced():
    plan = calculate_payment_plan(500, travel_in(10), BOOKING_DATE)

    assert plan.eligible is False
    assert plan.reason == "Payment plans not available for flights within 14 days"
    assert plan.reason_code == "TRAVEL_TOO_SOON"
    assert plan.schedule == []
    assert plan.deposit_amount is None
    assert plan.installment_count is None
    assert plan.fee_breakdown.flight_price == Decimal("500.00")
    assert plan.total_amount == Decimal("500.00")


def test_advance_window_boundary():
    """Exactly 14 days out does not qualify, 15 does"""
    assert calculate_payment_plan(500, travel_in(14), BOOKING_DATE).eligible is False
    assert calculate_payment_plan(500, travel_in(15), BOOKING_DATE).eligible is True
    assert check_eligibility(14) == (False, "Payment plans not available for flights within 14 days")
    assert check_eligibility(15) == (True, None)


def test_installments_capped_at_26_weeks():
    plan = calculate_payment_plan(300, travel_in(400), BOOKING_DATE)

    assert plan.eligible is True
    assert plan.installment_count == 26
    assert plan.deposit_amount == Decimal("60.00")
    assert plan.installment_amount == Decimal("9.23")
    assert plan.schedule[-1].amount == Decimal("9.25")
    assert installment_total(plan) == Decimal("240.00")


def test_deposit_rounds_half_up():
    plan = calculate_payment_plan(Decimal("333.33"), travel_in(180), BOOKING_DATE)

    assert plan.deposit_amount == Decimal("66.67")
    assert installment_total(plan) == Decimal("266.66")
    assert plan.deposit_amount + installment_total(plan) == Decimal("333.33")


def test_float_input_is_quantized_to_cents():
    plan = calculate_payment_plan(333.33, travel_in(180), BOOKING_DATE)
    assert plan.fee_breakdown.base_cost == Decimal("333.33")
    assert plan.deposit_amount == Decimal("66.67")


def test_schedule_invariants_across_horizons():
    """Sum, ordering, cutoff and cap hold for every eligible horizon"""
    for days in range(15, 420, 3):
        for base in (Decimal("99.99"), Decimal("1234.57"), Decimal("0.16")):
            plan = calculate_payment_plan(base, travel_in(days), BOOKING_DATE)
            cutoff = travel_in(days) - timedelta(days=14)
            due_dates = [item.due_date for item in plan.schedule]

            assert plan.eligible is True
            assert plan.deposit_amount + installment_total(plan) == plan.fee_breakdown.flight_price
            assert due_dates == sorted(due_dates)
            assert all(d <= cutoff for d in due_dates[1:])
            assert 1 <= plan.installment_count <= 26
            assert all(item.amount >= 0 for item in plan.schedule)
            assert [item.payment_number for item in plan.schedule] == list(range(1, len(plan.schedule) + 1))


def test_due_dates_are_weekly_from_booking():
    plan = calculate_payment_plan(1000, travel_in(180), BOOKING_DATE)

    assert plan.schedule[0].due_date == BOOKING_DATE
    assert plan.schedule[1].due_date == BOOKING_DATE + timedelta(days=7)
    assert plan.schedule[2].due_date == BOOKING_DATE + timedelta(days=14)
    assert plan.schedule[-1].due_date == BOOKING_DATE + timedelta(weeks=23)


def test_descriptions():
    plan = calculate_payment_plan(1000, travel_in(35), BOOKING_DATE)

    assert [item.description for item in plan.schedule] == [
        "Deposit - Due immediately",
        "Weekly Payment 1 - Due January 22, 2025",
        "Weekly Payment 2 - Due January 29, 2025",
        "Final Payment - Due February 5, 2025",
    ]


def test_same_inputs_same_output():
    first = calculate_payment_plan(Decimal("777.77"), travel_in(90), BOOKING_DATE)
    second = calculate_payment_plan(Decimal("777.77"), travel_in(90), BOOKING_DATE)
    assert first == second


def test_short_eligible_window_folds_balance_into_one_payment():
    """15-20 days out leaves no full week, the balance becomes a single final payment"""
    plan = calculate_payment_plan(500, travel_in(20), BOOKING_DATE)

    assert installment_count_for(20) == 0
    assert plan.eligible is True
    assert plan.installment_count == 1
    assert plan.deposit_amount == Decimal("100.00")
    assert plan.installment_amount == Decimal("400.00")
    assert plan.schedule[1].amount == Decimal("400.00")
    assert plan.schedule[1].due_date == travel_in(20) - timedelta(days=14)
    assert plan.schedule[1].description.startswith("Final Payment")


def test_trailing_installments_collapse_onto_cutoff():
    """With a wider travel gap the weekly cadence overshoots and is clamped"""
    policy = replace(DEFAULT_POLICY, minimum_advance_days=21, min_gap_before_travel_days=21)
    plan = calculate_payment_plan(1000, travel_in(70), BOOKING_DATE, policy)
    cutoff = travel_in(70) - timedelta(days=21)

    assert plan.installment_count == 8
    assert plan.schedule[-1].due_date == cutoff
    assert plan.schedule[-2].due_date == cutoff
    assert plan.schedule[-3].due_date == cutoff - timedelta(days=7)


@pytest.mark.parametrize(
    "overrides, days_out",
    [
        ({"min_gap_before_travel_days": 21}, 16),
        ({"minimum_advance_days": 7}, 10),
    ],
)
def test_cutoff_never_precedes_booking_date(overrides, days_out):
    """A travel gap wider than the advance window still keeps due dates in order"""
    policy = replace(DEFAULT_POLICY, **overrides)
    plan = calculate_payment_plan(500, travel_in(days_out), BOOKING_DATE, policy)
    due_dates = [item.due_date for item in plan.schedule]

    assert plan.eligible is True
    assert due_dates == sorted(due_dates)
    assert plan.schedule[-1].due_date == BOOKING_DATE
    assert plan.deposit_amount + installment_total(plan) == Decimal("500.00")


def test_tiny_balance_never_goes_negative():
    plan = calculate_payment_plan(Decimal("0.16"), travel_in(400), BOOKING_DATE)

    assert plan.deposit_amount == Decimal("0.03")
    assert plan.installment_amount == Decimal("0.00")
    assert plan.schedule[-1].amount == Decimal("0.13")
    assert installment_total(plan) == Decimal("0.13")


def test_zero_cost_plan():
    plan = calculate_payment_plan(0, travel_in(60), BOOKING_DATE)
    assert plan.eligible is True
    assert all(item.amount == Decimal("0.00") for item in plan.schedule)


def test_past_travel_date_is_ineligible():
    plan = calculate_payment_plan(500, BOOKING_DATE - timedelta(days=3), BOOKING_DATE)
    assert plan.days_until_travel == -3
    assert plan.eligible is False


def test_fee_rates_are_applied():
    policy = replace(DEFAULT_POLICY, admin_fee_rate=Decimal("0.05"), lay_by_fee_rate=Decimal("0.10"))

    fees, days = calculate_fees(1000, travel_in(180), BOOKING_DATE, policy)
    assert days == 180
    assert fees.admin_fee == Decimal("50.00")
    assert fees.lay_by_fee == Decimal("100.00")
    assert fees.flight_price == Decimal("1150.00")

    plan = calculate_payment_plan(1000, travel_in(180), BOOKING_DATE, policy)
    assert plan.deposit_amount == Decimal("230.00")
    assert plan.deposit_amount + installment_total(plan) == Decimal("1150.00")


def test_lay_by_fee_waived_inside_advance_window():
    policy = replace(DEFAULT_POLICY, admin_fee_rate=Decimal("0.05"), lay_by_fee_rate=Decimal("0.10"))

    fees, _ = calculate_fees(1000, travel_in(14), BOOKING_DATE, policy)
    assert fees.lay_by_fee == Decimal("0.00")
    assert fees.flight_price == Decimal("1050.00")


def test_default_fees_are_zero():
    fees, _ = calculate_fees(Decimal("450.10"), travel_in(100), BOOKING_DATE)
    assert fees.admin_fee == Decimal("0.00")
    assert fees.lay_by_fee == Decimal("0.00")
    assert fees.flight_price == Decimal("450.10")


def test_negative_base_cost_rejected():
    with pytest.raises(InvalidPlanInputError):
        calculate_payment_plan(-1, travel_in(100), BOOKING_DATE)


def test_is_eligible_for_payment_plan():
    assert is_eligible_for_payment_plan(500, travel_in(30), BOOKING_DATE) is True
    assert is_eligible_for_payment_plan(500, travel_in(7), BOOKING_DATE) is False


def test_format_long_date():
    assert format_long_date(date(2027, 4, 7)) == "April 7, 2027"
