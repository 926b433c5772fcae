"""POST /v1/payment-plan/* - lay-by eligibility and schedule endpoints"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request

from layby_gateway.api.v1.schemas import (
    FeeBreakdownSchema,
    OfferQuoteSchema,
    PaymentPlanRequest,
    PaymentPlanResponse,
    PaymentScheduleItemSchema,
    QuoteRequest,
    QuoteResponse,
)
from layby_gateway.api.dependencies import get_plan_policy, get_request_id, get_today
from layby_gateway.domain.exceptions import InvalidPlanInputError
from layby_gateway.domain.models import FlightOffer, PaymentPlanResult, PlanPolicy
from layby_gateway.domain.offers import quote_offers
from layby_gateway.domain.payment_plan import calculate_payment_plan
from layby_gateway.infrastructure.observability.logging import log_plan_calculated
from layby_gateway.infrastructure.observability.metrics import record_plan_calculation

router = APIRouter()


def to_plan_result_response(result: PaymentPlanResult) -> PaymentPlanResponse:
    fees = result.fee_breakdown
    return PaymentPlanResponse(
        eligible=result.eligible,
        reason=result.reason,
        reason_code=result.reason_code,
        fee_breakdown=FeeBreakdownSchema(
            base_cost=fees.base_cost,
            admin_fee=fees.admin_fee,
            lay_by_fee=fees.lay_by_fee,
            flight_price=fees.flight_price,
        ),
        days_until_travel=result.days_until_travel,
        total_amount=result.total_amount,
        deposit_amount=result.deposit_amount,
        installment_amount=result.installment_amount,
        installment_count=result.installment_count,
        cadence=result.cadence,
        schedule=[
            PaymentScheduleItemSchema(
                payment_number=item.payment_number,
                due_date=item.due_date,
                amount=item.amount,
                description=item.description,
            )
            for item in result.schedule
        ]
        if result.eligible
        else None,
    )


@router.post(
    "/payment-plan/calculate",
    response_model=PaymentPlanResponse,
    response_model_exclude_none=True,
)
def calculate_plan(
    request_body: PaymentPlanRequest,
    request: Request,
    today: date = Depends(get_today),
    policy: PlanPolicy = Depends(get_plan_policy),
):
    """
    Work out whether a fare can be paid by lay-by and how.

    Ineligible flights still return 200 with the full price, so the client
    can fall back to full payment.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = calculate_payment_plan(
            request_body.base_cost,
            request_body.travel_date,
            request_body.booking_date or today,
            policy,
        )
    except InvalidPlanInputError as e:
        logging.warning(f"Invalid plan input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_plan_calculation(result.eligible, result.installment_count)
    log_plan_calculated(request_id, result.eligible, result.days_until_travel, result.installment_count, duration_ms)

    return to_plan_result_response(result)


@router.post(
    "/payment-plan/quote",
    response_model=QuoteResponse,
    response_model_exclude_none=True,
)
def quote_flight_offers(
    request_body: QuoteRequest,
    today: date = Depends(get_today),
    policy: PlanPolicy = Depends(get_plan_policy),
):
    """Annotate search results with post-fee prices and plan summaries"""
    offers = [
        FlightOffer(
            offer_id=o.offer_id,
            total_price=o.total_price,
            currency=o.currency,
            departure_at=o.departure_at,
            origin=o.origin,
            destination=o.destination,
        )
        for o in request_body.offers
    ]
    quotes = quote_offers(offers, request_body.booking_date or today, policy)

    for quote in quotes:
        record_plan_calculation(quote.plan_eligible, quote.installment_count)

    return QuoteResponse(
        quotes=[
            OfferQuoteSchema(
                offer_id=q.offer.offer_id,
                currency=q.offer.currency,
                departure_at=q.offer.departure_at,
                origin=q.offer.origin,
                destination=q.offer.destination,
                flight_price=q.flight_price,
                payment_plan_eligible=q.plan_eligible,
                deposit_amount=q.deposit_amount,
                installment_amount=q.installment_amount,
                installment_count=q.installment_count,
            )
            for q in quotes
        ]
    )
