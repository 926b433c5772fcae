"""Annotate provider flight offers with lay-by availability"""

from datetime import date
from typing import List
from layby_gateway.domain.models import FlightOffer, OfferQuote, PlanPolicy
from layby_gateway.domain.payment_plan import DEFAULT_POLICY, calculate_payment_plan
from layby_gateway.utils.date_utils import to_calendar_date


def quote_offer(offer: FlightOffer, today: date, policy: PlanPolicy = DEFAULT_POLICY) -> OfferQuote:
    """Replace the provider price with the post-fee flight price and attach plan summary"""
    plan = calculate_payment_plan(
        offer.total_price,
        to_calendar_date(offer.departure_at),
        today,
        policy,
    )

    quote = OfferQuote(
        offer=offer,
        flight_price=plan.fee_breakdown.flight_price,
        plan_eligible=plan.eligible,
    )
    if plan.eligible:
        quote.deposit_amount = plan.deposit_amount
        quote.installment_amount = plan.installment_amount
        quote.installment_count = plan.installment_count
    return quote


def quote_offers(offers: List[FlightOffer], today: date, policy: PlanPolicy = DEFAULT_POLICY) -> List[OfferQuote]:
    return [quote_offer(offer, today, policy) for offer in offers]
