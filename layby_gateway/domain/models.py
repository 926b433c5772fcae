"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class PlanPolicy:
    """Rates and thresholds the payment plan calculator works with"""

    admin_fee_rate: Decimal
    lay_by_fee_rate: Decimal
    deposit_percentage: Decimal
    minimum_advance_days: int
    max_installment_weeks: int
    min_gap_before_travel_days: int


@dataclass(frozen=True)
class FeeBreakdown:
    """Base fare plus the fees charged on top of it"""

    base_cost: Decimal
    admin_fee: Decimal
    lay_by_fee: Decimal
    flight_price: Decimal


@dataclass(frozen=True)
class PaymentScheduleItem:
    """Single payment in a lay-by schedule (item 1 is the deposit)"""

    payment_number: int
    due_date: date
    amount: Decimal
    description: str


@dataclass(frozen=True)
class PaymentPlanResult:
    """Output of the payment plan calculator"""

    eligible: bool
    fee_breakdown: FeeBreakdown
    days_until_travel: int
    reason: Optional[str] = None
    reason_code: Optional[str] = None
    deposit_amount: Optional[Decimal] = None
    installment_amount: Optional[Decimal] = None
    installment_count: Optional[int] = None
    cadence: Optional[str] = None
    schedule: List[PaymentScheduleItem] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return self.fee_breakdown.flight_price


@dataclass
class FlightOffer:
    """Priced offer as returned by the airfare provider"""

    offer_id: str
    total_price: Decimal
    currency: str
    departure_at: datetime
    origin: Optional[str] = None
    destination: Optional[str] = None


@dataclass
class OfferQuote:
    """Flight offer annotated with its lay-by availability"""

    offer: FlightOffer
    flight_price: Decimal
    plan_eligible: bool
    deposit_amount: Optional[Decimal] = None
    installment_amount: Optional[Decimal] = None
    installment_count: Optional[int] = None


@dataclass
class BookingRequest:
    """Everything needed to book a flight and fix its payment schedule"""

    customer_email: str
    origin: str
    destination: str
    travel_date: date
    base_cost: Decimal
    currency: str
    passenger_count: int
    payment_type: str  # "installments" or "full"
    booking_date: date


@dataclass
class BookingPlan:
    """Payment plan chosen for a booking, ready to persist"""

    payment_type: str
    total_amount: Decimal
    schedule: List[PaymentScheduleItem]
    deposit_amount: Optional[Decimal] = None
    installment_amount: Optional[Decimal] = None
    installment_count: Optional[int] = None
    installment_frequency: Optional[str] = None
