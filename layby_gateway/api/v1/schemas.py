"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Amounts travel as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Leaves room for fees within the Numeric(12, 2) price columns
MAX_FARE = Decimal("99999999.99")


class CamelModel(BaseModel):
    """Wire format is camelCase; Python side stays snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentPlanRequest(CamelModel):
    """Request body for POST /v1/payment-plan/calculate"""

    base_cost: Decimal = Field(..., ge=0, le=MAX_FARE, description="Base fare in the booking currency")
    travel_date: date
    booking_date: Optional[date] = Field(None, description="Defaults to today")


class FeeBreakdownSchema(CamelModel):
    base_cost: Money
    admin_fee: Money
    lay_by_fee: Money
    flight_price: Money


class PaymentScheduleItemSchema(CamelModel):
    payment_number: int
    due_date: date
    amount: Money
    description: str


class PaymentPlanResponse(CamelModel):
    """Response for POST /v1/payment-plan/calculate"""

    eligible: bool
    reason: Optional[str] = None
    reason_code: Optional[str] = None
    fee_breakdown: FeeBreakdownSchema
    days_until_travel: int
    total_amount: Money
    deposit_amount: Optional[Money] = None
    installment_amount: Optional[Money] = None
    installment_count: Optional[int] = None
    cadence: Optional[str] = None
    schedule: Optional[List[PaymentScheduleItemSchema]] = None


class FlightOfferSchema(CamelModel):
    """Priced offer as already fetched from the airfare provider"""

    offer_id: str = Field(..., min_length=1)
    total_price: Decimal = Field(..., ge=0, le=MAX_FARE)
    currency: str = Field(..., min_length=3, max_length=3)
    departure_at: datetime
    origin: Optional[str] = None
    destination: Optional[str] = None


class QuoteRequest(CamelModel):
    """Request body for POST /v1/payment-plan/quote"""

    offers: List[FlightOfferSchema]
    booking_date: Optional[date] = None


class OfferQuoteSchema(CamelModel):
    offer_id: str
    currency: str
    departure_at: datetime
    origin: Optional[str] = None
    destination: Optional[str] = None
    flight_price: Money
    payment_plan_eligible: bool
    deposit_amount: Optional[Money] = None
    installment_amount: Optional[Money] = None
    installment_count: Optional[int] = None


class QuoteResponse(CamelModel):
    quotes: List[OfferQuoteSchema]


class BookingCreateRequest(CamelModel):
    """Request body for POST /v1/bookings"""

    customer_email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    origin: str = Field(..., min_length=3, max_length=3)
    destination: str = Field(..., min_length=3, max_length=3)
    travel_date: date
    base_cost: Decimal = Field(..., ge=0, le=MAX_FARE)
    currency: str = Field(..., min_length=3, max_length=3)
    passenger_count: int = Field(1, ge=1)
    payment_type: Literal["installments", "full"] = "installments"
    booking_date: Optional[date] = None


class InstallmentSchema(CamelModel):
    """Stored schedule item"""

    payment_number: int
    due_date: date
    amount: Money
    description: str
    status: str = "scheduled"


class PlanResponse(CamelModel):
    """Response for GET /v1/plan/{plan_id}"""

    plan_id: str
    booking_id: str
    type: str
    total_amount: Money
    currency: str
    deposit_amount: Optional[Money] = None
    installment_amount: Optional[Money] = None
    installment_count: Optional[int] = None
    installment_frequency: Optional[str] = None
    installments: List[InstallmentSchema]
    created_at: str


class BookingResponse(CamelModel):
    """Response for POST /v1/bookings and GET /v1/bookings/{booking_id}"""

    booking_id: str
    reference: str
    customer_email: str
    origin: str
    destination: str
    travel_date: date
    passenger_count: int
    base_cost: Money
    total_price: Money
    currency: str
    status: str
    created_at: str
    payment_plan: PlanResponse


class BookingSummary(CamelModel):
    booking_id: str
    reference: str
    travel_date: date
    total_price: Money
    currency: str
    payment_type: str
    created_at: str


class BookingHistoryResponse(CamelModel):
    """Response for GET /v1/bookings"""

    customer_email: str
    bookings: List[BookingSummary]
