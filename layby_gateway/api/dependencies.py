"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from layby_gateway.config import settings
from layby_gateway.domain.models import PlanPolicy
from layby_gateway.infrastructure.clients.payment_processor import PaymentProcessorClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Reference date for plans when the caller does not send a booking date"""
    return date.today()


def get_plan_policy() -> PlanPolicy:
    return settings.plan_policy()


def get_payment_processor_client() -> PaymentProcessorClient:
    """Provide payment processor webhook client instance"""
    return PaymentProcessorClient()
