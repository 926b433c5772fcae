"""GET /v1/plan/{plan_id} - Fetch stored payment plan details"""

import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from layby_gateway.api.v1.schemas import PlanResponse, InstallmentSchema
from layby_gateway.infrastructure.database.models import PaymentPlan
from layby_gateway.infrastructure.database.session import get_db
from layby_gateway.infrastructure.database.repositories import PlanRepository

router = APIRouter()


def to_plan_response(plan: PaymentPlan) -> PlanResponse:
    installments = [
        InstallmentSchema(
            payment_number=inst.payment_number,
            due_date=inst.due_date,
            amount=inst.amount,
            description=inst.description,
            status=inst.status,
        )
        for inst in plan.installments
    ]

    return PlanResponse(
        plan_id=str(plan.id),
        booking_id=str(plan.booking_id),
        type=plan.type,
        total_amount=plan.total_amount,
        currency=plan.currency,
        deposit_amount=plan.deposit_amount,
        installment_amount=plan.installment_amount,
        installment_count=plan.installment_count,
        installment_frequency=plan.installment_frequency,
        installments=installments,
        created_at=plan.created_at.isoformat(),
    )


@router.get("/plan/{plan_id}", response_model=PlanResponse, response_model_exclude_none=True)
def get_plan(plan_id: str, db: Session = Depends(get_db)):
    """
    Retrieve payment plan with its installment schedule.

    Returns:
        Plan details; payment 1 is the deposit (or the full payment)
    """
    try:
        plan_uuid = uuid.UUID(plan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid plan ID format")

    plan_repo = PlanRepository(db)
    plan = plan_repo.get_plan_by_id(plan_uuid)

    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")

    return to_plan_response(plan)
