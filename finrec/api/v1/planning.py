"""POST /v1/allocation, /v1/spending-allowance, /v1/goals/forecast, /v1/emergency-preparedness - forward-looking plans"""

from typing import List

from fastapi import APIRouter, Depends

from finrec.api.dependencies import evaluation_date, get_request_id, run_component
from finrec.api.v1.schemas import SnapshotRequest
from finrec.domain.allocation import calculate_auto_allocation, calculate_spending_allowance
from finrec.domain.engine import assess_health
from finrec.domain.forecast import generate_goal_forecast
from finrec.domain.metrics import total_monthly_expenses, total_monthly_income
from finrec.domain.models import AutoAllocation, EmergencyPreparedness, GoalForecast, SpendingAllowance
from finrec.domain.preparedness import calculate_emergency_preparedness
from finrec.infrastructure.observability.metrics import record_allocation

router = APIRouter()


@router.post("/allocation", response_model=AutoAllocation)
def create_allocation(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Split monthly surplus into debt, emergency fund, goals and discretionary buckets"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> AutoAllocation:
        snapshot.validate()
        health = assess_health(snapshot, today=today)
        return calculate_auto_allocation(
            total_monthly_income(snapshot.incomes),
            total_monthly_expenses(snapshot.expenses),
            snapshot.loans,
            snapshot.goals,
            snapshot.business_entries,
            snapshot.preferences,
            health,
            snapshot.accounts,
            today=today,
        )

    allocation = run_component(
        request_id,
        "allocation",
        compute,
        lambda a: {"surplus": a.surplus, "is_deficit": a.is_deficit},
    )
    record_allocation(allocation.is_deficit)
    return allocation


@router.post("/spending-allowance", response_model=SpendingAllowance)
def create_spending_allowance(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Wants budget left this month under the 50/30/20 rule"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> SpendingAllowance:
        snapshot.validate()
        return calculate_spending_allowance(
            snapshot.incomes,
            snapshot.expenses,
            snapshot.loans,
            snapshot.goals,
            snapshot.business_entries,
            snapshot.preferences,
            snapshot.accounts,
            today=today,
        )

    return run_component(
        request_id,
        "spending_allowance",
        compute,
        lambda a: {"can_spend": a.can_spend, "remaining": a.remaining_wants_allowance},
    )


@router.post("/goals/forecast", response_model=List[GoalForecast])
def create_goal_forecasts(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Completion forecast for every goal at the current savings rate"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> List[GoalForecast]:
        snapshot.validate()
        health = assess_health(snapshot, today=today)
        return [
            generate_goal_forecast(
                goal,
                health.monthly_income,
                health.monthly_expenses,
                health.savings_rate,
                today=today,
                currency=snapshot.preferences.currency,
            )
            for goal in snapshot.goals
        ]

    return run_component(request_id, "forecast", compute, lambda f: {"goal_count": len(f)})


@router.post("/emergency-preparedness", response_model=EmergencyPreparedness)
def create_emergency_preparedness(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Liquidity resilience score and level"""
    snapshot = body.to_snapshot()

    def compute() -> EmergencyPreparedness:
        snapshot.validate()
        return calculate_emergency_preparedness(
            snapshot.accounts,
            snapshot.incomes,
            snapshot.expenses,
            snapshot.loans,
            target_months=snapshot.preferences.emergency_fund_months,
            currency=snapshot.preferences.currency,
        )

    return run_component(
        request_id,
        "preparedness",
        compute,
        lambda p: {"preparedness_score": p.score, "level": p.level},
    )
