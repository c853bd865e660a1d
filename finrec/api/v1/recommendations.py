"""POST /v1/recommendations, /v1/financial-health and improvement steps - full report and health score"""

from typing import List

from fastapi import APIRouter, Depends

from finrec.api.dependencies import evaluation_date, get_request_id, run_component
from finrec.api.v1.schemas import SnapshotRequest
from finrec.domain.engine import assess_health, build_recommendations
from finrec.domain.health import generate_health_improvement_steps
from finrec.domain.models import FinancialHealth, HealthImprovementStep, RecommendationReport
from finrec.infrastructure.observability.metrics import record_allocation, record_debt_plan, record_health

router = APIRouter()


@router.post("/recommendations", response_model=RecommendationReport)
def create_recommendations(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """
    Compute every output for a record snapshot.

    Flow:
    1. Validate and convert the records
    2. Run the engine as of the requested date
    3. Record metrics and log headline figures
    """
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    report = run_component(
        request_id,
        "report",
        lambda: build_recommendations(snapshot, today=today, extra_payment=body.extra_payment),
        lambda r: {
            "health_score": r.financial_health.score,
            "debt_strategy": r.debt_strategy,
            "debt_free": r.debt_free,
            "is_deficit": r.allocation.is_deficit,
        },
    )

    record_health(report.financial_health.score)
    record_debt_plan(report.debt_strategy, len(report.debt_plan))
    record_allocation(report.allocation.is_deficit)
    return report


@router.post("/financial-health", response_model=FinancialHealth)
def get_financial_health(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Composite 0-100 health score with supporting ratios"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> FinancialHealth:
        snapshot.validate()
        return assess_health(snapshot, today=today)

    health = run_component(request_id, "health", compute, lambda h: {"health_score": h.score})
    record_health(health.score)
    return health


@router.post("/financial-health/improvement-steps", response_model=List[HealthImprovementStep])
def get_health_improvement_steps(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Concrete steps to raise the health score, high-impact easy wins first"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> List[HealthImprovementStep]:
        snapshot.validate()
        prefs = snapshot.preferences
        return generate_health_improvement_steps(
            assess_health(snapshot, today=today),
            snapshot.incomes,
            snapshot.expenses,
            snapshot.loans,
            snapshot.accounts,
            emergency_fund_months=prefs.emergency_fund_months,
            currency=prefs.currency,
        )

    return run_component(request_id, "improvement_steps", compute, lambda s: {"step_count": len(s)})
