"""POST /v1/debt-plan, /v1/payment-suggestions, /v1/next-payment - payoff plan and payment to-do list"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from finrec.api.dependencies import evaluation_date, get_request_id, run_component
from finrec.api.v1.schemas import DebtPlanResponse, SnapshotRequest
from finrec.domain.debt import compare_strategies, generate_debt_recommendations, resolve_debt_strategy
from finrec.domain.engine import assess_health
from finrec.domain.metrics import total_debt
from finrec.domain.models import NextPayment, PaymentSuggestion
from finrec.domain.suggestions import generate_payment_suggestions, get_next_payment_recommendation
from finrec.infrastructure.observability.metrics import record_debt_plan

router = APIRouter()


@router.post("/debt-plan", response_model=DebtPlanResponse)
def create_debt_plan(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """
    Rank loans and account debts under the resolved strategy.

    The whole extra payment goes to the top-ranked debt; a comparison of all
    three strategies is returned alongside.
    """
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> DebtPlanResponse:
        snapshot.validate()
        strategy = resolve_debt_strategy(
            snapshot.preferences,
            snapshot.loans,
            snapshot.incomes,
            snapshot.expenses,
            snapshot.daily_entries,
            snapshot.accounts,
        )
        debt = total_debt(snapshot.loans, snapshot.accounts)
        return DebtPlanResponse(
            strategy=strategy,
            total_debt=round(debt, 2),
            debt_free=debt == 0,
            recommendations=generate_debt_recommendations(
                snapshot.loans,
                body.extra_payment,
                strategy,
                snapshot.accounts,
                today=today,
                currency=snapshot.preferences.currency,
            ),
            comparison=compare_strategies(snapshot.loans, body.extra_payment, snapshot.accounts, today=today),
        )

    plan = run_component(
        request_id,
        "debt_plan",
        compute,
        lambda p: {"debt_strategy": p.strategy, "debt_count": len(p.recommendations)},
    )
    record_debt_plan(plan.strategy, len(plan.recommendations))
    return plan


@router.post("/payment-suggestions", response_model=List[PaymentSuggestion])
def create_payment_suggestions(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """Ordered payments to make now, using extra_payment as the available amount"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> List[PaymentSuggestion]:
        snapshot.validate()
        prefs = snapshot.preferences
        health = assess_health(snapshot, today=today)
        strategy = resolve_debt_strategy(
            prefs,
            snapshot.loans,
            snapshot.incomes,
            snapshot.expenses,
            snapshot.daily_entries,
            snapshot.accounts,
        )
        return generate_payment_suggestions(
            snapshot.loans,
            snapshot.bills,
            snapshot.goals,
            body.extra_payment,
            prefs,
            health,
            snapshot.accounts,
            today=today,
            debt_strategy=strategy,
        )

    return run_component(request_id, "suggestions", compute, lambda s: {"suggestion_count": len(s)})


@router.post("/next-payment", response_model=Optional[NextPayment])
def get_next_payment(body: SnapshotRequest, request_id: str = Depends(get_request_id)):
    """The single most important payment to make now, or null when nothing is due"""
    snapshot = body.to_snapshot()
    today = evaluation_date(body.as_of)

    def compute() -> Optional[NextPayment]:
        snapshot.validate()
        strategy = resolve_debt_strategy(
            snapshot.preferences,
            snapshot.loans,
            snapshot.incomes,
            snapshot.expenses,
            snapshot.daily_entries,
            snapshot.accounts,
        )
        return get_next_payment_recommendation(
            snapshot.loans,
            snapshot.bills,
            body.extra_payment,
            strategy,
            snapshot.accounts,
            today=today,
        )

    return run_component(
        request_id,
        "next_payment",
        compute,
        lambda p: {"target_id": p.target_id if p else None},
    )
