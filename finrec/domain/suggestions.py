"""Ranked, actionable payment suggestions across account debt, loans, bills and goals"""

from datetime import date
from typing import List, Optional, Sequence

from finrec.domain.debt import generate_debt_recommendations
from finrec.domain.forecast import calculate_goal_progress
from finrec.domain.metrics import account_debt
from finrec.domain.models import (
    BankAccount,
    Bill,
    FinancialGoal,
    FinancialHealth,
    Loan,
    NextPayment,
    PaymentSuggestion,
    UserPreferences,
)
from finrec.domain.money import classify_urgency
from finrec.utils.date_utils import days_until

URGENCY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}

# Share of available funds suggested against account debt
ACCOUNT_DEBT_SHARE = 0.5
BILL_WINDOW_DAYS = 7
NEXT_PAYMENT_BILL_WINDOW_DAYS = 3
ACCOUNT_DEBT_REASON = "Account debt typically has high fees and should be prioritized"


def _bill_reason(bill: Bill, today: date) -> str:
    days = days_until(bill.due_date, today)
    if days < 0:
        return f"Overdue by {-days} days"
    return f"Due in {days} days"


def _indebted_accounts(accounts: Sequence[BankAccount]) -> List[BankAccount]:
    return [a for a in accounts if account_debt(a) > 0]


def generate_payment_suggestions(
    loans: Sequence[Loan],
    bills: Sequence[Bill],
    goals: Sequence[FinancialGoal],
    available_amount: float,
    preferences: UserPreferences,
    financial_health: FinancialHealth,
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
    debt_strategy: Optional[str] = None,
) -> List[PaymentSuggestion]:
    """
    Build the ordered to-do list of payments.

    Order of collection: account debts (critical), the two top-ranked loans
    under the debt strategy, unpaid bills due within a week, then the first
    high-priority goal that is behind. Final order is by urgency; ranks are
    renumbered 1..n.

    Each account debt draws up to half of available_amount, never more than
    is left; only the remainder goes to the top loan as extra payment.
    """
    strategy = debt_strategy or preferences.debt_strategy
    available_amount = max(0.0, available_amount)
    suggestions: List[PaymentSuggestion] = []
    remaining = available_amount

    for account in _indebted_accounts(accounts):
        amount = round(min(account_debt(account), available_amount * ACCOUNT_DEBT_SHARE, remaining), 2)
        remaining = max(0.0, remaining - amount)
        suggestions.append(
            PaymentSuggestion(
                id=f"account-{account.id}",
                type="loan",
                name=f"{account.name} Account Debt",
                amount=amount,
                priority=len(suggestions) + 1,
                urgency="critical",
                reason=ACCOUNT_DEBT_REASON,
            )
        )

    loans_by_id = {loan.id: loan for loan in loans}
    plan = generate_debt_recommendations(
        loans, remaining, strategy, today=today, currency=preferences.currency
    )
    for index, rec in enumerate(plan[:2]):
        loan = loans_by_id.get(rec.obligation_id)
        if loan is None:
            # Loan removed by the caller since the plan was built
            continue
        suggestions.append(
            PaymentSuggestion(
                id=f"loan-{loan.id}",
                type="loan",
                name=loan.name,
                amount=rec.suggested_payment,
                priority=len(suggestions) + 1,
                urgency="high" if index == 0 else "medium",
                reason=rec.reason,
                due_date=loan.due_date,
            )
        )

    for bill in bills:
        if bill.is_paid or days_until(bill.due_date, today) > BILL_WINDOW_DAYS:
            continue
        urgency = classify_urgency(bill.due_date, today)
        if URGENCY_ORDER[urgency] < URGENCY_ORDER["high"]:
            urgency = "high"
        suggestions.append(
            PaymentSuggestion(
                id=f"bill-{bill.id}",
                type="bill",
                name=bill.name,
                amount=bill.amount,
                priority=len(suggestions) + 1,
                urgency=urgency,
                reason=_bill_reason(bill, today),
                due_date=bill.due_date,
            )
        )

    high_priority_goals = [g for g in goals if g.priority == "high"]
    for goal in high_priority_goals[:1]:
        progress = calculate_goal_progress(goal, today=today)
        if progress.status in ("behind", "at-risk"):
            suggestions.append(
                PaymentSuggestion(
                    id=f"goal-{goal.id}",
                    type="goal",
                    name=goal.name,
                    amount=progress.monthly_required,
                    priority=len(suggestions) + 1,
                    urgency="medium",
                    reason=f"Goal is {progress.status}. Needs regular contributions to stay on track.",
                    due_date=goal.target_date,
                )
            )

    # sorted() is stable, so collection order breaks urgency ties
    ranked = sorted(suggestions, key=lambda s: -URGENCY_ORDER[s.urgency])
    for rank, suggestion in enumerate(ranked, start=1):
        suggestion.priority = rank
    return ranked


def get_next_payment_recommendation(
    loans: Sequence[Loan],
    bills: Sequence[Bill],
    available_amount: float,
    strategy: str = "avalanche",
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
) -> Optional[NextPayment]:
    """Single most important payment: account debt, then top loan, then a bill due within 3 days"""
    indebted = _indebted_accounts(accounts)
    if indebted:
        account = indebted[0]
        return NextPayment(
            target_id=account.id,
            name=f"{account.name} Account Debt",
            amount=round(min(account_debt(account), max(0.0, available_amount) * ACCOUNT_DEBT_SHARE), 2),
            reason=ACCOUNT_DEBT_REASON,
        )

    plan = generate_debt_recommendations(loans, available_amount, strategy, today=today)
    loans_by_id = {loan.id: loan for loan in loans}
    for rec in plan[:1]:
        loan = loans_by_id.get(rec.obligation_id)
        if loan is not None:
            return NextPayment(
                target_id=loan.id,
                name=loan.name,
                amount=rec.suggested_payment,
                reason=rec.reason,
            )

    for bill in bills:
        if not bill.is_paid and days_until(bill.due_date, today) <= NEXT_PAYMENT_BILL_WINDOW_DAYS:
            return NextPayment(
                target_id=bill.id,
                name=bill.name,
                amount=bill.amount,
                reason=_bill_reason(bill, today),
            )

    return None
