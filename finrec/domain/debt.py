"""Debt strategy simulator - ranks loans and account debts, allocates payments, projects payoff"""

import math
from datetime import date
from typing import Callable, List, Sequence

from finrec.domain.exceptions import UnknownStrategyError
from finrec.domain.metrics import (
    account_debt,
    account_minimum_payment,
    interest_per_month,
    total_minimum_payments,
    total_monthly_expenses,
    total_monthly_income,
)
from finrec.domain.models import (
    BankAccount,
    Currency,
    DailyEntry,
    DebtRecommendation,
    DEFAULT_CURRENCIES,
    Expense,
    Income,
    Loan,
    Obligation,
    ObligationKind,
    StrategyComparison,
    UserPreferences,
)
from finrec.domain.money import format_currency
from finrec.utils.date_utils import days_until

STRATEGIES = ("avalanche", "snowball", "hybrid")

# Payoff month count meaning "payment never amortizes the balance"
PAYOFF_SENTINEL = 999
# Punitive interest multiplier reported alongside the sentinel
SENTINEL_INTEREST_MULTIPLIER = 10

# Effective monthly rate (%) assumed for negative balances and overdrafts
ACCOUNT_DEBT_MONTHLY_RATE = 5.0

HYBRID_RATE_WEIGHT = 0.5
HYBRID_BALANCE_WEIGHT = 0.3
HYBRID_URGENCY_WEIGHT = 0.2
URGENCY_HORIZON_DAYS = 30


def calculate_payoff_time(balance: float, payment: float, monthly_rate: float) -> int:
    """
    Months needed to amortize balance at a fixed monthly payment.

    Formula (r = monthly_rate / 100):
        n = ceil(-ln(1 - balance*r / payment) / ln(1 + r))   if payment > balance*r
        n = 999                                               otherwise

    Example:
        $1000 at 2%/month paying $100 → 12 months
    """
    if balance <= 0:
        return 0
    if payment <= 0:
        return PAYOFF_SENTINEL

    r = monthly_rate / 100
    if r <= 0:
        return math.ceil(balance / payment - 1e-9)
    if payment <= balance * r:
        return PAYOFF_SENTINEL

    months = -math.log(1 - balance * r / payment) / math.log(1 + r)
    # Tolerance keeps exact integer results from rounding up on float noise
    return max(1, math.ceil(months - 1e-9))


def calculate_total_interest(balance: float, payment: float, monthly_rate: float) -> float:
    """Interest paid over the payoff period; balance * 10 when the debt never amortizes"""
    months = calculate_payoff_time(balance, payment, monthly_rate)
    if months == PAYOFF_SENTINEL:
        return round(balance * SENTINEL_INTEREST_MULTIPLIER, 2)
    return round(max(0.0, payment * months - balance), 2)


def build_obligations(loans: Sequence[Loan], accounts: Sequence[BankAccount] = ()) -> List[Obligation]:
    """Merge loans with outstanding balances and indebted accounts into one list"""
    obligations = [
        Obligation(
            id=loan.id,
            name=loan.name,
            kind=ObligationKind.LOAN,
            balance=loan.current_balance,
            interest_rate=loan.interest_rate,
            minimum_payment=loan.minimum_payment,
            due_date=loan.due_date,
            penalty_rate=loan.penalty_rate,
            other_charges=loan.other_charges,
        )
        for loan in loans
        if loan.current_balance > 0
    ]

    for account in accounts:
        debt = account_debt(account)
        if debt <= 0:
            continue
        obligations.append(
            Obligation(
                id=account.id,
                name=f"{account.name} Account",
                kind=ObligationKind.ACCOUNT_DEBT,
                balance=debt,
                interest_rate=ACCOUNT_DEBT_MONTHLY_RATE,
                minimum_payment=account_minimum_payment(account),
                negative_balance=account.negative_balance,
                overdraft_used=account.overdraft_used if account.has_overdraft else 0.0,
            )
        )

    return obligations


def due_date_urgency(due_date: date | None, today: date) -> float:
    """1.0 when due or overdue, decaying linearly to 0 over 30 days"""
    if due_date is None:
        return 0.0
    days = days_until(due_date, today)
    if days <= 0:
        return 1.0
    return max(0.0, 1 - days / URGENCY_HORIZON_DAYS)


def _hybrid_scorer(obligations: Sequence[Obligation], today: date) -> Callable[[Obligation], float]:
    max_rate = max(o.interest_rate for o in obligations)
    min_balance = min(o.balance for o in obligations)

    def score(o: Obligation) -> float:
        rate_score = o.interest_rate / max_rate if max_rate > 0 else 0.0
        balance_score = min_balance / o.balance if o.balance > 0 else 1.0
        return (
            HYBRID_RATE_WEIGHT * rate_score
            + HYBRID_BALANCE_WEIGHT * balance_score
            + HYBRID_URGENCY_WEIGHT * due_date_urgency(o.due_date, today)
        )

    return score


def rank_obligations(obligations: Sequence[Obligation], strategy: str, today: date) -> List[Obligation]:
    """
    Order obligations by payoff priority.

    - avalanche: highest rate first, ties by smaller balance, earlier due date
    - snowball: smallest balance first, ties by earlier due date
    - hybrid: 0.5 * normalized rate + 0.3 * normalized 1/balance + 0.2 * due urgency

    Kind and id close every key so the order never depends on input order.
    """
    if strategy not in STRATEGIES:
        raise UnknownStrategyError(f"Unknown debt strategy: {strategy}")
    if not obligations:
        return []

    def due(o: Obligation) -> date:
        return o.due_date or date.max

    if strategy == "avalanche":
        key = lambda o: (-o.interest_rate, o.balance, due(o), o.kind.value, o.id)
    elif strategy == "snowball":
        key = lambda o: (o.balance, due(o), o.kind.value, o.id)
    else:
        score = _hybrid_scorer(obligations, today)
        key = lambda o: (-score(o), o.balance, o.kind.value, o.id)

    return sorted(obligations, key=key)


def _reason(obligation: Obligation, strategy: str, currency: Currency) -> str:
    if obligation.kind is ObligationKind.ACCOUNT_DEBT:
        return "Account debt: negative balances and overdrafts carry high fees and penalties"
    if strategy == "avalanche":
        return (
            f"High interest rate of {obligation.interest_rate:g}% makes this a priority "
            "for the avalanche method"
        )
    if strategy == "snowball":
        return (
            f"Small balance of {format_currency(obligation.balance, currency)} makes this "
            "a good quick win for the snowball method"
        )
    return "Optimized on interest rate, balance and due date for the biggest improvement soonest"


def _projected_fees(obligation: Obligation, today: date) -> float:
    fees = obligation.other_charges
    if obligation.due_date is not None and obligation.due_date < today:
        fees += obligation.balance * obligation.penalty_rate / 100
    return round(fees, 2)


def generate_debt_recommendations(
    loans: Sequence[Loan],
    extra_payment: float,
    strategy: str,
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
    currency: Currency = DEFAULT_CURRENCIES["KES"],
) -> List[DebtRecommendation]:
    """
    Build the ranked payoff plan.

    Every obligation receives its minimum payment; the whole extra payment is
    applied to the single top-ranked obligation (greedy waterfall, not split).
    Returns an empty list when there is no debt.
    """
    ranked = rank_obligations(build_obligations(loans, accounts), strategy, today)
    extra_payment = max(0.0, extra_payment)

    recommendations = []
    for index, obligation in enumerate(ranked):
        extra = extra_payment if index == 0 else 0.0
        payment = obligation.minimum_payment + extra

        recommendations.append(
            DebtRecommendation(
                obligation_id=obligation.id,
                name=obligation.name,
                kind=obligation.kind,
                strategy=strategy,
                priority=index + 1,
                reason=_reason(obligation, strategy, currency),
                balance=round(obligation.balance, 2),
                minimum_payment=round(obligation.minimum_payment, 2),
                extra_payment=round(extra, 2),
                suggested_payment=round(payment, 2),
                urgency_score=max(0, 100 - index * 5),
                payoff_months=calculate_payoff_time(obligation.balance, payment, obligation.interest_rate),
                monthly_interest=round(interest_per_month(obligation.balance, obligation.interest_rate), 2),
                total_interest=calculate_total_interest(obligation.balance, payment, obligation.interest_rate),
                projected_fees=_projected_fees(obligation, today),
            )
        )

    return recommendations


def compare_strategies(
    loans: Sequence[Loan],
    extra_payment: float,
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
) -> List[StrategyComparison]:
    """Run every strategy over the same debts and summarise the outcome"""
    comparisons = []
    for strategy in STRATEGIES:
        plan = generate_debt_recommendations(loans, extra_payment, strategy, accounts, today=today)
        comparisons.append(
            StrategyComparison(
                strategy=strategy,
                total_interest=round(sum(r.total_interest for r in plan), 2),
                longest_payoff_months=max((r.payoff_months for r in plan), default=0),
                first_target=plan[0].name if plan else None,
            )
        )
    return comparisons


def suggest_optimal_debt_strategy(
    loans: Sequence[Loan],
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    daily_entries: Sequence[DailyEntry],
    accounts: Sequence[BankAccount] = (),
) -> str:
    """
    Pick a strategy from the user's situation.

    - snowball: cash-flow negative, low engagement (<10 daily entries) or a
      balance under half a month's income (quick wins keep motivation up)
    - avalanche: any rate above 15% or an average above 10%
    - hybrid: otherwise
    """
    if not loans:
        return "avalanche"

    monthly_income = total_monthly_income(list(incomes))
    disposable = (
        monthly_income
        - total_monthly_expenses(list(expenses))
        - total_minimum_payments(list(loans), list(accounts))
    )
    avg_rate = sum(l.interest_rate for l in loans) / len(loans)

    has_small_debts = any(l.current_balance < monthly_income * 0.5 for l in loans)
    has_high_interest = any(l.interest_rate > 15 for l in loans)
    needs_motivation = len(daily_entries) < 10

    if disposable < 0 or needs_motivation or has_small_debts:
        return "snowball"
    elif has_high_interest or avg_rate > 10:
        return "avalanche"
    else:
        return "hybrid"


def resolve_debt_strategy(
    preferences: UserPreferences,
    loans: Sequence[Loan],
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    daily_entries: Sequence[DailyEntry],
    accounts: Sequence[BankAccount] = (),
) -> str:
    """Preferred strategy, or the suggested one when auto-suggest is enabled"""
    if preferences.auto_suggest_strategy:
        return suggest_optimal_debt_strategy(loans, incomes, expenses, daily_entries, accounts)
    if preferences.debt_strategy not in STRATEGIES:
        raise UnknownStrategyError(f"Unknown debt strategy: {preferences.debt_strategy}")
    return preferences.debt_strategy
