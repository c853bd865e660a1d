"""Auto-allocation of monthly surplus across debt, emergency fund, goals and discretionary spending"""

from datetime import date
from typing import Dict, List, Sequence

from finrec.domain.exceptions import UnknownStrategyError
from finrec.domain.forecast import calculate_goal_progress
from finrec.domain.metrics import (
    business_contribution,
    total_account_debt,
    total_debt,
    total_minimum_payments,
    total_monthly_expenses,
    total_monthly_income,
)
from finrec.domain.models import (
    AllocationBucket,
    AutoAllocation,
    BankAccount,
    BusinessEntry,
    Expense,
    FinancialGoal,
    FinancialHealth,
    GoalContribution,
    Income,
    Loan,
    SpendingAllowance,
    UserPreferences,
)
from finrec.domain.money import format_currency, from_cents, to_cents

BUCKETS = ("debt", "emergency_fund", "goals", "discretionary")

# (debt, emergency fund + goals, discretionary) percentages of surplus
STRATEGY_SPLITS = {
    "debt-focused": (70, 20, 10),
    "balanced": (40, 40, 20),
    "savings-focused": (20, 60, 20),
}

LOW_HEALTH_SCORE = 50
LOW_HEALTH_SHIFT = 10

GOAL_PRIORITY_WEIGHTS = {"high": 3, "medium": 2, "low": 1}


def allocation_percentages(
    strategy: str,
    health_score: float,
    emergency_fund_ratio: float,
    has_debt: bool,
    has_goals: bool,
) -> Dict[str, int]:
    """
    Integer percentage per bucket, always summing to 100.

    Adjustments applied in order:
    1. Base split by strategy; savings share halved between fund and goals
    2. Score < 50: 10 points from discretionary, half to debt, half to fund
    3. Fund full (ratio >= 1): fund share to debt, or to goals when debt-free
    4. Debt-free: debt share to fund, or to goals when the fund is full
    5. No open goals: goal share to fund, or to discretionary when the fund is full
    """
    if strategy not in STRATEGY_SPLITS:
        raise UnknownStrategyError(f"Unknown allocation strategy: {strategy}")

    debt, savings, discretionary = STRATEGY_SPLITS[strategy]
    if has_goals:
        emergency = savings // 2
        goals = savings - emergency
    else:
        emergency, goals = savings, 0

    if health_score < LOW_HEALTH_SCORE:
        shift = min(LOW_HEALTH_SHIFT, discretionary)
        discretionary -= shift
        debt += shift // 2
        emergency += shift - shift // 2

    fund_full = emergency_fund_ratio >= 1
    if fund_full and emergency:
        if has_debt:
            debt += emergency
        else:
            goals += emergency
        emergency = 0

    if not has_debt and debt:
        if fund_full:
            goals += debt
        else:
            emergency += debt
        debt = 0

    if not has_goals and goals:
        if fund_full:
            discretionary += goals
        else:
            emergency += goals
        goals = 0

    return {
        "debt": debt,
        "emergency_fund": emergency,
        "goals": goals,
        "discretionary": discretionary,
    }


def split_cents(total_cents: int, percentages: Dict[str, int]) -> Dict[str, int]:
    """
    Split an amount by integer percentages with no rounding leakage.

    Largest bucket absorbs the remainder so the parts always sum to total_cents.
    Example: 100001 cents at 40/40/20 → 40000 + 40000 + 20000, +1 to the first 40%.
    """
    amounts = {name: total_cents * pct // 100 for name, pct in percentages.items()}
    remainder = total_cents - sum(amounts.values())
    if remainder:
        largest = max(percentages, key=lambda name: percentages[name])
        amounts[largest] += remainder
    return amounts


def distribute_to_goals(goal_cents: int, goals: Sequence[FinancialGoal]) -> List[GoalContribution]:
    """
    Share the goal bucket by priority weight (high 3, medium 2, low 1).

    No goal receives more than it still needs; capped leftovers flow to the
    next goals in priority order.
    """
    open_goals = sorted(
        (g for g in goals if g.remaining_amount > 0),
        key=lambda g: (-GOAL_PRIORITY_WEIGHTS.get(g.priority, 1), g.target_date, g.id),
    )
    if goal_cents <= 0 or not open_goals:
        return []

    total_weight = sum(GOAL_PRIORITY_WEIGHTS.get(g.priority, 1) for g in open_goals)
    caps = {g.id: to_cents(g.remaining_amount) for g in open_goals}
    shares = {}
    for goal in open_goals:
        share = goal_cents * GOAL_PRIORITY_WEIGHTS.get(goal.priority, 1) // total_weight
        shares[goal.id] = min(share, caps[goal.id])

    leftover = goal_cents - sum(shares.values())
    for goal in open_goals:
        if leftover <= 0:
            break
        room = caps[goal.id] - shares[goal.id]
        top_up = min(room, leftover)
        shares[goal.id] += top_up
        leftover -= top_up

    return [
        GoalContribution(goal_id=g.id, name=g.name, amount_cents=shares[g.id])
        for g in open_goals
        if shares[g.id] > 0
    ]


def calculate_auto_allocation(
    monthly_income: float,
    monthly_expenses: float,
    loans: Sequence[Loan],
    goals: Sequence[FinancialGoal],
    business_entries: Sequence[BusinessEntry],
    preferences: UserPreferences,
    financial_health: FinancialHealth,
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
) -> AutoAllocation:
    """
    Split the monthly surplus (income + business profit - expenses - minimum
    debt payments) into named buckets.

    A surplus of zero or less yields all-zero buckets and a deficit state.
    """
    business_profit = business_contribution(list(business_entries), today)
    total_income = monthly_income + business_profit
    minimum_payments = total_minimum_payments(list(loans), list(accounts))
    surplus = total_income - monthly_expenses - minimum_payments
    surplus_cents = to_cents(surplus)

    has_debt = total_debt(list(loans), list(accounts)) > 0
    has_goals = any(g.remaining_amount > 0 for g in goals)
    percentages = allocation_percentages(
        preferences.strategy,
        financial_health.score,
        financial_health.emergency_fund_ratio,
        has_debt,
        has_goals,
    )

    currency = preferences.currency
    recommendations: List[str] = []

    if surplus_cents <= 0:
        amounts = {name: 0 for name in BUCKETS}
        goal_contributions: List[GoalContribution] = []
        if surplus_cents < 0:
            recommendations.append(
                f"Spending and minimum payments exceed income by {format_currency(-surplus, currency)}; "
                "reduce expenses or increase income before allocating"
            )
        else:
            recommendations.append("Nothing is left after expenses and minimum payments this month")
    else:
        amounts = split_cents(surplus_cents, percentages)
        goal_contributions = distribute_to_goals(amounts["goals"], goals)
        unassigned = amounts["goals"] - sum(c.amount_cents for c in goal_contributions)
        if unassigned > 0:
            recommendations.append(
                f"Goal allocation exceeds remaining goal targets by "
                f"{format_currency(from_cents(unassigned), currency)}; consider setting a new goal"
            )

    if financial_health.debt_to_income_ratio > 30:
        recommendations.append("Your debt-to-income ratio is high. Consider allocating more to debt repayment.")
    if financial_health.emergency_fund_ratio < 0.5:
        recommendations.append("Your emergency fund is below target. Prioritize building it.")
    if financial_health.savings_rate < 10:
        recommendations.append("Your savings rate is low. Try to increase income or reduce expenses to save more.")
    if total_account_debt(list(accounts)) > 0:
        recommendations.append("Prioritize paying off account debts and overdrafts to avoid high fees and interest.")

    buckets = [
        AllocationBucket(
            name=name,
            percentage=percentages[name] if surplus_cents > 0 else 0,
            amount_cents=amounts[name],
        )
        for name in BUCKETS
    ]

    return AutoAllocation(
        strategy=preferences.strategy,
        total_income=round(total_income, 2),
        total_expenses=round(monthly_expenses, 2),
        minimum_debt_payments=round(minimum_payments, 2),
        business_profit=round(business_profit, 2),
        surplus=from_cents(max(0, surplus_cents)),
        is_deficit=surplus_cents <= 0,
        deficit=from_cents(max(0, -surplus_cents)),
        buckets=buckets,
        goal_contributions=goal_contributions,
        recommendations=recommendations,
    )


# 50/30/20 rule: share of income available for wants
WANTS_SHARE = 0.30
LOW_ALLOWANCE_SHARE = 0.20
HIGH_DEBT_INCOME_MULTIPLE = 3


def calculate_spending_allowance(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    loans: Sequence[Loan],
    goals: Sequence[FinancialGoal],
    business_entries: Sequence[BusinessEntry],
    preferences: UserPreferences,
    accounts: Sequence[BankAccount] = (),
    *,
    today: date,
) -> SpendingAllowance:
    """
    How much discretionary spending is left this month.

    Wants may take 30% of income (salaried plus business profit). Spending
    is discouraged when the wants budget is exhausted, debt exceeds three
    months of income, or goals are falling behind.
    """
    income = total_monthly_income(list(incomes)) + business_contribution(list(business_entries), today)
    wants = total_monthly_expenses([e for e in expenses if e.category == "want"])
    allowed = income * WANTS_SHARE
    remaining = allowed - wants
    currency = preferences.currency

    recommendations: List[str] = []
    restrictions: List[str] = []

    if remaining < 0:
        restrictions.append(f"You've exceeded your monthly wants budget by {format_currency(-remaining, currency)}")
        restrictions.append("Consider reducing non-essential spending for the rest of the month")
    elif remaining < allowed * LOW_ALLOWANCE_SHARE:
        recommendations.append(
            f"You have {format_currency(remaining, currency)} left for wants this month "
            "(less than 20% of your budget)"
        )
        recommendations.append("Be mindful of additional discretionary spending")
    else:
        recommendations.append(f"You have {format_currency(remaining, currency)} available for wants this month")

    debt = total_debt(list(loans), list(accounts))
    if debt > 0 and debt > income * HIGH_DEBT_INCOME_MULTIPLE:
        restrictions.append("Your debt level is high relative to income")
        restrictions.append("Consider prioritizing debt repayment over discretionary spending")

    lagging = [
        g for g in goals if calculate_goal_progress(g, today=today).status in ("behind", "at-risk")
    ]
    if lagging:
        recommendations.append(f"You have {len(lagging)} financial goals that need attention")
        recommendations.append("Consider allocating more to goals instead of discretionary spending")

    return SpendingAllowance(
        allowed_wants_spending=round(allowed, 2),
        current_wants_spending=round(wants, 2),
        remaining_wants_allowance=round(remaining, 2),
        can_spend=remaining > 0,
        recommendations=recommendations,
        restrictions=restrictions,
    )
