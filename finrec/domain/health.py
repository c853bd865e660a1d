"""Financial health scoring - composite 0-100 score from savings, debt load, emergency fund and solvency"""

from datetime import date
from typing import List

from finrec.domain.metrics import (
    account_debt,
    business_contribution,
    daily_totals,
    emergency_savings,
    expected_payment_totals,
    liquid_assets,
    net_worth,
    total_account_debt,
    total_debt,
    total_minimum_payments,
    total_monthly_expenses,
    total_monthly_income,
)
from finrec.domain.models import (
    BankAccount,
    BusinessEntry,
    Currency,
    DailyEntry,
    DEFAULT_CURRENCIES,
    ExpectedPayment,
    Expense,
    FinancialGoal,
    FinancialHealth,
    HealthImprovementStep,
    Income,
    Loan,
)
from finrec.domain.money import EPSILON, clamp, format_currency

SAVINGS_WEIGHT = 0.40
DEBT_WEIGHT = 0.30
EMERGENCY_WEIGHT = 0.30
SOLVENCY_PENALTY_POINTS = 10.0

# Savings rate that earns full credit, and DTI (%) that earns none
TARGET_SAVINGS_RATE = 0.20
MAX_DEBT_TO_INCOME = 40.0


def compute_health_score(
    savings_rate: float,
    debt_to_income_ratio: float,
    emergency_fund_ratio: float,
    solvency_ratio: float = 0.0,
) -> float:
    """
    Weighted composite score in [0, 100].

    Args:
        savings_rate: fraction of income kept after expenses
        debt_to_income_ratio: minimum payments as percent of income
        emergency_fund_ratio: liquid assets / emergency fund target
        solvency_ratio: account debt / income, drives the solvency penalty

    Each component is clamped to [0, 1] before weighting.
    """
    savings_score = clamp(savings_rate / TARGET_SAVINGS_RATE)
    debt_score = clamp(1 - debt_to_income_ratio / MAX_DEBT_TO_INCOME)
    emergency_score = clamp(emergency_fund_ratio)

    score = 100 * (
        SAVINGS_WEIGHT * savings_score
        + DEBT_WEIGHT * debt_score
        + EMERGENCY_WEIGHT * emergency_score
    )
    score -= SOLVENCY_PENALTY_POINTS * clamp(solvency_ratio)

    return round(clamp(score, 0.0, 100.0), 1)


def health_level(score: float) -> str:
    if score >= 80:
        return "excellent"
    elif score >= 60:
        return "good"
    elif score >= 40:
        return "fair"
    else:
        return "poor"


def calculate_financial_health(
    incomes: List[Income],
    expenses: List[Expense],
    loans: List[Loan],
    daily_entries: List[DailyEntry],
    business_entries: List[BusinessEntry],
    goals: List[FinancialGoal],
    accounts: List[BankAccount],
    expected_payments: List[ExpectedPayment],
    *,
    today: date,
    emergency_fund_months: int = 6,
    currency: Currency = DEFAULT_CURRENCIES["KES"],
) -> FinancialHealth:
    """
    Score the user's overall financial position.

    Daily entries, business profit and settled expected payments are folded
    into the monthly income/expense totals. Unpaid expected payments only
    affect net worth.
    """
    business = business_contribution(business_entries, today)
    daily_income, daily_expenses = daily_totals(daily_entries, today)
    settled_income, settled_expenses = expected_payment_totals(expected_payments, today)

    income = total_monthly_income(incomes) + business + daily_income + settled_income
    spending = total_monthly_expenses(expenses) + daily_expenses + settled_expenses
    debt = total_debt(loans, accounts)
    minimum_payments = total_minimum_payments(loans, accounts)
    liquid = liquid_assets(accounts)

    income_basis = max(income, EPSILON)
    savings_rate = clamp((income - spending) / income_basis, -1.0, 1.0)
    debt_to_income_ratio = minimum_payments / income_basis * 100

    fund_target = spending * emergency_fund_months
    emergency_fund_ratio = liquid / max(fund_target, EPSILON)
    emergency_fund_gap = max(0.0, fund_target - liquid)

    worth = net_worth(accounts, loans, goals, expected_payments)

    if income == 0 and spending == 0 and debt == 0 and liquid == 0:
        # Nothing recorded yet
        score = 0.0
    else:
        score = compute_health_score(
            savings_rate,
            debt_to_income_ratio,
            emergency_fund_ratio,
            total_account_debt(accounts) / income_basis,
        )

    recommendations: List[str] = []
    if debt_to_income_ratio > 30:
        recommendations.append("Focus on reducing debt to improve your debt-to-income ratio")
    if savings_rate < 0.10:
        recommendations.append("Increase your savings rate by reducing expenses or increasing income")
    if emergency_fund_gap > 0:
        recommendations.append(
            f"Build your emergency fund by {format_currency(emergency_fund_gap, currency)} "
            f"to cover {emergency_fund_months} months of expenses"
        )
    if total_account_debt(accounts) > 0:
        recommendations.append("Clear negative balances and overdrafts to avoid fees and penalties")
    if worth < 0:
        recommendations.append("Work on increasing your net worth by paying down debt and building assets")
    if sum(1 for i in incomes if i.is_active) <= 1:
        recommendations.append("Consider developing additional income streams to increase financial security")

    if debt_to_income_ratio > 40 or debt > income * 6:
        suggested_strategy = "debt-focused"
    elif emergency_fund_ratio < 0.5 or savings_rate < 0.10:
        suggested_strategy = "savings-focused"
    else:
        suggested_strategy = "balanced"

    return FinancialHealth(
        score=score,
        level=health_level(score),
        monthly_income=round(income, 2),
        monthly_expenses=round(spending, 2),
        savings_rate=round(savings_rate * 100, 2),
        debt_to_income_ratio=round(debt_to_income_ratio, 2),
        emergency_fund_ratio=round(emergency_fund_ratio, 4),
        net_worth=round(worth, 2),
        business_contribution=round(business, 2),
        emergency_fund_gap=round(emergency_fund_gap, 2),
        recommendations=recommendations,
        suggested_strategy=suggested_strategy,
    )


IMPACT_WEIGHTS = {"high": 3, "medium": 2, "low": 1}
EASE_WEIGHTS = {"easy": 3, "medium": 2, "hard": 1}


def generate_health_improvement_steps(
    financial_health: FinancialHealth,
    incomes: List[Income],
    expenses: List[Expense],
    loans: List[Loan],
    accounts: List[BankAccount],
    *,
    emergency_fund_months: int = 6,
    currency: Currency = DEFAULT_CURRENCIES["KES"],
) -> List[HealthImprovementStep]:
    """
    Concrete steps to raise the health score, each with an estimated gain.

    Steps are ordered by impact plus ease, high-impact easy wins first.
    Returns an empty list when nothing has been recorded.
    """
    if not (incomes or expenses or loans or accounts):
        return []

    income = total_monthly_income(incomes)
    spending = total_monthly_expenses(expenses)
    wants = sorted(
        (e for e in expenses if e.is_active and e.category == "want"),
        key=lambda e: -e.monthly_amount,
    )
    steps: List[HealthImprovementStep] = []

    if financial_health.emergency_fund_ratio < 1:
        fund_months = emergency_savings(accounts) / max(1.0, spending)
        steps.append(
            HealthImprovementStep(
                id="emergency-fund",
                title="Build Emergency Fund",
                description=(
                    f"Increase your emergency fund to cover {emergency_fund_months} months of expenses. "
                    f"Currently at {fund_months:.1f} months "
                    f"({financial_health.emergency_fund_ratio * 100:.1f}% of target)."
                ),
                impact="high",
                difficulty="medium",
                estimated_timeframe="6-12 months",
                potential_score_increase=15,
                category="emergency",
            )
        )

    if loans and financial_health.debt_to_income_ratio > 30:
        costliest = max(loans, key=lambda l: l.interest_rate)
        steps.append(
            HealthImprovementStep(
                id="reduce-debt",
                title=f"Pay Down {costliest.name}",
                description=(
                    f"Focus on paying down your {costliest.name} with {costliest.interest_rate:g}% interest rate. "
                    f"Current balance: {format_currency(costliest.current_balance, currency)}."
                ),
                impact="high",
                difficulty="hard",
                estimated_timeframe="12-24 months",
                potential_score_increase=20,
                category="debt",
            )
        )

    indebted = [a for a in accounts if account_debt(a) > 0]
    if indebted:
        worst = max(indebted, key=account_debt)
        steps.append(
            HealthImprovementStep(
                id=f"account-debt-{worst.id}",
                title=f"Clear {worst.name} Account Debt",
                description=(
                    f"Pay off the negative balance and overdraft in your {worst.name} account. "
                    f"Current debt: {format_currency(account_debt(worst), currency)}."
                ),
                impact="high",
                difficulty="medium",
                estimated_timeframe="1-3 months",
                potential_score_increase=15,
                category="debt",
            )
        )

    savings_rate = (income - spending) / income * 100 if income > 0 else 0.0
    if savings_rate < 20:
        top_wants = wants[:3]
        potential = sum(e.monthly_amount * 0.2 for e in top_wants)
        description = f"Your current savings rate is {savings_rate:.1f}% of income, below the recommended 20%."
        if top_wants:
            description += (
                f" Consider reducing discretionary expenses like {', '.join(e.name for e in top_wants)} "
                f"to save approximately {format_currency(potential, currency)}/month more."
            )
        steps.append(
            HealthImprovementStep(
                id="increase-savings",
                title="Increase Savings Rate",
                description=description,
                impact="medium",
                difficulty="medium",
                estimated_timeframe="3-6 months",
                potential_score_increase=10,
                category="savings",
            )
        )

    active_incomes = [i for i in incomes if i.is_active]
    if len(active_incomes) == 1:
        steps.append(
            HealthImprovementStep(
                id="diversify-income",
                title="Diversify Income Sources",
                description=(
                    f"You currently rely on a single income source ({active_incomes[0].source}). "
                    "Consider developing additional income streams to reduce financial risk."
                ),
                impact="medium",
                difficulty="hard",
                estimated_timeframe="6-12 months",
                potential_score_increase=8,
                category="income",
            )
        )

    if wants and sum(e.monthly_amount for e in wants) > income * 0.3:
        largest = wants[0]
        steps.append(
            HealthImprovementStep(
                id=f"optimize-expense-{largest.id}",
                title=f"Reduce {largest.name} Expense",
                description=(
                    f"Your {largest.name} expense of {format_currency(largest.monthly_amount, currency)}/month "
                    "is significant. Consider ways to reduce this cost by 20% to improve your "
                    "wants-to-income ratio."
                ),
                impact="medium",
                difficulty="easy",
                estimated_timeframe="1-3 months",
                potential_score_increase=12,
                category="expenses",
            )
        )

    return sorted(steps, key=lambda s: -(IMPACT_WEIGHTS[s.impact] + EASE_WEIGHTS[s.difficulty]))
