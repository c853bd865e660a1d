"""Emergency preparedness scoring - liquidity resilience against monthly burn and debt load"""

from typing import List, Sequence

from finrec.domain.metrics import (
    liquid_assets,
    total_minimum_payments,
    total_monthly_expenses,
    total_monthly_income,
)
from finrec.domain.models import (
    BankAccount,
    Currency,
    DEFAULT_CURRENCIES,
    EmergencyPreparedness,
    Expense,
    Income,
    Loan,
)
from finrec.domain.money import EPSILON, format_currency

STARTER_RECOMMENDATIONS = [
    "Start building an emergency fund as soon as you begin receiving income",
    "Aim to save at least 3-6 months of expenses in a liquid savings account",
    "Consider setting up automatic transfers to your emergency fund",
]


def income_stability(incomes: Sequence[Income]) -> float:
    """Two or more active income sources score 0.8, otherwise 0.6"""
    return 0.8 if sum(1 for i in incomes if i.is_active) >= 2 else 0.6


def _fund_points(months: float) -> float:
    if months >= 6:
        return 40.0
    elif months >= 3:
        return 30.0
    elif months >= 1:
        return 20.0
    return months * 20


def _debt_points(debt_to_income_ratio: float) -> float:
    if debt_to_income_ratio <= 20:
        return 30.0
    elif debt_to_income_ratio <= 40:
        return 20.0
    elif debt_to_income_ratio <= 60:
        return 10.0
    return 0.0


def preparedness_level(score: float) -> str:
    if score >= 80:
        return "well-prepared"
    elif score >= 60:
        return "prepared"
    elif score >= 40:
        return "basic"
    else:
        return "unprepared"


def calculate_emergency_preparedness(
    accounts: Sequence[BankAccount],
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    loans: Sequence[Loan],
    *,
    target_months: int = 6,
    currency: Currency = DEFAULT_CURRENCIES["KES"],
) -> EmergencyPreparedness:
    """
    Score how long the user could absorb a shock.

    Weights: emergency fund 40, debt load 30, income stability 20,
    liquid cushion (3 months of expenses) 10.
    """
    if not (accounts or incomes or expenses or loans):
        return EmergencyPreparedness(
            score=0,
            level="unprepared",
            emergency_fund_months=0.0,
            liquid_assets=0.0,
            debt_to_income_ratio=0.0,
            income_stability=0.0,
            emergency_fund_gap=0.0,
            recommendations=list(STARTER_RECOMMENDATIONS),
        )

    income = total_monthly_income(list(incomes))
    spending = total_monthly_expenses(list(expenses))
    liquid = liquid_assets(list(accounts))

    fund_months = liquid / max(spending, EPSILON)
    debt_to_income_ratio = total_minimum_payments(list(loans), list(accounts)) / max(income, EPSILON) * 100
    stability = income_stability(incomes)
    cushion = min(1.0, liquid / max(spending * 3, EPSILON))

    score = _fund_points(fund_months) + _debt_points(debt_to_income_ratio) + stability * 20 + cushion * 10
    score = round(min(100.0, max(0.0, score)))

    fund_target = spending * target_months
    fund_gap = max(0.0, fund_target - liquid)

    recommendations: List[str] = []
    if fund_gap > 0:
        recommendations.append(
            f"Build emergency fund by adding {format_currency(fund_gap, currency)} to reach "
            f"{target_months} months of expenses ({format_currency(fund_target, currency)})"
        )
    if debt_to_income_ratio > 40:
        if loans:
            costliest = max(loans, key=lambda l: l.interest_rate)
            recommendations.append(
                f"Focus on reducing your {costliest.name} with {costliest.interest_rate:g}% "
                "interest rate to improve financial flexibility"
            )
        else:
            recommendations.append("Focus on reducing debt to improve financial flexibility")
    active_incomes = [i for i in incomes if i.is_active]
    if len(active_incomes) == 1:
        recommendations.append(
            f"Consider developing additional income sources beyond your current {active_incomes[0].source}"
        )
    if liquid < spending:
        recommendations.append(
            f"Increase liquid savings by at least {format_currency(spending - liquid, currency)} "
            "for immediate access to funds"
        )

    return EmergencyPreparedness(
        score=score,
        level=preparedness_level(score),
        emergency_fund_months=round(fund_months, 2),
        liquid_assets=round(liquid, 2),
        debt_to_income_ratio=round(debt_to_income_ratio, 2),
        income_stability=stability,
        emergency_fund_gap=round(fund_gap, 2),
        recommendations=recommendations,
    )
