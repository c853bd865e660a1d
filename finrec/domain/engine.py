"""Recommendation engine - main entry point producing every output from one record snapshot"""

from datetime import date

from finrec.domain.allocation import calculate_auto_allocation, calculate_spending_allowance
from finrec.domain.debt import generate_debt_recommendations, resolve_debt_strategy
from finrec.domain.forecast import generate_goal_forecast
from finrec.domain.health import calculate_financial_health, generate_health_improvement_steps
from finrec.domain.metrics import total_debt, total_monthly_expenses, total_monthly_income
from finrec.domain.models import FinancialHealth, FinancialSnapshot, RecommendationReport
from finrec.domain.preparedness import calculate_emergency_preparedness
from finrec.domain.suggestions import generate_payment_suggestions, get_next_payment_recommendation


def assess_health(snapshot: FinancialSnapshot, *, today: date) -> FinancialHealth:
    """Financial health over every record set in the snapshot"""
    return calculate_financial_health(
        snapshot.incomes,
        snapshot.expenses,
        snapshot.loans,
        snapshot.daily_entries,
        snapshot.business_entries,
        snapshot.goals,
        snapshot.accounts,
        snapshot.expected_payments,
        today=today,
        emergency_fund_months=snapshot.preferences.emergency_fund_months,
        currency=snapshot.preferences.currency,
    )


def build_recommendations(
    snapshot: FinancialSnapshot,
    *,
    today: date,
    extra_payment: float = 0.0,
) -> RecommendationReport:
    """
    Run the full pipeline over a snapshot.

    Flow:
    1. Validate records
    2. Score financial health
    3. Resolve debt strategy and build the payoff plan
    4. Allocate surplus
    5. Rank payment suggestions against the debt allocation
    6. Pick the single next payment
    7. Forecast every goal against the folded income and expenses
    8. Score emergency preparedness
    9. Wants allowance and health improvement steps
    """
    snapshot.validate()
    prefs = snapshot.preferences
    currency = prefs.currency

    health = assess_health(snapshot, today=today)

    strategy = resolve_debt_strategy(
        prefs,
        snapshot.loans,
        snapshot.incomes,
        snapshot.expenses,
        snapshot.daily_entries,
        snapshot.accounts,
    )
    debt_plan = generate_debt_recommendations(
        snapshot.loans,
        extra_payment,
        strategy,
        snapshot.accounts,
        today=today,
        currency=currency,
    )

    monthly_income = total_monthly_income(snapshot.incomes)
    monthly_expenses = total_monthly_expenses(snapshot.expenses)
    allocation = calculate_auto_allocation(
        monthly_income,
        monthly_expenses,
        snapshot.loans,
        snapshot.goals,
        snapshot.business_entries,
        prefs,
        health,
        snapshot.accounts,
        today=today,
    )

    suggestions = generate_payment_suggestions(
        snapshot.loans,
        snapshot.bills,
        snapshot.goals,
        allocation.bucket("debt").amount,
        prefs,
        health,
        snapshot.accounts,
        today=today,
        debt_strategy=strategy,
    )

    next_payment = get_next_payment_recommendation(
        snapshot.loans,
        snapshot.bills,
        allocation.bucket("debt").amount,
        strategy,
        snapshot.accounts,
        today=today,
    )

    forecasts = [
        generate_goal_forecast(
            goal,
            health.monthly_income,
            health.monthly_expenses,
            health.savings_rate,
            today=today,
            currency=currency,
        )
        for goal in snapshot.goals
    ]

    preparedness = calculate_emergency_preparedness(
        snapshot.accounts,
        snapshot.incomes,
        snapshot.expenses,
        snapshot.loans,
        target_months=prefs.emergency_fund_months,
        currency=currency,
    )

    spending_allowance = calculate_spending_allowance(
        snapshot.incomes,
        snapshot.expenses,
        snapshot.loans,
        snapshot.goals,
        snapshot.business_entries,
        prefs,
        snapshot.accounts,
        today=today,
    )
    improvement_steps = generate_health_improvement_steps(
        health,
        snapshot.incomes,
        snapshot.expenses,
        snapshot.loans,
        snapshot.accounts,
        emergency_fund_months=prefs.emergency_fund_months,
        currency=currency,
    )

    debt = total_debt(snapshot.loans, snapshot.accounts)

    return RecommendationReport(
        as_of=today,
        total_debt=round(debt, 2),
        debt_free=debt == 0,
        debt_strategy=strategy,
        financial_health=health,
        debt_plan=debt_plan,
        allocation=allocation,
        payment_suggestions=suggestions,
        goal_forecasts=forecasts,
        emergency_preparedness=preparedness,
        next_payment=next_payment,
        spending_allowance=spending_allowance,
        improvement_steps=improvement_steps,
    )
