"""Goal forecasting - completion dates, success probability, milestones and progress status"""

import math
from datetime import date
from typing import List

from finrec.domain.models import (
    Currency,
    DEFAULT_CURRENCIES,
    FinancialGoal,
    GoalForecast,
    GoalMilestone,
    GoalProgress,
)
from finrec.domain.money import format_currency
from finrec.utils.date_utils import add_months, days_until, months_until

MILESTONE_PERCENTAGES = (25, 50, 75, 100)
MIN_SUCCESS_PROBABILITY = 20


def _months_to_reach(amount: float, monthly_saving: float) -> int:
    # At least one unit per month so a stalled saver still gets a finite date
    return max(0, math.ceil(amount / max(1.0, monthly_saving)))


def success_probability(available: float, needed: float) -> float:
    """100 when the monthly need is covered, else the covered share floored at 20"""
    if needed <= 0 or available >= needed:
        return 100.0
    return max(float(MIN_SUCCESS_PROBABILITY), 100 * available / needed)


def generate_goal_forecast(
    goal: FinancialGoal,
    monthly_income: float,
    monthly_expenses: float,
    savings_rate: float,
    *,
    today: date,
    currency: Currency = DEFAULT_CURRENCIES["KES"],
) -> GoalForecast:
    """
    Project a goal's completion from the current savings trajectory.

    Args:
        savings_rate: percent of (income - expenses) directed to goals

    Milestones at 25/50/75/100% are dated by projecting forward from today;
    milestones already reached are marked achieved as of today.
    """
    remaining = goal.target_amount - goal.current_amount
    months_remaining = months_until(goal.target_date, today)

    # A deficit leaves nothing for goals
    available = max(0.0, (monthly_income - monthly_expenses) * (savings_rate / 100))
    needed = remaining / months_remaining
    probability = success_probability(available, needed)

    milestones: List[GoalMilestone] = []
    for percentage in MILESTONE_PERCENTAGES:
        amount = goal.target_amount * percentage / 100
        achieved = goal.current_amount >= amount
        if achieved:
            estimated = today
        else:
            estimated = add_months(today, _months_to_reach(amount - goal.current_amount, available))
        milestones.append(
            GoalMilestone(
                percentage=percentage,
                amount=round(amount, 2),
                estimated_date=estimated,
                achieved=achieved,
                achieved_date=today if achieved else None,
            )
        )

    adjustments: List[str] = []
    if probability < 80:
        shortfall = (needed - available) * 1.1
        adjustments.append(
            f"Increase monthly contribution by {format_currency(shortfall, currency)} to improve success rate"
        )
        adjustments.append("Consider extending target date by 3-6 months")
        adjustments.append("Review and reduce non-essential expenses")
    if probability > 95:
        adjustments.append("Consider increasing goal amount or setting additional goals")
        adjustments.append("Explore investment options for excess savings")

    projected = add_months(today, _months_to_reach(max(0.0, remaining), available))

    return GoalForecast(
        goal_id=goal.id,
        goal_name=goal.name,
        months_remaining=months_remaining,
        available_for_goals=round(available, 2),
        monthly_contribution_needed=round(needed, 2),
        probability_of_success=round(probability),
        projected_completion_date=projected,
        milestones=milestones,
        recommended_adjustments=adjustments,
    )


def calculate_goal_progress(goal: FinancialGoal, *, today: date) -> GoalProgress:
    """Compare progress against elapsed time since the goal was created"""
    days_remaining = max(0, days_until(goal.target_date, today))
    months_remaining = max(1, math.ceil(days_remaining / 30))

    progress = goal.current_amount / goal.target_amount * 100 if goal.target_amount > 0 else 100.0
    monthly_required = (goal.target_amount - goal.current_amount) / months_remaining

    created = goal.created_at or today
    days_elapsed = max(0, (today - created).days)
    span = days_remaining + days_elapsed
    elapsed_percentage = 100.0 if span == 0 else days_elapsed / span * 100

    if progress >= elapsed_percentage + 10:
        status = "ahead"
    elif progress >= elapsed_percentage - 10:
        status = "on-track"
    elif progress >= elapsed_percentage - 25:
        status = "behind"
    else:
        status = "at-risk"

    return GoalProgress(
        goal_id=goal.id,
        goal_name=goal.name,
        days_remaining=days_remaining,
        months_remaining=months_remaining,
        progress_percentage=round(progress, 2),
        monthly_required=round(monthly_required, 2),
        is_on_track=progress >= elapsed_percentage,
        status=status,
    )
