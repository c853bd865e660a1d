"""Unit tests for goal forecasting and progress tracking"""

import pytest
from datetime import date, timedelta
from finrec.domain.forecast import calculate_goal_progress, generate_goal_forecast, success_probability
from finrec.domain.models import FinancialGoal


def _goal(today, target=12000, current=0, days=360, created_days_ago=None):
    created = today - timedelta(days=created_days_ago) if created_days_ago is not None else None
    return FinancialGoal(
        "g1", "House deposit", target, current, today + timedelta(days=days), priority="high", created_at=created
    )


def test_fully_funded_goal(today: date):
    """12000 over 360 days with 1000 a month available"""
    forecast = generate_goal_forecast(_goal(today), 3000, 1000, 50, today=today)

    assert forecast.months_remaining == 12
    assert forecast.available_for_goals == 1000
    assert forecast.monthly_contribution_needed == 1000
    assert forecast.probability_of_success == 100
    assert forecast.projected_completion_date == date(2026, 6, 1)
    assert any("increasing goal amount" in a for a in forecast.recommended_adjustments)


def test_partially_funded_goal(today: date):
    forecast = generate_goal_forecast(_goal(today), 2200, 1000, 50, today=today)

    assert forecast.probability_of_success == 60
    assert forecast.recommended_adjustments[0] == (
        "Increase monthly contribution by KSh 440 to improve success rate"
    )


def test_probability_has_a_floor(today: date):
    forecast = generate_goal_forecast(_goal(today), 1200, 1000, 50, today=today)

    assert forecast.probability_of_success == 20


@pytest.mark.parametrize(
    "available, needed, expected",
    [(1000, 1000, 100), (0, 0, 100), (500, -10, 100), (750, 1000, 75), (-200, 1000, 20)],
)
def test_success_probability(available, needed, expected):
    assert success_probability(available, needed) == expected


def test_milestones(today: date):
    forecast = generate_goal_forecast(_goal(today, current=6000), 3000, 1000, 50, today=today)
    milestones = {m.percentage: m for m in forecast.milestones}

    assert [m.percentage for m in forecast.milestones] == [25, 50, 75, 100]
    assert milestones[25].achieved and milestones[25].achieved_date == today
    assert milestones[50].achieved
    assert not milestones[75].achieved
    assert milestones[75].estimated_date == date(2025, 9, 1)
    assert milestones[100].estimated_date == date(2025, 12, 1)
    assert milestones[100].amount == 12000


def test_past_target_date_still_one_month(today: date):
    forecast = generate_goal_forecast(_goal(today, days=-45), 3000, 1000, 50, today=today)

    assert forecast.months_remaining == 1
    assert forecast.monthly_contribution_needed == 12000


def test_completed_goal(today: date):
    forecast = generate_goal_forecast(_goal(today, current=12000), 3000, 3000, 0, today=today)

    assert forecast.probability_of_success == 100
    assert all(m.achieved for m in forecast.milestones)
    assert forecast.projected_completion_date == today


@pytest.mark.parametrize(
    "current, status",
    [(8000, "ahead"), (6000, "on-track"), (3600, "behind"), (1200, "at-risk")],
)
def test_goal_progress_status(today: date, current, status):
    """Halfway through the goal's timeline"""
    progress = calculate_goal_progress(_goal(today, current=current, days=100, created_days_ago=100), today=today)

    assert progress.status == status
    assert progress.days_remaining == 100
    assert progress.months_remaining == 4


def test_goal_progress_without_creation_date(today: date):
    progress = calculate_goal_progress(_goal(today, current=3000, days=90), today=today)

    assert progress.progress_percentage == 25
    assert progress.monthly_required == 3000
    assert progress.status == "ahead"


def test_deficit_leaves_nothing_for_goals(today: date):
    """Spending twice the income must not read as money available"""
    forecast = generate_goal_forecast(_goal(today), 1000, 2000, -100, today=today)

    assert forecast.available_for_goals == 0
    assert forecast.probability_of_success == 20
    assert forecast.recommended_adjustments[0].startswith("Increase monthly contribution by KSh 1,100")
