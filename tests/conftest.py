"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from finrec.api.main import create_app
from finrec.domain.models import (
    BankAccount,
    Bill,
    Expense,
    FinancialGoal,
    FinancialHealth,
    FinancialSnapshot,
    Income,
    Loan,
    UserPreferences,
)

TODAY = date(2025, 6, 1)


def _make_health(
    score: float = 70.0,
    emergency_fund_ratio: float = 0.5,
    debt_to_income_ratio: float = 10.0,
    savings_rate: float = 20.0,
) -> FinancialHealth:
    """FinancialHealth with only the fields under test set meaningfully"""
    return FinancialHealth(
        score=score,
        level="good",
        monthly_income=3000.0,
        monthly_expenses=2000.0,
        savings_rate=savings_rate,
        debt_to_income_ratio=debt_to_income_ratio,
        emergency_fund_ratio=emergency_fund_ratio,
        net_worth=0.0,
        business_contribution=0.0,
        emergency_fund_gap=0.0,
        recommendations=[],
        suggested_strategy="balanced",
    )


@pytest.fixture
def make_health():
    """Factory for FinancialHealth inputs to allocation and suggestions"""
    return _make_health


@pytest.fixture
def today() -> date:
    """Fixed evaluation date so forecasts are deterministic"""
    return TODAY


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_snapshot(today: date) -> FinancialSnapshot:
    """A salaried user with a side income, two loans, an overdrawn account and one goal"""
    return FinancialSnapshot(
        incomes=[
            Income("inc_salary", "Salary", 3000),
            Income("inc_freelance", "Freelance", 500),
        ],
        expenses=[
            Expense("exp_rent", "Rent", 1200, category="need"),
            Expense("exp_groceries", "Groceries", 100, frequency="weekly", category="need"),
            Expense("exp_streaming", "Streaming", 15, category="want"),
        ],
        loans=[
            Loan("loan_car", "Car Loan", 10000, 8000, 1.0, 300, due_date=today + timedelta(days=10)),
            Loan("loan_card", "Credit Card", 2000, 1500, 3.0, 60, due_date=today + timedelta(days=3)),
        ],
        bills=[
            Bill("bill_internet", "Internet", 50, due_date=today + timedelta(days=2)),
        ],
        accounts=[
            BankAccount("acc_checking", "Everyday", 2500, type="checking"),
            BankAccount("acc_savings", "Rainy Day", 4000, type="savings"),
            BankAccount(
                "acc_overdrawn",
                "Joint",
                -200,
                type="checking",
                has_overdraft=True,
                overdraft_limit=500,
                overdraft_used=100,
            ),
        ],
        goals=[
            FinancialGoal(
                "goal_holiday",
                "Holiday",
                3000,
                500,
                target_date=today + timedelta(days=300),
                priority="high",
                created_at=today - timedelta(days=60),
            ),
        ],
        preferences=UserPreferences(),
    )
