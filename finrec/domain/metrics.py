"""Aggregate metrics - monthly totals, debt load and asset figures over raw records"""

from datetime import date
from typing import List, Tuple

from finrec.domain.models import (
    BankAccount,
    BusinessEntry,
    DailyEntry,
    ExpectedPayment,
    Expense,
    FinancialGoal,
    Income,
    Loan,
)
from finrec.utils.date_utils import within_last_days

# Synthetic minimum payment for account debt
ACCOUNT_MIN_PAYMENT_RATE = 0.05
ACCOUNT_MIN_PAYMENT_FLOOR = 25.0

LIQUID_ACCOUNT_TYPES = ("checking", "savings")


def total_monthly_income(incomes: List[Income]) -> float:
    return sum(i.monthly_amount for i in incomes if i.is_active)


def total_monthly_expenses(expenses: List[Expense]) -> float:
    return sum(e.monthly_amount for e in expenses if e.is_active)


def account_debt(account: BankAccount) -> float:
    """Negative balance plus overdraft used; inactive accounts carry none"""
    if not account.is_active:
        return 0.0
    return account.debt


def total_account_debt(accounts: List[BankAccount]) -> float:
    return sum(account_debt(a) for a in accounts)


def total_debt(loans: List[Loan], accounts: List[BankAccount]) -> float:
    """
    Loan balances plus account debt.

    Negative balance and drawn overdraft are both counted: they are distinct
    owed amounts (principal shortfall vs. drawn facility).
    """
    return sum(l.current_balance for l in loans) + total_account_debt(accounts)


def account_minimum_payment(account: BankAccount) -> float:
    """
    Synthetic monthly minimum for an account in debt.

    - Negative balance: 5% of the shortfall, at least 25
    - Overdraft used: 5% of the drawn amount
    """
    if not account.is_active:
        return 0.0

    payment = 0.0
    if account.negative_balance > 0:
        payment += max(account.negative_balance * ACCOUNT_MIN_PAYMENT_RATE, ACCOUNT_MIN_PAYMENT_FLOOR)
    if account.has_overdraft and account.overdraft_used > 0:
        payment += account.overdraft_used * ACCOUNT_MIN_PAYMENT_RATE
    return payment


def total_minimum_payments(loans: List[Loan], accounts: List[BankAccount]) -> float:
    loan_payments = sum(l.minimum_payment for l in loans)
    return loan_payments + sum(account_minimum_payment(a) for a in accounts)


def interest_per_month(balance: float, monthly_rate: float) -> float:
    """Interest accrued in one month at a monthly percentage rate"""
    return balance * monthly_rate / 100


def liquid_assets(accounts: List[BankAccount]) -> float:
    """Positive balances held in active checking and savings accounts"""
    return sum(
        max(0.0, a.balance)
        for a in accounts
        if a.is_active and a.type in LIQUID_ACCOUNT_TYPES
    )


def emergency_savings(accounts: List[BankAccount]) -> float:
    """Positive balances held in active savings accounts only"""
    return sum(max(0.0, a.balance) for a in accounts if a.is_active and a.type == "savings")


def business_contribution(entries: List[BusinessEntry], today: date) -> float:
    """Business profit over the last 30 days, taken as a monthly figure"""
    return sum(e.profit for e in entries if within_last_days(e.date, today))


def daily_totals(entries: List[DailyEntry], today: date) -> Tuple[float, float]:
    """(income, expenses) recorded as daily entries over the last 30 days"""
    recent = [e for e in entries if within_last_days(e.date, today)]
    return sum(e.income for e in recent), sum(e.expenses for e in recent)


def expected_payment_totals(payments: List[ExpectedPayment], today: date) -> Tuple[float, float]:
    """(income, expenses) from expected payments marked paid in the last 30 days"""
    settled = [p for p in payments if p.is_paid and within_last_days(p.expected_date, today)]
    income = sum(p.amount for p in settled if p.type == "income")
    expenses = sum(p.amount for p in settled if p.type == "expense")
    return income, expenses


def net_worth(
    accounts: List[BankAccount],
    loans: List[Loan],
    goals: List[FinancialGoal],
    expected_payments: List[ExpectedPayment],
) -> float:
    """
    Assets minus liabilities.

    Assets: positive balances, investment/emergency goal savings, unpaid receivables.
    Liabilities: loans, account debt, unpaid payables.
    """
    assets = sum(max(0.0, a.balance) for a in accounts if a.is_active)
    goal_assets = sum(
        g.current_amount for g in goals if g.category in ("investment", "emergency")
    )
    receivables = sum(p.amount for p in expected_payments if p.type == "income" and not p.is_paid)
    payables = sum(p.amount for p in expected_payments if p.type == "expense" and not p.is_paid)

    return (assets + goal_assets + receivables) - (total_debt(loans, accounts) + payables)
