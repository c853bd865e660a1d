"""Pydantic schemas for API request validation and conversion into domain records"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from finrec.config import settings
from finrec.domain.models import (
    BankAccount,
    Bill,
    BusinessEntry,
    DailyEntry,
    DebtRecommendation,
    DEFAULT_CURRENCIES,
    ExpectedPayment,
    Expense,
    FinancialGoal,
    FinancialSnapshot,
    Income,
    Loan,
    StrategyComparison,
    UserPreferences,
)

Frequency = Literal["weekly", "biweekly", "monthly", "yearly"]


class IncomeSchema(BaseModel):
    id: str = Field(..., min_length=1)
    source: str
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: Frequency = "monthly"
    is_active: bool = True
    bank_account_id: Optional[str] = None

    def to_domain(self) -> Income:
        return Income(**self.model_dump())


class ExpenseSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: Frequency = "monthly"
    category: Literal["need", "want"] = "need"
    is_active: bool = True
    bank_account_id: Optional[str] = None

    def to_domain(self) -> Expense:
        return Expense(**self.model_dump())


class BillSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    due_date: date
    frequency: Frequency = "monthly"
    is_paid: bool = False
    category: str = "utilities"
    bank_account_id: Optional[str] = None

    def to_domain(self) -> Bill:
        return Bill(**self.model_dump())


class LoanSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    principal: float = Field(..., ge=0, allow_inf_nan=False)
    current_balance: float = Field(..., ge=0, allow_inf_nan=False)
    interest_rate: float = Field(..., ge=0, allow_inf_nan=False, description="Monthly percentage rate")
    minimum_payment: float = Field(..., ge=0, allow_inf_nan=False)
    due_date: Optional[date] = None
    penalty_rate: float = Field(0.0, ge=0, allow_inf_nan=False)
    other_charges: float = Field(0.0, ge=0, allow_inf_nan=False)

    def to_domain(self) -> Loan:
        return Loan(**self.model_dump())


class BankAccountSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    balance: float = Field(..., allow_inf_nan=False)
    type: str = "checking"
    is_active: bool = True
    has_overdraft: bool = False
    overdraft_limit: float = Field(0.0, ge=0, allow_inf_nan=False)
    overdraft_used: float = Field(0.0, ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def overdraft_within_limit(self) -> "BankAccountSchema":
        if self.overdraft_used > self.overdraft_limit:
            raise ValueError("overdraft_used cannot exceed overdraft_limit")
        return self

    def to_domain(self) -> BankAccount:
        return BankAccount(**self.model_dump())


class GoalSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    target_amount: float = Field(..., gt=0, allow_inf_nan=False)
    current_amount: float = Field(..., ge=0, allow_inf_nan=False)
    target_date: date
    priority: Literal["high", "medium", "low"] = "medium"
    category: str = "savings"
    created_at: Optional[date] = None

    def to_domain(self) -> FinancialGoal:
        return FinancialGoal(**self.model_dump())


class BusinessEntrySchema(BaseModel):
    id: str = Field(..., min_length=1)
    date: date
    revenue: float = Field(..., ge=0, allow_inf_nan=False)
    expenses: float = Field(..., ge=0, allow_inf_nan=False)

    def to_domain(self) -> BusinessEntry:
        return BusinessEntry(**self.model_dump())


class DailyEntrySchema(BaseModel):
    id: str = Field(..., min_length=1)
    date: date
    income: float = Field(0.0, ge=0, allow_inf_nan=False)
    expenses: float = Field(0.0, ge=0, allow_inf_nan=False)

    def to_domain(self) -> DailyEntry:
        return DailyEntry(**self.model_dump())


class ExpectedPaymentSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    type: Literal["income", "expense"]
    expected_date: date
    is_paid: bool = False

    def to_domain(self) -> ExpectedPayment:
        return ExpectedPayment(**self.model_dump())


class PreferencesSchema(BaseModel):
    strategy: Literal["debt-focused", "balanced", "savings-focused"] = "balanced"
    risk_tolerance: str = "moderate"
    emergency_fund_months: int = Field(default_factory=lambda: settings.default_emergency_fund_months, ge=1, le=24)
    debt_strategy: Literal["avalanche", "snowball", "hybrid"] = "avalanche"
    auto_suggest_strategy: bool = False
    currency: str = Field(default_factory=lambda: settings.default_currency)

    def to_domain(self) -> UserPreferences:
        data = self.model_dump()
        code = data.pop("currency").upper()
        return UserPreferences(
            **data,
            currency=DEFAULT_CURRENCIES.get(code, DEFAULT_CURRENCIES[settings.default_currency]),
        )


class SnapshotRequest(BaseModel):
    """Request body shared by every /v1 recommendation endpoint"""

    incomes: List[IncomeSchema] = []
    expenses: List[ExpenseSchema] = []
    loans: List[LoanSchema] = []
    bills: List[BillSchema] = []
    accounts: List[BankAccountSchema] = []
    goals: List[GoalSchema] = []
    business_entries: List[BusinessEntrySchema] = []
    daily_entries: List[DailyEntrySchema] = []
    expected_payments: List[ExpectedPaymentSchema] = []
    preferences: PreferencesSchema = Field(default_factory=PreferencesSchema)

    extra_payment: float = Field(
        default_factory=lambda: settings.default_extra_payment, ge=0, allow_inf_nan=False
    )
    as_of: Optional[date] = Field(None, description="Evaluation date; defaults to today")

    def to_snapshot(self) -> FinancialSnapshot:
        return FinancialSnapshot(
            incomes=[i.to_domain() for i in self.incomes],
            expenses=[e.to_domain() for e in self.expenses],
            loans=[l.to_domain() for l in self.loans],
            bills=[b.to_domain() for b in self.bills],
            accounts=[a.to_domain() for a in self.accounts],
            goals=[g.to_domain() for g in self.goals],
            business_entries=[b.to_domain() for b in self.business_entries],
            daily_entries=[d.to_domain() for d in self.daily_entries],
            expected_payments=[p.to_domain() for p in self.expected_payments],
            preferences=self.preferences.to_domain(),
        )


class DebtPlanResponse(BaseModel):
    """Response for POST /v1/debt-plan"""

    strategy: str
    total_debt: float
    debt_free: bool
    recommendations: List[DebtRecommendation]
    comparison: List[StrategyComparison]
