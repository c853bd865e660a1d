"""Domain models - pure Python dataclasses representing financial records and derived results"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from finrec.domain.exceptions import InvalidFinancialDataError

# Monthly-equivalent multipliers per payment frequency
FREQUENCY_FACTORS = {
    "weekly": 4.33,
    "biweekly": 2.1667,
    "monthly": 1.0,
    "yearly": 1 / 12,
}


def _monthly(amount: float, frequency: str) -> float:
    return amount * FREQUENCY_FACTORS.get(frequency, 1.0)


@dataclass(frozen=True)
class Currency:
    """Display-only currency label"""

    code: str
    symbol: str
    name: str
    decimals: int = 2


DEFAULT_CURRENCIES = {
    "KES": Currency("KES", "KSh", "Kenyan Shilling", decimals=0),
    "USD": Currency("USD", "$", "US Dollar"),
    "EUR": Currency("EUR", "€", "Euro"),
    "GBP": Currency("GBP", "£", "British Pound"),
}


# --- Raw records -----------------------------------------------------------


@dataclass(frozen=True)
class Income:
    id: str
    source: str
    amount: float
    frequency: str = "monthly"
    is_active: bool = True
    bank_account_id: Optional[str] = None

    @property
    def monthly_amount(self) -> float:
        return _monthly(self.amount, self.frequency)


@dataclass(frozen=True)
class Expense:
    id: str
    name: str
    amount: float
    frequency: str = "monthly"
    category: str = "need"  # "need" or "want"
    is_active: bool = True
    bank_account_id: Optional[str] = None

    @property
    def monthly_amount(self) -> float:
        return _monthly(self.amount, self.frequency)


@dataclass(frozen=True)
class Bill:
    id: str
    name: str
    amount: float
    due_date: date
    frequency: str = "monthly"
    is_paid: bool = False
    category: str = "utilities"
    bank_account_id: Optional[str] = None

    @property
    def monthly_amount(self) -> float:
        return _monthly(self.amount, self.frequency)


@dataclass(frozen=True)
class Loan:
    """Loan with a monthly (not annual) percentage interest rate"""

    id: str
    name: str
    principal: float
    current_balance: float
    interest_rate: float
    minimum_payment: float
    due_date: Optional[date] = None
    penalty_rate: float = 0.0
    other_charges: float = 0.0


@dataclass(frozen=True)
class BankAccount:
    id: str
    name: str
    balance: float
    type: str = "checking"  # checking | savings | credit | investment
    is_active: bool = True
    has_overdraft: bool = False
    overdraft_limit: float = 0.0
    overdraft_used: float = 0.0

    @property
    def negative_balance(self) -> float:
        return max(0.0, -self.balance)

    @property
    def debt(self) -> float:
        """Negative balance plus drawn overdraft facility"""
        overdraft = self.overdraft_used if self.has_overdraft else 0.0
        return self.negative_balance + max(0.0, overdraft)


@dataclass(frozen=True)
class FinancialGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    priority: str = "medium"  # high | medium | low
    category: str = "savings"
    created_at: Optional[date] = None

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)


@dataclass(frozen=True)
class BusinessEntry:
    id: str
    date: date
    revenue: float
    expenses: float

    @property
    def profit(self) -> float:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class DailyEntry:
    id: str
    date: date
    income: float = 0.0
    expenses: float = 0.0


@dataclass(frozen=True)
class ExpectedPayment:
    """Pending receivable ("income") or payable ("expense")"""

    id: str
    name: str
    amount: float
    type: str
    expected_date: date
    is_paid: bool = False


@dataclass(frozen=True)
class UserPreferences:
    strategy: str = "balanced"  # debt-focused | balanced | savings-focused
    risk_tolerance: str = "moderate"
    emergency_fund_months: int = 6
    debt_strategy: str = "avalanche"  # avalanche | snowball | hybrid
    auto_suggest_strategy: bool = False
    currency: Currency = DEFAULT_CURRENCIES["KES"]


@dataclass(frozen=True)
class FinancialSnapshot:
    """Every record set the engine consumes in a single pass"""

    incomes: List[Income] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    loans: List[Loan] = field(default_factory=list)
    bills: List[Bill] = field(default_factory=list)
    accounts: List[BankAccount] = field(default_factory=list)
    goals: List[FinancialGoal] = field(default_factory=list)
    business_entries: List[BusinessEntry] = field(default_factory=list)
    daily_entries: List[DailyEntry] = field(default_factory=list)
    expected_payments: List[ExpectedPayment] = field(default_factory=list)
    preferences: UserPreferences = field(default_factory=UserPreferences)

    def is_empty(self) -> bool:
        return not (self.incomes or self.expenses or self.loans or self.accounts)

    def validate(self) -> None:
        """Reject non-finite amounts and negative loan balances"""
        amounts = (
            [("income", i.id, i.amount) for i in self.incomes]
            + [("expense", e.id, e.amount) for e in self.expenses]
            + [("bill", b.id, b.amount) for b in self.bills]
            + [("loan", l.id, l.current_balance) for l in self.loans]
            + [("loan", l.id, l.minimum_payment) for l in self.loans]
            + [("account", a.id, a.balance) for a in self.accounts]
            + [("goal", g.id, g.target_amount) for g in self.goals]
            + [("goal", g.id, g.current_amount) for g in self.goals]
        )
        for kind, record_id, value in amounts:
            if not math.isfinite(value):
                raise InvalidFinancialDataError(f"{kind} {record_id} has a non-finite amount")

        for loan in self.loans:
            if loan.current_balance < 0:
                raise InvalidFinancialDataError(f"loan {loan.id} has a negative balance")


# --- Derived results -------------------------------------------------------


class ObligationKind(str, Enum):
    LOAN = "loan"
    ACCOUNT_DEBT = "account_debt"


@dataclass(frozen=True)
class Obligation:
    """A loan or an overdrawn account, ranked on equal footing"""

    id: str
    name: str
    kind: ObligationKind
    balance: float
    interest_rate: float  # monthly percent
    minimum_payment: float
    due_date: Optional[date] = None
    penalty_rate: float = 0.0
    other_charges: float = 0.0
    # account_debt only
    negative_balance: float = 0.0
    overdraft_used: float = 0.0


@dataclass
class FinancialHealth:
    score: float
    level: str
    monthly_income: float  # salaried + business + daily + settled receivables
    monthly_expenses: float
    savings_rate: float  # percent of income
    debt_to_income_ratio: float  # percent of income
    emergency_fund_ratio: float
    net_worth: float
    business_contribution: float
    emergency_fund_gap: float
    recommendations: List[str]
    suggested_strategy: str


@dataclass
class HealthImprovementStep:
    id: str
    title: str
    description: str
    impact: str  # high | medium | low
    difficulty: str  # easy | medium | hard
    estimated_timeframe: str
    potential_score_increase: int
    category: str


@dataclass
class DebtRecommendation:
    obligation_id: str
    name: str
    kind: ObligationKind
    strategy: str
    priority: int
    reason: str
    balance: float
    minimum_payment: float
    extra_payment: float
    suggested_payment: float
    urgency_score: int
    payoff_months: int
    monthly_interest: float
    total_interest: float
    projected_fees: float


@dataclass
class StrategyComparison:
    strategy: str
    total_interest: float
    longest_payoff_months: int
    first_target: Optional[str]


@dataclass
class PaymentSuggestion:
    id: str
    type: str  # loan | bill | goal
    name: str
    amount: float
    priority: int
    urgency: str  # critical | high | medium | low
    reason: str
    due_date: Optional[date] = None
    completed: bool = False


@dataclass
class NextPayment:
    target_id: str
    name: str
    amount: float
    reason: str


@dataclass
class AllocationBucket:
    name: str  # debt | emergency_fund | goals | discretionary
    percentage: int
    amount_cents: int

    @property
    def amount(self) -> float:
        return self.amount_cents / 100


@dataclass
class SpendingAllowance:
    """Wants budget under the 50/30/20 rule"""

    allowed_wants_spending: float
    current_wants_spending: float
    remaining_wants_allowance: float
    can_spend: bool
    recommendations: List[str]
    restrictions: List[str]


@dataclass
class GoalContribution:
    goal_id: str
    name: str
    amount_cents: int


@dataclass
class AutoAllocation:
    strategy: str
    total_income: float
    total_expenses: float
    minimum_debt_payments: float
    business_profit: float
    surplus: float
    is_deficit: bool
    deficit: float
    buckets: List[AllocationBucket]
    goal_contributions: List[GoalContribution]
    recommendations: List[str]

    def bucket(self, name: str) -> AllocationBucket:
        return next(b for b in self.buckets if b.name == name)

    @property
    def total_allocated_cents(self) -> int:
        return sum(b.amount_cents for b in self.buckets)


@dataclass
class GoalMilestone:
    percentage: int
    amount: float
    estimated_date: date
    achieved: bool
    achieved_date: Optional[date] = None


@dataclass
class GoalForecast:
    goal_id: str
    goal_name: str
    months_remaining: int
    available_for_goals: float
    monthly_contribution_needed: float
    probability_of_success: int
    projected_completion_date: date
    milestones: List[GoalMilestone]
    recommended_adjustments: List[str]


@dataclass
class GoalProgress:
    goal_id: str
    goal_name: str
    days_remaining: int
    months_remaining: int
    progress_percentage: float
    monthly_required: float
    is_on_track: bool
    status: str  # ahead | on-track | behind | at-risk


@dataclass
class EmergencyPreparedness:
    score: int
    level: str
    emergency_fund_months: float
    liquid_assets: float
    debt_to_income_ratio: float
    income_stability: float
    emergency_fund_gap: float
    recommendations: List[str]


@dataclass
class RecommendationReport:
    """Output of a full engine pass"""

    as_of: date
    total_debt: float
    debt_free: bool
    debt_strategy: str
    financial_health: FinancialHealth
    debt_plan: List[DebtRecommendation]
    allocation: AutoAllocation
    payment_suggestions: List[PaymentSuggestion]
    goal_forecasts: List[GoalForecast]
    emergency_preparedness: EmergencyPreparedness
    next_payment: Optional[NextPayment]
    spending_allowance: SpendingAllowance
    improvement_steps: List[HealthImprovementStep]
