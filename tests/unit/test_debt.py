"""Unit tests for the debt strategy simulator"""

import itertools
import pytest
from datetime import date, timedelta
from finrec.domain.debt import (
    PAYOFF_SENTINEL,
    build_obligations,
    calculate_payoff_time,
    calculate_total_interest,
    compare_strategies,
    generate_debt_recommendations,
    rank_obligations,
    resolve_debt_strategy,
    suggest_optimal_debt_strategy,
)
from finrec.domain.exceptions import UnknownStrategyError
from finrec.domain.models import (
    BankAccount,
    DailyEntry,
    Expense,
    Income,
    Loan,
    Obligation,
    ObligationKind,
    UserPreferences,
)


class TestPayoffTime:
    """Tests for amortization math"""

    def test_known_amortization(self):
        """1000 at 2%/month paying 100 takes 12 months"""
        assert calculate_payoff_time(1000, 100, 2) == 12

    @pytest.mark.parametrize(
        "balance, payment, rate",
        [
            (1000, 20, 2),  # payment equals the monthly interest
            (1000, 10, 2),  # payment below the monthly interest
            (5000, 0, 1),
        ],
    )
    def test_non_amortizing_returns_sentinel(self, balance, payment, rate):
        assert calculate_payoff_time(balance, payment, rate) == PAYOFF_SENTINEL

    @pytest.mark.parametrize(
        "balance, payment, rate, expected",
        [
            (5000, 250, 2, 26),
            (5000, 150, 2, 56),
            (200, 300, 5, 1),
            (1200, 100, 0, 12),
            (0, 100, 2, 0),
        ],
    )
    def test_finite_payoff(self, balance, payment, rate, expected):
        assert calculate_payoff_time(balance, payment, rate) == expected

    def test_total_interest_matches_payments_made(self):
        months = calculate_payoff_time(1000, 100, 2)

        assert calculate_total_interest(1000, 100, 2) == pytest.approx(100 * months - 1000)
        assert calculate_total_interest(1000, 100, 2) >= 0

    def test_total_interest_sentinel_is_punitive(self):
        assert calculate_total_interest(1000, 10, 2) == 10000


class TestRanking:
    """Tests for obligation ordering"""

    def test_avalanche_independent_of_input_order(self, today: date):
        loans = [
            Loan("l1", "Card", 2000, 1500, 3.0, 60),
            Loan("l2", "Store card", 900, 800, 3.0, 40),
            Loan("l3", "Car", 10000, 8000, 1.0, 300),
            Loan("l4", "Phone", 600, 800, 3.0, 40, due_date=today + timedelta(days=5)),
        ]
        expected = None
        for permutation in itertools.permutations(loans):
            ranked = rank_obligations(build_obligations(list(permutation)), "avalanche", today)
            ids = [o.id for o in ranked]
            expected = expected or ids
            assert ids == expected

        # Equal rate and balance: earlier due date wins, missing due dates last
        assert expected == ["l4", "l2", "l1", "l3"]

    def test_avalanche_puts_account_debt_above_cheaper_loans(self, today: date):
        loans = [Loan("l1", "Car", 10000, 8000, 1.5, 300), Loan("l2", "Card", 2000, 1500, 3.0, 60)]
        accounts = [BankAccount("a1", "Joint", -400)]

        ranked = rank_obligations(build_obligations(loans, accounts), "avalanche", today)

        assert ranked[0].kind is ObligationKind.ACCOUNT_DEBT
        assert [o.id for o in ranked[1:]] == ["l2", "l1"]

    def test_snowball_smallest_balance_first(self, today: date):
        loans = [
            Loan("l1", "Big", 9000, 9000, 4.0, 300),
            Loan("l2", "Small late", 500, 500, 1.0, 50, due_date=today + timedelta(days=20)),
            Loan("l3", "Small soon", 500, 500, 1.0, 50, due_date=today + timedelta(days=2)),
        ]

        ranked = rank_obligations(build_obligations(loans), "snowball", today)

        assert [o.id for o in ranked] == ["l3", "l2", "l1"]

    def test_hybrid_weighs_balance_and_due_date(self, today: date):
        loans = [
            Loan("l1", "Costly", 5000, 5000, 4.0, 250, due_date=today + timedelta(days=60)),
            Loan("l2", "Due now", 500, 500, 1.0, 50, due_date=today),
        ]

        ranked = rank_obligations(build_obligations(loans), "hybrid", today)

        assert [o.id for o in ranked] == ["l2", "l1"]

    def test_hybrid_tolerates_zero_balance(self, today: date):
        obligations = [
            Obligation("o_card", "Card", ObligationKind.LOAN, 500, 4.0, 50),
            Obligation("o_settled", "Settled", ObligationKind.LOAN, 0, 2.0, 0),
        ]

        ranked = rank_obligations(obligations, "hybrid", today)

        assert [o.id for o in ranked] == ["o_settled", "o_card"]

    def test_unknown_strategy_raises(self, today: date):
        with pytest.raises(UnknownStrategyError):
            rank_obligations([], "lottery", today)


class TestRecommendations:
    """Tests for the payoff plan"""

    def test_extra_payment_goes_to_top_obligation(self, today: date):
        """5000 at 2% with 150 minimum and 100 extra"""
        loan = Loan("l1", "Personal", 6000, 5000, 2.0, 150)

        plan = generate_debt_recommendations([loan], 100, "avalanche", today=today)
        baseline = generate_debt_recommendations([loan], 0, "avalanche", today=today)

        assert plan[0].suggested_payment == 250
        assert plan[0].extra_payment == 100
        assert plan[0].payoff_months == 26
        assert baseline[0].payoff_months == 56
        assert plan[0].payoff_months < baseline[0].payoff_months

    def test_greedy_extra_only_to_first(self, today: date):
        loans = [Loan("l1", "Card", 2000, 1500, 3.0, 60), Loan("l2", "Car", 10000, 8000, 1.0, 300)]

        plan = generate_debt_recommendations(loans, 200, "avalanche", today=today)

        assert [r.priority for r in plan] == [1, 2]
        assert plan[0].suggested_payment == 260
        assert plan[1].extra_payment == 0
        assert plan[1].suggested_payment == plan[1].minimum_payment
        assert [r.urgency_score for r in plan] == [100, 95]

    def test_monthly_interest_reported(self, today: date):
        plan = generate_debt_recommendations([Loan("l1", "Card", 2000, 1500, 3.0, 60)], 0, "avalanche", today=today)

        assert plan[0].monthly_interest == 45

    def test_debt_free_plan_is_empty(self, today: date):
        accounts = [BankAccount("a1", "Checking", 1500)]
        loans = [Loan("l1", "Paid off", 1000, 0, 2.0, 50)]

        assert generate_debt_recommendations(loans, 100, "avalanche", accounts, today=today) == []

    def test_account_debt_row(self, today: date):
        accounts = [BankAccount("a1", "Joint", -200, has_overdraft=True, overdraft_limit=500, overdraft_used=100)]

        plan = generate_debt_recommendations([], 0, "snowball", accounts, today=today)

        assert len(plan) == 1
        assert plan[0].kind is ObligationKind.ACCOUNT_DEBT
        assert plan[0].name == "Joint Account"
        assert plan[0].balance == 300
        assert plan[0].minimum_payment == 30
        assert plan[0].reason.startswith("Account debt")

    def test_overdue_loan_projects_penalty_fees(self, today: date):
        loan = Loan(
            "l1", "Late", 1000, 1000, 2.0, 100,
            due_date=today - timedelta(days=2), penalty_rate=2.0, other_charges=50,
        )

        plan = generate_debt_recommendations([loan], 0, "avalanche", today=today)

        assert plan[0].projected_fees == 70

    def test_non_amortizing_loan_reports_sentinel(self, today: date):
        loan = Loan("l1", "Trap", 1000, 1000, 5.0, 40)

        plan = generate_debt_recommendations([loan], 0, "avalanche", today=today)

        assert plan[0].payoff_months == PAYOFF_SENTINEL
        assert plan[0].total_interest == 10000

    def test_compare_strategies(self, today: date):
        loans = [Loan("l1", "Card", 2000, 1500, 3.0, 60), Loan("l2", "Small", 400, 300, 1.0, 30)]

        comparison = compare_strategies(loans, 100, today=today)

        assert [c.strategy for c in comparison] == ["avalanche", "snowball", "hybrid"]
        assert comparison[0].first_target == "Card"
        assert comparison[1].first_target == "Small"

    def test_compare_strategies_debt_free(self, today: date):
        comparison = compare_strategies([], 100, today=today)

        assert all(c.longest_payoff_months == 0 and c.first_target is None for c in comparison)


class TestStrategySuggestion:
    """Tests for choosing a strategy from the user's situation"""

    @pytest.fixture
    def engaged_entries(self, today: date):
        return [DailyEntry(f"d{i}", today - timedelta(days=i), income=10) for i in range(12)]

    def test_no_loans_defaults_to_avalanche(self):
        assert suggest_optimal_debt_strategy([], [], [], []) == "avalanche"

    def test_low_engagement_prefers_snowball(self):
        loans = [Loan("l1", "Car", 10000, 10000, 20.0, 200)]
        incomes = [Income("i1", "Salary", 5000)]

        assert suggest_optimal_debt_strategy(loans, incomes, [], []) == "snowball"

    def test_high_interest_prefers_avalanche(self, engaged_entries):
        loans = [Loan("l1", "Car", 10000, 10000, 20.0, 200)]
        incomes = [Income("i1", "Salary", 5000)]
        expenses = [Expense("e1", "Living", 1000)]

        assert suggest_optimal_debt_strategy(loans, incomes, expenses, engaged_entries) == "avalanche"

    def test_moderate_rates_prefer_hybrid(self, engaged_entries):
        loans = [Loan("l1", "Car", 10000, 10000, 2.0, 200)]
        incomes = [Income("i1", "Salary", 5000)]
        expenses = [Expense("e1", "Living", 1000)]

        assert suggest_optimal_debt_strategy(loans, incomes, expenses, engaged_entries) == "hybrid"

    def test_resolve_uses_preference_unless_auto(self):
        loans = [Loan("l1", "Car", 10000, 10000, 20.0, 200)]

        assert resolve_debt_strategy(UserPreferences(debt_strategy="hybrid"), loans, [], [], []) == "hybrid"
        auto = UserPreferences(debt_strategy="hybrid", auto_suggest_strategy=True)
        assert resolve_debt_strategy(auto, loans, [], [], []) == "snowball"

    def test_resolve_rejects_unknown_preference(self):
        with pytest.raises(UnknownStrategyError):
            resolve_debt_strategy(UserPreferences(debt_strategy="lottery"), [], [], [], [])
