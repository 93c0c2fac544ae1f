"""Tests for the audited mortgage and debt payoff calculators."""

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from finplan_core import (
    CreditCard,
    DebtPayoffCalculator,
    DebtPayoffPlan,
    DegenerateInputError,
    EngineConfig,
    MortgageAnalysis,
    MortgageCalculator,
    MortgageInputs,
    PayoffStrategy,
    ValidationError,
    calculate_mortgage,
    calculate_payoff_time,
)


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine settings with the documented defaults."""
    return EngineConfig(
        payoff_max_months=600,
        schedule_max_months=120,
        default_strategy=PayoffStrategy.AVALANCHE,
        validate_inputs=True,
    )


@pytest.fixture
def mortgage_inputs() -> MortgageInputs:
    """15% down on a $400k home at 4.5% for 30 years."""
    return MortgageInputs(
        loan_amount=Decimal("400000"),
        down_payment=Decimal("60000"),
        interest_rate=Decimal("4.5"),
        loan_term_years=30,
        property_tax=Decimal("6000"),
        home_insurance=Decimal("1200"),
        pmi_rate=Decimal("0.5"),
    )


@pytest.fixture
def cards() -> list[CreditCard]:
    """Three valid cards."""
    return [
        CreditCard(
            id="A",
            name="Travel Card",
            balance=Decimal("3000"),
            credit_limit=Decimal("8000"),
            minimum_payment=Decimal("90"),
            interest_rate=Decimal("22"),
        ),
        CreditCard(
            id="B",
            name="Store Card",
            balance=Decimal("1000"),
            credit_limit=Decimal("2000"),
            minimum_payment=Decimal("30"),
            interest_rate=Decimal("15"),
        ),
        CreditCard(
            id="C",
            name="Cash Back",
            balance=Decimal("500"),
            credit_limit=Decimal("5000"),
            minimum_payment=Decimal("25"),
            interest_rate=Decimal("18"),
        ),
    ]


class TestMortgageCalculator:
    """Test suite for MortgageCalculator."""

    def test_calculate_returns_analysis(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """Calculator wraps the engine result without changing it."""
        calculator = MortgageCalculator(engine_config)
        analysis = calculator.calculate(mortgage_inputs)

        assert isinstance(analysis, MortgageAnalysis)
        assert analysis.inputs == mortgage_inputs
        assert analysis.results == calculate_mortgage(mortgage_inputs)
        assert len(analysis.schedule) == 360

    def test_audit_log_populated(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """Every step of the breakdown is recorded."""
        calculator = MortgageCalculator(engine_config)
        analysis = calculator.calculate(mortgage_inputs)

        steps = [entry.step for entry in analysis.audit_log]
        assert steps == [
            "financed_amount",
            "monthly_payment",
            "monthly_escrow",
            "monthly_pmi",
            "total_monthly_payment",
            "lifetime_totals",
            "amortization_schedule",
        ]
        assert calculator.audit_log == analysis.audit_log

    def test_pmi_warning(self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs):
        """A low down payment is called out."""
        analysis = MortgageCalculator(engine_config).calculate(mortgage_inputs)

        assert analysis.results.monthly_pmi > 0
        assert any("PMI" in warning for warning in analysis.warnings)

    def test_no_pmi_warning_at_twenty_percent(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """20% down has no PMI and no warning."""
        inputs = mortgage_inputs.model_copy(update={"down_payment": Decimal("80000")})
        analysis = MortgageCalculator(engine_config).calculate(inputs)

        assert analysis.results.monthly_pmi == 0
        assert analysis.warnings == []

    def test_without_schedule(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """Schedule can be skipped."""
        analysis = MortgageCalculator(engine_config).calculate(
            mortgage_inputs, include_schedule=False
        )

        assert analysis.schedule == []
        assert "amortization_schedule" not in [e.step for e in analysis.audit_log]

    def test_audit_log_reset_between_calls(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """Each call starts a fresh audit log."""
        calculator = MortgageCalculator(engine_config)
        first = calculator.calculate(mortgage_inputs)
        second = calculator.calculate(mortgage_inputs)

        assert len(first.audit_log) == len(second.audit_log)

    def test_invalid_inputs_rejected(self, engine_config: EngineConfig):
        """Out-of-range inputs fail validation before calculating."""
        inputs = MortgageInputs(
            loan_amount=Decimal("400000"),
            interest_rate=Decimal("45"),
            loan_term_years=30,
        )
        with pytest.raises(ValidationError) as exc_info:
            MortgageCalculator(engine_config).calculate(inputs)

        assert exc_info.value.field == "interest_rate"
        assert str(exc_info.value).startswith("Invalid mortgage inputs:")

    def test_validation_can_be_disabled(self):
        """With validation off, a zero rate is calculated rather than rejected."""
        inputs = MortgageInputs(
            loan_amount=Decimal("120000"),
            interest_rate=Decimal("0"),
            loan_term_years=10,
        )
        analysis = MortgageCalculator(EngineConfig(validate_inputs=False)).calculate(inputs)

        assert analysis.results.monthly_payment == Decimal("1000.00")
        assert analysis.results.total_interest == 0

    def test_zero_loan_amount_without_validation(self):
        """The engine still refuses a zero sale price."""
        inputs = MortgageInputs(
            loan_amount=Decimal("0"),
            interest_rate=Decimal("4.5"),
            loan_term_years=30,
        )
        with pytest.raises(DegenerateInputError):
            MortgageCalculator(EngineConfig(validate_inputs=False)).calculate(inputs)

    def test_custom_pmi_threshold(self, mortgage_inputs: MortgageInputs):
        """The PMI threshold comes from configuration."""
        calculator = MortgageCalculator(EngineConfig(pmi_threshold_percent=Decimal("10")))
        assert calculator.calculate(mortgage_inputs).results.monthly_pmi == 0

    def test_affordability(self, engine_config: EngineConfig):
        """Affordability is audited like the full calculation."""
        calculator = MortgageCalculator(engine_config)
        price = calculator.affordability(2000, 20, Decimal("4.5"), 30, 600)

        assert Decimal("340000") < price < Decimal("350000")
        assert [e.step for e in calculator.audit_log] == ["affordable_price"]

    def test_steps_are_logged(
        self, engine_config: EngineConfig, mortgage_inputs: MortgageInputs
    ):
        """Each audit step is also emitted as a structured log event."""
        with capture_logs() as logs:
            MortgageCalculator(engine_config).calculate(
                mortgage_inputs, include_schedule=False
            )

        steps = [log["step"] for log in logs if log["event"] == "calculation_step"]
        assert "monthly_payment" in steps
        assert all(
            log["calculator"] == "MortgageCalculator"
            for log in logs
            if log["event"] == "calculation_step"
        )


class TestDebtPayoffCalculator:
    """Test suite for DebtPayoffCalculator."""

    def test_plan_returns_plan(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """A plan covers every card."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"))

        assert isinstance(plan, DebtPayoffPlan)
        assert plan.strategy is PayoffStrategy.AVALANCHE
        assert [a.card_id for a in plan.allocations] == ["A", "C", "B"]
        assert set(plan.projections) == {"A", "B", "C"}
        assert plan.summary.card_count == 3

    def test_budget_fully_allocated(
        self, engine_config: EngineConfig, cards: list[CreditCard]
    ):
        """Allocated plus unallocated equals the budget."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"))

        assert plan.total_allocated == Decimal("500")
        assert plan.unallocated_budget == 0

    def test_unallocated_when_budget_exceeds_debt(
        self, engine_config: EngineConfig, cards: list[CreditCard]
    ):
        """Money left after clearing the top card is reported."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("10000"))

        assert plan.total_allocated == Decimal("3055")
        assert plan.unallocated_budget == Decimal("6945")
        # The first month's interest is still owed after paying the balance
        assert plan.projections["A"].months == 2

    def test_snowball_strategy(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """Strategy names are accepted as strings."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"), "snowball")

        assert plan.strategy is PayoffStrategy.SNOWBALL
        assert plan.allocations[0].card_id == "C"

    def test_default_strategy_from_config(self, cards: list[CreditCard]):
        """Configured default applies when no strategy is given."""
        calculator = DebtPayoffCalculator(
            EngineConfig(default_strategy=PayoffStrategy.SNOWBALL)
        )
        assert calculator.plan(cards, Decimal("500")).strategy is PayoffStrategy.SNOWBALL

    def test_unknown_strategy(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """Unknown strategies are rejected."""
        with pytest.raises(ValidationError):
            DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"), "random")

    def test_budget_below_minimums_warning(
        self, engine_config: EngineConfig, cards: list[CreditCard]
    ):
        """Short budgets are flagged."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("100"))

        assert any("minimum payments" in warning for warning in plan.warnings)

    def test_unreachable_projection_warning(self, engine_config: EngineConfig):
        """A payment below monthly interest is flagged, not raised."""
        card = CreditCard(
            id="big",
            name="Maxed Card",
            balance=Decimal("9000"),
            credit_limit=Decimal("10000"),
            minimum_payment=Decimal("100"),
            interest_rate=Decimal("24"),
        )
        plan = DebtPayoffCalculator(engine_config).plan([card], Decimal("100"))

        assert plan.projections["big"].is_unreachable
        assert any("does not cover monthly interest" in w for w in plan.warnings)

    def test_negative_budget(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """A negative budget is treated as nothing to spend."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("-20"))

        assert plan.total_budget == 0
        assert plan.total_allocated == 0
        assert plan.unallocated_budget == 0

    def test_invalid_card_rejected(self, engine_config: EngineConfig):
        """Cards are validated before planning."""
        card = CreditCard(id="x", balance=Decimal("100"), interest_rate=Decimal("20"))

        with pytest.raises(ValidationError) as exc_info:
            DebtPayoffCalculator(engine_config).plan([card], Decimal("50"))

        assert exc_info.value.field == "name"

    def test_validation_can_be_disabled(self):
        """Without validation, bare cards are planned."""
        card = CreditCard(id="x", balance=Decimal("100"), interest_rate=Decimal("20"))
        plan = DebtPayoffCalculator(EngineConfig(validate_inputs=False)).plan(
            [card], Decimal("50")
        )

        assert plan.allocations[0].payment == Decimal("50")

    def test_audit_log(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """Summary, allocation and one projection per card are recorded."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"))

        steps = [entry.step for entry in plan.audit_log]
        assert steps == [
            "portfolio_summary",
            "payment_allocation",
            "payoff_A",
            "payoff_C",
            "payoff_B",
        ]

    def test_payoff_projection_cap_noted(self, cards: list[CreditCard]):
        """Hitting the configured cap is noted in the audit log."""
        calculator = DebtPayoffCalculator(EngineConfig(payoff_max_months=12))
        result = calculator.payoff_projection(cards[0], Decimal("100"))

        assert result.months == 12
        assert calculator.audit_log[0].notes == "capped at 12 months"

    def test_payoff_projection(self, engine_config: EngineConfig, cards: list[CreditCard]):
        """Projection for a single card at a fixed payment."""
        calculator = DebtPayoffCalculator(engine_config)
        result = calculator.payoff_projection(cards[2], Decimal("100"))

        assert not result.is_unreachable
        assert result.months == 6
        assert len(calculator.audit_log) == 1
        assert calculator.audit_log[0].notes is None

    def test_suggested_minimum(self, cards: list[CreditCard]):
        """Minimum payment uses the configured percentage and floor."""
        assert DebtPayoffCalculator(EngineConfig()).suggested_minimum(cards[0]) == Decimal("60.00")
        raised_floor = DebtPayoffCalculator(EngineConfig(minimum_payment_flat=Decimal("75")))
        assert raised_floor.suggested_minimum(cards[0]) == Decimal("75.00")

    def test_payment_schedule_length(self, cards: list[CreditCard]):
        """Schedules default to the configured length."""
        calculator = DebtPayoffCalculator(EngineConfig(schedule_max_months=6))

        assert len(calculator.payment_schedule(cards[0], Decimal("100"))) == 6
        assert len(calculator.payment_schedule(cards[0], Decimal("100"), max_months=3)) == 3

    def test_payment_schedule_zero_months(self, cards: list[CreditCard]):
        """An explicit zero length is honoured rather than replaced by the default."""
        calculator = DebtPayoffCalculator(EngineConfig(schedule_max_months=6))
        assert calculator.payment_schedule(cards[0], Decimal("100"), max_months=0) == []

    def test_projection_uses_allocated_card(
        self, engine_config: EngineConfig, cards: list[CreditCard]
    ):
        """Each projection runs on the balance of the card that got the payment."""
        plan = DebtPayoffCalculator(engine_config).plan(cards, Decimal("500"))

        assert plan.projections["A"] == calculate_payoff_time(3000, 22, 445)
        assert plan.projections["C"] == calculate_payoff_time(500, 18, 25)
        assert plan.projections["B"] == calculate_payoff_time(1000, 15, 30)

    def test_duplicate_card_ids_rejected(self, engine_config: EngineConfig):
        """Two cards with one id cannot both be projected."""
        cards = [
            CreditCard(
                id="a",
                name="Main Card",
                balance=Decimal("1000"),
                credit_limit=Decimal("5000"),
                minimum_payment=Decimal("25"),
                interest_rate=Decimal("18"),
            ),
            CreditCard(
                id="a",
                name="Old Card",
                balance=Decimal("50"),
                credit_limit=Decimal("500"),
                minimum_payment=Decimal("25"),
                interest_rate=Decimal("12"),
            ),
        ]

        with pytest.raises(ValidationError) as exc_info:
            DebtPayoffCalculator(engine_config).plan(cards, Decimal("200"))

        assert exc_info.value.field == "id"
        assert exc_info.value.value == "a"

    def test_payoff_on_last_allowed_month_not_capped(self, cards: list[CreditCard]):
        """Clearing the balance exactly at the cap is not reported as capped."""
        calculator = DebtPayoffCalculator(EngineConfig(payoff_max_months=6))
        result = calculator.payoff_projection(cards[2], Decimal("100"))

        assert result.months == 6
        assert not result.capped
        assert calculator.audit_log[0].notes is None
