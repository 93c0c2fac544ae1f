"""Audited calculators for the mortgage and debt payoff screens.

This module provides two calculators:
1. MortgageCalculator - payment breakdown, amortization and affordability
2. DebtPayoffCalculator - budget allocation and payoff projections across cards

Both wrap the pure engine functions with configuration, optional input
validation and a step-by-step audit log, so every figure shown to a user
can be traced back to its inputs.
"""

from decimal import Decimal
from typing import Optional, Union

import structlog

from .allocation import (
    calculate_optimal_payment_distribution,
    order_by_strategy,
    resolve_strategy,
)
from .config import EngineConfig
from .credit import (
    calculate_minimum_payment,
    calculate_payoff_time,
    generate_payment_schedule,
    summarize_credit_cards,
)
from .exceptions import ValidationError
from .models import (
    AuditEntry,
    CreditCard,
    DebtPayoffPlan,
    MortgageAnalysis,
    MortgageInputs,
    PaymentScheduleEntry,
    PayoffResult,
    PayoffStrategy,
)
from .money import MONTHS_PER_YEAR, ZERO, Number, round_cents, to_decimal
from .mortgage import (
    calculate_affordable_house_price,
    calculate_mortgage,
    generate_amortization_schedule,
)
from .validation import (
    ensure_valid,
    validate_credit_card,
    validate_mortgage_inputs,
)

logger = structlog.get_logger()


class _AuditedCalculator:
    """Shared audit log handling."""

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize calculator with engine settings.

        Args:
            config: Engine settings (default: loaded from the environment)
        """
        self.config = config or EngineConfig()
        self._audit_log: list[AuditEntry] = []
        self._warnings: list[str] = []

    @property
    def audit_log(self) -> list[AuditEntry]:
        """Audit entries from the most recent call."""
        return list(self._audit_log)

    def _reset(self) -> None:
        self._audit_log = []
        self._warnings = []

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.info(
            "calculation_step",
            calculator=type(self).__name__,
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )


class MortgageCalculator(_AuditedCalculator):
    """
    Calculate the cost of a fixed-rate mortgage.

    Produces the monthly breakdown (P&I, tax, insurance, PMI), lifetime
    totals and the amortization schedule for one set of inputs.
    """

    def calculate(
        self,
        inputs: MortgageInputs,
        *,
        include_schedule: bool = True,
    ) -> MortgageAnalysis:
        """
        Run the full mortgage analysis.

        Args:
            inputs: Mortgage inputs
            include_schedule: Also build the amortization schedule

        Returns:
            MortgageAnalysis with results, schedule and audit trail

        Raises:
            ValidationError: If input validation is enabled and fails
            DegenerateInputError: If the sale price is zero
        """
        self._reset()

        if self.config.validate_inputs:
            ensure_valid(validate_mortgage_inputs(inputs.model_dump()), "mortgage inputs")

        self._log_step(
            step="financed_amount",
            input_value=f"loan_amount={inputs.loan_amount} - down_payment={inputs.down_payment}",
            output_value=str(inputs.financed_amount),
            source="User provided",
        )

        results = calculate_mortgage(
            inputs, pmi_threshold_pct=self.config.pmi_threshold_percent
        )

        self._log_step(
            step="monthly_payment",
            input_value=(
                f"principal={results.principal}, rate={inputs.interest_rate}%, "
                f"term={inputs.loan_term_years}y"
            ),
            output_value=str(results.monthly_payment),
            source="Annuity formula",
        )
        self._log_step(
            step="monthly_escrow",
            input_value=f"tax={inputs.property_tax}/yr, insurance={inputs.home_insurance}/yr",
            output_value=f"tax={results.monthly_tax}, insurance={results.monthly_insurance}",
            source="Annual amounts / 12",
        )

        down_pct = round_cents(inputs.down_payment_percentage)
        self._log_step(
            step="monthly_pmi",
            input_value=f"down_payment={down_pct}%, pmi_rate={inputs.pmi_rate}%",
            output_value=str(results.monthly_pmi),
            source=f"PMI below {self.config.pmi_threshold_percent}% down",
        )
        if results.monthly_pmi > 0:
            self._warnings.append(
                f"Down payment of {down_pct}% is below "
                f"{self.config.pmi_threshold_percent}%; PMI of "
                f"{results.monthly_pmi}/month is included."
            )

        self._log_step(
            step="total_monthly_payment",
            input_value=(
                f"{results.monthly_payment} + {results.monthly_tax} + "
                f"{results.monthly_insurance} + {results.monthly_pmi}"
            ),
            output_value=str(results.total_monthly_payment),
            source="Calculated",
        )
        self._log_step(
            step="lifetime_totals",
            input_value=f"{inputs.loan_term_years * MONTHS_PER_YEAR} payments",
            output_value=f"total_interest={results.total_interest}, total_cost={results.total_cost}",
            source="Flat payment x term - principal",
        )

        schedule = []
        if include_schedule:
            schedule = generate_amortization_schedule(
                inputs.financed_amount, inputs.interest_rate, inputs.loan_term_years
            )
            schedule_interest = schedule[-1].total_interest_paid if schedule else ZERO
            self._log_step(
                step="amortization_schedule",
                input_value=f"{len(schedule)} months",
                output_value=f"total_interest_paid={schedule_interest}",
                source="Month-by-month schedule",
                notes=f"differs from flat total by {schedule_interest - results.total_interest}",
            )

        return MortgageAnalysis(
            inputs=inputs,
            results=results,
            schedule=schedule,
            audit_log=self._audit_log,
            warnings=self._warnings,
        )

    def affordability(
        self,
        monthly_budget: Number,
        down_payment_pct: Number,
        annual_rate_pct: Number,
        term_years: int,
        monthly_tax_insurance: Number = ZERO,
    ) -> Decimal:
        """Highest affordable sale price for a monthly budget."""
        self._reset()
        price = calculate_affordable_house_price(
            monthly_budget,
            down_payment_pct,
            annual_rate_pct,
            term_years,
            monthly_tax_insurance,
        )
        self._log_step(
            step="affordable_price",
            input_value=(
                f"budget={monthly_budget}, tax_insurance={monthly_tax_insurance}, "
                f"down={down_payment_pct}%, rate={annual_rate_pct}%, term={term_years}y"
            ),
            output_value=str(price),
            source="Inverse annuity formula",
        )
        return price


class DebtPayoffCalculator(_AuditedCalculator):
    """
    Plan monthly credit card payments.

    Splits a budget across cards using the avalanche or snowball ordering
    and projects how long each card takes to clear at its allocated payment.
    """

    def plan(
        self,
        cards: list[CreditCard],
        total_budget: Number,
        strategy: Optional[Union[PayoffStrategy, str]] = None,
    ) -> DebtPayoffPlan:
        """
        Build a payoff plan for one month's budget.

        Args:
            cards: Cards to pay
            total_budget: Amount available for card payments this month
            strategy: avalanche or snowball (default from configuration)

        Returns:
            DebtPayoffPlan with allocations, projections and audit trail

        Raises:
            ValidationError: If two cards share an id, a card fails validation
                (when enabled) or the strategy is unknown
        """
        self._reset()
        strategy = resolve_strategy(strategy or self.config.default_strategy)
        budget = max(to_decimal(total_budget), ZERO)

        seen_ids: set[str] = set()
        for card in cards:
            if card.id in seen_ids:
                raise ValidationError(
                    f"Duplicate card id: {card.id}",
                    field="id",
                    value=card.id,
                    constraint="unique card ids",
                )
            seen_ids.add(card.id)

        if self.config.validate_inputs:
            for card in cards:
                ensure_valid(validate_credit_card(card.model_dump()), f"credit card {card.id}")

        summary = summarize_credit_cards(cards)
        self._log_step(
            step="portfolio_summary",
            input_value=f"{summary.card_count} cards",
            output_value=(
                f"balance={summary.total_balance}, utilization={summary.total_utilization}%, "
                f"minimums={summary.total_minimum_payments}"
            ),
            source="Calculated",
        )

        allocations = calculate_optimal_payment_distribution(cards, budget, strategy)
        allocated = sum((a.payment for a in allocations), ZERO)
        self._log_step(
            step="payment_allocation",
            input_value=f"budget={budget}, strategy={strategy.value}",
            output_value=", ".join(f"{a.card_id}={a.payment}" for a in allocations),
            source=f"{strategy.value.title()} ordering",
        )

        if budget < summary.total_minimum_payments:
            self._warnings.append(
                f"Budget of {budget} does not cover minimum payments of "
                f"{summary.total_minimum_payments}; lower-priority cards are short."
            )

        projections: dict[str, PayoffResult] = {}
        for card, allocation in zip(order_by_strategy(cards, strategy), allocations):
            projection = self._project(card, allocation.payment)
            projections[allocation.card_id] = projection
            if projection.is_unreachable:
                self._warnings.append(
                    f"Card {card.id}: payment of {allocation.payment} does not cover "
                    f"monthly interest; the balance will not go down."
                )

        return DebtPayoffPlan(
            strategy=strategy,
            total_budget=budget,
            allocations=allocations,
            projections=projections,
            summary=summary,
            unallocated_budget=budget - allocated,
            audit_log=self._audit_log,
            warnings=self._warnings,
        )

    def payoff_projection(self, card: CreditCard, monthly_payment: Number) -> PayoffResult:
        """Project payoff of one card at a fixed monthly payment."""
        self._reset()
        return self._project(card, monthly_payment)

    def _project(self, card: CreditCard, monthly_payment: Number) -> PayoffResult:
        result = calculate_payoff_time(
            card.balance,
            card.interest_rate,
            monthly_payment,
            max_months=self.config.payoff_max_months,
            epsilon=self.config.payoff_epsilon,
        )
        self._log_step(
            step=f"payoff_{card.id}",
            input_value=f"balance={card.balance}, rate={card.interest_rate}%, payment={monthly_payment}",
            output_value=(
                "unreachable" if result.is_unreachable
                else f"months={result.months}, interest={result.total_interest}"
            ),
            source="Monthly simulation",
            notes=f"capped at {self.config.payoff_max_months} months" if result.capped else None,
        )
        return result

    def suggested_minimum(self, card: CreditCard) -> Decimal:
        """Issuer-style minimum payment for a card using the configured terms."""
        return calculate_minimum_payment(
            card.balance,
            self.config.minimum_payment_percent,
            self.config.minimum_payment_flat,
        )

    def payment_schedule(
        self,
        card: CreditCard,
        monthly_payment: Number,
        max_months: Optional[int] = None,
    ) -> list[PaymentScheduleEntry]:
        """Month-by-month schedule for one card (length from configuration by default)."""
        return generate_payment_schedule(
            card.balance,
            card.interest_rate,
            monthly_payment,
            self.config.schedule_max_months if max_months is None else max_months,
            epsilon=self.config.payoff_epsilon,
        )
