"""Value records passed into and returned from the calculation engines.

Every record is an immutable pydantic model. The engines never keep a
reference to a record after returning, so callers own everything they
receive and can serialize it with ``model_dump()`` for storage.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from .money import HUNDRED, ZERO, to_decimal

PMI_THRESHOLD_PERCENT = Decimal("20")


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class PayoffStrategy(str, Enum):
    """Ordering used to prioritize debts when splitting a payment budget."""
    AVALANCHE = "avalanche"  # Highest interest rate first
    SNOWBALL = "snowball"  # Smallest balance first


# =============================================================================
# MORTGAGE
# =============================================================================

class MortgageInputs(BaseModel):
    """Inputs for a fixed-rate mortgage calculation.

    ``loan_amount`` is the sale price; the financed principal is
    ``loan_amount - down_payment``. Keeping the down payment at or below the
    sale price is the caller's job (see ``validation.validate_mortgage_inputs``).
    """

    model_config = {"frozen": True}

    loan_amount: Decimal = Field(ge=0, description="Sale price of the home")
    down_payment: Decimal = Field(default=ZERO, ge=0)
    interest_rate: Decimal = Field(ge=0, description="Annual interest rate in percent")
    loan_term_years: int = Field(gt=0)
    property_tax: Decimal = Field(default=ZERO, ge=0, description="Annual property tax")
    home_insurance: Decimal = Field(default=ZERO, ge=0, description="Annual home insurance")
    pmi_rate: Decimal = Field(
        default=ZERO,
        ge=0,
        description="Annual PMI rate in percent, applied to the financed amount",
    )

    @field_validator(
        "loan_amount",
        "down_payment",
        "interest_rate",
        "property_tax",
        "home_insurance",
        mode="before",
    )
    @classmethod
    def coerce_to_decimal(cls, v):
        """Coerce floats and strings to Decimal without binary noise."""
        if isinstance(v, (float, str)):
            return to_decimal(v)
        return v

    @field_validator("pmi_rate", mode="before")
    @classmethod
    def default_missing_pmi(cls, v):
        """A missing PMI rate means no PMI."""
        if v is None:
            return ZERO
        if isinstance(v, (float, str)):
            return to_decimal(v)
        return v

    @property
    def financed_amount(self) -> Decimal:
        """Amount borrowed after the down payment."""
        return self.loan_amount - self.down_payment

    @property
    def down_payment_percentage(self) -> Decimal:
        """Down payment as a percentage of the sale price (0 for no price)."""
        if self.loan_amount <= 0:
            return ZERO
        return self.down_payment / self.loan_amount * HUNDRED

    @property
    def loan_to_value_ratio(self) -> Decimal:
        """Financed amount as a percentage of the sale price (0 for no price)."""
        if self.loan_amount <= 0:
            return ZERO
        return self.financed_amount / self.loan_amount * HUNDRED

    @property
    def needs_pmi(self) -> bool:
        return self.down_payment_percentage < PMI_THRESHOLD_PERCENT


class MortgageResults(BaseModel):
    """Monthly and lifetime cost breakdown of a mortgage.

    ``interest`` duplicates ``total_interest``; both are kept because
    stored calculations use either name.
    """

    model_config = {"frozen": True}

    monthly_payment: Decimal  # Principal and interest only
    principal: Decimal
    interest: Decimal
    monthly_tax: Decimal
    monthly_insurance: Decimal
    monthly_pmi: Decimal
    total_monthly_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal


class AmortizationEntry(BaseModel):
    """One month of an amortization schedule."""

    model_config = {"frozen": True}

    month: int = Field(ge=1)
    principal_payment: Decimal
    interest_payment: Decimal
    remaining_balance: Decimal = Field(ge=0)
    total_interest_paid: Decimal


# =============================================================================
# CREDIT CARDS
# =============================================================================

class CreditCard(BaseModel):
    """The parts of a credit card the engines care about.

    Due dates and payment history belong to the caller; ``id`` is opaque
    and only echoed back in allocations.
    """

    model_config = {"frozen": True}

    id: str
    name: str = ""
    balance: Decimal = Field(ge=0)
    credit_limit: Decimal = Field(default=ZERO, ge=0)
    minimum_payment: Decimal = Field(default=ZERO, ge=0)
    interest_rate: Decimal = Field(ge=0, description="Annual percentage rate")

    @field_validator(
        "balance", "credit_limit", "minimum_payment", "interest_rate", mode="before"
    )
    @classmethod
    def coerce_to_decimal(cls, v):
        """Coerce floats and strings to Decimal without binary noise."""
        if isinstance(v, (float, str)):
            return to_decimal(v)
        return v


class PayoffResult(BaseModel):
    """Outcome of paying a fixed amount every month until a balance clears.

    When the payment never outpaces the interest, all three fields are
    ``None``. Check ``is_unreachable`` before formatting or summing.
    """

    model_config = {"frozen": True}

    months: Optional[int] = Field(default=None, ge=0)
    total_interest: Optional[Decimal] = None
    total_paid: Optional[Decimal] = None
    capped: bool = Field(
        default=False,
        description="Simulation stopped at the month cap with a balance still owed",
    )

    @classmethod
    def unreachable(cls) -> "PayoffResult":
        """The payment does not cover the interest; the debt never clears."""
        return cls(months=None, total_interest=None, total_paid=None)

    @classmethod
    def empty(cls) -> "PayoffResult":
        """Nothing to pay, or nothing being paid."""
        return cls(months=0, total_interest=ZERO, total_paid=ZERO)

    @computed_field
    @property
    def is_unreachable(self) -> bool:
        """True when the debt can never be paid off at this payment."""
        return self.months is None


class PaymentScheduleEntry(BaseModel):
    """One simulated month of a credit card payoff."""

    model_config = {"frozen": True}

    month: int = Field(ge=1)
    amount: Decimal
    interest_charged: Decimal
    principal_paid: Decimal
    remaining_balance: Decimal


class InterestSavings(BaseModel):
    """Comparison of paying the minimum against a proposed payment.

    Deltas are negative when the proposed payment is below the minimum, and
    ``None`` when either scenario is unreachable.
    """

    model_config = {"frozen": True}

    minimum_payoff_time: Optional[int]
    proposed_payoff_time: Optional[int]
    interest_saved: Optional[Decimal]
    time_saved: Optional[int]


class CreditPortfolioSummary(BaseModel):
    """Aggregate figures across a set of credit cards."""

    model_config = {"frozen": True}

    card_count: int = Field(ge=0)
    total_balance: Decimal
    total_credit_limit: Decimal
    total_utilization: Decimal = Field(description="Percent of combined limit in use")
    total_minimum_payments: Decimal
    total_monthly_interest: Decimal


class PaymentAllocation(BaseModel):
    """Share of a payment budget assigned to one card."""

    model_config = {"frozen": True}

    card_id: str
    payment: Decimal = Field(ge=0)


# =============================================================================
# CALCULATOR RESULTS
# =============================================================================

class AuditEntry(BaseModel):
    """Audit log entry for calculation transparency."""

    model_config = {"frozen": True}

    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class MortgageAnalysis(BaseModel):
    """Everything the mortgage screen shows for one set of inputs."""

    inputs: MortgageInputs
    results: MortgageResults
    schedule: list[AmortizationEntry] = Field(default_factory=list)
    audit_log: list[AuditEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=_utc_now)


class DebtPayoffPlan(BaseModel):
    """A month's payment split across cards plus where each card is headed."""

    strategy: PayoffStrategy
    total_budget: Decimal
    allocations: list[PaymentAllocation]
    projections: dict[str, PayoffResult] = Field(
        default_factory=dict,
        description="Payoff projection per card id at its allocated payment",
    )
    summary: CreditPortfolioSummary
    unallocated_budget: Decimal = Field(ge=0)
    audit_log: list[AuditEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=_utc_now)

    @computed_field
    @property
    def total_allocated(self) -> Decimal:
        """Sum of all card payments in this plan."""
        return sum((a.payment for a in self.allocations), ZERO)
