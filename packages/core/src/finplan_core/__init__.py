"""finplan-core - Mortgage, credit card and debt payoff calculations."""

__version__ = "0.1.0"

from .allocation import (
    calculate_debt_avalanche,
    calculate_debt_snowball,
    calculate_optimal_payment_distribution,
)
from .calculator import DebtPayoffCalculator, MortgageCalculator
from .config import EngineConfig, FinPlanConfig, configure_logging, load_config
from .credit import (
    calculate_credit_utilization,
    calculate_interest_savings,
    calculate_minimum_payment,
    calculate_monthly_interest,
    calculate_payoff_time,
    calculate_total_credit_utilization,
    generate_payment_schedule,
    summarize_credit_cards,
)
from .exceptions import (
    ConfigurationError,
    DegenerateInputError,
    FinPlanError,
    ValidationError,
)
from .models import (
    AmortizationEntry,
    AuditEntry,
    CreditCard,
    CreditPortfolioSummary,
    DebtPayoffPlan,
    InterestSavings,
    MortgageAnalysis,
    MortgageInputs,
    MortgageResults,
    PaymentAllocation,
    PaymentScheduleEntry,
    PayoffResult,
    PayoffStrategy,
)
from .money import round_cents, to_decimal
from .mortgage import (
    calculate_affordable_house_price,
    calculate_monthly_insurance,
    calculate_monthly_payment,
    calculate_monthly_property_tax,
    calculate_mortgage,
    calculate_pmi,
    calculate_total_interest,
    generate_amortization_schedule,
)
from .validation import (
    FieldError,
    FormValidation,
    validate_credit_card,
    validate_mortgage_inputs,
)

__all__ = [
    # Calculators
    "MortgageCalculator",
    "DebtPayoffCalculator",
    # Configuration
    "EngineConfig",
    "FinPlanConfig",
    "configure_logging",
    "load_config",
    # Mortgage
    "calculate_monthly_payment",
    "calculate_pmi",
    "calculate_monthly_property_tax",
    "calculate_monthly_insurance",
    "calculate_total_interest",
    "calculate_mortgage",
    "generate_amortization_schedule",
    "calculate_affordable_house_price",
    # Credit cards
    "calculate_monthly_interest",
    "calculate_minimum_payment",
    "calculate_payoff_time",
    "generate_payment_schedule",
    "calculate_credit_utilization",
    "calculate_total_credit_utilization",
    "calculate_interest_savings",
    "summarize_credit_cards",
    # Debt allocation
    "calculate_debt_avalanche",
    "calculate_debt_snowball",
    "calculate_optimal_payment_distribution",
    # Validation
    "validate_mortgage_inputs",
    "validate_credit_card",
    "FieldError",
    "FormValidation",
    # Models
    "MortgageInputs",
    "MortgageResults",
    "AmortizationEntry",
    "CreditCard",
    "PayoffResult",
    "PaymentScheduleEntry",
    "InterestSavings",
    "CreditPortfolioSummary",
    "PaymentAllocation",
    "PayoffStrategy",
    "AuditEntry",
    "MortgageAnalysis",
    "DebtPayoffPlan",
    # Money
    "round_cents",
    "to_decimal",
    # Exceptions
    "FinPlanError",
    "ValidationError",
    "DegenerateInputError",
    "ConfigurationError",
]
