"""Range validation for user-entered calculator inputs.

The engines trust their inputs apart from a few divide-by-zero guards.
This module is the layer in front of them: it checks form data against
the ranges the application accepts and reports every problem at once, so
a form can highlight all bad fields together.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, Field

from .exceptions import ValidationError
from .money import to_decimal


# Field: (minimum, maximum), inclusive
VALIDATION_RULES: dict[str, dict[str, tuple[Decimal, Decimal]]] = {
    "mortgage": {
        "loan_amount": (Decimal("1000"), Decimal("10000000")),
        "down_payment": (Decimal("0"), Decimal("5000000")),
        "interest_rate": (Decimal("0.01"), Decimal("30")),
        "loan_term_years": (Decimal("1"), Decimal("50")),
        "property_tax": (Decimal("0"), Decimal("100000")),
        "home_insurance": (Decimal("0"), Decimal("50000")),
        "pmi_rate": (Decimal("0"), Decimal("5")),
    },
    "credit_card": {
        "balance": (Decimal("0"), Decimal("1000000")),
        "credit_limit": (Decimal("100"), Decimal("1000000")),
        "minimum_payment": (Decimal("0"), Decimal("100000")),
        "interest_rate": (Decimal("0"), Decimal("50")),
    },
}


class FieldError(BaseModel):
    """A single field that failed validation."""
    field: str
    message: str


class FormValidation(BaseModel):
    """Outcome of validating one form."""
    is_valid: bool
    errors: list[FieldError] = Field(default_factory=list)

    def error_for(self, field: str) -> Optional[FieldError]:
        """Return the error for a field, if any."""
        return next((e for e in self.errors if e.field == field), None)


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None


def _money(amount: Decimal) -> str:
    return f"${amount:,.0f}" if amount == amount.to_integral_value() else f"${amount:,}"


def _check_range(
    data: Mapping[str, Any],
    field: str,
    label: str,
    bounds: tuple[Decimal, Decimal],
    errors: list[FieldError],
    *,
    required: bool,
    unit: str,
) -> None:
    """Append an error if a field is missing (when required) or out of range.

    Required fields treat zero like a missing value.
    """
    raw = data.get(field)
    if raw is None and not required:
        return

    value = _as_decimal(raw)
    low, high = bounds
    missing = value is None or (required and value == 0)
    if missing or value < low or value > high:
        if unit == "$":
            span = f"{_money(low)} and {_money(high)}"
        elif unit == "%":
            span = f"{low}% and {high}%"
        else:
            span = f"{low} and {high} {unit}"
        errors.append(FieldError(field=field, message=f"{label} must be between {span}"))


def validate_mortgage_inputs(data: Mapping[str, Any]) -> FormValidation:
    """Validate mortgage form data.

    Sale price, rate and term are required; the other fields are checked
    only when present. A down payment above the sale price is rejected.
    """
    rules = VALIDATION_RULES["mortgage"]
    errors: list[FieldError] = []

    _check_range(data, "loan_amount", "Loan amount", rules["loan_amount"], errors, required=True, unit="$")
    _check_range(data, "down_payment", "Down payment", rules["down_payment"], errors, required=False, unit="$")
    _check_range(data, "interest_rate", "Interest rate", rules["interest_rate"], errors, required=True, unit="%")
    _check_range(data, "loan_term_years", "Loan term", rules["loan_term_years"], errors, required=True, unit="years")
    _check_range(data, "property_tax", "Property tax", rules["property_tax"], errors, required=False, unit="$")
    _check_range(data, "home_insurance", "Home insurance", rules["home_insurance"], errors, required=False, unit="$")
    _check_range(data, "pmi_rate", "PMI rate", rules["pmi_rate"], errors, required=False, unit="%")

    loan_amount = _as_decimal(data.get("loan_amount"))
    down_payment = _as_decimal(data.get("down_payment"))
    if (
        loan_amount is not None
        and down_payment is not None
        and down_payment > loan_amount
        and not any(e.field == "down_payment" for e in errors)
    ):
        errors.append(FieldError(
            field="down_payment",
            message="Down payment cannot exceed the loan amount",
        ))

    return FormValidation(is_valid=not errors, errors=errors)


def validate_credit_card(data: Mapping[str, Any]) -> FormValidation:
    """Validate credit card form data.

    Name, credit limit and interest rate are required. A zero interest rate
    counts as missing, matching how the card form has always behaved.
    """
    rules = VALIDATION_RULES["credit_card"]
    errors: list[FieldError] = []

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError(field="name", message="Card name is required"))

    _check_range(data, "balance", "Balance", rules["balance"], errors, required=False, unit="$")
    _check_range(data, "credit_limit", "Credit limit", rules["credit_limit"], errors, required=True, unit="$")
    _check_range(data, "minimum_payment", "Minimum payment", rules["minimum_payment"], errors, required=False, unit="$")
    _check_range(data, "interest_rate", "Interest rate", rules["interest_rate"], errors, required=True, unit="%")

    return FormValidation(is_valid=not errors, errors=errors)


def ensure_valid(validation: FormValidation, entity: str) -> None:
    """Raise if a validation failed.

    Raises:
        ValidationError: Carrying the first failing field, with every error
            listed under ``details["errors"]``
    """
    if validation.is_valid:
        return

    first = validation.errors[0]
    raise ValidationError(
        f"Invalid {entity}: {first.message}",
        field=first.field,
        details={"errors": [e.model_dump() for e in validation.errors]},
    )
