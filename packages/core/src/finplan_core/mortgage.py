"""Fixed-rate mortgage calculations.

Payments use the standard annuity formula

    M = P * r(1+r)^n / ((1+r)^n - 1)

with r the monthly rate (annual % / 100 / 12) and n the number of monthly
payments. All functions are pure and return values rounded to the cent.
"""

from decimal import Decimal

from .exceptions import DegenerateInputError, ValidationError
from .models import (
    PMI_THRESHOLD_PERCENT,
    AmortizationEntry,
    MortgageInputs,
    MortgageResults,
)
from .money import (
    HUNDRED,
    MONTHS_PER_YEAR,
    ZERO,
    Number,
    percent_to_monthly_rate,
    round_cents,
    to_decimal,
)


def _payment_count(term_years: Number) -> int:
    """Number of monthly payments in a term.

    Whole-number floats and strings (``30.0``, ``"30"``) from form data are
    accepted; fractional terms are rejected.

    Raises:
        ValidationError: If the term is not a whole number of years
    """
    years = to_decimal(term_years)
    if years != years.to_integral_value():
        raise ValidationError(
            "Loan term must be a whole number of years",
            field="term_years",
            value=str(term_years),
            constraint="integer years",
        )
    return int(years) * MONTHS_PER_YEAR


def calculate_monthly_payment(
    principal: Number,
    annual_rate_pct: Number,
    term_years: Number,
) -> Decimal:
    """Calculate the monthly principal and interest payment.

    A zero rate repays the principal in equal installments.

    Args:
        principal: Amount financed
        annual_rate_pct: Annual interest rate in percent (4.5 for 4.5%)
        term_years: Loan term in whole years

    Returns:
        Monthly payment rounded to the cent
    """
    principal = to_decimal(principal)
    n = _payment_count(term_years)
    if principal == 0:
        return round_cents(ZERO)

    r = percent_to_monthly_rate(annual_rate_pct)
    if r == 0:
        return round_cents(principal / n)

    growth = (1 + r) ** n
    return round_cents(principal * (r * growth) / (growth - 1))


def calculate_pmi(financed_amount: Number, annual_pmi_rate_pct: Number) -> Decimal:
    """Monthly private mortgage insurance on the financed amount."""
    return round_cents(
        to_decimal(financed_amount) * (to_decimal(annual_pmi_rate_pct) / HUNDRED) / MONTHS_PER_YEAR
    )


def calculate_monthly_property_tax(annual_property_tax: Number) -> Decimal:
    """Monthly share of the annual property tax."""
    return round_cents(to_decimal(annual_property_tax) / MONTHS_PER_YEAR)


def calculate_monthly_insurance(annual_insurance: Number) -> Decimal:
    """Monthly share of the annual home insurance premium."""
    return round_cents(to_decimal(annual_insurance) / MONTHS_PER_YEAR)


def calculate_total_interest(
    monthly_payment: Number,
    term_years: Number,
    principal: Number,
) -> Decimal:
    """Total interest over the full term, from the flat monthly payment.

    This does not sum a schedule. Because the payment is rounded to the
    cent, it differs from the schedule's cumulative interest by at most half
    a cent per payment, compounded.
    """
    total_payments = to_decimal(monthly_payment) * _payment_count(term_years)
    return round_cents(total_payments - to_decimal(principal))


def calculate_mortgage(
    inputs: MortgageInputs,
    *,
    pmi_threshold_pct: Number = PMI_THRESHOLD_PERCENT,
) -> MortgageResults:
    """Calculate the full monthly and lifetime cost of a mortgage.

    PMI is charged only when the down payment is strictly below
    ``pmi_threshold_pct`` percent of the sale price.

    Args:
        inputs: Sale price, down payment, rate, term and annual costs
        pmi_threshold_pct: Down payment percentage at which PMI stops

    Returns:
        MortgageResults with every amount rounded to the cent

    Raises:
        DegenerateInputError: If loan_amount is zero, since the down payment
            percentage is undefined
    """
    if inputs.loan_amount <= 0:
        raise DegenerateInputError(
            "Loan amount must be greater than zero",
            field="loan_amount",
            value=str(inputs.loan_amount),
            constraint="loan_amount > 0",
        )

    principal = inputs.financed_amount
    term = inputs.loan_term_years

    monthly_payment = calculate_monthly_payment(principal, inputs.interest_rate, term)
    monthly_tax = calculate_monthly_property_tax(inputs.property_tax)
    monthly_insurance = calculate_monthly_insurance(inputs.home_insurance)

    if inputs.down_payment_percentage < to_decimal(pmi_threshold_pct):
        monthly_pmi = calculate_pmi(principal, inputs.pmi_rate)
    else:
        monthly_pmi = round_cents(ZERO)

    total_monthly_payment = monthly_payment + monthly_tax + monthly_insurance + monthly_pmi
    total_interest = calculate_total_interest(monthly_payment, term, principal)
    total_cost = principal + total_interest + (monthly_tax + monthly_insurance) * term * MONTHS_PER_YEAR

    return MortgageResults(
        monthly_payment=monthly_payment,
        principal=round_cents(principal),
        interest=total_interest,
        monthly_tax=monthly_tax,
        monthly_insurance=monthly_insurance,
        monthly_pmi=monthly_pmi,
        total_monthly_payment=round_cents(total_monthly_payment),
        total_interest=total_interest,
        total_cost=round_cents(total_cost),
    )


def generate_amortization_schedule(
    principal: Number,
    annual_rate_pct: Number,
    term_years: Number,
) -> list[AmortizationEntry]:
    """Build the month-by-month amortization schedule.

    Each month pays the fixed (rounded) monthly payment. Interest accrues on
    the unrounded balance; the final month settles whatever the payment
    rounding left over, so the last remaining balance is exactly zero.

    Returns:
        One entry per payment, ``term_years * 12`` in total
    """
    balance = to_decimal(principal)
    monthly_rate = percent_to_monthly_rate(annual_rate_pct)
    number_of_payments = _payment_count(term_years)
    payment = calculate_monthly_payment(balance, annual_rate_pct, term_years)

    schedule: list[AmortizationEntry] = []
    total_interest_paid = ZERO

    for month in range(1, number_of_payments + 1):
        interest_payment = balance * monthly_rate
        principal_payment = payment - interest_payment

        # Final payment absorbs rounding; earlier ones never overpay
        if month == number_of_payments or principal_payment > balance:
            principal_payment = balance

        balance -= principal_payment
        if balance < 0:
            balance = ZERO
        total_interest_paid += interest_payment

        schedule.append(AmortizationEntry(
            month=month,
            principal_payment=round_cents(principal_payment),
            interest_payment=round_cents(interest_payment),
            remaining_balance=round_cents(balance),
            total_interest_paid=round_cents(total_interest_paid),
        ))

    return schedule


def calculate_affordable_house_price(
    monthly_budget: Number,
    down_payment_pct: Number,
    annual_rate_pct: Number,
    term_years: Number,
    monthly_tax_insurance: Number = ZERO,
) -> Decimal:
    """Highest sale price whose P&I fits the budget after tax and insurance.

    Inverts the payment formula to find the largest loan the remaining
    budget can service, then grosses it up by the down payment share.

    Args:
        monthly_budget: Total monthly housing budget
        down_payment_pct: Down payment as a percentage of the price
        annual_rate_pct: Annual interest rate in percent
        term_years: Loan term in whole years
        monthly_tax_insurance: Monthly tax and insurance taken off the budget first

    Returns:
        Affordable price rounded to the cent, or 0 if nothing is left for P&I

    Raises:
        DegenerateInputError: If the down payment is 100% or more
    """
    available = to_decimal(monthly_budget) - to_decimal(monthly_tax_insurance)
    if available <= 0:
        return round_cents(ZERO)

    financed_share = 1 - to_decimal(down_payment_pct) / HUNDRED
    if financed_share <= 0:
        raise DegenerateInputError(
            "Down payment must be less than 100% of the price",
            field="down_payment_pct",
            value=str(down_payment_pct),
            constraint="down_payment_pct < 100",
        )

    r = percent_to_monthly_rate(annual_rate_pct)
    n = _payment_count(term_years)

    if r == 0:
        max_loan = available * n
    else:
        growth = (1 + r) ** n
        max_loan = available * (growth - 1) / (r * growth)

    return round_cents(max_loan / financed_share)
