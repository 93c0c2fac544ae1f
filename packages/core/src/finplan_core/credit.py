"""Credit card interest and payoff calculations.

Interest accrues monthly at annual % / 100 / 12 on the carried balance.
Payoff projections simulate one month at a time with a hard iteration cap
so a payment that barely outpaces interest cannot spin forever.
"""

from collections.abc import Iterable
from decimal import Decimal

import structlog

from .models import (
    CreditCard,
    CreditPortfolioSummary,
    InterestSavings,
    PaymentScheduleEntry,
    PayoffResult,
)
from .money import (
    HUNDRED,
    ZERO,
    Number,
    percent_to_monthly_rate,
    round_cents,
    to_decimal,
)

logger = structlog.get_logger()

# 50 years of monthly payments
PAYOFF_MAX_MONTHS = 600
PAYOFF_EPSILON = Decimal("0.01")
SCHEDULE_MAX_MONTHS = 120

MINIMUM_PAYMENT_PERCENT = Decimal("2")
MINIMUM_PAYMENT_FLAT = Decimal("25")


def calculate_monthly_interest(balance: Number, annual_rate_pct: Number) -> Decimal:
    """Interest charged on a balance for one month, rounded to the cent."""
    return round_cents(to_decimal(balance) * percent_to_monthly_rate(annual_rate_pct))


def calculate_minimum_payment(
    balance: Number,
    minimum_pct: Number = MINIMUM_PAYMENT_PERCENT,
    minimum_flat: Number = MINIMUM_PAYMENT_FLAT,
) -> Decimal:
    """Typical issuer minimum: a percentage of the balance or a flat floor.

    The payoff functions take an explicit payment and do not call this.
    """
    percentage_payment = to_decimal(balance) * (to_decimal(minimum_pct) / HUNDRED)
    return round_cents(max(percentage_payment, to_decimal(minimum_flat)))


def calculate_payoff_time(
    balance: Number,
    annual_rate_pct: Number,
    monthly_payment: Number,
    *,
    max_months: int = PAYOFF_MAX_MONTHS,
    epsilon: Number = PAYOFF_EPSILON,
) -> PayoffResult:
    """Simulate paying a fixed amount monthly until the balance clears.

    Args:
        balance: Starting balance
        annual_rate_pct: Annual percentage rate
        monthly_payment: Amount paid every month
        max_months: Iteration cap; reaching it with a balance still owed ends
            the simulation normally and sets ``capped``
        epsilon: Remaining balance treated as paid off

    Returns:
        PayoffResult with months, total interest and total paid. A zero
        payment or balance gives an all-zero result; a payment that does not
        exceed the first month's interest gives ``PayoffResult.unreachable()``.
    """
    balance = to_decimal(balance)
    monthly_payment = to_decimal(monthly_payment)
    epsilon = to_decimal(epsilon)

    if monthly_payment <= 0 or balance <= 0:
        return PayoffResult.empty()

    first_interest = calculate_monthly_interest(balance, annual_rate_pct)
    if monthly_payment <= first_interest:
        logger.debug(
            "payoff_unreachable",
            balance=str(balance),
            payment=str(monthly_payment),
            first_interest=str(first_interest),
        )
        return PayoffResult.unreachable()

    monthly_rate = percent_to_monthly_rate(annual_rate_pct)
    current_balance = balance
    total_interest = ZERO
    months = 0

    while current_balance > epsilon and months < max_months:
        interest_charge = current_balance * monthly_rate
        principal_payment = min(monthly_payment - interest_charge, current_balance)

        current_balance -= principal_payment
        total_interest += interest_charge
        months += 1

        if principal_payment <= 0:
            break

    capped = current_balance > epsilon and months >= max_months
    if capped:
        logger.debug(
            "payoff_simulation_capped",
            months=months,
            remaining_balance=str(round_cents(current_balance)),
        )

    total_interest = round_cents(total_interest)
    return PayoffResult(
        months=months,
        total_interest=total_interest,
        total_paid=round_cents(balance + total_interest),
        capped=capped,
    )


def generate_payment_schedule(
    balance: Number,
    annual_rate_pct: Number,
    monthly_payment: Number,
    max_months: int = SCHEDULE_MAX_MONTHS,
    *,
    epsilon: Number = PAYOFF_EPSILON,
) -> list[PaymentScheduleEntry]:
    """Month-by-month payoff schedule at a fixed payment.

    Stops after ``max_months`` entries, once the balance is at or below
    ``epsilon``, or as soon as a payment would not reduce principal.
    Months are 1-based offsets from today; calendar dates are the caller's.
    """
    current_balance = to_decimal(balance)
    monthly_payment = to_decimal(monthly_payment)
    epsilon = to_decimal(epsilon)
    monthly_rate = percent_to_monthly_rate(annual_rate_pct)

    schedule: list[PaymentScheduleEntry] = []
    for month in range(1, max_months + 1):
        if current_balance <= epsilon:
            break

        interest_charged = current_balance * monthly_rate
        principal_paid = min(monthly_payment - interest_charged, current_balance)
        if principal_paid <= 0:
            break

        current_balance -= principal_paid
        schedule.append(PaymentScheduleEntry(
            month=month,
            amount=round_cents(monthly_payment),
            interest_charged=round_cents(interest_charged),
            principal_paid=round_cents(principal_paid),
            remaining_balance=round_cents(current_balance),
        ))

    return schedule


def calculate_credit_utilization(balance: Number, credit_limit: Number) -> Decimal:
    """Balance as a percentage of the limit; 0 when there is no limit."""
    credit_limit = to_decimal(credit_limit)
    if credit_limit <= 0:
        return round_cents(ZERO)
    return round_cents(to_decimal(balance) / credit_limit * HUNDRED)


def calculate_total_credit_utilization(cards: Iterable[CreditCard]) -> Decimal:
    """Utilization of the combined balance against the combined limit."""
    cards = list(cards)
    total_balance = sum((card.balance for card in cards), ZERO)
    total_limit = sum((card.credit_limit for card in cards), ZERO)
    return calculate_credit_utilization(total_balance, total_limit)


def calculate_interest_savings(
    balance: Number,
    annual_rate_pct: Number,
    minimum_payment: Number,
    proposed_payment: Number,
    *,
    max_months: int = PAYOFF_MAX_MONTHS,
    epsilon: Number = PAYOFF_EPSILON,
) -> InterestSavings:
    """Compare paying the minimum with paying a proposed amount.

    Savings go negative when the proposal is below the minimum. When either
    scenario never pays off, the payoff times are reported as-is and both
    deltas are ``None``.
    """
    minimum = calculate_payoff_time(
        balance, annual_rate_pct, minimum_payment, max_months=max_months, epsilon=epsilon
    )
    proposed = calculate_payoff_time(
        balance, annual_rate_pct, proposed_payment, max_months=max_months, epsilon=epsilon
    )

    if minimum.is_unreachable or proposed.is_unreachable:
        interest_saved = None
        time_saved = None
    else:
        interest_saved = minimum.total_interest - proposed.total_interest
        time_saved = minimum.months - proposed.months

    return InterestSavings(
        minimum_payoff_time=minimum.months,
        proposed_payoff_time=proposed.months,
        interest_saved=interest_saved,
        time_saved=time_saved,
    )


def summarize_credit_cards(cards: Iterable[CreditCard]) -> CreditPortfolioSummary:
    """Totals across cards: balances, limits, minimums and this month's interest."""
    cards = list(cards)
    total_balance = sum((card.balance for card in cards), ZERO)
    total_limit = sum((card.credit_limit for card in cards), ZERO)
    total_minimums = sum((card.minimum_payment for card in cards), ZERO)
    total_interest = sum(
        (calculate_monthly_interest(card.balance, card.interest_rate) for card in cards),
        ZERO,
    )

    return CreditPortfolioSummary(
        card_count=len(cards),
        total_balance=round_cents(total_balance),
        total_credit_limit=round_cents(total_limit),
        total_utilization=calculate_credit_utilization(total_balance, total_limit),
        total_minimum_payments=round_cents(total_minimums),
        total_monthly_interest=round_cents(total_interest),
    )
