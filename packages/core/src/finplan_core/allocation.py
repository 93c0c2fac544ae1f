"""Splitting a monthly payment budget across credit cards.

Two orderings are supported: avalanche (highest rate first, least total
interest) and snowball (smallest balance first, quickest wins). The
distribution pays minimums in priority order, then sends whatever is left
to the top-priority card.
"""

from collections.abc import Iterable
from typing import Union

from .exceptions import ValidationError
from .models import CreditCard, PaymentAllocation, PayoffStrategy
from .money import ZERO, Number, to_decimal


def calculate_debt_avalanche(cards: Iterable[CreditCard]) -> list[CreditCard]:
    """Cards ordered by interest rate, highest first. Ties keep input order."""
    return sorted(cards, key=lambda card: card.interest_rate, reverse=True)


def calculate_debt_snowball(cards: Iterable[CreditCard]) -> list[CreditCard]:
    """Cards ordered by balance, smallest first. Ties keep input order."""
    return sorted(cards, key=lambda card: card.balance)


def resolve_strategy(strategy: Union[PayoffStrategy, str]) -> PayoffStrategy:
    """Turn a strategy name into a PayoffStrategy.

    Raises:
        ValidationError: If the strategy is not avalanche or snowball
    """
    try:
        return PayoffStrategy(strategy)
    except ValueError:
        raise ValidationError(
            f"Unknown payoff strategy: {strategy}",
            field="strategy",
            value=str(strategy),
            constraint="one of: avalanche, snowball",
        ) from None


def order_by_strategy(
    cards: Iterable[CreditCard],
    strategy: Union[PayoffStrategy, str],
) -> list[CreditCard]:
    """Order cards by payoff priority for the given strategy."""
    if resolve_strategy(strategy) is PayoffStrategy.AVALANCHE:
        return calculate_debt_avalanche(cards)
    return calculate_debt_snowball(cards)


def calculate_optimal_payment_distribution(
    cards: Iterable[CreditCard],
    total_budget: Number,
    strategy: Union[PayoffStrategy, str] = PayoffStrategy.AVALANCHE,
) -> list[PaymentAllocation]:
    """Allocate a payment budget across cards.

    1. In priority order, each card gets the smaller of its minimum payment,
       its balance and whatever budget is left. Later cards may get less
       than their minimum, or nothing, when the budget runs out.
    2. Any remaining budget goes to the first card in priority order, up
       to its balance.

    Args:
        cards: Cards to pay
        total_budget: Amount available this month; negative counts as zero
        strategy: ``avalanche`` or ``snowball``

    Returns:
        One allocation per card, in priority order. No payment exceeds its
        card's balance and the payments never sum past the budget.
    """
    ordered = order_by_strategy(cards, strategy)
    remaining = max(to_decimal(total_budget), ZERO)

    payments = []
    for card in ordered:
        payment = min(card.minimum_payment, remaining, card.balance)
        payments.append(payment)
        remaining -= payment

    if remaining > 0 and ordered:
        priority = ordered[0]
        extra = min(remaining, priority.balance - payments[0])
        payments[0] += extra

    return [
        PaymentAllocation(card_id=card.id, payment=payment)
        for card, payment in zip(ordered, payments)
    ]
