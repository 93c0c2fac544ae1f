#!/usr/bin/env python3
"""
Mortgage and Debt Payoff Demonstration

This script walks through both calculators:
1. Break down a mortgage payment and show the start of its schedule
2. Split a monthly budget across credit cards with avalanche and snowball
3. Compare paying the minimum with paying more on one card

Run: python examples/planning_demo.py
"""

from decimal import Decimal

from finplan_core import (
    CreditCard,
    DebtPayoffCalculator,
    MortgageCalculator,
    MortgageInputs,
    PayoffStrategy,
    calculate_interest_savings,
    configure_logging,
    load_config,
)


def create_sample_cards() -> list[CreditCard]:
    """Create a small card portfolio with realistic data."""
    return [
        CreditCard(
            id="travel",
            name="Travel Rewards",
            balance=Decimal("4200"),
            credit_limit=Decimal("10000"),
            minimum_payment=Decimal("105"),
            interest_rate=Decimal("24.99"),
        ),
        CreditCard(
            id="store",
            name="Store Card",
            balance=Decimal("650"),
            credit_limit=Decimal("1500"),
            minimum_payment=Decimal("25"),
            interest_rate=Decimal("29.99"),
        ),
        CreditCard(
            id="cashback",
            name="Cash Back",
            balance=Decimal("1800"),
            credit_limit=Decimal("6000"),
            minimum_payment=Decimal("45"),
            interest_rate=Decimal("19.49"),
        ),
    ]


def main():
    """Run the planning demonstration."""
    config = load_config(log_level="WARNING")
    configure_logging(config)

    print("=" * 70)
    print("FINPLAN CORE - Mortgage and Debt Payoff Demo")
    print("=" * 70)
    print()

    # Step 1: Mortgage
    print("Step 1: Mortgage breakdown...")
    inputs = MortgageInputs(
        loan_amount=Decimal("425000"),
        down_payment=Decimal("42500"),
        interest_rate=Decimal("6.75"),
        loan_term_years=30,
        property_tax=Decimal("5100"),
        home_insurance=Decimal("1500"),
        pmi_rate=Decimal("0.55"),
    )
    mortgage = MortgageCalculator(config.engine).calculate(inputs)
    results = mortgage.results
    print(f"  - Principal & Interest: ${results.monthly_payment:,.2f}")
    print(f"  - Property Tax: ${results.monthly_tax:,.2f}")
    print(f"  - Insurance: ${results.monthly_insurance:,.2f}")
    print(f"  - PMI: ${results.monthly_pmi:,.2f}")
    print(f"  - Total Monthly: ${results.total_monthly_payment:,.2f}")
    print(f"  - Total Interest: ${results.total_interest:,.2f}")
    for warning in mortgage.warnings:
        print(f"  ! {warning}")
    print()
    print("  Month   Principal    Interest      Balance")
    for entry in mortgage.schedule[:6]:
        print(
            f"  {entry.month:>5} {entry.principal_payment:>11,.2f} "
            f"{entry.interest_payment:>11,.2f} {entry.remaining_balance:>12,.2f}"
        )
    print()

    # Step 2: Debt payoff plans
    cards = create_sample_cards()
    budget = Decimal("600")
    calculator = DebtPayoffCalculator(config.engine)
    for strategy in PayoffStrategy:
        print(f"Step 2: {strategy.value.title()} plan for ${budget:,.2f}/month...")
        plan = calculator.plan(cards, budget, strategy)
        for allocation in plan.allocations:
            projection = plan.projections[allocation.card_id]
            outcome = (
                "never paid off" if projection.is_unreachable
                else f"{projection.months} months, ${projection.total_interest:,.2f} interest"
            )
            print(f"  - {allocation.card_id:<10} ${allocation.payment:>8,.2f}  ({outcome})")
        for warning in plan.warnings:
            print(f"  ! {warning}")
        print()

    # Step 3: Paying more than the minimum
    print("Step 3: Minimum versus $250/month on the travel card...")
    travel = cards[0]
    minimum = calculator.suggested_minimum(travel)
    savings = calculate_interest_savings(
        travel.balance, travel.interest_rate, minimum, Decimal("250")
    )
    print(f"  - Suggested minimum: ${minimum:,.2f}")
    print(f"  - Months at minimum: {savings.minimum_payoff_time}")
    print(f"  - Months at $250: {savings.proposed_payoff_time}")
    if savings.interest_saved is not None:
        print(f"  - Interest saved: ${savings.interest_saved:,.2f}")
        print(f"  - Months saved: {savings.time_saved}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
