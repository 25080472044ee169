"""Shared loan fixtures.

Canonical loans: CAD amounts, round-half-up, adjustment date 2014-01-01.
"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from amortize.engine.rates import monthly_payment
from amortize.models.loan import CompoundingPeriod, LoanTerms
from amortize.models.money import Money


def cad(value: str, rounding: str = ROUND_HALF_UP) -> Money:
    return Money.of(value, "CAD", rounding)


def _amortized_terms(
    amount: str,
    rate: str,
    term_in_months: int,
    amortization_period_months: int,
    compounding: CompoundingPeriod = CompoundingPeriod.SEMI_ANNUALLY,
    regular_payment: Money | None = None,
) -> LoanTerms:
    """Amortized terms paying the calculated minimum unless a payment is given."""
    terms = LoanTerms(
        loan_amount=cad(amount),
        regular_payment=cad("0"),
        start_date=date(2014, 1, 1),
        adjustment_date=date(2014, 1, 1),
        term_in_months=term_in_months,
        interest_rate=Decimal(rate),
        interest_only=False,
        amortization_period_months=amortization_period_months,
        compounding_periods_per_year=compounding,
    )
    payment = regular_payment if regular_payment is not None else monthly_payment(terms)
    return replace(terms, regular_payment=payment)


@pytest.fixture
def interest_only_terms() -> LoanTerms:
    """$100.00 at 12%, interest-only for a year: $1.00/month."""
    return LoanTerms(
        loan_amount=cad("100.00"),
        regular_payment=cad("1.00"),
        start_date=date(2014, 1, 10),
        adjustment_date=date(2014, 1, 15),
        term_in_months=12,
        interest_rate=Decimal("12.0"),
        amortization_period_months=300,
        interest_only=True,
    )


@pytest.fixture
def mortgage_terms() -> LoanTerms:
    """$200,000 at 8% semi-annual, 20yr amortization, 3yr term."""
    return _amortized_terms("200000.00", "8.0", 36, 240)


@pytest.fixture
def small_loan_terms() -> LoanTerms:
    """$20,000 at 10% semi-annual, 10yr amortization, 1yr term."""
    return _amortized_terms("20000.00", "10.0", 12, 120)


@pytest.fixture
def overpaid_loan_terms() -> LoanTerms:
    """$20,000 at 10% paying $5,000/month: paid off well before the 1yr term."""
    return _amortized_terms("20000.00", "10.0", 12, 120, regular_payment=cad("5000"))


@pytest.fixture
def make_amortized_terms():
    """Factory for amortized terms; see _amortized_terms."""
    return _amortized_terms
