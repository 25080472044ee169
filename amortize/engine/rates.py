"""Interest rate and payment formulas.

Pure functions. No I/O. Float math is transient: raw payments come back
unrounded and only become exact when turned into Money.
"""

from decimal import Decimal

from amortize.models.loan import CompoundingPeriod, InvalidLoanTermsError, LoanTerms
from amortize.models.money import Money

PAYMENTS_PER_YEAR = 12  # Monthly payments only
DAYS_IN_A_YEAR = 365  # Per-diem year, leap or not


def period_rate(
    annual_percent: Decimal | float,
    compounding_periods_per_year: int | CompoundingPeriod,
) -> float:
    """Monthly-equivalent rate for a nominal annual rate.

    j = (1 + i / (c * 100)) ^ (c / 12) - 1

    where ``i`` is the nominal annual rate in percent and ``c`` the number of
    compounding periods per year. Compounding twelve times a year at ``j``
    yields the same effective annual rate as compounding ``c`` times at the
    nominal rate, so semi-annual (Canadian) and monthly (US) loans both get a
    rate per monthly payment.
    """
    if isinstance(compounding_periods_per_year, CompoundingPeriod):
        compounding_periods_per_year = compounding_periods_per_year.value
    if compounding_periods_per_year <= 0:
        raise InvalidLoanTermsError(
            f"Compounding periods per year must be positive, got {compounding_periods_per_year}"
        )
    c = compounding_periods_per_year
    return (1 + float(annual_percent) / (c * 100.0)) ** (c / 12.0) - 1


def interest_only_monthly_payment(
    amount: Money | Decimal | float, annual_percent: Decimal | float
) -> float:
    """Monthly interest on ``amount`` at a nominal annual percent. Unrounded."""
    if isinstance(amount, Money):
        amount = amount.amount
    return float(amount) * float(annual_percent) / 100.0 / 12.0


def amortized_monthly_payment(
    loan_amount: Money | Decimal | float,
    annual_percent: Decimal | float,
    compounding_periods_per_year: int | CompoundingPeriod,
    amortization_period_months: int,
) -> float:
    """Level monthly payment that retires the loan over the amortization period.

    payment = P * j / (1 - (1 + j) ^ (-n * y))

    with ``j`` from :func:`period_rate`, ``n`` = 12 payments a year and ``y``
    the amortization period in years. Unrounded.
    """
    if amortization_period_months <= 0:
        raise InvalidLoanTermsError(
            f"Amortization period must be positive, got {amortization_period_months} months"
        )
    if isinstance(loan_amount, Money):
        loan_amount = loan_amount.amount
    a = float(loan_amount)
    j = period_rate(annual_percent, compounding_periods_per_year)
    if j == 0:
        return a / amortization_period_months

    n = PAYMENTS_PER_YEAR
    y = amortization_period_months / 12.0
    return a * j / (1.0 - (j + 1.0) ** (-n * y))


def per_diem(amount: Money, annual_percent: Decimal | float) -> Money:
    """One day's interest on ``amount``, rounded to the currency.

    Always assumes a 365-day year, regardless of the actual year.
    """
    return amount * (float(annual_percent) * 0.01 / DAYS_IN_A_YEAR)


def adjustment_amount(amount: Money, annual_percent: Decimal | float, days: int) -> Money:
    """Interest for ``days`` days, charged as a whole number of per-diems.

    The per-diem is rounded before being multiplied out, so fractional units
    accumulate: a raw daily charge of $32.111 rounded up to $32.12 gives
    $321.20 over 10 days, not $321.11.
    """
    return per_diem(amount, annual_percent) * days


def monthly_payment(terms: LoanTerms) -> Money:
    """Minimum monthly payment for the terms, in the loan's currency and rounding."""
    if terms.interest_only:
        raw = interest_only_monthly_payment(terms.loan_amount, terms.interest_rate)
    else:
        raw = amortized_monthly_payment(
            terms.loan_amount,
            terms.interest_rate,
            terms.compounding_periods_per_year,
            terms.amortization_period_months,
        )
    return terms.loan_amount.with_amount(raw)
