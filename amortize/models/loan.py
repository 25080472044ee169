from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from amortize.models.money import Money


class InvalidLoanTermsError(ValueError):
    """Loan terms that no schedule can be generated from."""


class CompoundingPeriod(Enum):
    """How often a nominal annual rate compounds. Value = periods per year."""
    MONTHLY = 12        # US convention
    SEMI_ANNUALLY = 2   # Canadian fixed-rate mortgages
    ANNUALLY = 1


@dataclass(frozen=True)
class LoanTerms:
    loan_amount: Money
    regular_payment: Money  # Requested monthly payment; surplus over the minimum goes to principal
    start_date: date
    adjustment_date: date  # Amortization counts from here (may align to a billing cycle)
    term_in_months: int  # Schedule stops here; any remaining balance is due
    interest_rate: Decimal  # Nominal annual, percent (8.0 = 8%)
    amortization_period_months: int  # Months to reach zero balance at the minimum payment
    interest_only: bool = False
    compounding_periods_per_year: int | CompoundingPeriod = CompoundingPeriod.MONTHLY

    def __post_init__(self):
        if isinstance(self.compounding_periods_per_year, CompoundingPeriod):
            object.__setattr__(
                self, "compounding_periods_per_year", self.compounding_periods_per_year.value
            )

    @property
    def currency(self) -> str:
        return self.loan_amount.currency

    @property
    def rounding(self) -> str:
        return self.loan_amount.rounding


@dataclass(frozen=True)
class ScheduledPayment:
    """One line of an amortization schedule."""
    payment_number: int  # 1-based
    payment_date: date
    interest: Money
    principal: Money
    balance: Money  # Remaining after this payment

    @property
    def payment(self) -> Money:
        return self.interest + self.principal
