"""Amortization schedule generation.

A schedule is a lazy, single-pass iterator of ScheduledPayment, one per
month from the adjustment date, ending at the term or at payoff, whichever
comes first. Two variants share state and helpers: interest-only and
amortized. No I/O.
"""

import logging
from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

from amortize.engine.rates import monthly_payment, period_rate
from amortize.models.loan import InvalidLoanTermsError, LoanTerms, ScheduledPayment
from amortize.models.money import Money

logger = logging.getLogger(__name__)


@dataclass
class _ScheduleState:
    """Mutable state owned by a single schedule iterator."""
    terms: LoanTerms
    calculated_payment: Money  # Theoretical minimum payment, rounded
    remaining_balance: Money
    zero: Money
    payment_number: int = 0  # Payments already emitted


def _validate(terms: LoanTerms) -> None:
    if terms.loan_amount.amount <= 0:
        raise InvalidLoanTermsError(f"Loan amount must be positive, got {terms.loan_amount}")
    if terms.term_in_months <= 0:
        raise InvalidLoanTermsError(f"Term must be positive, got {terms.term_in_months} months")
    if terms.interest_only:
        return
    if terms.amortization_period_months <= 0:
        raise InvalidLoanTermsError(
            f"Amortization period must be positive, got {terms.amortization_period_months} months"
        )
    if terms.compounding_periods_per_year <= 0:
        raise InvalidLoanTermsError(
            f"Compounding periods per year must be positive, got {terms.compounding_periods_per_year}"
        )
    if terms.interest_rate <= 0:
        raise InvalidLoanTermsError(f"Interest rate must be positive, got {terms.interest_rate}%")


def _new_state(terms: LoanTerms) -> _ScheduleState:
    _validate(terms)
    calculated = monthly_payment(terms)
    # Raises CurrencyMismatchError if the requested payment is in another currency
    if calculated > terms.regular_payment:
        raise InvalidLoanTermsError(
            f"Requested payment {terms.regular_payment} is below the calculated minimum {calculated}"
        )
    return _ScheduleState(
        terms=terms,
        calculated_payment=calculated,
        remaining_balance=terms.loan_amount,
        zero=Money.zero(terms.currency, terms.rounding),
    )


def _has_next(state: _ScheduleState) -> bool:
    return (
        state.payment_number < state.terms.term_in_months
        and state.remaining_balance > state.zero
    )


def _advance(state: _ScheduleState) -> date:
    """Count the next payment and return its date."""
    if not _has_next(state):
        raise StopIteration
    state.payment_number += 1
    return state.terms.adjustment_date + relativedelta(months=state.payment_number)


class InterestOnlySchedule:
    """Interest-only payments. By definition no principal is retired, so
    every payment is exactly the calculated interest and the requested
    regular payment is ignored.
    """

    def __init__(self, terms: LoanTerms):
        self._state = _new_state(terms)
        logger.debug(
            "Interest-only schedule: %s over %d months, %s/month",
            terms.loan_amount, terms.term_in_months, self._state.calculated_payment,
        )

    @property
    def calculated_payment(self) -> Money:
        return self._state.calculated_payment

    @property
    def periodic_payment(self) -> Money:
        return self._state.calculated_payment

    def has_next(self) -> bool:
        return _has_next(self._state)

    def __iter__(self):
        return self

    def __next__(self) -> ScheduledPayment:
        state = self._state
        payment_date = _advance(state)
        return ScheduledPayment(
            payment_number=state.payment_number,
            payment_date=payment_date,
            interest=state.calculated_payment,
            principal=state.zero,
            balance=state.terms.loan_amount,
        )


class AmortizedSchedule:
    """Level payments that retire principal.

    If the requested regular payment is above the calculated minimum, the
    surplus goes to principal every month.
    """

    def __init__(self, terms: LoanTerms):
        self._state = _new_state(terms)
        calculated = self._state.calculated_payment

        self._period_rate = period_rate(terms.interest_rate, terms.compounding_periods_per_year)
        if terms.regular_payment > calculated:
            self._periodic_payment = self._state.zero.with_amount(terms.regular_payment.amount)
        else:
            self._periodic_payment = calculated

        logger.debug(
            "Amortized schedule: %s at %s%% (j=%.10f), %s/month, %s extra principal/month",
            terms.loan_amount, terms.interest_rate, self._period_rate,
            self._periodic_payment, self._periodic_payment - calculated,
        )

    @property
    def calculated_payment(self) -> Money:
        return self._state.calculated_payment

    @property
    def periodic_payment(self) -> Money:
        return self._periodic_payment

    @property
    def period_rate(self) -> float:
        """Monthly-equivalent interest rate."""
        return self._period_rate

    def has_next(self) -> bool:
        return _has_next(self._state)

    def __iter__(self):
        return self

    def __next__(self) -> ScheduledPayment:
        state = self._state
        payment_date = _advance(state)

        # Interest is re-derived from the true balance every month
        balance = state.remaining_balance
        interest = state.zero.with_amount(float(balance.amount) * self._period_rate)

        # Whatever is not interest is principal; the last payment may be partial
        principal = self._periodic_payment - interest
        if principal > balance:
            principal = balance
        state.remaining_balance = balance - principal

        if (
            state.remaining_balance == state.zero
            and state.payment_number < state.terms.term_in_months
        ):
            logger.debug(
                "Loan paid off at payment %d of %d",
                state.payment_number, state.terms.term_in_months,
            )

        return ScheduledPayment(
            payment_number=state.payment_number,
            payment_date=payment_date,
            interest=interest,
            principal=principal,
            balance=state.remaining_balance,
        )


PaymentSchedule = InterestOnlySchedule | AmortizedSchedule


def payments(terms: LoanTerms) -> PaymentSchedule:
    """Lazy payment schedule for the terms.

    Raises InvalidLoanTermsError for terms no schedule can be built from,
    including a requested payment below the calculated minimum.
    """
    if terms.interest_only:
        return InterestOnlySchedule(terms)
    return AmortizedSchedule(terms)


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[ScheduledPayment]
    periodic_payment: Money
    total_interest: Money
    total_principal: Money
    final_balance: Money


def amortization_schedule(terms: LoanTerms) -> AmortizationSchedule:
    """Generate the full schedule eagerly, with totals."""
    schedule = payments(terms)
    rows = list(schedule)
    zero = Money.zero(terms.currency, terms.rounding)

    return AmortizationSchedule(
        payments=rows,
        periodic_payment=schedule.periodic_payment,
        total_interest=sum((p.interest for p in rows), zero),
        total_principal=sum((p.principal for p in rows), zero),
        final_balance=rows[-1].balance if rows else terms.loan_amount,
    )


def yearly_summary(schedule: AmortizationSchedule) -> list[dict]:
    """Aggregate a schedule by year of payments.

    Returns list of dicts with keys: year, principal, interest, debt_service, ending_balance
    """
    yearly: list[dict] = []
    if not schedule.payments:
        return yearly

    zero = schedule.final_balance.with_amount(0)
    year_principal = zero
    year_interest = zero
    year_debt_service = zero

    for p in schedule.payments:
        year_principal += p.principal
        year_interest += p.interest
        year_debt_service += p.payment

        if p.payment_number % 12 == 0 or p.payment_number == len(schedule.payments):
            yearly.append({
                "year": (p.payment_number - 1) // 12 + 1,
                "principal": year_principal,
                "interest": year_interest,
                "debt_service": year_debt_service,
                "ending_balance": p.balance,
            })
            year_principal = zero
            year_interest = zero
            year_debt_service = zero

    return yearly
