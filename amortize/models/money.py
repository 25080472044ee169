"""Exact monetary amounts bound to a currency and a rounding mode.

Every amount is quantized to its currency's minor unit with its own rounding
mode, on construction and therefore after every arithmetic operation.
"""

from dataclasses import dataclass
from decimal import Decimal

from amortize.config import settings

# ISO 4217 minor units that differ from the usual two decimals
MINOR_UNITS = {
    "BHD": 3,
    "CLP": 0,
    "IQD": 3,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
    "UGX": 0,
    "VND": 0,
}


class CurrencyMismatchError(ValueError):
    """Raised when two amounts in different currencies are combined."""


def minor_units(currency: str) -> int:
    return MINOR_UNITS.get(currency.upper(), 2)


def to_decimal(value: "Money | Decimal | int | float | str") -> Decimal:
    """Convert a raw number to Decimal.

    Floats go through their shortest string form, so 0.1 becomes
    Decimal("0.1") rather than its binary expansion.
    """
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str
    rounding: str

    def __post_init__(self):
        currency = self.currency.upper()
        scale = Decimal(1).scaleb(-minor_units(currency))
        object.__setattr__(self, "currency", currency)
        object.__setattr__(
            self, "amount", to_decimal(self.amount).quantize(scale, rounding=self.rounding)
        )

    @classmethod
    def of(
        cls,
        value: "Decimal | int | float | str",
        currency: str | None = None,
        rounding: str | None = None,
    ) -> "Money":
        """Build an amount, falling back to the configured currency and rounding."""
        return cls(
            to_decimal(value),
            currency or settings.default_currency,
            rounding or settings.default_rounding,
        )

    @classmethod
    def zero(cls, currency: str | None = None, rounding: str | None = None) -> "Money":
        return cls.of(0, currency, rounding)

    def with_amount(self, value: "Decimal | int | float | str") -> "Money":
        """Same currency and rounding mode, different amount."""
        return Money(to_decimal(value), self.currency, self.rounding)

    def _same_currency(self, other: "Money") -> None:
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.with_amount(self.amount + other.amount)

    def __radd__(self, other):
        # Lets the builtin sum() start from 0
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.with_amount(self.amount - other.amount)

    def __mul__(self, factor):
        if isinstance(factor, Money) or not isinstance(factor, (int, float, Decimal)):
            return NotImplemented
        return self.with_amount(self.amount * to_decimal(factor))

    __rmul__ = __mul__

    def __lt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.amount < other.amount

    def __le__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"
