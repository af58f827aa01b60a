"""
Monetary Amount Module

Fixed-point decimal amounts with at most four fractional digits.
NEVER uses float for monetary values.
"""

from decimal import Decimal, Context, Inexact, Rounded, Overflow, InvalidOperation, localcontext
from dataclasses import dataclass
from typing import Union
import re

# Maximum number of digits after the decimal point
MAX_SCALE = 4

# Maximum number of significant digits, the precision of the arithmetic context
MAX_DIGITS = 28

# Exact arithmetic: anything that would round or overflow raises instead
_EXACT = Context(prec=MAX_DIGITS, traps=[Inexact, Rounded, Overflow, InvalidOperation])

_AMOUNT_PATTERN = re.compile(r'^\+?(\d+(\.\d*)?|\.\d+)$')


@dataclass(frozen=True)
class Amount:
    """
    Immutable nonnegative money amount.
    The scale of the underlying Decimal is never more than MAX_SCALE.
    """
    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            object.__setattr__(self, 'value', Decimal(str(self.value)))

        if not self.value.is_finite():
            raise ValueError(f"`{self.value}` is not a valid amount. It needs to be a finite decimal number.")

        if self.value.is_signed() and not self.value.is_zero():
            raise ValueError(f"`{self.value}` is not a valid amount. It needs to be a nonnegative decimal number.")

        if scale_of(self.value) > MAX_SCALE:
            raise ValueError(
                f"`{self.value}` is not a valid amount. It needs to have a precision of "
                f"no more than {MAX_SCALE} places past the decimal."
            )

        if len(self.value.as_tuple().digits) > MAX_DIGITS:
            raise ValueError(
                f"`{self.value}` is not a valid amount. It needs to have no more than "
                f"{MAX_DIGITS} significant digits."
            )

        # -0 and 0 are the same amount
        if self.value.is_signed():
            object.__setattr__(self, 'value', abs(self.value))

    @classmethod
    def zero(cls) -> 'Amount':
        return cls(Decimal('0'))

    def __add__(self, other: 'Amount') -> 'Amount':
        with localcontext(_EXACT):
            return Amount(self.value + other.value)

    def __sub__(self, other: 'Amount') -> 'Amount':
        with localcontext(_EXACT):
            return Amount(self.value - other.value)

    def __lt__(self, other: 'Amount') -> bool:
        return self.value < other.value

    def __le__(self, other: 'Amount') -> bool:
        return self.value <= other.value

    def __gt__(self, other: 'Amount') -> bool:
        return self.value > other.value

    def __ge__(self, other: 'Amount') -> bool:
        return self.value >= other.value

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.value.is_zero()

    def to_string(self) -> str:
        """Plain positional notation, never exponent form"""
        return format(self.value, 'f')

    def __str__(self) -> str:
        return self.to_string()


def scale_of(value: Decimal) -> int:
    """Number of digits after the decimal point"""
    exponent = value.as_tuple().exponent
    return -exponent if exponent < 0 else 0


def amount_from_string(value: Union[str, Decimal]) -> Amount:
    """
    Convert an input field to an Amount

    Args:
        value: Decimal or string such as "1.5", "  10.0000 "

    Returns:
        Amount

    Raises:
        ValueError: If the value is not a plain nonnegative decimal with at most
            four fractional digits
    """
    if isinstance(value, Decimal):
        return Amount(value)

    if not isinstance(value, str) or not value.strip():
        raise ValueError("Amount must be a non-empty string")

    clean_value = value.strip()
    if not _AMOUNT_PATTERN.match(clean_value):
        raise ValueError(f"Cannot convert '{value}' to an amount")

    return Amount(Decimal(clean_value))
