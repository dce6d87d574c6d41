"""Integer arithmetic utilities for wallet amounts.

All balances and amounts are stored as int minor units (cents / paise).
User input is parsed with Decimal so "30.10" never passes through a float.
"""

from decimal import Decimal, DecimalException, Inexact, localcontext

from config.settings import settings
from src.wl_common.errors import InvalidAmountError

_MINOR_UNITS = 100
# Largest value a BIGINT column holds
MAX_CENTS = 2**63 - 1


def parse_amount(raw: object, field: str = "amount") -> int:
    """Parse a user-supplied amount into cents.

    Accepts int, Decimal, float or str. Rejects NaN, infinities, negatives,
    booleans, anything with more than two fractional digits and values that
    do not fit in MAX_CENTS.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidAmountError(raw, field)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise InvalidAmountError(raw, field)
    try:
        with localcontext() as ctx:
            # Scaling must be exact; a rounded product could hide a third decimal
            ctx.traps[Inexact] = True
            # str() first so floats like 0.1 parse as written, not as their binary value
            value = Decimal(str(raw))
            if not value.is_finite() or value < 0:
                raise InvalidAmountError(raw, field)
            cents = value * _MINOR_UNITS
            if cents > MAX_CENTS or cents != cents.to_integral_value():
                raise InvalidAmountError(raw, field)
    except (DecimalException, ValueError) as exc:
        raise InvalidAmountError(raw, field) from exc
    return int(cents)


def cents_to_display(cents: int, symbol: str | None = None) -> str:
    """Convert cents to display string: 150050 -> '₹1,500.50', -1200 -> '-₹12.00'."""
    sym = settings.CURRENCY_SYMBOL if symbol is None else symbol
    if cents < 0:
        abs_cents = -cents
        return f"-{sym}{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"{sym}{cents // 100:,}.{cents % 100:02d}"
