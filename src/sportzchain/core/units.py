"""
Token unit helpers.

Convert between whole-token amounts (as written in deploy parameters) and
integer base units for a token with a given number of decimals, without
relying on floats.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Any

from sportzchain.core.constants import MAX_TOKEN_DECIMALS

# Enough digits for any uint256 amount at 18 decimals
_PRECISION = 100


def _check_decimals(decimals: int) -> None:
    if not isinstance(decimals, int) or not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(f"Decimals must be an int between 0 and {MAX_TOKEN_DECIMALS}")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        return Decimal(str(value))
    raise ValueError("Amount must be int, float, str, or Decimal")


def quantize_amount(value: Any, decimals: int) -> Decimal:
    """Convert to a Decimal token amount truncated to ``decimals`` places."""
    _check_decimals(decimals)
    try:
        dec = _to_decimal(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"Invalid amount value: {value}") from exc

    if dec.is_nan():
        raise ValueError("Amount cannot be NaN")
    if dec.is_infinite():
        raise ValueError("Amount cannot be infinite")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return dec.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN)


def to_base_units(value: Any, decimals: int) -> int:
    """Convert a whole-token amount to integer base units."""
    dec = quantize_amount(value, decimals)
    if dec < 0:
        raise ValueError("Amount cannot be negative")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return int(dec.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(value: int, decimals: int) -> Decimal:
    """Convert integer base units to a Decimal whole-token amount."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError("Base units must be an int")
    _check_decimals(decimals)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(value).scaleb(-decimals).quantize(
            Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN
        )


def format_amount(value: int, decimals: int, symbol: str = "") -> str:
    """Format base units as a fixed-precision token string."""
    text = f"{from_base_units(value, decimals):f}"
    return f"{text} {symbol}" if symbol else text
