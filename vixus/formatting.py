"""Display-time formatting in Brazilian conventions.

Masking is applied to the rendered string only; callers keep aggregating
over the real values. None of these functions raise: anything that is not a
finite number renders as zero.
"""

from __future__ import annotations

from datetime import date
from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

CURRENCY_MASK = "••••••"
PERCENTAGE_MASK = "••••"

_CENTS = Decimal("0.01")
_TENTHS = Decimal("0.1")

# Larger magnitudes are not money; they render as zero like other junk input.
_MAX_ADJUSTED = 1000


def _to_decimal(value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not d.is_finite() or d.adjusted() > _MAX_ADJUSTED:
        return Decimal(0)
    return d


def _round(value: object, exp: Decimal) -> Decimal:
    d = _to_decimal(value)
    with localcontext() as ctx:
        # quantize must keep every integer digit plus the fraction
        ctx.prec = max(28, d.adjusted() + 3)
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        return d.quantize(exp, rounding=ROUND_HALF_UP)


def format_currency(amount: object) -> str:
    """``1500.5`` -> ``"R$ 1.500,50"``; ``-300`` -> ``"-R$ 300,00"``.

    Rounds half-up to cents. ``None``, ``NaN``, infinities and non-numeric
    input render as ``"R$ 0,00"``, as do magnitudes beyond ``1e1000``.
    Any smaller amount keeps all of its integer digits.
    """

    v = _round(amount, _CENTS)
    s = f"{v.copy_abs():,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"-R$ {s}" if v < 0 else f"R$ {s}"


def mask_if_hidden(amount: object, hidden: bool) -> str:
    return CURRENCY_MASK if hidden else format_currency(amount)


def format_percentage(value: object, *, hidden: bool = False) -> str:
    if hidden:
        return PERCENTAGE_MASK
    v = _round(value, _TENTHS)
    if v == 0:
        v = v.copy_abs()
    return f"{v}%"


def format_date_br(d: date) -> str:
    return d.strftime("%d/%m/%Y")


__all__ = [
    "CURRENCY_MASK",
    "PERCENTAGE_MASK",
    "format_currency",
    "format_date_br",
    "format_percentage",
    "mask_if_hidden",
]
