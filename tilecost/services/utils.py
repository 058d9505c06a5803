from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def round_half_up(value: Any) -> int:
    """Round to the nearest integer, ties away from zero.

    The shortest decimal representation of floats is used, so ``2.5`` becomes
    ``3`` and ``10.000000000000002`` becomes ``10``.
    """
    dec_value = _to_decimal(value)
    if dec_value is None:
        try:
            dec_value = Decimal(str(float(value)))
        except (TypeError, ValueError, InvalidOperation) as exc:
            raise ValueError(f"Cannot round non-numeric value {value!r}") from exc
    return int(dec_value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def loose_equals(submitted: Any, computed: Any) -> bool:
    """Compare a client value with a recomputed one allowing numeric coercion.

    ``10`` equals ``"10"`` and ``"10.0"``; ``None`` never equals a number.
    """
    if submitted is None or computed is None:
        return submitted is None and computed is None
    left = _to_decimal(submitted)
    right = _to_decimal(computed)
    if left is None or right is None:
        return False
    if not left.is_finite() or not right.is_finite():
        return False
    return left == right
