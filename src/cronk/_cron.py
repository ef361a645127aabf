from __future__ import annotations

from typing import TYPE_CHECKING

from ._ast import Field, Multiple, Range, Single, WeekdayConstraint

if TYPE_CHECKING:
    from ._expression import Expression


def to_cron(expr: Expression) -> str:
    """Render as a five-field cron string: minute hour dom month dow."""
    parts = [
        _field_to_cron(expr.minute),
        _field_to_cron(expr.hour),
        _field_to_cron(expr.dom),
        _field_to_cron(expr.month),
        _weekday_to_cron(expr.dow),
    ]
    return " ".join(parts)


def _field_to_cron(field: Field | None) -> str:
    match field:
        case None:
            return "*"
        case Single(value=v):
            return str(v)
        case Multiple(values=vs):
            return ",".join(str(v) for v in vs)
        case Range(min=lo, max=hi):
            return f"{lo}-{hi}" if lo != hi else str(lo)


def _weekday_to_cron(dow: WeekdayConstraint | None) -> str:
    if dow is None:
        return "*"
    out = _field_to_cron(dow.field)
    if dow.nth is not None:
        # "#" binds to a single weekday in cron; lists get it on every item
        out = ",".join(f"{part}#{dow.nth}" for part in out.split(","))
    return out
