"""Value tickers: resumable per-field cursors driving the ripple carry.

Every ticker answers ``tick() -> (value, must_carry)``. ``must_carry`` is set
on the tick that could not move forward within the field, telling the
schedule that the next larger field has to advance as well.
"""

from __future__ import annotations

from ._ast import Field, Multiple, Range, Single


class SingleTicker:
    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def tick(self) -> tuple[int, bool]:
        # A fixed field has nowhere else to go: every tick is also a wrap.
        return self.value, True


class SetTicker:
    __slots__ = ("values", "_index")

    def __init__(self, values: tuple[int, ...]) -> None:
        self.values = values
        self._index = 0

    def tick(self) -> tuple[int, bool]:
        if self._index >= len(self.values):
            self._index = 1
            return self.values[0], True
        value = self.values[self._index]
        self._index += 1
        return value, False


class RangeTicker:
    __slots__ = ("min", "max", "current")

    def __init__(self, min: int, max: int, current: int | None = None) -> None:
        self.min = min
        self.max = max
        self.current = min if current is None else current

    def tick(self) -> tuple[int, bool]:
        if self.min <= self.current <= self.max:
            value = self.current
            self.current += 1
            return value, False
        self.current = self.min + 1
        return self.min, True


Ticker = SingleTicker | SetTicker | RangeTicker


def into_ticker(field: Field) -> Ticker:
    match field:
        case Single(value=v):
            return SingleTicker(v)
        case Multiple(values=vs):
            return SetTicker(vs)
        case Range(min=lo, max=hi):
            return RangeTicker(lo, hi)
