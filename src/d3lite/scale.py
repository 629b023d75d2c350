"""
Scales - configurable mapping functions from data values to pixel positions.

Each scale is a callable object. Configuration is available both as explicit
get_*/set_* methods and as fluent accessors that read when called without an
argument and write (returning the scale) when called with one:

    x = scale_band().domain(["a", "b", "c"]).range([0, 90]).padding(0.1)
    y = scale_linear().domain([0, 10]).range([240, 0])
    x("b"), y(5)
"""

import math
from typing import Any, List, Optional, Sequence, Tuple

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _divide(numerator: float, denominator: float) -> float:
    """Float division that yields inf/nan for a zero denominator instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = _round_half_up(start * inc)
        i2 = _round_half_up(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = _round_half_up(start / inc)
        i2 = _round_half_up(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1

    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """
    Tick step for [start, stop] using the 1-2-5 rule.

    Negative results are inverted steps: -10 means a step of 1/10.
    """
    start, stop, count = float(start), float(stop), float(count)
    if stop == start or count <= 0:
        return 0
    return _tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float = 10) -> List[float]:
    """
    Roughly count evenly spaced, human-friendly values between start and stop.

    Args:
        start: First bound (may be greater than stop)
        stop: Second bound
        count: Desired number of ticks (a hint, not a guarantee)

    Returns:
        Tick values, in the same direction as start -> stop
    """
    start, stop = float(start), float(stop)
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    if reverse:
        values.reverse()
    return values


class LinearScale:
    """
    Continuous linear mapping between the first two values of the domain and
    of the range; further domain values do not take part in the mapping.

    Values outside the domain extrapolate; nothing is clamped. A domain whose
    ends are equal produces inf/nan results.
    """

    def __init__(self):
        self._domain: List[float] = [0, 1]
        self._range: List[float] = [0, 1]

    def __call__(self, value: float) -> float:
        d0, d1 = self._domain[0], self._domain[1]
        r0, r1 = self._range[0], self._range[1]
        t = _divide(value - d0, d1 - d0)
        return r0 + t * (r1 - r0)

    def invert(self, value: float) -> float:
        """Map a range value back to the domain."""
        d0, d1 = self._domain[0], self._domain[1]
        r0, r1 = self._range[0], self._range[1]
        t = _divide(value - r0, r1 - r0)
        return d0 + t * (d1 - d0)

    def get_domain(self) -> List[float]:
        return list(self._domain)

    def set_domain(self, values: Sequence[float]) -> 'LinearScale':
        self._domain = list(values)
        return self

    def domain(self, *args):
        """Return the domain, or set it and return the scale."""
        if not args:
            return self.get_domain()
        return self.set_domain(*args)

    def get_range(self) -> List[float]:
        return list(self._range)

    def set_range(self, values: Sequence[float]) -> 'LinearScale':
        self._range = list(values)
        return self

    def range(self, *args):
        """Return the range, or set it and return the scale."""
        if not args:
            return self.get_range()
        return self.set_range(*args)

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self._domain[0], self._domain[-1], count)

    def nice(self, count: int = 10) -> 'LinearScale':
        """Extend the domain so that it starts and ends on round tick values."""
        domain = list(self._domain)
        i0, i1 = 0, len(domain) - 1
        start, stop = domain[i0], domain[i1]
        if stop < start:
            start, stop = stop, start
            i0, i1 = i1, i0

        previous_step = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == previous_step:
                domain[i0], domain[i1] = start, stop
                self._domain = domain
                return self
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            previous_step = step
        return self

    def copy(self) -> 'LinearScale':
        return LinearScale().set_domain(self._domain).set_range(self._range)

    def __repr__(self):
        return f"<LinearScale domain={self._domain} range={self._range}>"


class BandScale:
    """
    Ordinal scale that splits a continuous range into one band per domain value.

    Bands are indexed by the position of the value in the domain. Values not
    in the domain map to None.
    """

    def __init__(self):
        self._domain: List[Any] = []
        self._range: List[float] = [0, 1]
        self._padding_inner: float = 0
        self._padding_outer: float = 0

    def __call__(self, value: Any) -> Optional[float]:
        index = self._index(value)
        if index is None:
            return None
        step = self.step()
        return self._range[0] + index * step + self._padding_outer * step

    def _index(self, value) -> Optional[int]:
        # Strict equality: True is not 1 and NaN matches nothing
        for index, item in enumerate(self._domain):
            if isinstance(item, bool) == isinstance(value, bool) and item == value:
                return index
        return None

    def step(self) -> float:
        """Distance between the starts of adjacent bands."""
        if not self._domain:
            return 0
        return (self._range[1] - self._range[0]) / len(self._domain)

    def bandwidth(self) -> float:
        """Width of each band after inner padding."""
        return self.step() * (1 - self._padding_inner)

    def get_domain(self) -> List[Any]:
        return list(self._domain)

    def set_domain(self, values: Sequence[Any]) -> 'BandScale':
        self._domain = list(values)
        return self

    def domain(self, *args):
        """Return the domain, or set it and return the scale."""
        if not args:
            return self.get_domain()
        return self.set_domain(*args)

    def get_range(self) -> List[float]:
        return list(self._range)

    def set_range(self, values: Sequence[float]) -> 'BandScale':
        self._range = list(values)
        return self

    def range(self, *args):
        """Return the range, or set it and return the scale."""
        if not args:
            return self.get_range()
        return self.set_range(*args)

    def get_padding(self) -> float:
        return self._padding_inner

    def set_padding(self, value: float) -> 'BandScale':
        self._padding_inner = value
        return self

    def padding(self, *args):
        """Return the inner padding, or set it and return the scale."""
        if not args:
            return self.get_padding()
        return self.set_padding(*args)

    def get_padding_outer(self) -> float:
        # No setter: outer padding is always 0
        return self._padding_outer

    def copy(self) -> 'BandScale':
        return BandScale().set_domain(self._domain).set_range(self._range).set_padding(self._padding_inner)

    def __repr__(self):
        return f"<BandScale domain={self._domain} range={self._range}>"


def scale_linear() -> LinearScale:
    """New linear scale with domain [0, 1] and range [0, 1]."""
    return LinearScale()


def scale_band() -> BandScale:
    """New band scale with an empty domain, range [0, 1] and no padding."""
    return BandScale()
