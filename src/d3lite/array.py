"""
Aggregate helpers over sequences that tolerate missing values.

None and NaN entries are ignored: a value counts only if it is not None
and compares greater-or-equal to itself (NaN does not). With an accessor,
the accessor result is what gets compared and validated, and the matching
element is returned, like the key argument of the builtins.
"""

from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

from ._callbacks import adapt

Accessor = Callable[[Any, int, Sequence[Any]], Any]


def _valid(key) -> bool:
    return key is not None and key >= key


def _keyed(values: Sequence[Any], accessor: Optional[Accessor]) -> Iterator[Tuple[Any, Any]]:
    if accessor is None:
        return ((value, value) for value in values)
    accessor = adapt(accessor, 3)
    return ((accessor(value, index, values), value) for index, value in enumerate(values))


def _reduce(values, accessor, better):
    best_key = best = None
    found = False
    for key, value in _keyed(values, accessor):
        if not found:
            if _valid(key):
                best_key, best, found = key, value, True
        elif key is not None and better(key, best_key):
            best_key, best = key, value
    return best


def max(values: Sequence[Any], accessor: Optional[Accessor] = None):
    """
    Largest valid value, or None when there is none.

    Args:
        values: Sequence to scan
        accessor: Optional function (value[, index[, values]]) -> comparable

    Returns:
        The element with the largest (accessor) value; the first one wins ties

    Examples:
        max([3, None, 7, float("nan"), 1])   # 7
        max(rows, lambda d: d["value"])      # the row with the largest value
    """
    return _reduce(values, accessor, lambda key, best: key > best)


def min(values: Sequence[Any], accessor: Optional[Accessor] = None):
    """Smallest valid value, or None when there is none. See max()."""
    return _reduce(values, accessor, lambda key, best: key < best)


def extent(values: Sequence[Any], accessor: Optional[Accessor] = None) -> Tuple[Any, Any]:
    """(min, max) of the valid values; (None, None) when there are none."""
    return min(values, accessor), max(values, accessor)
