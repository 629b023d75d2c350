"""Adapting user callbacks to the arguments they accept."""

import inspect
from typing import Callable


def positional_arity(function: Callable, limit: int) -> int:
    """Number of positional arguments (up to limit) that function accepts."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures take the value only
        return 1
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind == parameter.VAR_POSITIONAL:
            return limit
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count if count < limit else limit


def adapt(function: Callable, limit: int) -> Callable:
    """Wrap function so it can always be called with limit positional arguments."""
    arity = positional_arity(function, limit)
    if arity == limit:
        return function
    return lambda *args: function(*args[:arity])
