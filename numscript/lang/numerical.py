"""Runtime values for numscript: a value is either a float or a list of values, nested to any depth.

Arithmetic broadcasts. Two lists combine elementwise (their lengths must match at every level), and a scalar combines
with every element of a list. Scalar arithmetic follows IEEE 754: division by zero and domain errors of '^' give
infinities/NaN rather than raising.

Source: https://numpy.org/doc/stable/user/basics.broadcasting.html (a much simpler version of it)
"""

import math
import operator

from numscript.lang.error import InvalidListLength


CONSTANTS = {
    "PI": math.pi,
    "TAU": math.tau,
    "GLR": 1.618033988749894,  # golden ratio
}


def is_list(value):
    return isinstance(value, list)


def _is_odd_integer(num):
    return math.isfinite(num) and num == int(num) and int(num) % 2 == 1


def divide(left, right):
    """left / right, with IEEE semantics for a zero divisor."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def power(base, exponent):
    """Real-valued base ^ exponent. Negative bases with fractional exponents give NaN."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0:  # zero to a negative power
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


OPERATORS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": divide,
    "^": power,
}

FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
}


def apply(left, right, op):
    """Applies binary operator op ('+', '-', '*', '/', '^') to left and right with broadcasting."""
    if is_list(left) and is_list(right):
        if len(left) != len(right):
            raise InvalidListLength(len(left), len(right))
        return [apply(left_elem, right_elem, op) for left_elem, right_elem in zip(left, right)]

    elif is_list(left):
        return [apply(elem, right, op) for elem in left]

    elif is_list(right):
        return [apply(left, elem, op) for elem in right]

    return OPERATORS[op](left, right)


def apply_func(value, func):
    """Maps func over every scalar in value, preserving list structure."""
    if is_list(value):
        return [apply_func(elem, func) for elem in value]
    return _safe(func, value)


def _safe(func, num):
    try:
        return func(num)
    except ValueError:  # e.g. sin(inf)
        return math.nan


def render(value):
    """Text of value as printed by a print expression: 1.5, [1.0, [2.0, 3.0]]."""
    if is_list(value):
        return "[" + ", ".join(render(elem) for elem in value) + "]"
    return repr(float(value))
