"""
Scalar arithmetic capabilities.

The decomposition engine never touches scalars directly. Every arithmetic
operation goes through a `ScalarOps` record, so the same code runs on floats,
complex numbers, exact fractions or arbitrary-precision decimals.
"""

import cmath
import math
import sys
from dataclasses import dataclass
from decimal import Decimal, getcontext
from fractions import Fraction
from typing import Any, Callable, Iterable


@dataclass(frozen=True)
class ScalarOps:
    """
    Injected scalar arithmetic.

    Attributes:
        name: Short identifier, e.g. 'number'
        add, subtract, multiply, divide: Binary arithmetic
        negate: Unary minus
        abs_gt: abs_gt(x, y) is True iff |x| > |y|
        is_zero: Equality with the additive identity
        sign: x / |x| (zero for zero)
        sqrt: Principal square root
        conj: Complex conjugate (identity for real scalars)
        zero, one: Additive and multiplicative identities
        from_float: Convert a Python float constant into this scalar type
        epsilon: Relative precision of the scalar type, read when called
    """
    name: str
    add: Callable[[Any, Any], Any]
    subtract: Callable[[Any, Any], Any]
    multiply: Callable[[Any, Any], Any]
    divide: Callable[[Any, Any], Any]
    negate: Callable[[Any], Any]
    abs_gt: Callable[[Any, Any], bool]
    is_zero: Callable[[Any], bool]
    sign: Callable[[Any], Any]
    sqrt: Callable[[Any], Any]
    conj: Callable[[Any], Any]
    zero: Any
    one: Any
    from_float: Callable[[float], Any]
    epsilon: Callable[[], float]

    def __repr__(self):
        return f"<{self.__class__.__name__}({self.name})>"


def _conj(x):
    return x.conjugate()


def _float_epsilon():
    return sys.float_info.epsilon


# Python numbers: int, float, complex

def _number_sign(x):
    if isinstance(x, complex):
        return 0j if x == 0 else x / abs(x)
    if x > 0: return 1
    if x < 0: return -1
    return 0


def _number_sqrt(x):
    if isinstance(x, complex) or x < 0:
        return cmath.sqrt(x)
    return math.sqrt(x)


NUMBER = ScalarOps(
    name="number",
    add=lambda x, y: x + y,
    subtract=lambda x, y: x - y,
    multiply=lambda x, y: x * y,
    divide=lambda x, y: x / y,
    negate=lambda x: -x,
    abs_gt=lambda x, y: abs(x) > abs(y),
    is_zero=lambda x: x == 0,
    sign=_number_sign,
    sqrt=_number_sqrt,
    conj=_conj,
    zero=0,
    one=1,
    from_float=float,
    epsilon=_float_epsilon,
)


# Exact rationals. Square roots are irrational in general, so go through float.

def _fraction_sqrt(x):
    return Fraction(math.sqrt(x))


FRACTION = ScalarOps(
    name="fraction",
    add=lambda x, y: x + y,
    subtract=lambda x, y: x - y,
    multiply=lambda x, y: x * y,
    divide=lambda x, y: Fraction(x) / y,
    negate=lambda x: -x,
    abs_gt=lambda x, y: abs(x) > abs(y),
    is_zero=lambda x: x == 0,
    sign=lambda x: Fraction((x > 0) - (x < 0)),
    sqrt=_fraction_sqrt,
    conj=_conj,
    zero=Fraction(0),
    one=Fraction(1),
    from_float=Fraction,
    epsilon=_float_epsilon,
)


# Arbitrary precision, governed by the active `decimal` context

def _decimal_epsilon():
    return float(Decimal(10) ** (1 - getcontext().prec))


DECIMAL = ScalarOps(
    name="decimal",
    add=lambda x, y: Decimal(x) + y,
    subtract=lambda x, y: Decimal(x) - y,
    multiply=lambda x, y: Decimal(x) * y,
    divide=lambda x, y: Decimal(x) / y,
    negate=lambda x: -Decimal(x),
    abs_gt=lambda x, y: abs(x) > abs(y),
    is_zero=lambda x: x == 0,
    sign=lambda x: Decimal((x > 0) - (x < 0)),
    sqrt=lambda x: Decimal(x).sqrt(),
    conj=_conj,
    zero=Decimal(0),
    one=Decimal(1),
    from_float=lambda x: Decimal(repr(x)),
    epsilon=_decimal_epsilon,
)

SCALAR_OPS = {ops.name: ops for ops in (NUMBER, FRACTION, DECIMAL)}


def infer_ops(values: Iterable) -> ScalarOps:
    """ Pick the `ScalarOps` matching the scalars in `values`.
    Fractions and decimals each win over plain numbers, but cannot be mixed. """
    fraction = decimal = False
    for v in values:
        if isinstance(v, Fraction):
            fraction = True
        elif isinstance(v, Decimal):
            decimal = True
    if fraction and decimal:
        raise TypeError("Cannot mix Fraction and Decimal scalars in one operation")
    if fraction:
        return FRACTION
    if decimal:
        return DECIMAL
    return NUMBER
