#!/usr/bin/env python
# -*-coding:utf8-*-

# exact.py: exact grade values for augmented arrangements
# Copyright (C) 2023  Isaac Ren
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from fractions import Fraction
import math

"""
SECTION: Exact values

Grades and every geometric quantity derived from them are stored as
fractions.Fraction, so that comparisons between intersection points in the
arrangement are exact. The only non-finite value is the sentinel INFTY,
which is used for the deaths of essential bars.
"""

ExactValue = Fraction


class _Infinity():
    """
    Sentinel greater than every finite value. There is a single instance,
    INFTY.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "INFTY"

    def __str__(self):
        return "inf"

    def __float__(self):
        return math.inf

    def __hash__(self):
        return hash(math.inf)

    def __eq__(self, other):
        return other is self or (isinstance(other, float) and other == math.inf)

    def __ne__(self, other):
        return not self == other

    def __lt__(self, other):
        return False

    def __le__(self, other):
        return self == other

    def __gt__(self, other):
        return not self == other

    def __ge__(self, other):
        return True

    def __add__(self, other):
        if isinstance(other, (int, Fraction, _Infinity)) or other == math.inf:
            return self
        if isinstance(other, float) and math.isfinite(other):
            return self
        return NotImplemented

    __radd__ = __add__

    def __reduce__(self):
        return (_Infinity, ())


INFTY = _Infinity()


def is_infinite(value):
    """Return True if value is INFTY (or a float infinity)."""
    return value is INFTY or (isinstance(value, float) and value == math.inf)


def to_exact(value):
    """
    Convert a number or a string to an exact value.

    Decimal strings are read exactly, so "0.1" becomes Fraction(1, 10) and
    not the binary approximation of 0.1. Floats are converted to their exact
    binary value. The strings "inf" and "infinity" give INFTY.

    Parameters
    ----------
    value: int, float, Fraction or str
        Value to convert.

    Returns
    -------
    exact: Fraction or INFTY
    """
    if value is INFTY:
        return value
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not grade values")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if math.isinf(value) and value > 0:
            return INFTY
        if not math.isfinite(value):
            raise ValueError(f"cannot convert {value!r} to an exact value")
        return Fraction(value)
    if isinstance(value, str):
        token = value.strip()
        if token.lower() in ("inf", "+inf", "infinity"):
            return INFTY
        # Fraction parses decimals and "p/q" exactly
        return Fraction(token)
    # numpy scalars and other number types
    if hasattr(value, "item"):
        return to_exact(value.item())
    raise TypeError(f"cannot convert {type(value).__name__} to an exact value")


def format_exact(value):
    """
    String form of an exact value that to_exact reads back exactly, e.g.
    "3/7", "-2" or "inf".
    """
    if value is INFTY:
        return "inf"
    value = Fraction(value)
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"
