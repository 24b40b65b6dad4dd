#!/usr/bin/env python
# -*-coding:utf8-*-

# test_exact.py: tests of exact values and grade indices
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
"""Tests for augarr/exact.py and augarr/grades.py."""
from fractions import Fraction
import math

import numpy as np
import pytest

from augarr.errors import GradeIndexError, InputError
from augarr.exact import INFTY, format_exact, is_infinite, to_exact
from augarr.grades import GradeIndex, coarsen


class TestInfinity:

    def test_greater_than_finite_values(self):
        assert INFTY > Fraction(10**9)
        assert Fraction(-3, 7) < INFTY
        assert not INFTY < Fraction(0)

    def test_equal_only_to_itself(self):
        assert INFTY == INFTY
        assert INFTY != Fraction(10**9)

    def test_addition_absorbs(self):
        assert INFTY + INFTY is INFTY
        assert INFTY + Fraction(1, 2) is INFTY

    def test_conversions(self):
        assert float(INFTY) == math.inf
        assert str(INFTY) == "inf"
        assert is_infinite(INFTY)
        assert is_infinite(math.inf)
        assert not is_infinite(Fraction(1))


class TestToExact:

    def test_decimal_string_is_exact(self):
        assert to_exact("0.1") == Fraction(1, 10)

    def test_fraction_string(self):
        assert to_exact("3/7") == Fraction(3, 7)

    def test_float_keeps_binary_value(self):
        assert to_exact(0.1) == Fraction(0.1)
        assert to_exact(0.1) != Fraction(1, 10)

    def test_int_and_numpy_scalars(self):
        assert to_exact(3) == Fraction(3)
        assert to_exact(np.int64(4)) == Fraction(4)

    def test_infinity_tokens(self):
        assert to_exact("inf") is INFTY
        assert to_exact("Infinity") is INFTY
        assert to_exact(math.inf) is INFTY

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_exact("one half")
        with pytest.raises(ValueError):
            to_exact(math.nan)

    def test_format_round_trip(self):
        for value in (Fraction(3, 7), Fraction(-2), Fraction(0)):
            assert to_exact(format_exact(value)) == value
        assert format_exact(Fraction(3, 7)) == "3/7"
        assert format_exact(Fraction(-2)) == "-2"
        assert format_exact(INFTY) == "inf"


class TestGradeIndex:

    def test_from_values_sorts_and_deduplicates(self):
        grades = GradeIndex.from_values(["1/2", 0, "0.5", 2])
        assert grades.values == (Fraction(0), Fraction(1, 2), Fraction(2))
        assert len(grades) == 3

    def test_index_lookup(self):
        grades = GradeIndex.from_values([0, "1/3", 1])
        assert grades.index(Fraction(1, 3)) == 1
        assert grades[2] == Fraction(1)

    def test_missing_value_raises(self):
        grades = GradeIndex.from_values([0, 1])
        with pytest.raises(GradeIndexError):
            grades.index(Fraction(1, 2))

    def test_grade_index_error_is_input_error(self):
        assert issubclass(GradeIndexError, InputError)

    def test_floor_index(self):
        grades = GradeIndex.from_values([0, 1, 2])
        assert grades.floor_index(Fraction(3, 2)) == 1
        assert grades.floor_index(Fraction(2)) == 2

    def test_infinity_is_not_a_grade(self):
        with pytest.raises(ValueError):
            GradeIndex.from_values([0, "inf"])

    def test_to_float(self):
        grades = GradeIndex.from_values(["1/4", 1])
        np.testing.assert_allclose(grades.to_float(), [0.25, 1.0])

    def test_equality_and_hash(self):
        a = GradeIndex.from_values([0, 1])
        b = GradeIndex.from_values([1, 0, 1])
        assert a == b
        assert hash(a) == hash(b)


class TestCoarsen:

    def test_without_bins(self):
        assert coarsen([Fraction(1, 2), Fraction(3)]) == {Fraction(1, 2): Fraction(1, 2), 3: 3}

    def test_rounds_up_to_bin_ends(self):
        mapping = coarsen([Fraction(0), Fraction(1), Fraction(3)], n_bins=2)
        assert mapping == {0: Fraction(3, 2), 1: Fraction(3, 2), 3: 3}

    def test_value_on_a_bin_end_stays(self):
        mapping = coarsen([Fraction(0), Fraction(1), Fraction(2)], n_bins=2)
        assert mapping == {0: 1, 1: 1, 2: 2}

    def test_keeps_order(self):
        values = [Fraction(k, 7) for k in range(20)]
        mapping = coarsen(values, n_bins=3)
        binned = [mapping[v] for v in values]
        assert binned == sorted(binned)
        assert len(set(binned)) <= 3

    def test_single_value(self):
        assert coarsen([Fraction(5)], n_bins=4) == {5: 5}

    def test_reverse_negates(self):
        assert coarsen([Fraction(0), Fraction(1, 2)], reverse=True) == {0: 0, Fraction(1, 2): Fraction(-1, 2)}

    def test_reverse_before_binning(self):
        mapping = coarsen([Fraction(0), Fraction(1), Fraction(3)], n_bins=2, reverse=True)
        assert mapping == {3: Fraction(-3, 2), 1: 0, 0: 0}
