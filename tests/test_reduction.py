#!/usr/bin/env python
# -*-coding:utf8-*-

# test_reduction.py: tests of column reduction over Z/2Z
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
"""Tests for augarr/reduction.py."""
import numpy as np

from augarr.reduction import (
    express, get_low_of, homology_dims, in_span, induced_map, kernel_basis,
    quotient_space, rank, reduce, zero_space)


def _boundary_of_triangle():
    """Boundary of the edges ab, bc, ca of a triangle, rows a, b, c."""
    return np.array([
        [1, 0, 1],
        [1, 1, 0],
        [0, 1, 1],
    ], dtype=int)


class TestRank:

    def test_triangle_boundary_has_rank_two(self):
        assert rank(_boundary_of_triangle()) == 2

    def test_rank_does_not_modify(self):
        A = _boundary_of_triangle()
        rank(A)
        np.testing.assert_array_equal(A, _boundary_of_triangle())

    def test_empty(self):
        assert rank(np.zeros((3, 0), dtype=int)) == 0


class TestReduce:

    def test_lows_are_unique(self):
        A = reduce(_boundary_of_triangle(), np.arange(3), np.arange(3))
        low_of = get_low_of(A, np.arange(3))
        assert sorted(low_of[low_of >= 0].tolist()) == [0, 1]
        assert not A[:, 2].any()

    def test_record_column_operations(self):
        original = _boundary_of_triangle()
        A, V = reduce(original.copy(), np.arange(3), np.arange(3), record=True)
        np.testing.assert_array_equal(original @ V % 2, A)

    def test_column_order(self):
        # reducing ca first leaves ab or bc to be zero
        A = reduce(_boundary_of_triangle(), np.arange(3), np.array([2, 0, 1]))
        assert not A[:, 1].any()
        assert A[:, 0].any() and A[:, 2].any()


class TestKernelAndSpan:

    def test_kernel_of_triangle_boundary(self):
        K = kernel_basis(_boundary_of_triangle())
        assert K.shape == (3, 1)
        np.testing.assert_array_equal(K[:, 0], [1, 1, 1])

    def test_kernel_restricted_to_columns(self):
        K = kernel_basis(_boundary_of_triangle(), np.array([0, 1]))
        assert K.shape == (3, 0)

    def test_express(self):
        basis = np.array([[1, 0], [1, 1], [0, 1]], dtype=int)
        coefficients = express(np.array([1, 0, 1]), basis)
        np.testing.assert_array_equal(basis @ coefficients % 2, [1, 0, 1])

    def test_express_outside_span(self):
        basis = np.array([[1], [1], [0]], dtype=int)
        assert express(np.array([1, 0, 0]), basis) is None

    def test_in_span(self):
        basis = np.array([[1, 0], [1, 1], [0, 1]], dtype=int)
        assert in_span(np.array([1, 0, 1]), basis)
        assert not in_span(np.array([1, 0, 0]), basis)
        assert in_span(np.zeros(3, dtype=int), np.zeros((3, 0), dtype=int))


class TestQuotientSpaces:

    def test_dimension_of_quotient(self):
        # vertices a, b modulo the boundary a + b
        space = quotient_space(np.array([[1], [1]]), np.eye(2, dtype=int))
        assert space.n_active == 1

    def test_induced_map_to_quotient(self):
        source = quotient_space(np.zeros((2, 0), dtype=int), np.eye(2, dtype=int))
        target = quotient_space(np.array([[1], [1]]), np.eye(2, dtype=int))
        M = induced_map(source, target)
        assert M.shape == (1, 2)
        np.testing.assert_array_equal(M, [[1, 1]])

    def test_map_from_zero_space(self):
        target = quotient_space(np.zeros((2, 0), dtype=int), np.eye(2, dtype=int))
        assert induced_map(zero_space(2), target).shape == (2, 0)


class TestHomologyDims:

    def test_exact_sequence(self):
        # 0 -> F -> F -> 0 with the identity
        assert homology_dims([np.eye(1, dtype=int)]) == [0, 0]

    def test_zero_map(self):
        assert homology_dims([np.zeros((2, 1), dtype=int)]) == [2, 1]

    def test_koszul_shaped_complex(self):
        # F <- F^2 <- F, exact everywhere
        D1 = np.array([[1, 1]])
        D2 = np.array([[1], [1]])
        assert homology_dims([D1, D2]) == [0, 0, 0]

    def test_kernel_in_middle_degree(self):
        D1 = np.zeros((1, 2), dtype=int)
        D2 = np.array([[1], [0]])
        assert homology_dims([D1, D2]) == [1, 1, 0]
