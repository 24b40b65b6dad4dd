#!/usr/bin/env python
# -*-coding:utf8-*-

# reduction.py: column reduction of matrices over Z/2Z
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

from collections import namedtuple

import numpy as np

"""
SECTION: Introduction

All matrices are boundary matrices with coefficients in Z/2Z, stored as
numpy arrays of integers. Sums are thus done by

    (x + y) % 2.

Columns are reduced with the "low" algorithm: the low of a column is its
last nonzero row, for a given row order, and a column is added to another
whenever they share the same low. At the end, the nonzero columns have
pairwise distinct lows.
"""

QuotientSpace = namedtuple("QuotientSpace", ["matrix", "n_active", "row_order", "low_of"])
QuotientSpace.__doc__ = """
Subquotient Z / B of an ambient space, e.g. cycles modulo boundaries of a
module at one grade.

The columns of matrix are reduced, a basis of B first and then the n_active
columns that complete it into a basis of Z:

    [ basis of B | n_active columns ]

Attributes
----------
matrix: np.ndarray of int
    Reduced columns, of shape (n, dim Z).
n_active: int
    dim Z - dim B, the dimension of the subquotient.
row_order: np.ndarray of int
    Row order used for the lows.
low_of: np.ndarray of int
    For each row, the column of matrix having it as low, or -1.
"""


def reduce_standard(A):
    """
    Reduce every column of A in place, with the rows in their natural order.

    Returns
    -------
    A: np.ndarray of int
        The reduced array.
    is_low: np.ndarray of bool
        Rows that are the low of a nonzero column, one per unit of rank.
    """
    rows = np.arange(A.shape[0])
    A = reduce(A, rows, np.arange(A.shape[1]))
    return A, get_low_of(A, rows) > -1


def reduce(A, row_order, col_order, record=False):
    """
    Reduce some columns of A with the "low" algorithm, following some row and
    column orders, assuming that the coefficients are in Z/2Z.

    Note: A is modified by the function

    Parameters
    ----------
    A: np.ndarray of int
        Array of shape (n, m).
    row_order: np.ndarray of int
        1D array of length at most n.
    col_order: np.ndarray of int
        1D array of length at most m.
    record: bool, optional
        If True, also return the array V of shape (m, m) recording the column
        operations, so that the reduced array is the original one times V.
        Default is False.

    Returns
    -------
    A: np.ndarray of int
        Partially reduced array.
    V: np.ndarray of int
        Only if record is True.
    """
    n, m = A.shape
    p = len(col_order)
    V = np.eye(m, dtype=int) if record else None

    low_of = np.full(n, -1, dtype=int)
    for col_index in range(p):
        j2 = col_order[col_index]
        for i in row_order[::-1]:
            if A[i, j2]: # current low
                if low_of[i] > -1: # found this low
                    A[:, j2] = (A[:, j2] + A[:, low_of[i]]) % 2
                    if record:
                        V[:, j2] = (V[:, j2] + V[:, low_of[i]]) % 2
                else: # did not find this low
                    low_of[i] = j2
                    break
    if record:
        return A, V
    return A


def get_low_of(A, row_order):
    """
    For each row, the column of a reduced array A having it as low, or -1.
    The low of a column is its last nonzero row in row_order.
    """
    low_of = np.full(A.shape[0], -1, dtype=int)
    ordered = A[row_order]
    for j in range(A.shape[1]):
        nonzero = ordered[:, j].nonzero()[0]
        if len(nonzero):
            low_of[row_order[nonzero[-1]]] = j
    return low_of


def rank(A):
    """Rank over Z/2Z. A is not modified."""
    if A.size == 0:
        return 0
    _, is_low = reduce_standard(A.copy())
    return int(np.count_nonzero(is_low))


def kernel_basis(A, columns=None):
    """
    Basis of the kernel of A restricted to some of its columns.

    Parameters
    ----------
    A: np.ndarray of int
        Array of shape (n, m).
    columns: np.ndarray of int, optional
        Indices of the columns spanning the domain. Default is all columns.

    Returns
    -------
    K: np.ndarray of int
        Array of shape (m, k) whose columns form a basis of the kernel, written
        in the basis of all m columns of A.
    """
    n, m = A.shape
    if columns is None:
        columns = np.arange(m)
    columns = np.asarray(columns, dtype=int)
    sub = A[:, columns].copy()
    reduced, V = reduce(sub, np.arange(n), np.arange(len(columns)), record=True)
    null_cols = np.logical_not(reduced.any(axis=0)).nonzero()[0]
    K = np.zeros((m, len(null_cols)), dtype=int)
    K[columns, :] = V[:, null_cols]
    return K


def express(vector, basis):
    """
    Write a vector as a combination of the columns of basis.

    Parameters
    ----------
    vector: np.ndarray of int
        Array of shape (n,).
    basis: np.ndarray of int
        Array of shape (n, k) of linearly independent columns.

    Returns
    -------
    coefficients: np.ndarray of int or None
        Array of shape (k,) with basis @ coefficients = vector mod 2, or None
        if vector is not in the span of basis.
    """
    n, k = basis.shape
    A = np.hstack((basis, np.asarray(vector, dtype=int).reshape(-1, 1)))
    reduced, V = reduce(A, np.arange(n), np.arange(k + 1), record=True)
    if reduced[:, k].any():
        return None
    return V[:k, k].copy()


def in_span(vector, basis):
    """Check if a vector is in the span of the columns of basis."""
    if not np.asarray(vector).any():
        return True
    if basis.shape[1] == 0:
        return False
    n, k = basis.shape
    A = np.hstack((basis, np.asarray(vector, dtype=int).reshape(-1, 1)))
    reduced = reduce(A, np.arange(n), np.arange(k + 1))
    return not reduced[:, k].any()


def quotient_space(relations, generators):
    """
    Build the QuotientSpace spanned by the columns of generators modulo the
    span of the columns of relations.

    Parameters
    ----------
    relations, generators: np.ndarray of int
        Arrays of shape (n, r) and (n, g). The span of relations should lie
        in the span of relations and generators.

    Returns
    -------
    space: QuotientSpace
    """
    n, r = relations.shape
    row_order = np.arange(n)
    A = np.hstack((relations, generators)).astype(int)
    reduced = reduce(A, row_order, np.arange(A.shape[1]))
    nonzero = reduced.any(axis=0)
    relation_col = nonzero[:r].nonzero()[0]
    active_col = r + nonzero[r:].nonzero()[0]
    matrix = reduced[:, np.concatenate((relation_col, active_col))]
    low_of = get_low_of(matrix, row_order)
    return QuotientSpace(matrix, len(active_col), row_order, low_of)


def zero_space(n):
    """The zero subquotient of an n-dimensional ambient space."""
    return QuotientSpace(np.zeros((n, 0), dtype=int), 0, np.arange(n), np.full(n, -1, dtype=int))


def induced_map(source, target):
    """
    Map between two subquotients of the same ambient space induced by the
    identity, e.g. the structure map M(a) -> M(b) for a <= b.

    The boundaries of source must lie in those of target. Each active column
    of source is reduced by the columns of target; the reductions by active
    columns of target give its image, and a column left nonzero is outside
    the cycles of target and maps to zero.

    Parameters
    ----------
    source, target: QuotientSpace

    Returns
    -------
    M: np.ndarray of int
        Array of shape (target.n_active, source.n_active).
    """
    first_active = target.matrix.shape[1] - target.n_active
    M = np.zeros((target.n_active, source.n_active), dtype=int)
    active = source.matrix[:, source.matrix.shape[1] - source.n_active:]
    for k in range(source.n_active):
        column = active[:, k].copy()
        image = np.zeros(target.n_active, dtype=int)
        for i in target.row_order[::-1]:
            if not column[i]:
                continue
            j = target.low_of[i]
            if j < 0:
                break
            column = (column + target.matrix[:, j]) % 2
            if j >= first_active:
                image[j - first_active] ^= 1
        else:
            M[:, k] = image
    return M


def homology_dims(boundary_maps):
    """
    Homology dimensions of a chain complex C_0 <- C_1 <- ... <- C_n given by
    its boundary maps D_1, ..., D_n, e.g. the Koszul complex of a module at
    one grade. The arrays are reduced in place.

    Returns
    -------
    h_dims: list of int
        Dimensions of H_0, ..., H_n.
    """
    if len(boundary_maps) == 0:
        return []
    ranks = [int(np.count_nonzero(reduce_standard(D)[1])) for D in boundary_maps]
    dims = [boundary_maps[0].shape[0]] + [D.shape[1] for D in boundary_maps]
    # H_k = C_k minus the rank out of C_k minus the rank into C_k
    return [dim - out - into for dim, out, into in zip(dims, [0] + ranks, ranks + [0])]
