#!/usr/bin/env python
# -*-coding:utf8-*-

# firep.py: bifiltered complexes and free implicit representations
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

import itertools as it
import logging

import numpy as np

from .errors import FiltrationError
from .exact import INFTY, format_exact, to_exact
from .grades import GradeIndex, coarsen

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

The homology in degree k of a one-critical bifiltered complex is the
homology of the middle term of a chain complex of free modules over Z/2Z[x, y]

           D_high        D_low
    C_k+1 -------> C_k -------> C_k-1

where each cell generates a free summand at its grade. This triple of graded
cells with the two boundary matrices is called a free implicit
representation (FIRep). Boundary entries must go from a cell to a cell of
lower or equal grade: a boundary entry between non-monotone grades is a
malformed filtration.
"""


def _check_monotone(D, row_grades, col_grades, name):
    """
    Raise FiltrationError if some nonzero entry D[i, j] has a row grade that
    is not <= the column grade.
    """
    rows, cols = D.nonzero()
    for i, j in zip(rows, cols):
        if (row_grades[i] > col_grades[j]).any():
            raise FiltrationError(
                f"{name}: boundary entry ({i}, {j}) goes from grade "
                f"{tuple(col_grades[j])} to the larger grade {tuple(row_grades[i])}")


class FIRep():
    """
    Free implicit representation of a bigraded persistence module, with
    coefficients in Z/2Z. Grades are given as indices in x_grades and
    y_grades.

    Attributes
    ----------
    x_grades, y_grades: GradeIndex
        Exact values of the grades in each coordinate.
    high_grade: np.ndarray
        Array of shape (n_high, 2) of the grades of the (k+1)-cells.
    mid_grade: np.ndarray
        Array of shape (n_mid, 2) of the grades of the k-cells.
    low_grade: np.ndarray
        Array of shape (n_low, 2) of the grades of the (k-1)-cells.
    D_high: np.ndarray
        Array of shape (n_mid, n_high) of the boundary of the (k+1)-cells.
    D_low: np.ndarray
        Array of shape (n_low, n_mid) of the boundary of the k-cells.
    hom_degree: int
        Degree k of homology.
    x_label, y_label: str
        Names of the two grading parameters.
    """
    __slots__ = ("x_grades", "y_grades", "high_grade", "mid_grade", "low_grade",
                 "D_high", "D_low", "hom_degree", "x_label", "y_label")

    def __init__(self, x_grades, y_grades, high_grade, mid_grade, low_grade,
                 D_high, D_low, hom_degree=0, x_label="x", y_label="y"):
        self.x_grades = x_grades
        self.y_grades = y_grades
        self.high_grade = np.asarray(high_grade, dtype=int).reshape(-1, 2)
        self.mid_grade = np.asarray(mid_grade, dtype=int).reshape(-1, 2)
        self.low_grade = np.asarray(low_grade, dtype=int).reshape(-1, 2)
        self.D_high = np.asarray(D_high, dtype=int).reshape(len(self.mid_grade), len(self.high_grade)) % 2
        self.D_low = np.asarray(D_low, dtype=int).reshape(len(self.low_grade), len(self.mid_grade)) % 2
        self.hom_degree = hom_degree
        self.x_label = x_label
        self.y_label = y_label

        for grades in (self.high_grade, self.mid_grade, self.low_grade):
            if len(grades) and ((grades < 0).any()
                    or (grades[:, 0] >= len(x_grades)).any()
                    or (grades[:, 1] >= len(y_grades)).any()):
                raise FiltrationError("cell grade outside of the grade indices")
        _check_monotone(self.D_high, self.mid_grade, self.high_grade, "D_high")
        _check_monotone(self.D_low, self.low_grade, self.mid_grade, "D_low")
        if (self.D_low @ self.D_high % 2).any():
            raise FiltrationError("boundary matrices do not compose to zero")

    @property
    def shape(self):
        """Shape of the grid of grades."""
        return (len(self.x_grades), len(self.y_grades))

    def __repr__(self):
        return (f"FIRep(degree={self.hom_degree}, cells=({len(self.high_grade)}, "
                f"{len(self.mid_grade)}, {len(self.low_grade)}), shape={self.shape})")

    def grade_values(self, grade):
        """Exact values of a grade given by indices."""
        return (self.x_grades[int(grade[0])], self.y_grades[int(grade[1])])

    def binned(self, x_bins=0, y_bins=0):
        """
        FIRep with its grades rounded up into bins, see grades.coarsen.
        Binning keeps the order of grades, so the boundary matrices are
        unchanged.
        """
        def axis(grades, n_bins):
            mapping = coarsen(grades, n_bins)
            new = GradeIndex.from_values(mapping.values())
            return new, np.array([new.index(mapping[v]) for v in grades], dtype=int)

        x_grades, x_new = axis(self.x_grades, x_bins)
        y_grades, y_new = axis(self.y_grades, y_bins)

        def regrade(grades):
            return np.column_stack((x_new[grades[:, 0]], y_new[grades[:, 1]]))

        return FIRep(x_grades, y_grades, regrade(self.high_grade), regrade(self.mid_grade),
                     regrade(self.low_grade), self.D_high, self.D_low, self.hom_degree,
                     self.x_label, self.y_label)


class BifilteredComplex():
    """
    One-critical bifiltered simplicial complex: each simplex appears at a
    single exact grade (x, y) and stays afterwards.

    Attributes
    ----------
    grades: dict
        Maps each simplex, as a sorted tuple of vertices, to its exact grade.
    x_label, y_label: str
        Names of the two filtration parameters, used by front ends.
    """

    def __init__(self, simplices=(), x_label="x", y_label="y"):
        self.grades = {}
        self.x_label = x_label
        self.y_label = y_label
        for vertices, grade in simplices:
            self.add_simplex(vertices, grade)

    def __len__(self):
        return len(self.grades)

    def __repr__(self):
        return f"BifilteredComplex({len(self)} simplices)"

    def add_simplex(self, vertices, grade):
        """
        Add a simplex at an exact grade. Faces are only checked by validate,
        so simplices may be added in any order.

        Parameters
        ----------
        vertices: iterable of int
            Vertices of the simplex.
        grade: pair of numbers or strings
            Grade of the simplex, converted with to_exact.
        """
        simplex = tuple(sorted(int(v) for v in vertices))
        if len(simplex) == 0:
            raise FiltrationError("empty simplex")
        if len(set(simplex)) != len(simplex):
            raise FiltrationError(f"repeated vertex in simplex {simplex}")
        if simplex in self.grades:
            raise FiltrationError(f"simplex {simplex} appears twice (multi-critical "
                                  "bifiltrations are not supported)")
        x, y = (to_exact(g) for g in grade)
        if x is INFTY or y is INFTY:
            raise FiltrationError(f"simplex {simplex} has an infinite grade")
        self.grades[simplex] = (x, y)

    def dimension(self):
        """Largest dimension of a simplex, or -1 for the empty complex."""
        return max((len(s) - 1 for s in self.grades), default=-1)

    def validate(self):
        """
        Check that every facet of every simplex is present with a grade less
        than or equal to the simplex's grade.
        """
        for simplex, (x, y) in self.grades.items():
            if len(simplex) == 1:
                continue
            for facet in it.combinations(simplex, len(simplex) - 1):
                if facet not in self.grades:
                    raise FiltrationError(f"facet {facet} of simplex {simplex} is missing")
                fx, fy = self.grades[facet]
                if fx > x or fy > y:
                    raise FiltrationError(
                        f"facet {facet} at grade ({format_exact(fx)}, {format_exact(fy)}) "
                        f"appears after simplex {simplex} at grade "
                        f"({format_exact(x)}, {format_exact(y)})")

    def simplices_of_dim(self, dim):
        """
        Simplices of a given dimension, sorted by grade then by vertices so
        that the order is deterministic.
        """
        simplices = [s for s in self.grades if len(s) == dim + 1]
        simplices.sort(key=lambda s: (self.grades[s], s))
        return simplices

    def transformed(self, x_bins=0, y_bins=0, x_reverse=False, y_reverse=False):
        """
        Complex with reversed then binned grades, see grades.coarsen. A
        reversed axis negates the grades, so a complex that is not valid may
        become valid and conversely.

        Returns
        -------
        complex: BifilteredComplex
        """
        x_map = coarsen((g[0] for g in self.grades.values()), x_bins, x_reverse)
        y_map = coarsen((g[1] for g in self.grades.values()), y_bins, y_reverse)
        result = BifilteredComplex(x_label=self.x_label, y_label=self.y_label)
        result.grades = {s: (x_map[x], y_map[y]) for s, (x, y) in self.grades.items()}
        return result

    def firep(self, hom_degree=0, x_bins=0, y_bins=0, x_reverse=False, y_reverse=False):
        """
        Compute the free implicit representation for homology in degree
        hom_degree.

        Parameters
        ----------
        hom_degree: int, optional
            Default is 0.
        x_bins, y_bins: int, optional
            Numbers of bins on each axis, 0 for no binning.
        x_reverse, y_reverse: bool, optional
            Whether to reverse each axis before binning.

        Returns
        -------
        firep: FIRep
        """
        if hom_degree < 0:
            raise FiltrationError("homology degree must be nonnegative")
        if x_bins or y_bins or x_reverse or y_reverse:
            logger.info("Binning grades into %d x %d bins, reversed axes: %s",
                        x_bins, y_bins,
                        ", ".join(name for name, flag in ((self.x_label, x_reverse),
                                                          (self.y_label, y_reverse)) if flag) or "none")
            return self.transformed(x_bins, y_bins, x_reverse, y_reverse).firep(hom_degree)
        self.validate()
        x_grades = GradeIndex.from_values(g[0] for g in self.grades.values())
        y_grades = GradeIndex.from_values(g[1] for g in self.grades.values())

        high = self.simplices_of_dim(hom_degree + 1)
        mid = self.simplices_of_dim(hom_degree)
        low = self.simplices_of_dim(hom_degree - 1) if hom_degree > 0 else []
        logger.debug("FIRep in degree %d: %d, %d, %d cells",
                     hom_degree, len(high), len(mid), len(low))

        def index_grades(simplices):
            return np.array([(x_grades.index(self.grades[s][0]), y_grades.index(self.grades[s][1]))
                             for s in simplices], dtype=int).reshape(-1, 2)

        D_high = _boundary_matrix(high, mid)
        D_low = _boundary_matrix(mid, low)
        return FIRep(x_grades, y_grades, index_grades(high), index_grades(mid), index_grades(low),
                     D_high, D_low, hom_degree, self.x_label, self.y_label)


def _boundary_matrix(cells, faces):
    """Boundary matrix with rows indexed by faces and columns by cells."""
    D = np.zeros((len(faces), len(cells)), dtype=int)
    if len(faces) == 0:
        return D
    row_of = {face: i for i, face in enumerate(faces)}
    for j, cell in enumerate(cells):
        for facet in it.combinations(cell, len(cell) - 1):
            D[row_of[facet], j] = 1
    return D
