#!/usr/bin/env python
# -*-coding:utf8-*-

# betti.py: multigraded Betti numbers and template points
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
from concurrent.futures import ThreadPoolExecutor
import itertools as it
import logging

import numpy as np

from .reduction import homology_dims, induced_map, kernel_basis, quotient_space, zero_space

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

Let M be a finitely presented bigraded module. At every grade a of the grid,
the Koszul complex of M at a is

    0 -> M(a - e1 - e2) -> M(a - e1) + M(a - e2) -> M(a) -> 0

where the maps are induced by the structure maps of M (no signs are needed
over Z/2Z). Its homology dimensions, from right to left, are the multigraded
Betti numbers xi_0(a), xi_1(a) and xi_2(a): the number of generators,
relations and second syzygies at a in a minimal free resolution of M.

Grades a - e1 and a - e2 are taken in the grid of grades, so the complex has
zero terms on the left and bottom borders of the grid.
"""

TemplatePoint = namedtuple("TemplatePoint", ["x", "y", "zero", "one", "two"])
TemplatePoint.__doc__ = """
Grade of the grid, given by indices in the x and y grade indices, where at
least one of the Betti numbers xi_0 (zero), xi_1 (one) and xi_2 (two) is
nonzero.
"""


def _executor(num_threads):
    """Thread pool with at most num_threads workers; 0 lets Python decide."""
    return ThreadPoolExecutor(max_workers=num_threads if num_threads > 0 else None)


class TemplatePoints():
    """
    Multigraded Betti numbers and dimensions of a bigraded module.

    Attributes
    ----------
    x_grades, y_grades: GradeIndex
        Exact values of the grades in each coordinate.
    template_points: tuple of TemplatePoint
        Grades with nonzero Betti numbers, sorted lexicographically.
    homology_dimensions: np.ndarray
        Array of shape (len(x_grades), len(y_grades)) of the dimensions of the
        module at each grade.
    hom_degree: int
        Degree of homology of the module.
    """
    __slots__ = "x_grades", "y_grades", "template_points", "homology_dimensions", "hom_degree"

    def __init__(self, x_grades, y_grades, template_points, homology_dimensions, hom_degree=0):
        self.x_grades = x_grades
        self.y_grades = y_grades
        self.template_points = tuple(sorted(TemplatePoint(*(int(v) for v in p)) for p in template_points))
        for point in self.template_points:
            if min(point[2:]) < 0 or not any(point[2:]):
                raise ValueError(f"invalid template point {point}")
        self.homology_dimensions = np.asarray(homology_dimensions, dtype=int).reshape(
            len(x_grades), len(y_grades))
        self.hom_degree = hom_degree

    @classmethod
    def from_betti(cls, x_grades, y_grades, betti, homology_dimensions, hom_degree=0):
        """
        Build template points from an array of shape (n_x, n_y, 3) of Betti
        numbers, keeping only the grades where one of them is nonzero.
        """
        points = [(i, j, *betti[i, j]) for i, j in zip(*betti.any(axis=2).nonzero())]
        return cls(x_grades, y_grades, points, homology_dimensions, hom_degree)

    def __len__(self):
        return len(self.template_points)

    def __iter__(self):
        return iter(self.template_points)

    def __eq__(self, other):
        return (isinstance(other, TemplatePoints)
                and self.x_grades == other.x_grades
                and self.y_grades == other.y_grades
                and self.template_points == other.template_points
                and np.array_equal(self.homology_dimensions, other.homology_dimensions))

    def __repr__(self):
        return f"TemplatePoints({list(self.template_points)!r})"

    def betti(self):
        """Array of shape (n_x, n_y, 3) of the Betti numbers."""
        betti = np.zeros((len(self.x_grades), len(self.y_grades), 3), dtype=int)
        for p in self.template_points:
            betti[p.x, p.y] = (p.zero, p.one, p.two)
        return betti

    def grade_values(self, point):
        """Exact values (x, y) of a template point."""
        return (self.x_grades[point.x], self.y_grades[point.y])


"""
SECTION: Koszul homology

The space M(a) = Z(a) / B(a) is represented by a QuotientSpace in the basis
of k-cells: B(a) is spanned by the boundaries of the (k+1)-cells graded <= a,
and Z(a) by the cycles supported on k-cells graded <= a.
"""


def module_space(firep, grade):
    """
    QuotientSpace representing M(grade) for the module presented implicitly
    by firep.
    """
    grade = np.asarray(grade)
    mid_cols = (firep.mid_grade <= grade).all(axis=1).nonzero()[0]
    cycles = kernel_basis(firep.D_low, mid_cols)
    high_cols = (firep.high_grade <= grade).all(axis=1)
    boundaries = firep.D_high[:, high_cols]
    return quotient_space(boundaries, cycles)


def koszul_boundary_maps(spaces, i, j):
    """
    Boundary maps of the Koszul complex at grade (i, j).

    Parameters
    ----------
    spaces: dict
        Maps grades (i, j) of the grid to the QuotientSpace of the module.
    i, j: int
        Grade of the Koszul complex.

    Returns
    -------
    boundary_maps: list of np.ndarray
        The matrices of M(a - e1) + M(a - e2) -> M(a) and of
        M(a - e1 - e2) -> M(a - e1) + M(a - e2).
    """
    n_ambient = spaces[i, j].matrix.shape[0]
    here = spaces[i, j]
    left = spaces[i - 1, j] if i > 0 else zero_space(n_ambient)
    down = spaces[i, j - 1] if j > 0 else zero_space(n_ambient)
    diag = spaces[i - 1, j - 1] if i > 0 and j > 0 else zero_space(n_ambient)

    d1 = np.hstack((induced_map(left, here), induced_map(down, here)))
    d2 = np.vstack((induced_map(diag, left), induced_map(diag, down)))
    return [d1, d2]


def koszul_template_points(firep, num_threads=0, progress=None):
    """
    Compute the template points of the module presented implicitly by firep
    from the homology of its Koszul complexes, without building a
    presentation.

    Parameters
    ----------
    firep: FIRep
    num_threads: int, optional
        Maximal number of worker threads; 0 lets Python decide.
    progress: Progress, optional
        Receives one step per grade of the grid, twice.

    Returns
    -------
    template_points: TemplatePoints
    """
    n_x, n_y = firep.shape
    grid = list(it.product(range(n_x), range(n_y)))
    if progress is not None:
        progress.set_progress_maximum(2 * len(grid))

    def space_at(grade):
        space = module_space(firep, grade)
        if progress is not None:
            progress.progress(1)
        return space

    with _executor(num_threads) as executor:
        spaces = dict(zip(grid, executor.map(space_at, grid)))

        def betti_at(grade):
            h_dims = homology_dims(koszul_boundary_maps(spaces, *grade))
            if progress is not None:
                progress.progress(1)
            return h_dims

        all_h_dims = list(executor.map(betti_at, grid))

    betti = np.zeros((n_x, n_y, 3), dtype=int)
    dims = np.zeros((n_x, n_y), dtype=int)
    for grade, h_dims in zip(grid, all_h_dims):
        betti[grade] = h_dims
        dims[grade] = spaces[grade].n_active
    logger.info("Koszul homology: %d template points on a %dx%d grid",
                np.count_nonzero(betti.any(axis=2)), n_x, n_y)
    return TemplatePoints.from_betti(firep.x_grades, firep.y_grades, betti, dims, firep.hom_degree)
