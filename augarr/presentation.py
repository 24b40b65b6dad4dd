#!/usr/bin/env python
# -*-coding:utf8-*-

# presentation.py: minimal presentations of bigraded modules
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

from .betti import TemplatePoints, _executor
from .errors import PresentationError
from .exact import format_exact
from .reduction import express, in_span, kernel_basis, rank

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

The homology M of a free implicit representation in degree k is presented
by a free module G of cycles and a free module R of relations, with a map

      d
    R -> G -> M -> 0

sending each relation to the cycles it identifies. A minimal presentation
has as few generators and relations as possible, and then the number of
generators and relations at each grade are the Betti numbers xi_0 and xi_1
of M. The generators of the kernel of d give xi_2.

Coefficients are in Z/2, stored as integers in numpy arrays. Grades are
positions in the grid of grades of the bifiltration, whose exact values are
kept in two GradeIndex objects.
"""


class Presentation():
    """
    Free presentation R -> G -> M -> 0 of a bigraded module M over Z/2.

    Attributes
    ----------
    x_grades, y_grades: GradeIndex
        Exact values of the grades in each coordinate.
    G_grade: np.ndarray
        Array of shape (n_gen, 2) of the grades of the generators.
    R_grade: np.ndarray
        Array of shape (n_rel, 2) of the grades of the relations.
    R_image: np.ndarray
        Array of shape (n_gen, n_rel) of the matrix representing the
        morphism R -> G.
    """
    __slots__ = "x_grades", "y_grades", "G_grade", "R_grade", "R_image"
    dim = 2

    def __init__(self, x_grades, y_grades, G_grade, R_grade, R_image):
        self.x_grades = x_grades
        self.y_grades = y_grades
        self.G_grade = np.asarray(G_grade, dtype=int).reshape(-1, 2)
        self.R_grade = np.asarray(R_grade, dtype=int).reshape(-1, 2)
        self.R_image = np.asarray(R_image, dtype=int).reshape(len(self.G_grade), len(self.R_grade)) % 2

    @property
    def n_gen(self):
        return len(self.G_grade)

    @property
    def n_rel(self):
        return len(self.R_grade)

    @property
    def shape(self):
        return (len(self.x_grades), len(self.y_grades))

    def __str__(self):
        """
        Matrix of the presentation, with the grade of each relation above its
        column and the grade of each generator left of its row, e.g.

            (x  ) 0 1
            (  y) 1 0
             0 0 [1 1]
        """
        width = len(str(max(self.G_grade.max(initial=0), self.R_grade.max(initial=0), 1)))

        def cells(values):
            return " ".join(f"{v:{width}d}" for v in values)

        rows = []
        for d, label in enumerate("xy"):
            header = [" " * width] * self.dim
            header[d] = f"{label:>{width}}"
            rows.append(f"({' '.join(header)}) {cells(self.R_grade[:, d])}")
        for grade, image in zip(self.G_grade, self.R_image):
            rows.append(f" {cells(grade)} [{cells(image)}]")
        return "\n".join(rows).strip()

    def __repr__(self):
        return (f"Presentation({self.x_grades!r}, {self.y_grades!r}, {self.G_grade.tolist()!r}, "
                f"{self.R_grade.tolist()!r}, {self.R_image.tolist()!r})")

    def __eq__(self, other):
        return (isinstance(other, Presentation)
                and self.x_grades == other.x_grades
                and self.y_grades == other.y_grades
                and np.array_equal(self.G_grade, other.G_grade)
                and np.array_equal(self.R_grade, other.R_grade)
                and np.array_equal(self.R_image, other.R_image))

    def grade_string(self, grade):
        """Exact values of a grade, e.g. "(1/2, 3)"."""
        x, y = grade
        return f"({format_exact(self.x_grades[x])}, {format_exact(self.y_grades[y])})"

    def print_sparse(self):
        """
        Sparse textual form of the presentation: the exact grades, then one
        line per generator and one line per relation listing the generators
        in its boundary.

        Returns
        -------
        output: str
        """
        lines = [
            "x-grades: " + " ".join(self.x_grades.to_strings()),
            "y-grades: " + " ".join(self.y_grades.to_strings()),
            f"generators: {self.n_gen}",
        ]
        for i in range(self.n_gen):
            lines.append(f"  {i}: {self.grade_string(self.G_grade[i])}")
        lines.append(f"relations: {self.n_rel}")
        for j in range(self.n_rel):
            support = " ".join(str(i) for i in self.R_image[:, j].nonzero()[0])
            lines.append(f"  {j}: {self.grade_string(self.R_grade[j])} ; {support}")
        return "\n".join(lines)

    def draw(self, ax, gen_color="#339c9c", rel_color="#e86a58"):
        """
        Draw the free presentation at its exact grade values.

        Parameters
        ----------
        ax: matplotlib Axis
            Axis where the presentation is drawn.
        gen_color, rel_color: matplotlib color, optional
            Colors for the generators and relations. Default are #339c9c and
            #e86a58, which correspond to certain shades of turquoise and red.
        """
        from .draw import draw_presentation
        draw_presentation(ax, self, gen_color=gen_color, rel_color=rel_color)

    """
    Betti numbers

    For a minimal presentation, xi_0 and xi_1 count the generators and the
    relations at each grade. The kernel K of R -> G is a free module, and
    xi_2 counts its generators, which is

        dim K(a) - dim K(a - e1) - dim K(a - e2) + dim K(a - e1 - e2)

    since K(a - e1) and K(a - e2) intersect in K(a - e1 - e2).
    """
    def _rank_at(self, grade):
        """Rank of the relations graded <= grade."""
        cols = (self.R_grade <= grade).all(axis=1)
        return rank(self.R_image[:, cols])

    def template_points(self, hom_degree=0, num_threads=0):
        """
        Compute the template points of the presented module. The
        presentation is assumed to be minimal.

        Returns
        -------
        template_points: TemplatePoints
        """
        n_x, n_y = self.shape
        grid = list(it.product(range(n_x), range(n_y)))
        with _executor(num_threads) as executor:
            ranks = dict(zip(grid, executor.map(lambda a: self._rank_at(np.asarray(a)), grid)))

        n_gen_below = np.zeros((n_x, n_y), dtype=int)
        n_rel_below = np.zeros((n_x, n_y), dtype=int)
        betti = np.zeros((n_x, n_y, 3), dtype=int)
        for i, j in self.G_grade:
            betti[i, j, 0] += 1
            n_gen_below[i:, j:] += 1
        for i, j in self.R_grade:
            betti[i, j, 1] += 1
            n_rel_below[i:, j:] += 1

        dims = np.zeros((n_x, n_y), dtype=int)
        kernel_dims = np.zeros((n_x + 1, n_y + 1), dtype=int) # padded with zeros at index -1
        for i, j in grid:
            dims[i, j] = n_gen_below[i, j] - ranks[i, j]
            kernel_dims[i, j] = n_rel_below[i, j] - ranks[i, j]
        for i, j in grid:
            betti[i, j, 2] = (kernel_dims[i, j] - kernel_dims[i - 1, j]
                              - kernel_dims[i, j - 1] + kernel_dims[i - 1, j - 1])
        return TemplatePoints.from_betti(self.x_grades, self.y_grades, betti, dims, hom_degree)


"""
SECTION: Minimal presentations

The module H_k is the quotient of the cycle module Z = ker(D_low) by the
boundary module B = im(D_high). Over two parameters, Z is free. We pick
minimal generators of Z grade by grade, in lexicographic order: at grade a,
the generators already picked at grades <= a span Z(a - e1) + Z(a - e2), and
new generators complete them into a basis of Z(a). The boundary of each
(k+1)-cell is then a relation, written in these generators.

The resulting presentation is made minimal in two steps. First, a relation
with a nonzero coefficient on a generator of the same grade is used as a
pivot to eliminate both. Second, the relations that lie in the span of
relations of smaller or equal grade are removed.
"""


def _lex_order(grades):
    """Indices sorting an array of grades of shape (n, 2) lexicographically."""
    if len(grades) == 0:
        return np.zeros(0, dtype=int)
    return np.lexsort((grades[:, 1], grades[:, 0]))


def _cycle_generators(firep, grid, num_threads):
    """
    Minimal generators of the cycle module.

    Returns
    -------
    gens: np.ndarray
        Array of shape (n_mid, n_gen) of cycles.
    gen_grade: np.ndarray
        Array of shape (n_gen, 2) of their grades.
    """
    def cycles_at(grade):
        cols = (firep.mid_grade <= np.asarray(grade)).all(axis=1).nonzero()[0]
        return kernel_basis(firep.D_low, cols)

    with _executor(num_threads) as executor:
        cycle_bases = list(executor.map(cycles_at, grid))

    n_mid = len(firep.mid_grade)
    gens = []
    gen_grade = []
    for grade, cycles in zip(grid, cycle_bases):
        below = [g for g, h in zip(gens, gen_grade) if h[0] <= grade[0] and h[1] <= grade[1]]
        basis = np.array(below, dtype=int).T.reshape(n_mid, len(below))
        for z in cycles.T:
            if not in_span(z, basis):
                gens.append(z)
                gen_grade.append(grade)
                basis = np.hstack((basis, z.reshape(-1, 1)))
    return (np.array(gens, dtype=int).T.reshape(n_mid, len(gens)),
            np.array(gen_grade, dtype=int).reshape(-1, 2))


def _relations(firep, gens, gen_grade, num_threads):
    """Write the boundary of each (k+1)-cell in the basis of generators."""
    def relation(j):
        grade = firep.high_grade[j]
        below = (gen_grade <= grade).all(axis=1).nonzero()[0]
        coefficients = express(firep.D_high[:, j], gens[:, below])
        if coefficients is None:
            raise PresentationError(f"boundary of cell {j} is not a cycle at its grade")
        column = np.zeros(len(gen_grade), dtype=int)
        column[below] = coefficients
        return column

    with _executor(num_threads) as executor:
        columns = list(executor.map(relation, range(len(firep.high_grade))))
    return np.array(columns, dtype=int).T.reshape(len(gen_grade), len(columns))


def _cancel_pairs(R_image, G_grade, R_grade):
    """
    Remove generator/relation pairs of equal grade. R_image is modified.

    Returns
    -------
    gen_alive, rel_alive: np.ndarray of bool
    """
    gen_alive = np.ones(len(G_grade), dtype=bool)
    rel_alive = np.ones(len(R_grade), dtype=bool)
    changed = True
    while changed:
        changed = False
        for r in _lex_order(R_grade):
            if not rel_alive[r]:
                continue
            pivots = [g for g in R_image[:, r].nonzero()[0]
                      if gen_alive[g] and (G_grade[g] == R_grade[r]).all()]
            if not pivots:
                continue
            g = pivots[0]
            for r2 in R_image[g, :].nonzero()[0]:
                if r2 != r and rel_alive[r2]:
                    R_image[:, r2] = (R_image[:, r2] + R_image[:, r]) % 2
            gen_alive[g] = False
            rel_alive[r] = False
            R_image[g, :] = 0
            changed = True
    return gen_alive, rel_alive


def _minimal_relations(R_image, R_grade):
    """Indices of relations that are not in the span of earlier ones."""
    kept = []
    for r in _lex_order(R_grade):
        below = [k for k in kept if (R_grade[k] <= R_grade[r]).all()]
        if not in_span(R_image[:, r], R_image[:, below]):
            kept.append(r)
    return np.array(kept, dtype=int)


def minimal_presentation(firep, num_threads=0, progress=None):
    """
    Compute a minimal presentation of the homology of a free implicit
    representation.

    Parameters
    ----------
    firep: FIRep
    num_threads: int, optional
        Maximal number of worker threads; 0 lets Python decide.
    progress: Progress, optional
        Receives one step for each of the four phases.

    Returns
    -------
    presentation: Presentation
        Minimal presentation, with generators and relations sorted by grade.
    """
    n_x, n_y = firep.shape
    grid = list(it.product(range(n_x), range(n_y)))
    if progress is not None:
        progress.set_progress_maximum(4)

    gens, G_grade = _cycle_generators(firep, grid, num_threads)
    if progress is not None:
        progress.progress(1)
    R_image = _relations(firep, gens, G_grade, num_threads)
    R_grade = firep.high_grade.copy()
    logger.debug("unminimized presentation: %d generators, %d relations", len(G_grade), len(R_grade))
    if progress is not None:
        progress.progress(1)

    gen_alive, rel_alive = _cancel_pairs(R_image, G_grade, R_grade)
    R_image = R_image[gen_alive][:, rel_alive]
    G_grade = G_grade[gen_alive]
    R_grade = R_grade[rel_alive]
    if progress is not None:
        progress.progress(1)

    kept = _minimal_relations(R_image, R_grade)
    R_image = R_image[:, kept]
    R_grade = R_grade[kept].reshape(-1, 2)
    if progress is not None:
        progress.progress(1)

    gen_order = _lex_order(G_grade)
    rel_order = _lex_order(R_grade)
    presentation = Presentation(firep.x_grades, firep.y_grades, G_grade[gen_order],
                                R_grade[rel_order], R_image[gen_order][:, rel_order])
    logger.info("minimal presentation: %d generators, %d relations",
                presentation.n_gen, presentation.n_rel)
    return presentation
