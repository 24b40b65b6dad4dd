#!/usr/bin/env python
# -*-coding:utf8-*-

# barcode.py: barcode templates and their specialization to query lines
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

from collections import Counter, namedtuple
from fractions import Fraction
import logging
import math

import numpy as np

from .errors import ArrangementError, QueryError
from .exact import INFTY
from .reduction import get_low_of, reduce

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

A query line L is a line of nonnegative slope in the plane of grades. The
push of a grade p onto L is the smallest point of L that is >= p: if p lies
on or below L, it is pushed up vertically, otherwise it is pushed to the
right horizontally. Some grades have no push on horizontal and vertical
lines; they are pushed to infinity.

Pulling a bigraded module back along L gives a persistence module over the
real line, whose births and deaths are pushes of the template points. As
long as the order of the pushes of the template points does not change, the
barcode only changes through the positions of these pushes. A barcode
template records the barcode with template point indices in place of
positions, and is specialized to a given line by pushing the template points.

Positions along L are measured from the foot of the perpendicular from the
origin to L. On a horizontal line the position is the x coordinate, and on
a vertical line it is the y coordinate.
"""

Bar = namedtuple("Bar", ["birth", "death", "multiplicity"])
Bar.__doc__ = """
Bar of a barcode. birth and death are floats, death is math.inf for
essential bars.
"""

TemplateBar = namedtuple("TemplateBar", ["birth", "death", "multiplicity"])
TemplateBar.__doc__ = """
Bar of a barcode template. birth is the index of a template point with
nonzero xi_0, death the index of a template point with nonzero xi_1 or None
for essential bars.
"""


def _death_key(death):
    return -1 if death is None else death


class BarcodeTemplate():
    """
    Barcode with symbolic endpoints, attached to a face of the arrangement.

    Attributes
    ----------
    bars: tuple of TemplateBar
        Sorted by birth index, then death index with essential bars first.
    """
    __slots__ = "bars",

    def __init__(self, bars=()):
        merged = Counter()
        for birth, death, multiplicity in bars:
            merged[int(birth), None if death is None else int(death)] += int(multiplicity)
        self.bars = tuple(sorted((TemplateBar(b, d, m) for (b, d), m in merged.items() if m > 0),
                                 key=lambda bar: (bar.birth, _death_key(bar.death))))

    def __len__(self):
        return len(self.bars)

    def __iter__(self):
        return iter(self.bars)

    def __eq__(self, other):
        return isinstance(other, BarcodeTemplate) and self.bars == other.bars

    def __hash__(self):
        return hash(self.bars)

    def __repr__(self):
        return f"BarcodeTemplate({list(self.bars)!r})"

    def to_list(self):
        """Plain list form, e.g. for serialization."""
        return [[b.birth, b.death, b.multiplicity] for b in self.bars]

    @classmethod
    def from_list(cls, bars):
        return cls(tuple(bar) for bar in bars)


"""
SECTION: Pushes
"""


def push(px, py, t, c):
    """
    Push the grade (px, py) onto the line y = t x + c, with t >= 0.

    Returns
    -------
    point: pair of Fraction or None
        The pushed point, or None if the grade has no push.
    """
    height = t * px + c
    if py <= height: # point below the line, push up
        return (px, height)
    if t == 0:
        return None
    return ((py - c) / t, py) # point above the line, push right


def push_vertical(px, py, x0):
    """Push the grade (px, py) onto the vertical line x = x0."""
    if px <= x0:
        return (x0, py)
    return None


class QueryLine():
    """
    Query line given by an angle in degrees and a signed offset, with exact
    coordinates in the dual plane.

    For an angle below 90 degrees, the line is y = t x + c with
    t = tan(angle) and c = offset / cos(angle), converted exactly from their
    floating point values. The vertical line (angle 90) is x = -offset.

    Attributes
    ----------
    angle, offset: float
    t, c: Fraction or None
        Dual coordinates, None for the vertical line.
    x0: Fraction or None
        Abscissa of the vertical line, None otherwise.
    """
    __slots__ = "angle", "offset", "t", "c", "x0", "_cos", "_tan"

    def __init__(self, angle, offset, line_number=None):
        try:
            angle = float(angle)
            offset = float(offset)
        except (TypeError, ValueError):
            raise QueryError(f"cannot read query ({angle!r}, {offset!r})", line_number) from None
        if not 0 <= angle <= 90:
            raise QueryError(f"angle {angle:g} must be between 0 and 90", line_number,
                             angle=angle, offset=offset)
        if not math.isfinite(offset):
            raise QueryError(f"offset {offset} must be finite", line_number,
                             angle=angle, offset=offset)
        self.angle = angle
        self.offset = offset
        radians = math.radians(angle)
        self._cos = math.cos(radians)
        self._tan = math.tan(radians) if angle != 90 else math.inf
        if angle == 90:
            self.t = self.c = None
            self.x0 = -Fraction(offset)
        elif angle == 0:
            self.t = Fraction(0)
            self.c = Fraction(offset)
            self.x0 = None
        else:
            self.t = Fraction(self._tan)
            self.c = Fraction(offset) / Fraction(self._cos)
            self.x0 = None

    def __repr__(self):
        return f"QueryLine({self.angle:g}, {self.offset:g})"

    @property
    def is_vertical(self):
        return self.x0 is not None

    def push(self, px, py):
        """Exact push of a grade onto the line, or None."""
        if self.is_vertical:
            return push_vertical(px, py, self.x0)
        return push(px, py, self.t, self.c)

    def position(self, point):
        """Position along the line of a pushed point, as a float."""
        if point is None:
            return math.inf
        x, y = point
        if self.is_vertical:
            return float(y)
        if self.angle == 0:
            return float(x)
        return float(x) / self._cos + self.offset * self._tan


"""
SECTION: Barcode templates

Barcode templates are computed at an exact point (t, c) of the dual plane,
with t > 0, so that every grade has a push. We compute the persistent
homology of the free implicit representation pulled back along the line:
the k-cells and (k+1)-cells are ordered by the x coordinates of their pushes
and the boundary matrix is reduced with the "low" algorithm.
"""


def _push_keys(firep, grades, t, c):
    """x coordinates of the pushes of cells of given grades."""
    keys = []
    for i, j in grades:
        px, py = firep.x_grades[i], firep.y_grades[j]
        keys.append(push(px, py, t, c)[0])
    return keys


def _sorted_indices(keys):
    return np.array(sorted(range(len(keys)), key=lambda i: (keys[i], i)), dtype=int)


def slice_bars(firep, t, c):
    """
    Barcode of the module along the line y = t x + c, with t > 0, as pairs of
    exact x coordinates of pushes. Bars of length zero are discarded.

    Returns
    -------
    bars: list of (Fraction, Fraction or INFTY)
    """
    if t <= 0:
        raise ArrangementError("barcode templates are computed on lines of positive slope")
    mid_keys = _push_keys(firep, firep.mid_grade, t, c)
    high_keys = _push_keys(firep, firep.high_grade, t, c)
    mid_order = _sorted_indices(mid_keys)
    high_order = _sorted_indices(high_keys)

    # Positive k-cells: their boundary is a combination of earlier boundaries
    n_low = firep.D_low.shape[0]
    reduced_low = reduce(firep.D_low.copy(), np.arange(n_low), mid_order)
    positive = np.logical_not(reduced_low.any(axis=0))

    # Pair k-cells with (k+1)-cells
    reduced_high = reduce(firep.D_high.copy(), mid_order, high_order)
    low_of = get_low_of(reduced_high, mid_order)

    bars = []
    for i in mid_order:
        if not positive[i]:
            continue
        if low_of[i] >= 0:
            birth, death = mid_keys[i], high_keys[low_of[i]]
            if birth < death:
                bars.append((birth, death))
        else:
            bars.append((mid_keys[i], INFTY))
    return bars


def barcode_template(firep, template_points, t, c):
    """
    Barcode template of the module along the line y = t x + c, where (t, c)
    lies strictly inside a face of the arrangement.

    Parameters
    ----------
    firep: FIRep
    template_points: TemplatePoints
    t, c: Fraction
        Dual coordinates with t > 0.

    Returns
    -------
    template: BarcodeTemplate
    """
    births = {}
    deaths = {}
    for index, point in enumerate(template_points.template_points):
        px, py = template_points.grade_values(point)
        key = push(px, py, t, c)[0]
        if point.zero:
            births.setdefault(key, index)
        if point.one:
            deaths.setdefault(key, index)

    counts = Counter()
    for birth, death in slice_bars(firep, t, c):
        if birth not in births:
            raise ArrangementError(f"birth at x = {birth} is not the push of a generator at ({t}, {c})")
        if death is INFTY:
            counts[births[birth], None] += 1
        elif death in deaths:
            counts[births[birth], deaths[death]] += 1
        else:
            raise ArrangementError(f"death at x = {death} is not the push of a relation at ({t}, {c})")
    return BarcodeTemplate((b, d, m) for (b, d), m in counts.items())


def specialize(template, template_points, line):
    """
    Specialize a barcode template to a query line.

    Births that have no push are dropped, deaths that have no push give
    essential bars, bars of length zero are dropped and equal bars are
    merged.

    Parameters
    ----------
    template: BarcodeTemplate
    template_points: TemplatePoints
    line: QueryLine

    Returns
    -------
    barcode: list of Bar
        Sorted by birth, then by decreasing death.
    """
    pushes = {}

    def push_of(index):
        if index not in pushes:
            point = template_points.template_points[index]
            pushes[index] = line.push(*template_points.grade_values(point))
        return pushes[index]

    counts = Counter()
    for bar in template:
        birth = push_of(bar.birth)
        if birth is None:
            continue
        death = None if bar.death is None else push_of(bar.death)
        if death is not None and death == birth:
            continue
        counts[line.position(birth), line.position(death)] += bar.multiplicity
    return [Bar(b, d, m) for (b, d), m in sorted(counts.items(), key=lambda item: (item[0][0], -item[0][1]))]
