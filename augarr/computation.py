#!/usr/bin/env python
# -*-coding:utf8-*-

# computation.py: computation of augmented arrangements and queries
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
import logging

from .arrangement import build_arrangement
from .barcode import QueryLine, specialize
from .betti import _executor, koszul_template_points
from .errors import InputError
from .firep import BifilteredComplex
from .presentation import minimal_presentation
from .progress import Progress

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

The computation runs in stages:
    1. the bifiltration is turned into a free implicit representation,
    2. the template points are computed, from a minimal presentation or from
       Koszul homology,
    3. the arrangement is built and every face receives a barcode template.
The result holds every artifact that was computed. Once computed, it is only
read, so any number of queries can run on it at the same time.
"""


class ComputationResult():
    """
    Artifacts of a computation.

    Attributes
    ----------
    template_points: TemplatePoints
    presentation: Presentation or None
        Minimal presentation, when computed.
    arrangement: Arrangement or None
        Augmented arrangement, when computed.
    x_label, y_label: str
        Names of the parameters.
    parameters: InputParameters or None
        Parameters of the run that computed the artifacts, when known.
    """
    __slots__ = "template_points", "presentation", "arrangement", "x_label", "y_label", "parameters"

    def __init__(self, template_points, presentation=None, arrangement=None, x_label="x", y_label="y",
                 parameters=None):
        self.template_points = template_points
        self.presentation = presentation
        self.arrangement = arrangement
        self.x_label = x_label
        self.y_label = y_label
        self.parameters = parameters

    def __repr__(self):
        return (f"ComputationResult({len(self.template_points)} template points, "
                f"presentation={self.presentation is not None}, arrangement={self.arrangement!r})")

    @property
    def hom_degree(self):
        return self.template_points.hom_degree


def compute(filtration, use_koszul=False, hom_degree=0, num_threads=0, progress=None,
            with_arrangement=True, x_bins=0, y_bins=0, x_reverse=False, y_reverse=False):
    """
    Compute the template points and the augmented arrangement of a
    bifiltration.

    Parameters
    ----------
    filtration: BifilteredComplex or FIRep
    use_koszul: bool, optional
        If True, compute the Betti numbers from Koszul homology and skip the
        minimal presentation. Default is False.
    hom_degree: int, optional
        Degree of homology, ignored if filtration is a FIRep. Default is 0.
    num_threads: int, optional
        Maximal number of worker threads; 0 lets Python decide.
    progress: Progress, optional
    with_arrangement: bool, optional
        If False, stop after the template points. Default is True.
    x_bins, y_bins: int, optional
        Numbers of bins on each axis, 0 for no binning.
    x_reverse, y_reverse: bool, optional
        Whether to reverse each axis. Only bifiltrations can be reversed.

    Returns
    -------
    result: ComputationResult
    """
    if progress is None:
        progress = Progress()

    progress.advance_stage()
    if isinstance(filtration, BifilteredComplex):
        firep = filtration.firep(hom_degree, x_bins, y_bins, x_reverse, y_reverse)
    elif x_reverse or y_reverse:
        raise InputError("axis reversal needs a bifiltration, not a free implicit representation")
    elif x_bins or y_bins:
        firep = filtration.binned(x_bins, y_bins)
    else:
        firep = filtration
    logger.info("free implicit representation with %d, %d and %d cells in degrees %d, %d and %d",
                len(firep.high_grade), len(firep.mid_grade), len(firep.low_grade),
                firep.hom_degree + 1, firep.hom_degree, firep.hom_degree - 1)

    progress.advance_stage()
    presentation = None
    if use_koszul:
        template_points = koszul_template_points(firep, num_threads, progress)
    else:
        presentation = minimal_presentation(firep, num_threads, progress)
        template_points = presentation.template_points(firep.hom_degree, num_threads)
    logger.info("%d template points", len(template_points))

    arrangement = None
    if with_arrangement:
        progress.advance_stage()
        arrangement = build_arrangement(firep, template_points, num_threads, progress)
    return ComputationResult(template_points, presentation, arrangement, firep.x_label, firep.y_label)


def query_barcodes(result, queries, num_threads=0):
    """
    Barcodes of the module along query lines.

    Every query is checked before any barcode is computed, so an invalid
    query aborts the whole batch.

    Parameters
    ----------
    result: ComputationResult
        Computed or reloaded artifacts, with an arrangement.
    queries: iterable of QueryLine or (angle, offset) pairs
    num_threads: int, optional
        Maximal number of worker threads; 0 lets Python decide.

    Returns
    -------
    barcodes: list of list of Bar
        One barcode per query, in the order of the queries.
    """
    if result.arrangement is None:
        raise InputError("barcodes are queried from an augmented arrangement, which this result does not have")
    lines = [query if isinstance(query, QueryLine) else QueryLine(*query) for query in queries]

    def barcode(line):
        return specialize(result.arrangement.template_at(line), result.template_points, line)

    with _executor(num_threads) as executor:
        return list(executor.map(barcode, lines))


"""
SECTION: Bounds
"""

Bounds = namedtuple("Bounds", ["x_low", "y_low", "x_high", "y_high"])
Bounds.__doc__ = "Smallest box containing the grades of the template points."


def compute_bounds(result):
    """
    Bounds of the template points of a result (or of TemplatePoints).

    Returns
    -------
    bounds: Bounds
        Floats, all zero if there are no template points.
    """
    template_points = result.template_points if isinstance(result, ComputationResult) else result
    if not len(template_points):
        logger.warning("no template points, bounds default to zero")
        return Bounds(0.0, 0.0, 0.0, 0.0)
    xs = [template_points.x_grades[p.x] for p in template_points]
    ys = [template_points.y_grades[p.y] for p in template_points]
    return Bounds(float(min(xs)), float(min(ys)), float(max(xs)), float(max(ys)))
