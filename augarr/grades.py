#!/usr/bin/env python
# -*-coding:utf8-*-

# grades.py: registries of exact grade values
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

from bisect import bisect_left, bisect_right

import numpy as np

from .errors import GradeIndexError
from .exact import INFTY, format_exact, to_exact


class GradeIndex():
    """
    Sorted, deduplicated registry of the exact values taken by one
    coordinate of the grades of a bifiltration. Combinatorial structures
    (presentations, template points, arrangements) refer to grades by their
    position in the registry.

    Attributes
    ----------
    values: tuple of Fraction
        Strictly increasing exact values.
    """
    __slots__ = "values",

    def __init__(self, values=()):
        values = tuple(values)
        for previous, current in zip(values, values[1:]):
            if not previous < current:
                raise ValueError("grade values must be strictly increasing")
        self.values = values

    @classmethod
    def from_values(cls, values):
        """
        Build a grade index from arbitrary exact values, removing duplicates.
        INFTY is not a grade and is rejected.
        """
        exact = set()
        for value in values:
            value = to_exact(value)
            if value is INFTY:
                raise ValueError("INFTY cannot be used as a grade")
            exact.add(value)
        return cls(sorted(exact))

    def __len__(self):
        return len(self.values)

    def __getitem__(self, i):
        return self.values[i]

    def __iter__(self):
        return iter(self.values)

    def __eq__(self, other):
        return isinstance(other, GradeIndex) and self.values == other.values

    def __hash__(self):
        return hash(self.values)

    def __repr__(self):
        return f"GradeIndex([{', '.join(format_exact(v) for v in self.values)}])"

    def index(self, value):
        """Position of an exact value, raising GradeIndexError if absent."""
        value = to_exact(value)
        i = bisect_left(self.values, value)
        if i == len(self.values) or self.values[i] != value:
            raise GradeIndexError(f"{format_exact(value)} is not a registered grade")
        return i

    def floor_index(self, value):
        """
        Position of the largest grade <= value, or -1 if every grade is
        larger than value.
        """
        return bisect_right(self.values, to_exact(value)) - 1

    def to_float(self):
        """Return the grades as a numpy array of floats."""
        return np.array([float(v) for v in self.values], dtype=float)

    def to_strings(self):
        """Return the grades as exact strings, e.g. for serialization."""
        return [format_exact(v) for v in self.values]


"""
SECTION: Binning and reversal
"""


def coarsen(values, n_bins=0, reverse=False):
    """
    New value of each grade on a reversed or binned axis.

    Reversal negates the values. Binning then cuts [min, max] into n_bins
    intervals of equal length and rounds each value up to the right end of
    its interval, the minimum going to the right end of the first interval.
    At most n_bins values remain, and binning keeps the order of grades.

    Parameters
    ----------
    values: iterable of Fraction
    n_bins: int, optional
        Number of bins, 0 for no binning. Default is 0.
    reverse: bool, optional
        Default is False.

    Returns
    -------
    mapping: dict
        Maps each value to its new value.
    """
    mapping = {value: -value if reverse else value for value in values}
    if n_bins <= 0 or len(mapping) <= 1:
        return mapping
    low, high = min(mapping.values()), max(mapping.values())
    width = (high - low) / n_bins
    ends = GradeIndex([low + k * width for k in range(n_bins + 1)])
    for value, moved in mapping.items():
        k = ends.floor_index(moved)
        if ends[k] < moved:
            k += 1
        mapping[value] = ends[max(k, 1)]
    return mapping
