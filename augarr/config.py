#!/usr/bin/env python
# -*-coding:utf8-*-

# config.py: parameters of a computation
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

from dataclasses import asdict, dataclass

from .errors import InputError
from .logging_config import verbosity_level


@dataclass
class InputParameters():
    """
    Parameters of a computation, as given on the command line.

    Attributes
    ----------
    input_file: str or None
        Bifiltration file, or module invariants file to reload.
    output_file: str or None
        Module invariants file to write.
    hom_degree: int
        Degree of homology.
    koszul: bool
        Compute the Betti numbers from Koszul homology instead of a minimal
        presentation.
    num_threads: int
        Maximal number of worker threads; 0 lets Python decide.
    verbosity: int
        Between 0 (only warnings) and 10.
    minpres, betti, bounds: bool
        Print the minimal presentation, the Betti numbers and dimensions, or
        the bounds of the module, and stop.
    barcodes_file: str or None
        File of query lines whose barcodes are printed.
    x_label, y_label: str
        Names of the parameters.
    x_bins, y_bins: int
        Numbers of bins on each axis, 0 for no binning.
    x_reverse, y_reverse: bool
        Reverse the direction of an axis of the bifiltration.
    """
    input_file: str = None
    output_file: str = None
    hom_degree: int = 0
    koszul: bool = False
    num_threads: int = 0
    verbosity: int = 0
    minpres: bool = False
    betti: bool = False
    bounds: bool = False
    barcodes_file: str = None
    x_label: str = "x"
    y_label: str = "y"
    x_bins: int = 0
    y_bins: int = 0
    x_reverse: bool = False
    y_reverse: bool = False

    def __post_init__(self):
        if self.hom_degree < 0:
            raise InputError(f"homology degree {self.hom_degree} must be nonnegative")
        if self.num_threads < 0:
            raise InputError(f"number of threads {self.num_threads} must be nonnegative")
        if self.x_bins < 0 or self.y_bins < 0:
            raise InputError(f"numbers of bins {self.x_bins} and {self.y_bins} must be nonnegative")
        if not 0 <= self.verbosity <= 10:
            raise InputError(f"verbosity {self.verbosity} must be between 0 and 10")
        if self.minpres and self.koszul:
            raise InputError("a minimal presentation is not computed with the Koszul strategy")
        if sum((self.minpres, self.betti, self.bounds, self.barcodes_file is not None)) > 1:
            raise InputError("choose at most one of minpres, betti, bounds and barcodes")

    @property
    def log_level(self):
        return verbosity_level(self.verbosity)

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        fields = cls.__dataclass_fields__
        return cls(**{key: value for key, value in data.items() if key in fields})
