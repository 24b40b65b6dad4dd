#!/usr/bin/env python
# -*-coding:utf8-*-

# __init__.py: augmented arrangements of bifiltrations
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

from .arrangement import Arrangement, build_arrangement
from .barcode import Bar, BarcodeTemplate, QueryLine, specialize
from .betti import TemplatePoint, TemplatePoints, koszul_template_points
from .computation import Bounds, ComputationResult, compute, compute_bounds, query_barcodes
from .config import InputParameters
from .errors import (
    ArrangementError, AugarrError, FileFormatError, FiltrationError, GradeIndexError, InputError,
    PresentationError, QueryError)
from .exact import INFTY, ExactValue, format_exact, to_exact
from .firep import BifilteredComplex, FIRep
from .grades import GradeIndex
from .presentation import Presentation, minimal_presentation
from .progress import Progress

__version__ = "0.1.0"
