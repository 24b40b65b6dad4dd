#!/usr/bin/env python
# -*-coding:utf8-*-

# errors.py: error taxonomy for augmented arrangement computations
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

"""
SECTION: Errors

Input validation errors (bad filtrations, bad query lines, unreadable files)
are reported to the caller with enough context to fix the input. Internal
invariant violations of the arrangement are fatal and abort the whole
computation. Nothing is retried: every computation is a deterministic
function of its input.
"""


class AugarrError(Exception):
    """Base class for all errors raised by augarr."""


class InputError(AugarrError, ValueError):
    """Invalid input supplied by the caller."""


class FiltrationError(InputError):
    """
    Malformed bifiltration, e.g. a simplex graded below one of its faces or
    a boundary entry between non-monotone grades.
    """


class GradeIndexError(InputError):
    """An exact value is not registered in a grade index."""


class FileFormatError(InputError):
    """
    An input file could not be parsed.

    Attributes
    ----------
    line_number: int or None
        1-based line number of the offending line, if known.
    """

    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class QueryError(FileFormatError):
    """
    Invalid line query, typically an angle outside [0, 90].

    Attributes
    ----------
    angle, offset: float or None
        The offending query, when it could be parsed.
    """

    def __init__(self, message, line_number=None, angle=None, offset=None):
        super().__init__(message, line_number)
        self.angle = angle
        self.offset = offset


class ArrangementError(AugarrError, RuntimeError):
    """
    Internal invariant violation while building or querying the augmented
    arrangement. This always indicates a defect, never bad input.
    """


class PresentationError(AugarrError, RuntimeError):
    """
    Internal invariant violation while computing a minimal presentation,
    e.g. a boundary that is not a cycle at its grade. FIRep rejects such
    inputs, so this always indicates a defect.
    """
