#!/usr/bin/env python
# -*-coding:utf8-*-

# io.py: reading and writing bifiltrations, query lines and module invariants
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

import json
import logging

import numpy as np

from .arrangement import Arrangement
from .barcode import QueryLine
from .betti import TemplatePoints
from .computation import ComputationResult
from .config import InputParameters
from .errors import FileFormatError, InputError
from .exact import INFTY, to_exact
from .firep import BifilteredComplex, FIRep
from .grades import GradeIndex

logger = logging.getLogger(__name__)

MODULE_INVARIANTS_HEADER = "AUGARR_json"

"""
SECTION: Bifiltrations

A bifiltration file lists one simplex per line, as its vertices followed by
a semicolon and the two coordinates of its grade:

    --datatype bifiltration
    --xlabel time
    --ylabel distance
    # comment
    0 ; 0 0
    1 ; 0 1/2
    0 1 ; 1 0.5

The option lines are optional. Grades are read exactly, either as decimals or
as fractions p/q.
"""


def _content_lines(lines):
    """Numbered lines without blank lines and comments."""
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if line and not line.startswith("#"):
            yield line_number, line


def parse_bifiltration(lines):
    """
    Parse a bifiltration from lines of text.

    Returns
    -------
    complex: BifilteredComplex
    """
    complex_ = BifilteredComplex()
    for line_number, line in _content_lines(lines):
        if line.startswith("--"):
            option, _, value = line.partition(" ")
            value = value.strip()
            if option == "--datatype":
                if value != "bifiltration":
                    raise FileFormatError(f"unsupported data type {value!r}", line_number)
            elif option == "--xlabel":
                complex_.x_label = value
            elif option == "--ylabel":
                complex_.y_label = value
            else:
                raise FileFormatError(f"unknown option {option}", line_number)
            continue

        vertices, semicolon, grade = line.partition(";")
        if not semicolon:
            raise FileFormatError("expected vertices, a semicolon and a grade", line_number)
        grade = grade.split()
        if len(grade) != 2:
            raise FileFormatError(f"expected one grade with two coordinates, found {len(grade)} values "
                                  "(multi-critical bifiltrations are not supported)", line_number)
        try:
            complex_.add_simplex(vertices.split(), grade)
        except (InputError, ValueError, ZeroDivisionError) as error:
            raise FileFormatError(str(error), line_number) from error
    logger.info("read %d simplices", len(complex_))
    return complex_


"""
SECTION: Free implicit representations

A FIRep file gives the cells of the chain complex C_k+1 -> C_k -> C_k-1
directly. After the options, a line holds the numbers of (k+1)-cells,
k-cells and (k-1)-cells, then each (k+1)-cell and each k-cell is given by its
grade, a semicolon and the rows of its nonzero boundary entries:

    --datatype firep
    --xlabel time
    --ylabel distance
    1 3 3
    1 1 ; 0 1 2
    0 0 ; 0 1
    0 0 ; 1 2
    0 0 ; 0 2

The (k-1)-cells only matter through the boundary of the k-cells, so they are
placed at the smallest grade.
"""


def parse_firep(lines, hom_degree=0):
    """
    Parse a free implicit representation from lines of text.

    Parameters
    ----------
    lines: iterable of str
    hom_degree: int, optional
        Degree k of homology that the cells compute, kept for output.

    Returns
    -------
    firep: FIRep
    """
    labels = {"--xlabel": "x", "--ylabel": "y"}
    counts = None
    cells = []
    for line_number, line in _content_lines(lines):
        if line.startswith("--"):
            option, _, value = line.partition(" ")
            value = value.strip()
            if option == "--datatype":
                if value != "firep":
                    raise FileFormatError(f"unsupported data type {value!r}", line_number)
            elif option in labels:
                labels[option] = value
            else:
                raise FileFormatError(f"unknown option {option}", line_number)
            continue

        if counts is None:
            try:
                counts = [int(v) for v in line.split()]
            except ValueError:
                counts = []
            if len(counts) != 3 or min(counts) < 0:
                raise FileFormatError("expected the numbers of (k+1)-cells, k-cells and (k-1)-cells",
                                      line_number)
            continue

        grade, semicolon, rows = line.partition(";")
        grade = grade.split()
        if not semicolon or len(grade) != 2:
            raise FileFormatError("expected a grade with two coordinates, a semicolon and "
                                  "boundary rows", line_number)
        try:
            grade = [to_exact(g) for g in grade]
            rows = [int(r) for r in rows.split()]
        except (ValueError, ZeroDivisionError) as error:
            raise FileFormatError(str(error), line_number) from error
        if INFTY in grade:
            raise FileFormatError("infinite grade", line_number)
        cells.append((line_number, grade, rows))

    if counts is None:
        raise FileFormatError("missing numbers of cells")
    n_high, n_mid, n_low = counts
    if len(cells) != n_high + n_mid:
        raise FileFormatError(f"expected {n_high + n_mid} graded cells, found {len(cells)}")

    x_grades = GradeIndex.from_values([grade[0] for _, grade, _ in cells] or [0])
    y_grades = GradeIndex.from_values([grade[1] for _, grade, _ in cells] or [0])
    D_high = np.zeros((n_mid, n_high), dtype=int)
    D_low = np.zeros((n_low, n_mid), dtype=int)
    for j, (line_number, _, rows) in enumerate(cells):
        D, column = (D_high, j) if j < n_high else (D_low, j - n_high)
        for row in rows:
            if not 0 <= row < len(D):
                raise FileFormatError(f"boundary row {row} outside of 0..{len(D) - 1}", line_number)
            D[row, column] ^= 1

    grades = np.array([(x_grades.index(x), y_grades.index(y)) for _, (x, y), _ in cells],
                      dtype=int).reshape(-1, 2)
    firep = FIRep(x_grades, y_grades, grades[:n_high], grades[n_high:], np.zeros((n_low, 2), dtype=int),
                  D_high, D_low, hom_degree, labels["--xlabel"], labels["--ylabel"])
    logger.info("read %d, %d and %d cells", n_high, n_mid, n_low)
    return firep


def read_input(path, hom_degree=0):
    """
    Read a bifiltration or, if its first line is --datatype firep, a free
    implicit representation.

    Returns
    -------
    filtration: BifilteredComplex or FIRep
    """
    with open(path, encoding="utf-8") as file:
        lines = file.readlines()
    first = next((line for _, line in _content_lines(lines)), "")
    if first.split() == ["--datatype", "firep"]:
        return parse_firep(lines, hom_degree)
    return parse_bifiltration(lines)


"""
SECTION: Query lines

A query file lists one line per row, as an angle in degrees between 0 and 90
and a signed offset. Blank lines and lines starting with # are skipped. The
first invalid row stops the reading with an error.
"""


def parse_queries(lines):
    """
    Parse query lines.

    Returns
    -------
    queries: list of QueryLine

    Raises
    ------
    QueryError
        If an angle is outside [0, 90].
    FileFormatError
        If a row cannot be read.
    """
    queries = []
    for line_number, line in _content_lines(lines):
        values = line.split()
        if len(values) < 2:
            raise FileFormatError(f"parse error: {line!r}", line_number)
        try:
            angle, offset = float(values[0]), float(values[1])
        except ValueError:
            raise FileFormatError(f"parse error: {line!r}", line_number) from None
        queries.append(QueryLine(angle, offset, line_number))
    logger.debug("read %d queries", len(queries))
    return queries


def read_query_file(path):
    with open(path, encoding="utf-8") as file:
        return parse_queries(file)


"""
SECTION: Module invariants

The module invariants file starts with the line AUGARR_json, followed by a
JSON object with the parameters, the template points and the augmented
arrangement. Exact values are stored as strings.
"""


def template_points_to_dict(template_points):
    return {
        "hom_degree": template_points.hom_degree,
        "x_grades": template_points.x_grades.to_strings(),
        "y_grades": template_points.y_grades.to_strings(),
        "template_points": [list(p) for p in template_points],
        "homology_dimensions": template_points.homology_dimensions.tolist(),
    }


def template_points_from_dict(data):
    x_grades = GradeIndex.from_values(data["x_grades"])
    y_grades = GradeIndex.from_values(data["y_grades"])
    return TemplatePoints(x_grades, y_grades, data["template_points"], data["homology_dimensions"],
                          data["hom_degree"])


def write_module_invariants(path, result, parameters=None):
    """
    Write the template points and the arrangement of a result.

    Parameters
    ----------
    path: str
    result: ComputationResult
    parameters: InputParameters, optional
        Stored along, for reference. Default is the parameters of the
        result.
    """
    if parameters is None:
        parameters = result.parameters
    data = {
        "parameters": None if parameters is None else parameters.to_dict(),
        "x_label": result.x_label,
        "y_label": result.y_label,
        "template_points": template_points_to_dict(result.template_points),
        "arrangement": None if result.arrangement is None else result.arrangement.to_dict(),
    }
    with open(path, "w", encoding="utf-8") as file:
        file.write(MODULE_INVARIANTS_HEADER + "\n")
        json.dump(data, file)
        file.write("\n")
    logger.info("wrote module invariants to %s", path)


def is_module_invariants_file(path):
    with open(path, encoding="utf-8") as file:
        return file.readline().strip() == MODULE_INVARIANTS_HEADER


def read_module_invariants(path):
    """
    Read a module invariants file.

    Returns
    -------
    result: ComputationResult
        Without minimal presentation, with the parameters of the computation
        when the file stores them.
    """
    with open(path, encoding="utf-8") as file:
        if file.readline().strip() != MODULE_INVARIANTS_HEADER:
            raise FileFormatError(f"{path} is not a module invariants file", 1)
        try:
            data = json.load(file)
        except json.JSONDecodeError as error:
            raise FileFormatError(f"invalid JSON: {error.msg}", error.lineno + 1) from error
    try:
        template_points = template_points_from_dict(data["template_points"])
        x_label, y_label = data.get("x_label", "x"), data.get("y_label", "y")
    except (KeyError, TypeError, ValueError) as error:
        raise FileFormatError(f"invalid template points: {error}") from error
    arrangement = None
    if data.get("arrangement") is not None:
        arrangement = Arrangement.from_dict(data["arrangement"], template_points)
    parameters = None
    if data.get("parameters") is not None:
        try:
            parameters = InputParameters.from_dict(data["parameters"])
        except (InputError, TypeError, AttributeError) as error:
            raise FileFormatError(f"invalid parameters: {error}") from error
    return ComputationResult(template_points, None, arrangement, x_label, y_label, parameters)
