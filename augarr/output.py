#!/usr/bin/env python
# -*-coding:utf8-*-

# output.py: textual output of barcodes, bounds and Betti numbers
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

import sys

from .exact import is_infinite


def format_number(value):
    """Number with 6 significant digits, inf for infinite deaths."""
    if is_infinite(value):
        return "inf"
    return f"{value:g}"


def format_bar(bar):
    return f"{format_number(bar.birth)} {format_number(bar.death)} x{bar.multiplicity}"


def format_barcode_line(line, barcode):
    """
    Line of output for a query, e.g. "23 -0.22: 0.5 inf x1, 0.5 2 x3".

    Parameters
    ----------
    line: QueryLine
    barcode: list of Bar
    """
    return f"{line.angle:g} {line.offset:g}: " + ", ".join(format_bar(bar) for bar in barcode)


def format_bounds(bounds):
    return (f"low: {bounds.x_low:.12g}, {bounds.y_low:.12g}\n"
            f"high: {bounds.x_high:.12g}, {bounds.y_high:.12g}")


def format_grades(x_grades, y_grades):
    """Exact values of the grades, one per line."""
    return "\n".join(["x-grades"] + x_grades.to_strings() + ["", "y-grades"] + y_grades.to_strings() + [""])


def format_dims(template_points):
    """Nonzero dimensions of the module, as (x, y, dim), one column of the grid per block."""
    lines = ["Dimensions > 0:"]
    for i, column in enumerate(template_points.homology_dimensions):
        lines.extend(f"({i}, {j}, {dim})" for j, dim in enumerate(column) if dim > 0)
        lines.append("")
    return "\n".join(lines)


def format_betti(template_points):
    """Nonzero Betti numbers, as (x, y, xi), for xi_0, xi_1 and xi_2."""
    lines = ["Betti numbers:"]
    for k, name in enumerate(("zero", "one", "two")):
        lines.append(f"xi_{k}:")
        for point in template_points:
            value = getattr(point, name)
            if value > 0:
                lines.append(f"({point.x}, {point.y}, {value})")
    return "\n".join(lines)


def print_barcodes(lines, barcodes, file=None):
    file = sys.stdout if file is None else file
    for line, barcode in zip(lines, barcodes):
        print(format_barcode_line(line, barcode), file=file)


def print_betti(template_points, file=None):
    """Grades, dimensions and Betti numbers, as printed by augarr --betti."""
    file = sys.stdout if file is None else file
    print(format_grades(template_points.x_grades, template_points.y_grades), file=file)
    print(format_dims(template_points), file=file)
    print(format_betti(template_points), file=file)


def print_minimal_presentation(presentation, file=None):
    file = sys.stdout if file is None else file
    print("MINIMAL PRESENTATION:", file=file)
    print(presentation.print_sparse(), file=file)
