#!/usr/bin/env python
# -*-coding:utf8-*-

# test_barcode.py: tests of query lines, barcode templates and specialization
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
"""Tests for augarr/barcode.py."""
from fractions import Fraction
import math

import pytest

from augarr.barcode import (
    Bar, BarcodeTemplate, QueryLine, TemplateBar, barcode_template, push, push_vertical,
    slice_bars, specialize)
from augarr.betti import koszul_template_points
from augarr.errors import ArrangementError, QueryError
from augarr.exact import INFTY
from augarr.firep import BifilteredComplex


def _hollow_triangle():
    return BifilteredComplex([
        ((0,), (0, 0)), ((1,), (0, 0)), ((2,), (0, 0)),
        ((0, 1), (0, 0)), ((1, 2), (0, 0)), ((0, 2), (0, 0)),
        ((0, 1, 2), (1, 1)),
    ])


def _bowtie():
    """Vertices a, b at (0, 0) and c at (0, 1); ab at (1, 0), ac and bc at (0, 1)."""
    return BifilteredComplex([
        ((0,), (0, 0)), ((1,), (0, 0)), ((2,), (0, 1)),
        ((0, 1), (1, 0)), ((0, 2), (0, 1)), ((1, 2), (0, 1)),
    ])


def _two_components():
    """Vertices at (0, 0) and (1, 0), joined at (2, 1)."""
    return BifilteredComplex([((0,), (0, 0)), ((1,), (1, 0)), ((0, 1), (2, 1))])


class TestPush:

    def test_point_below_is_pushed_up(self):
        assert push(Fraction(1), Fraction(0), Fraction(1), Fraction(0)) == (1, 1)

    def test_point_above_is_pushed_right(self):
        assert push(Fraction(0), Fraction(2), Fraction(1), Fraction(0)) == (2, 2)

    def test_point_on_line(self):
        assert push(Fraction(1), Fraction(1), Fraction(1), Fraction(0)) == (1, 1)

    def test_horizontal_line(self):
        assert push(Fraction(3), Fraction(0), Fraction(0), Fraction(1)) == (3, 1)
        assert push(Fraction(3), Fraction(2), Fraction(0), Fraction(1)) is None

    def test_vertical_line(self):
        assert push_vertical(Fraction(0), Fraction(5), Fraction(1)) == (1, 5)
        assert push_vertical(Fraction(2), Fraction(5), Fraction(1)) is None


class TestQueryLine:

    def test_angle_range(self):
        for angle in (-1, 90.5, 100):
            with pytest.raises(QueryError):
                QueryLine(angle, 0)

    def test_line_number_in_message(self):
        with pytest.raises(QueryError, match="line 4") as info:
            QueryLine(100, 0.92, line_number=4)
        assert info.value.angle == 100

    def test_infinite_offset(self):
        with pytest.raises(QueryError):
            QueryLine(45, math.inf)

    def test_horizontal(self):
        line = QueryLine(0, 0.5)
        assert line.t == 0
        assert line.c == Fraction(1, 2)
        assert not line.is_vertical

    def test_vertical_is_left_of_origin_for_positive_offset(self):
        line = QueryLine(90, 2)
        assert line.is_vertical
        assert line.x0 == -2

    def test_position_measured_from_foot_of_perpendicular(self):
        # the line y = tan(30) x - 1/cos(30) crosses the x-axis at x = 2
        line = QueryLine(30, -1)
        point = line.push(Fraction(0), Fraction(0))
        assert line.position(point) == pytest.approx(math.sqrt(3))

    def test_position_of_missing_push(self):
        assert QueryLine(0, 0).position(None) == math.inf


class TestBarcodeTemplate:

    def test_bars_are_merged_and_sorted(self):
        template = BarcodeTemplate([(1, None, 1), (0, 2, 1), (0, 2, 2), (0, None, 1)])
        assert template.bars == (TemplateBar(0, None, 1), TemplateBar(0, 2, 3), TemplateBar(1, None, 1))

    def test_list_round_trip(self):
        template = BarcodeTemplate([(0, 1, 2), (0, None, 1)])
        assert BarcodeTemplate.from_list(template.to_list()) == template


class TestSliceBars:

    def test_hollow_triangle(self):
        firep = _hollow_triangle().firep(1)
        # along y = x / 3 + 1 / 3, (0, 0) is pushed up and (1, 1) to the right
        assert slice_bars(firep, Fraction(1, 3), Fraction(1, 3)) == [(0, 2)]

    def test_essential_bar(self):
        firep = BifilteredComplex([((0,), (0, 0))]).firep(0)
        assert slice_bars(firep, Fraction(1), Fraction(0)) == [(0, INFTY)]

    def test_requires_positive_slope(self):
        firep = BifilteredComplex([((0,), (0, 0))]).firep(0)
        with pytest.raises(ArrangementError):
            slice_bars(firep, Fraction(0), Fraction(0))

    def test_elder_rule(self):
        firep = _two_components().firep(0)
        bars = slice_bars(firep, Fraction(1), Fraction(0))
        assert sorted(bars, key=lambda bar: bar[0]) == [(0, INFTY), (1, 2)]


class TestSpecialize:

    def test_template_and_specialization(self):
        firep = _hollow_triangle().firep(1)
        points = koszul_template_points(firep)
        template = barcode_template(firep, points, Fraction(1, 3), Fraction(1, 3))
        assert template.bars == (TemplateBar(0, 1, 1),)

        barcode = specialize(template, points, QueryLine(45, 0))
        assert len(barcode) == 1
        assert barcode[0].birth == pytest.approx(0)
        assert barcode[0].death == pytest.approx(math.sqrt(2))
        assert barcode[0].multiplicity == 1

    def test_death_without_push_is_infinite(self):
        firep = _hollow_triangle().firep(1)
        points = koszul_template_points(firep)
        template = BarcodeTemplate([(0, 1, 1)])
        assert specialize(template, points, QueryLine(0, 0)) == [Bar(0.0, math.inf, 1)]

    def test_birth_without_push_is_dropped(self):
        firep = _two_components().firep(0)
        points = koszul_template_points(firep)
        template = BarcodeTemplate([(0, None, 1), (1, 2, 1)])
        # vertical line x = 1/2 never reaches the vertex at (1, 0)
        assert specialize(template, points, QueryLine(90, -0.5)) == [Bar(0.0, math.inf, 1)]

    def test_zero_length_bars_dropped(self):
        firep = _bowtie().firep(0)
        points = koszul_template_points(firep)
        template = BarcodeTemplate([(0, None, 1), (1, 3, 1)])
        # (0, 1) and (1, 1) lie above the line and are pushed to the same point
        barcode = specialize(template, points, QueryLine(45, -5))
        assert len(barcode) == 1
        assert barcode[0].death == math.inf

    def test_multiplicity_is_kept(self):
        firep = _hollow_triangle().firep(1)
        points = koszul_template_points(firep)
        template = BarcodeTemplate([(0, 1, 2)])
        assert specialize(template, points, QueryLine(0, 1)) == [Bar(0.0, 1.0, 2)]
