#!/usr/bin/env python
# -*-coding:utf8-*-

# test_draw.py: tests of the drawing functions
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
"""Tests for augarr/draw.py."""
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from augarr.computation import compute
from augarr.draw import draw_arrangement, draw_betti_numbers
from augarr.firep import BifilteredComplex


def _bowtie():
    return BifilteredComplex([
        ((0,), (0, 0)), ((1,), (0, 0)), ((2,), (0, 1)),
        ((0, 1), (1, 0)), ((0, 2), (0, 1)), ((1, 2), (0, 1)),
    ], x_label="time", y_label="distance")


class TestDraw:

    def test_betti_numbers(self):
        result = compute(_bowtie(), use_koszul=True, with_arrangement=False)
        fig, axes = plt.subplots(1, 3)
        draw_betti_numbers(axes, result.template_points, result.x_label, result.y_label)
        assert axes[0].get_xlabel() == "time"
        assert axes[2].get_title() == r"$\xi_2$"
        # dimensions, then the disks of the nonzero Betti numbers
        assert len(axes[0].collections) == 2
        plt.close(fig)

    def test_presentation(self):
        result = compute(_bowtie(), with_arrangement=False)
        fig, ax = plt.subplots()
        result.presentation.draw(ax)
        assert len(ax.collections) == 6
        plt.close(fig)

    def test_arrangement(self):
        result = compute(_bowtie())
        fig, ax = plt.subplots()
        draw_arrangement(ax, result.arrangement)
        segments, vertices = ax.collections
        assert len(segments.get_segments()) == len(result.arrangement.half_edges) // 2
        assert len(vertices.get_paths()) == len(result.arrangement.vertices)
        plt.close(fig)
