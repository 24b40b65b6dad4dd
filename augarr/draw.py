#!/usr/bin/env python
# -*-coding:utf8-*-

# draw.py: figures of presentations, Betti numbers and arrangements
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

import matplotlib.patches as mpatches
from matplotlib.collections import LineCollection, PatchCollection
import numpy as np


def _grade_points(x_grades, y_grades, grades):
    """Float coordinates of an array of grade indices."""
    xs, ys = x_grades.to_float(), y_grades.to_float()
    return [(xs[i], ys[j]) for i, j in grades]


def _set_limits(ax, points, padding=.1):
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(points) == 0:
        low, high = np.zeros(2), np.ones(2)
    else:
        low, high = points.min(axis=0), points.max(axis=0)
    span = np.maximum(high - low, 1.)
    ax.set_xlim(low[0] - span[0] * padding, high[0] + span[0] * padding)
    ax.set_ylim(low[1] - span[1] * padding, high[1] + span[1] * padding)
    return span.max()


def draw_presentation(ax, presentation, gen_color="#339c9c", rel_color="#e86a58"):
    """
    Draw a free presentation: the free modules of the generators and
    relations are shaded up to the largest grade, and each relation is
    joined to the generators in its image.

    Parameters
    ----------
    ax: matplotlib Axis
        Axis where the presentation is drawn.
    presentation: Presentation
    gen_color, rel_color: matplotlib color, optional
        Colors for the generators and relations.
    """
    gens = _grade_points(presentation.x_grades, presentation.y_grades, presentation.G_grade)
    rels = _grade_points(presentation.x_grades, presentation.y_grades, presentation.R_grade)

    ax.grid(True)
    extent = _set_limits(ax, gens + rels)
    kill_x, kill_y = ax.get_xlim()[1], ax.get_ylim()[1]

    # Draw rectangles
    gen_rects = [mpatches.Rectangle(g, kill_x - g[0], kill_y - g[1]) for g in gens]
    rel_rects = [mpatches.Rectangle(r, kill_x - r[0], kill_y - r[1]) for r in rels]
    ax.add_collection(PatchCollection(gen_rects, fc=gen_color, ec="none", alpha=.6))
    # clear before adding relations
    ax.add_collection(PatchCollection(rel_rects, fc="1", ec="none", alpha=1))
    ax.add_collection(PatchCollection(rel_rects, fc=rel_color, ec="none", alpha=.6))

    # Draw generators and relations
    radius = extent / 100
    gen_points = [mpatches.Circle(g, radius=radius * 1.2) for g in gens]
    rel_points = [mpatches.Circle(r, radius=radius) for r in rels]
    ax.add_collection(PatchCollection(gen_points, fc="0", ec="none", zorder=2.5))
    ax.add_collection(PatchCollection(rel_points, fc="1", ec="0", zorder=2.6))

    # Draw the images of the relations
    image_lines = []
    for j, rel in enumerate(rels):
        for i in presentation.R_image[:, j].nonzero()[0]:
            image_lines.append([gens[i], rel])
    ax.add_collection(LineCollection(image_lines, colors="0"))


def draw_betti_numbers(axes, template_points, x_label="x", y_label="y"):
    """
    Draw the Betti numbers xi_0, xi_1 and xi_2 on three axes, as disks of
    area proportional to the Betti numbers, above the dimensions of the module
    in shades of gray.

    Parameters
    ----------
    axes: list of matplotlib Axis
        At least three axes.
    template_points: TemplatePoints
    x_label, y_label: str, optional
    """
    xs, ys = template_points.x_grades.to_float(), template_points.y_grades.to_float()
    points = [(xs[p.x], ys[p.y]) for p in template_points]
    dims = template_points.homology_dimensions
    dim_max = max(int(dims.max(initial=0)), 1)

    for k, name in enumerate(("zero", "one", "two")):
        ax = axes[k]
        ax.grid(True)
        ax.set_title(rf"$\xi_{k}$")
        ax.set_xlabel(x_label)
        ax.set_ylabel(y_label)
        extent = _set_limits(ax, points)
        x_end, y_end = ax.get_xlim()[1], ax.get_ylim()[1]

        # dimensions, constant on the cells of the grid
        cells = []
        shades = []
        for i, j in zip(*dims.nonzero()):
            x_next = xs[i + 1] if i + 1 < len(xs) else x_end
            y_next = ys[j + 1] if j + 1 < len(ys) else y_end
            cells.append(mpatches.Rectangle((xs[i], ys[j]), x_next - xs[i], y_next - ys[j]))
            shades.append(str(1 - .4 * dims[i, j] / dim_max))
        if cells:
            ax.add_collection(PatchCollection(cells, fc=shades, ec="none"))

        radius = extent / 60
        disks = [mpatches.Circle(point, radius=radius * np.sqrt(getattr(p, name)))
                 for point, p in zip(points, template_points) if getattr(p, name)]
        color = ("#339c9c", "#e86a58", "#f2c14e")[k]
        ax.add_collection(PatchCollection(disks, fc=color, ec="0", alpha=.8, zorder=2.5))


def draw_arrangement(ax, arrangement, color="0", vertex_color="#e86a58"):
    """
    Draw the arrangement in the dual plane: the horizontal axis is the slope t
    and the vertical axis the intercept c of query lines y = t x + c.

    Parameters
    ----------
    ax: matplotlib Axis
    arrangement: Arrangement
    color, vertex_color: matplotlib color, optional
    """
    coordinates = [(float(v.t), float(v.c)) for v in arrangement.vertices]
    segments = []
    for k, e in enumerate(arrangement.half_edges):
        if k < e.twin: # one segment per pair of twins
            segments.append([coordinates[e.origin], coordinates[arrangement.half_edges[e.twin].origin]])

    ax.grid(True)
    ax.set_xlabel("slope")
    ax.set_ylabel("intercept")
    extent = _set_limits(ax, coordinates, padding=.02)
    ax.add_collection(LineCollection(segments, colors=color, linewidths=.8))
    radius = extent / 200
    ax.add_collection(PatchCollection([mpatches.Circle(p, radius=radius) for p in coordinates],
                                      fc=vertex_color, ec="none", zorder=2.5))
