#!/usr/bin/env python
# -*-coding:utf8-*-

# arrangement.py: line arrangement in the dual plane with barcode templates
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

from bisect import bisect_right
from collections import defaultdict, namedtuple
from fractions import Fraction
import itertools as it
import logging

from .barcode import BarcodeTemplate, barcode_template
from .betti import _executor
from .errors import ArrangementError, FileFormatError
from .exact import format_exact, to_exact

logger = logging.getLogger(__name__)

"""
SECTION: Introduction

Lines of nonnegative slope y = t x + c in the plane of grades are points
(t, c) of the dual plane. For a grade p = (px, py), the lines through p form
the support line c = py - px t of p: a query line passes below p exactly when
its dual point lies below the support line of p.

The barcode template of a query line only depends on the position of the line
relative to the template points and to the anchors, i.e. the least upper
bounds of pairs of incomparable template points. The support lines of these
grades cut the half plane t >= 0 into faces, and each face carries one barcode
template.

The arrangement is stored as a doubly connected edge list. Vertices, half
edges and faces are records in three lists, and refer to each other by
index. Every face is traversed counterclockwise: a face lies to the left of
each of its half edges. The faces are clipped to a box [0, T] x [C_lo, C_hi]
containing every vertex, and the outside of the box is a single outer face
without template.
"""


class SupportLine(namedtuple("SupportLine", ["x", "y", "px", "py"])):
    """
    Support line c = py - px t of the grade (px, py), of indices (x, y) in
    the grade indices.
    """
    __slots__ = ()

    def value(self, t):
        return self.py - self.px * t

    @property
    def slope(self):
        return -self.px


class Vertex():
    __slots__ = "t", "c", "edge"

    def __init__(self, t, c, edge=None):
        self.t = t
        self.c = c
        self.edge = edge

    def __repr__(self):
        return f"Vertex({self.t}, {self.c}, edge={self.edge})"


class HalfEdge():
    """
    Half edge of the arrangement. line is the index of its support line, or
    None on the boundary of the box.
    """
    __slots__ = "origin", "twin", "next", "prev", "face", "line"

    def __init__(self, origin, twin=None, next=None, prev=None, face=None, line=None):
        self.origin = origin
        self.twin = twin
        self.next = next
        self.prev = prev
        self.face = face
        self.line = line

    def __repr__(self):
        return (f"HalfEdge(origin={self.origin}, twin={self.twin}, next={self.next}, "
                f"prev={self.prev}, face={self.face}, line={self.line})")


class Face():
    __slots__ = "edge", "template"

    def __init__(self, edge=None, template=None):
        self.edge = edge
        self.template = template

    def __repr__(self):
        return f"Face(edge={self.edge}, template={self.template!r})"


OUTER_FACE = 0


def anchors(template_points):
    """Grid positions of the least upper bounds of incomparable template points."""
    result = set()
    for p, q in it.combinations(template_points.template_points, 2):
        if (p.x - q.x) * (p.y - q.y) < 0:
            result.add((max(p.x, q.x), max(p.y, q.y)))
    return result


def support_lines(template_points):
    """
    Support lines of the template points and anchors, without repetition,
    sorted by grid position.
    """
    positions = {(p.x, p.y) for p in template_points} | anchors(template_points)
    return [SupportLine(i, j, template_points.x_grades[i], template_points.y_grades[j])
            for i, j in sorted(positions)]


def _crossings(lines, i):
    """Crossings with t > 0 of line i with the lines after it."""
    a = lines[i]
    crossings = []
    for j in range(i + 1, len(lines)):
        b = lines[j]
        if a.px == b.px:
            continue # parallel
        t = (a.py - b.py) / (a.px - b.px)
        if t > 0:
            crossings.append((t, a.value(t), i, j))
    return crossings


class _Gap():
    """Face between two consecutive lines of the sweep, under construction."""
    __slots__ = "face", "lower", "upper", "left", "right"

    def __init__(self, face):
        self.face = face
        self.lower = []
        self.upper = []
        self.left = None
        self.right = None


class Arrangement():
    """
    Arrangement of the support lines in the dual plane, with a barcode template
    on each face and a slab decomposition for point location.

    Attributes
    ----------
    lines: list of SupportLine
    vertices: list of Vertex
    half_edges: list of HalfEdge
    faces: list of Face
        faces[0] is the outer face.
    box: tuple of Fraction
        (T, C_lo, C_hi), the bounding box is [0, T] x [C_lo, C_hi].
    """

    def __init__(self, lines, vertices, half_edges, faces, box, slab_ts, slab_orders, slab_faces):
        self.lines = lines
        self.vertices = vertices
        self.half_edges = half_edges
        self.faces = faces
        self.box = box
        self._slab_ts = slab_ts
        self._slab_orders = slab_orders
        self._slab_faces = slab_faces

    def __repr__(self):
        return "Arrangement(%(vertices)d vertices, %(half_edges)d half edges, %(faces)d faces)" % self.stats()

    def stats(self):
        return {"vertices": len(self.vertices),
                "half_edges": len(self.half_edges),
                "faces": len(self.faces)}

    def face_cycle(self, face):
        """Indices of the half edges around a face, starting from its edge."""
        start = self.faces[face].edge
        cycle = [start]
        e = self.half_edges[start].next
        while e != start:
            cycle.append(e)
            e = self.half_edges[e].next
        return cycle

    def face_vertices(self, face):
        return [self.half_edges[e].origin for e in self.face_cycle(face)]

    def interior_point(self, face):
        """Centroid of the vertices of a face, strictly inside the face."""
        vertices = [self.vertices[v] for v in self.face_vertices(face)]
        n = len(vertices)
        return (Fraction(sum(v.t for v in vertices), n), Fraction(sum(v.c for v in vertices), n))

    def locate(self, line):
        """
        Face of the arrangement containing the dual point of a query line.

        A dual point on a support line belongs to the face above it, so a
        dual point on a vertex belongs to the face directly above the vertex.
        The vertical line x = x0 belongs to the face of steep lines lying
        above the grades of x coordinate greater than x0.

        Parameters
        ----------
        line: QueryLine

        Returns
        -------
        face: int
        """
        if line.is_vertical:
            s = len(self._slab_ts)
            count = sum(1 for i in self._slab_orders[s] if self.lines[i].px > line.x0)
            return self._slab_faces[s][count]

        t, c = line.t, line.c
        s = bisect_right(self._slab_ts, t)
        order = self._slab_orders[s]
        lo, hi = 0, len(order)
        while lo < hi:
            mid = (lo + hi) // 2
            if self.lines[order[mid]].value(t) <= c:
                lo = mid + 1
            else:
                hi = mid
        return self._slab_faces[s][lo]

    def template_at(self, line):
        """Barcode template of the face containing a query line."""
        return self.faces[self.locate(line)].template

    def draw(self, ax, **kwargs):
        """Draw the arrangement in the dual plane, see augarr.draw.draw_arrangement."""
        from .draw import draw_arrangement
        draw_arrangement(ax, self, **kwargs)

    """
    SECTION: Serialization
    """

    def to_dict(self):
        return {
            "lines": [[line.x, line.y] for line in self.lines],
            "box": [format_exact(value) for value in self.box],
            "vertices": [[format_exact(v.t), format_exact(v.c), v.edge] for v in self.vertices],
            "half_edges": [[e.origin, e.twin, e.next, e.prev, e.face, e.line] for e in self.half_edges],
            "faces": [[f.edge, None if f.template is None else f.template.to_list()] for f in self.faces],
            "slabs": {"t": [format_exact(t) for t in self._slab_ts],
                      "orders": [list(order) for order in self._slab_orders],
                      "faces": [list(faces) for faces in self._slab_faces]},
        }

    @classmethod
    def from_dict(cls, data, template_points):
        try:
            lines = [SupportLine(x, y, template_points.x_grades[x], template_points.y_grades[y])
                     for x, y in data["lines"]]
            vertices = [Vertex(to_exact(t), to_exact(c), edge) for t, c, edge in data["vertices"]]
            half_edges = [HalfEdge(*record) for record in data["half_edges"]]
            faces = [Face(edge, None if bars is None else BarcodeTemplate.from_list(bars))
                     for edge, bars in data["faces"]]
            box = tuple(to_exact(value) for value in data["box"])
            slabs = data["slabs"]
            slab_ts = [to_exact(t) for t in slabs["t"]]
            slab_orders = [tuple(order) for order in slabs["orders"]]
            slab_faces = [tuple(f) for f in slabs["faces"]]
        except (KeyError, TypeError, ValueError, IndexError) as error:
            raise FileFormatError(f"invalid arrangement: {error}") from error
        if len(slab_orders) != len(slab_ts) + 1 or len(slab_faces) != len(slab_orders):
            raise FileFormatError("invalid arrangement: inconsistent slabs")
        return cls(lines, vertices, half_edges, faces, box, slab_ts, slab_orders, slab_faces)


"""
SECTION: Construction

The arrangement is built by a sweep from t = 0 to t = T. The sweep keeps the
order of the lines from bottom to top, and a face under construction in each
of the gaps between consecutive lines, with gap 0 below the lowest line and
gap n above the highest. At a vertex, the lines through it are consecutive in
the order: their edges end, the gaps between them close, their order is
reversed and new gaps open between them.
"""


class _Builder():

    def __init__(self, lines):
        self.lines = lines
        self.vertices = []
        self.half_edges = []
        self.faces = [Face()] # outer face

    def vertex(self, t, c):
        self.vertices.append(Vertex(Fraction(t), Fraction(c)))
        return len(self.vertices) - 1

    def gap(self):
        self.faces.append(Face())
        return _Gap(len(self.faces) - 1)

    def edge_pair(self, origin, destination, face, twin_face, line=None):
        """Half edge from origin to destination on face, and its twin on twin_face."""
        e, twin = len(self.half_edges), len(self.half_edges) + 1
        self.half_edges.append(HalfEdge(origin, twin=twin, face=face, line=line))
        self.half_edges.append(HalfEdge(destination, twin=e, face=twin_face, line=line))
        for v, edge in ((origin, e), (destination, twin)):
            if self.vertices[v].edge is None:
                self.vertices[v].edge = edge
        return e, twin

    def link(self, cycle, face):
        for k, e in enumerate(cycle):
            following = cycle[(k + 1) % len(cycle)]
            record = self.half_edges[e]
            if record.face != face:
                raise ArrangementError(f"half edge {e} is not on face {face}")
            if self.half_edges[record.twin].origin != self.half_edges[following].origin:
                raise ArrangementError(f"boundary of face {face} is not connected at half edge {e}")
            record.next = following
            self.half_edges[following].prev = e
        self.faces[face].edge = cycle[0]

    def close(self, gap):
        cycle = gap.lower[:]
        if gap.right is not None:
            cycle.append(gap.right)
        cycle.extend(reversed(gap.upper))
        if gap.left is not None:
            cycle.append(gap.left)
        self.link(cycle, gap.face)

    def build(self, crossings):
        lines = self.lines
        n = len(lines)
        T = max((t for t, c in crossings), default=Fraction(0)) + 1
        values = [line.value(0) for line in lines] + [line.value(T) for line in lines]
        values += [c for t, c in crossings]
        c_lo, c_hi = min(values, default=Fraction(0)) - 1, max(values, default=Fraction(0)) + 1

        BL, BR = self.vertex(0, c_lo), self.vertex(T, c_lo)
        TL, TR = self.vertex(0, c_hi), self.vertex(T, c_hi)
        left = {value: self.vertex(0, value) for value in sorted({line.value(0) for line in lines})}
        open_vertex = [left[line.value(0)] for line in lines]

        # order just after t = 0
        order = sorted(range(n), key=lambda i: (lines[i].value(0), lines[i].slope))
        position = {line: p for p, line in enumerate(order)}
        gaps = [self.gap() for _ in range(n + 1)]

        bottom, bottom_twin = self.edge_pair(BL, BR, gaps[0].face, OUTER_FACE)
        gaps[0].lower.append(bottom)
        top, top_twin = self.edge_pair(TR, TL, gaps[n].face, OUTER_FACE)
        gaps[n].upper.append(top)

        left_twins = []
        for g in range(n + 1):
            upper = TL if g == n else open_vertex[order[g]]
            lower = BL if g == 0 else open_vertex[order[g - 1]]
            if upper != lower:
                gaps[g].left, twin = self.edge_pair(upper, lower, gaps[g].face, OUTER_FACE)
                left_twins.append(twin)

        slab_ts = []
        slab_orders = [tuple(order)]
        slab_faces = [tuple(gap.face for gap in gaps)]
        for t, group in it.groupby(sorted(crossings), key=lambda key: key[0]):
            for key in group:
                positions = sorted(position[i] for i in crossings[key])
                k, m = positions[0], len(positions)
                if positions[-1] - k != m - 1:
                    raise ArrangementError(f"lines through vertex ({t}, {key[1]}) are not consecutive")
                v = self.vertex(*key)
                for p in range(k, k + m):
                    line = order[p]
                    e, twin = self.edge_pair(open_vertex[line], v, gaps[p + 1].face, gaps[p].face, line)
                    gaps[p + 1].lower.append(e)
                    gaps[p].upper.append(twin)
                    open_vertex[line] = v
                for g in range(k + 1, k + m):
                    self.close(gaps[g])
                    gaps[g] = self.gap()
                order[k:k + m] = order[k:k + m][::-1]
                for p in range(k, k + m):
                    position[order[p]] = p
            slab_ts.append(t)
            slab_orders.append(tuple(order))
            slab_faces.append(tuple(gap.face for gap in gaps))

        right = []
        for p, line in enumerate(order):
            v = self.vertex(T, lines[line].value(T))
            e, twin = self.edge_pair(open_vertex[line], v, gaps[p + 1].face, gaps[p].face, line)
            gaps[p + 1].lower.append(e)
            gaps[p].upper.append(twin)
            right.append(v)

        right_twins = []
        for g in range(n + 1):
            lower = BR if g == 0 else right[g - 1]
            upper = TR if g == n else right[g]
            gaps[g].right, twin = self.edge_pair(lower, upper, gaps[g].face, OUTER_FACE)
            right_twins.append(twin)
        for gap in gaps:
            self.close(gap)
        self.link([bottom_twin] + left_twins + [top_twin] + right_twins[::-1], OUTER_FACE)

        return Arrangement(lines, self.vertices, self.half_edges, self.faces, (T, c_lo, c_hi),
                           slab_ts, slab_orders, slab_faces)


def build_arrangement(firep, template_points, num_threads=0, progress=None):
    """
    Build the arrangement of the support lines of the template points and
    anchors, and compute the barcode template of each face.

    Parameters
    ----------
    firep: FIRep
        Free implicit representation of the module.
    template_points: TemplatePoints
        Template points of the same module.
    num_threads: int, optional
        Maximal number of worker threads; 0 lets Python decide.
    progress: Progress, optional
        Receives one step per face.

    Returns
    -------
    arrangement: Arrangement
    """
    lines = support_lines(template_points)
    logger.info("%d support lines from %d template points", len(lines), len(template_points))

    crossings = defaultdict(set)
    with _executor(num_threads) as executor:
        for found in executor.map(lambda i: _crossings(lines, i), range(len(lines))):
            for t, c, i, j in found:
                crossings[t, c].update((i, j))

        arrangement = _Builder(lines).build(crossings)
        logger.info("arrangement with %(vertices)d vertices, %(half_edges)d half edges "
                    "and %(faces)d faces", arrangement.stats())

        interior = range(1, len(arrangement.faces))
        if progress is not None:
            progress.set_progress_maximum(len(interior))

        def template_of(face):
            t, c = arrangement.interior_point(face)
            template = barcode_template(firep, template_points, t, c)
            if progress is not None:
                progress.progress(1)
            return template

        for face, template in zip(interior, executor.map(template_of, interior)):
            arrangement.faces[face].template = template
    return arrangement
