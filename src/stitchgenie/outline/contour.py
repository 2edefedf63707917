"""
Inflated outline construction for Stitch Genie.

Traces the silhouette's outer boundary offset outward by the inflation
distance. Every occupied cell contributes straight segments for its exterior
edges, clockwise arcs at convex corners and counter-clockwise arcs at
concave corners. Fragments are independent and unordered.
"""

import math

import numpy as np

from stitchgenie.errors import InvalidConfig
from stitchgenie.models import ArcTo, LineTo, MoveTo, OutlinePath, RenderTarget
from stitchgenie.outline.neighborhood import CELL_OUTLINE_TABLE, Corner, Neighbor, neighbor_mask
from stitchgenie.tracer import get_tracer, trace

# Unit vectors for the quarter-turn angles used by corner arcs (screen space, y down).
_DIRECTIONS = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0), 360: (1.0, 0.0)}

# Corner -> (use right edge x, use bottom edge y, convex start angle, convex end angle)
_CORNER_ARCS = {
    Corner.NW: (False, False, 180, 270),
    Corner.NE: (True, False, 270, 360),
    Corner.SE: (True, True, 0, 90),
    Corner.SW: (False, True, 90, 180),
}


def unit_target(grid_width, grid_height):
    """Target with one output unit per stitch, anchored at the origin."""
    return RenderTarget(
        width=grid_width, height=grid_height,
        cell_width=1.0, cell_height=1.0,
    )


def _point_on(cx, cy, radius, angle):
    dx, dy = _DIRECTIONS[angle]
    return cx + dx * radius, cy + dy * radius


def _edge_segment(edge, sx, sy, ex, ey, offset):
    if edge == Neighbor.N:
        return (sx, sy - offset), (ex, sy - offset)
    if edge == Neighbor.S:
        return (sx, ey + offset), (ex, ey + offset)
    if edge == Neighbor.W:
        return (sx - offset, sy), (sx - offset, ey)
    return (ex + offset, sy), (ex + offset, ey)


def _corner_arc(corner, sx, sy, ex, ey, offset, convex):
    right, bottom, a0, a1 = _CORNER_ARCS[corner]
    cx = ex if right else sx
    cy = ey if bottom else sy
    if not convex:
        a0, a1 = a1, a0

    start = _point_on(cx, cy, offset, a0)
    end = _point_on(cx, cy, offset, a1)
    return [
        MoveTo(x=start[0], y=start[1]),
        ArcTo(
            cx=cx, cy=cy, radius=offset,
            start_angle=a0, end_angle=a1, clockwise=convex,
            x=end[0], y=end[1],
        ),
    ]


def cell_commands(cell_outline, sx, sy, ex, ey, offset):
    """Path commands contributed by one occupied cell."""
    commands = []
    for edge in cell_outline.edges:
        start, end = _edge_segment(edge, sx, sy, ex, ey, offset)
        commands.append(MoveTo(x=start[0], y=start[1]))
        commands.append(LineTo(x=end[0], y=end[1]))
    for corner in cell_outline.convex:
        commands.extend(_corner_arc(corner, sx, sy, ex, ey, offset, convex=True))
    for corner in cell_outline.concave:
        commands.extend(_corner_arc(corner, sx, sy, ex, ey, offset, convex=False))
    return commands


@trace(label="build_outline")
def build_outline(grid, exterior, inflation, target=None, color="#000000", stroke_width=1.0):
    """
    Build the inflated exterior outline of a stitch grid.

    Args:
        grid: bool array (rows, cols), True = stitched
        exterior: exterior mask from classify_exterior
        inflation: outward offset in output units; 0 gives an empty path
        target: RenderTarget; defaults to one unit per stitch
        color: stroke color recorded on the path
        stroke_width: stroke width recorded on the path

    Returns:
        OutlinePath
    """
    tracer = get_tracer()

    if not math.isfinite(inflation) or inflation < 0:
        raise InvalidConfig("outline_inflation", inflation, "must be finite and >= 0")

    grid = np.asarray(grid, dtype=bool)
    exterior = np.asarray(exterior, dtype=bool)
    if grid.shape != exterior.shape:
        raise ValueError(f"Grid shape {grid.shape} does not match exterior mask {exterior.shape}")

    path = OutlinePath(color=color, stroke_width=stroke_width)
    if inflation == 0:
        return path

    height, width = grid.shape
    if target is None:
        target = unit_target(width, height)

    masks = neighbor_mask(exterior)
    offset = float(inflation)
    commands = []

    for row, col in zip(*np.nonzero(grid)):
        sx, sy = target.cell_origin(int(row), int(col))
        ex = sx + target.cell_width
        ey = sy + target.cell_height
        cell_outline = CELL_OUTLINE_TABLE[int(masks[row, col])]
        commands.extend(cell_commands(cell_outline, sx, sy, ex, ey, offset))

    path.commands = commands
    tracer.event(
        f"Outline built: {path.fragment_count} fragments",
        arcs=len(path.arcs()),
    )

    return path
