"""
8-neighborhood masks for outline classification.

Each cell gets one byte recording which of its eight neighbors lie outside
the silhouette (exterior cells, or off the grid). Edge and corner decisions
are then table lookups on that byte.
"""

from enum import Enum, IntFlag
from typing import NamedTuple, Tuple

import numpy as np


class Neighbor(IntFlag):
    N = 1 << 0
    NE = 1 << 1
    E = 1 << 2
    SE = 1 << 3
    S = 1 << 4
    SW = 1 << 5
    W = 1 << 6
    NW = 1 << 7


NEIGHBOR_OFFSETS = {
    Neighbor.N: (-1, 0),
    Neighbor.NE: (-1, 1),
    Neighbor.E: (0, 1),
    Neighbor.SE: (1, 1),
    Neighbor.S: (1, 0),
    Neighbor.SW: (1, -1),
    Neighbor.W: (0, -1),
    Neighbor.NW: (-1, -1),
}

EDGES = (Neighbor.N, Neighbor.S, Neighbor.W, Neighbor.E)


class Corner(Enum):
    """Cell corners with the two edges and the diagonal that meet there."""
    NW = (Neighbor.N, Neighbor.W, Neighbor.NW)
    NE = (Neighbor.N, Neighbor.E, Neighbor.NE)
    SW = (Neighbor.S, Neighbor.W, Neighbor.SW)
    SE = (Neighbor.S, Neighbor.E, Neighbor.SE)

    @property
    def edges(self):
        return self.value[0], self.value[1]

    @property
    def diagonal(self):
        return self.value[2]


class CellOutline(NamedTuple):
    """Outline features of one occupied cell."""
    edges: Tuple[Neighbor, ...]
    convex: Tuple[Corner, ...]
    concave: Tuple[Corner, ...]


def boundary_edges(mask):
    """Edges whose neighbor is outside; each gets a straight offset segment."""
    return tuple(edge for edge in EDGES if mask & edge)


def convex_corners(mask):
    """Corners where both adjacent edges are boundary edges."""
    return tuple(
        corner for corner in Corner
        if mask & corner.edges[0] and mask & corner.edges[1]
    )


def concave_corners(mask):
    """Corners whose diagonal is outside while both adjacent edges are not."""
    return tuple(
        corner for corner in Corner
        if mask & corner.diagonal
        and not mask & corner.edges[0]
        and not mask & corner.edges[1]
    )


def describe_mask(mask):
    return CellOutline(
        edges=boundary_edges(mask),
        convex=convex_corners(mask),
        concave=concave_corners(mask),
    )


CELL_OUTLINE_TABLE = tuple(describe_mask(mask) for mask in range(256))


def neighbor_mask(exterior):
    """
    Compute the 8-neighbor outside mask of every cell.

    Off-grid neighbors count as outside.

    Returns:
        uint8 array with the shape of exterior
    """
    exterior = np.asarray(exterior, dtype=bool)
    height, width = exterior.shape
    padded = np.pad(exterior, 1, mode="constant", constant_values=True)

    mask = np.zeros((height, width), dtype=np.uint8)
    for bit, (dy, dx) in NEIGHBOR_OFFSETS.items():
        shifted = padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
        mask |= shifted.astype(np.uint8) * np.uint8(int(bit))
    return mask
