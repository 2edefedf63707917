"""
Exterior classification for Stitch Genie.

Flood-fills from every empty border cell through 4-connected empty cells.
Empty pockets enclosed by stitches are holes and stay out of the exterior,
so no outline is drawn around them.
"""

from collections import deque

import numpy as np

from stitchgenie.models import CellClass
from stitchgenie.tracer import get_tracer, trace

NEIGHBORS_4 = ((-1, 0), (1, 0), (0, -1), (0, 1))


def border_seeds(grid):
    """Yield (row, col) of every empty cell on the grid border, each once."""
    height, width = grid.shape
    seen = set()
    border = []
    for col in range(width):
        border.append((0, col))
        border.append((height - 1, col))
    for row in range(height):
        border.append((row, 0))
        border.append((row, width - 1))

    for cell in border:
        if cell in seen or grid[cell]:
            continue
        seen.add(cell)
        yield cell


@trace(label="classify_exterior")
def classify_exterior(grid):
    """
    Compute the exterior mask of a stitch grid.

    A cell is True iff it is empty and connected to the border through
    4-connected empty cells. Each cell is enqueued at most once.

    Returns:
        read-only numpy bool array with the grid's shape
    """
    tracer = get_tracer()

    grid = np.asarray(grid, dtype=bool)
    height, width = grid.shape
    exterior = np.zeros((height, width), dtype=bool)
    queue = deque()

    for row, col in border_seeds(grid):
        exterior[row, col] = True
        queue.append((row, col))

    while queue:
        row, col = queue.popleft()
        for dy, dx in NEIGHBORS_4:
            ny, nx = row + dy, col + dx
            if 0 <= ny < height and 0 <= nx < width and not exterior[ny, nx] and not grid[ny, nx]:
                exterior[ny, nx] = True
                queue.append((ny, nx))

    exterior.flags.writeable = False
    tracer.event(f"Exterior cells: {int(exterior.sum())} of {exterior.size}")

    return exterior


def classify_cells(grid, exterior):
    """
    Label each cell as occupied, exterior-empty or hole-empty.

    Returns an int8 array of CellClass values.
    """
    grid = np.asarray(grid, dtype=bool)
    labels = np.full(grid.shape, CellClass.HOLE.value, dtype=np.int8)
    labels[exterior] = CellClass.EXTERIOR.value
    labels[grid] = CellClass.OCCUPIED.value
    return labels


def count_holes(grid, exterior):
    """Number of empty cells not reachable from the border."""
    grid = np.asarray(grid, dtype=bool)
    return int(np.count_nonzero(~grid & ~exterior))
