"""
Stitch shape geometry for Stitch Genie.

Produces one primitive per occupied cell (two lines for a cross stitch) in
row-major order. Raster and vector backends both draw from this stream, so
their coordinates are identical for the same target.
"""

import numpy as np

from stitchgenie.errors import InvalidTarget
from stitchgenie.models import CirclePrimitive, FillShape, LinePrimitive, RectPrimitive


def check_target(target):
    """Raise InvalidTarget when the target has no drawable area."""
    if target.width <= 0 or target.height <= 0 or target.cell_width <= 0 or target.cell_height <= 0:
        raise InvalidTarget(target.width, target.height)


def stroke_width_for(stitch_size, size_multiplier):
    return max(1.0, stitch_size / 10.0 * size_multiplier)


def circle_for(row, col, config, target):
    cx, cy = target.cell_center(row, col)
    m = config.size_multiplier
    radius = target.stitch_size / 3.0 * m

    if config.fill_shape == FillShape.HOLLOW_CIRCLE:
        width = stroke_width_for(target.stitch_size, m)
        return CirclePrimitive(
            row=row, col=col, cx=cx, cy=cy,
            r=max(0.0, radius - width / 2),
            filled=False, stroke_width=width,
            color=config.thread_color,
        )

    return CirclePrimitive(row=row, col=col, cx=cx, cy=cy, r=radius, color=config.thread_color)


def square_for(row, col, config, target):
    cx, cy = target.cell_center(row, col)
    m = config.size_multiplier
    side = target.stitch_size * 2.0 / 3.0 * m

    if config.fill_shape == FillShape.HOLLOW_SQUARE:
        width = stroke_width_for(target.stitch_size, m)
        inner = max(0.0, side - width)
        return RectPrimitive(
            row=row, col=col,
            x=cx - inner / 2, y=cy - inner / 2, width=inner, height=inner,
            filled=False, stroke_width=width,
            color=config.thread_color,
        )

    return RectPrimitive(
        row=row, col=col,
        x=cx - side / 2, y=cy - side / 2, width=side, height=side,
        color=config.thread_color,
    )


def inset_box(row, col, scale, target):
    """
    Corners (x0, y0, x1, y1) of the cell shrunk symmetrically to scale.

    The inset is (1 - scale) / 2 of the cell on each side.
    """
    sx, sy = target.cell_origin(row, col)
    inset_x = target.cell_width * (1.0 - scale) / 2
    inset_y = target.cell_height * (1.0 - scale) / 2
    return (sx + inset_x, sy + inset_y,
            sx + target.cell_width - inset_x, sy + target.cell_height - inset_y)


def lines_for(row, col, config, target):
    x0, y0, x1, y1 = inset_box(row, col, config.line_scale, target)
    width = stroke_width_for(target.stitch_size, config.size_multiplier)

    def line(ax, ay, bx, by):
        return LinePrimitive(
            row=row, col=col, x1=ax, y1=ay, x2=bx, y2=by,
            stroke_width=width, color=config.thread_color,
        )

    if config.fill_shape == FillShape.HALF_FORWARD:
        return [line(x0, y1, x1, y0)]
    if config.fill_shape == FillShape.HALF_BACKWARD:
        return [line(x0, y0, x1, y1)]
    return [line(x0, y0, x1, y1), line(x0, y1, x1, y0)]


def primitives_for_cell(row, col, config, target):
    """Primitives for one occupied cell."""
    shape = config.fill_shape
    if shape in (FillShape.SOLID_CIRCLE, FillShape.HOLLOW_CIRCLE):
        return [circle_for(row, col, config, target)]
    if shape in (FillShape.SOLID_SQUARE, FillShape.HOLLOW_SQUARE):
        return [square_for(row, col, config, target)]
    return lines_for(row, col, config, target)


def render_shapes(grid, config, target):
    """
    Lazily yield shape primitives for every occupied cell.

    The target is checked before the first primitive is produced; calling
    again restarts from the first cell.

    Args:
        grid: bool array (rows, cols)
        config: GenerationConfig
        target: RenderTarget

    Yields:
        CirclePrimitive, RectPrimitive or LinePrimitive
    """
    check_target(target)
    grid = np.asarray(grid, dtype=bool)
    return _iter_primitives(grid, config, target)


def _iter_primitives(grid, config, target):
    for row, col in zip(*np.nonzero(grid)):
        yield from primitives_for_cell(int(row), int(col), config, target)
