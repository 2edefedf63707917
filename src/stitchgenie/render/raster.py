"""
Raster rendering for Stitch Genie.

Draws the outline and stitch primitives into an RGBA pixel buffer with
OpenCV anti-aliasing. Coordinates are passed as fixed point so sub-pixel
positions from the shape stream are kept.
"""

import cv2
import numpy as np

from stitchgenie.models import hex_to_rgb
from stitchgenie.render.shapes import check_target, render_shapes
from stitchgenie.tracer import get_tracer, trace

SHIFT = 4
_FIXED = 1 << SHIFT


def _fx(value):
    return int(round(value * _FIXED))


def _pt(x, y):
    return _fx(x), _fx(y)


def _rgba(hex_color):
    r, g, b = hex_to_rgb(hex_color)
    return (r, g, b, 255)


def _thickness(width):
    return max(1, int(round(width)))


def draw_primitive(img, prim):
    """Draw one shape primitive onto an RGBA buffer in place."""
    color = _rgba(prim.color)

    if prim.kind == "circle":
        radius = _fx(prim.r)
        if radius < 1:
            return
        thickness = -1 if prim.filled else _thickness(prim.stroke_width)
        cv2.circle(img, _pt(prim.cx, prim.cy), radius, color, thickness, cv2.LINE_AA, SHIFT)

    elif prim.kind == "rect":
        corners = np.array([
            _pt(prim.x, prim.y),
            _pt(prim.x + prim.width, prim.y),
            _pt(prim.x + prim.width, prim.y + prim.height),
            _pt(prim.x, prim.y + prim.height),
        ], dtype=np.int32)
        if prim.filled:
            cv2.fillPoly(img, [corners], color, cv2.LINE_AA, SHIFT)
        else:
            cv2.polylines(img, [corners], True, color, _thickness(prim.stroke_width), cv2.LINE_AA, SHIFT)

    else:
        cv2.line(img, _pt(prim.x1, prim.y1), _pt(prim.x2, prim.y2), color,
                 _thickness(prim.stroke_width), cv2.LINE_AA, SHIFT)


def draw_outline(img, outline):
    """Stroke every outline fragment onto an RGBA buffer in place."""
    color = _rgba(outline.color)
    thickness = _thickness(outline.stroke_width)
    current = None

    for cmd in outline.commands:
        if cmd.kind == "move":
            current = (cmd.x, cmd.y)
            continue
        if cmd.kind == "line":
            cv2.line(img, _pt(*current), _pt(cmd.x, cmd.y), color, thickness, cv2.LINE_AA, SHIFT)
        else:
            radius = _fx(cmd.radius)
            cv2.ellipse(
                img, _pt(cmd.cx, cmd.cy), (radius, radius), 0,
                cmd.start_angle, cmd.end_angle, color, thickness, cv2.LINE_AA, SHIFT,
            )
        current = (cmd.x, cmd.y)


@trace(label="render_raster")
def render_raster(grid, config, target, outline=None, background=(0, 0, 0, 0)):
    """
    Render a pattern into a new RGBA buffer of the target's size.

    The outline, when given, is drawn first so stitches sit on top of it.

    Args:
        grid: bool array (rows, cols)
        config: GenerationConfig
        target: RenderTarget; width and height are rounded to whole pixels
        outline: optional OutlinePath in the same coordinate space
        background: RGBA fill, transparent by default

    Returns:
        uint8 numpy array (height, width, 4), RGBA
    """
    tracer = get_tracer()
    check_target(target)

    width = max(1, int(round(target.width)))
    height = max(1, int(round(target.height)))
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:] = background

    if outline is not None and not outline.is_empty:
        draw_outline(img, outline)

    count = 0
    for prim in render_shapes(grid, config, target):
        draw_primitive(img, prim)
        count += 1

    tracer.event(f"Raster {width}x{height}: {count} primitives")

    return img
