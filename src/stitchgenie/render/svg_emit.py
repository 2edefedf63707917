"""
SVG emission for Stitch Genie.

Writes the outline path followed by one element per stitch primitive, using
the same coordinates as the raster renderer.
"""

import svgwrite

from stitchgenie.render.shapes import render_shapes
from stitchgenie.tracer import get_tracer, trace


def primitive_element(dwg, prim):
    """Create the svgwrite element for one shape primitive."""
    if prim.kind == "circle":
        if prim.filled:
            return dwg.circle(center=(prim.cx, prim.cy), r=prim.r, fill=prim.color)
        return dwg.circle(
            center=(prim.cx, prim.cy), r=prim.r,
            fill="none", stroke=prim.color, stroke_width=prim.stroke_width,
        )

    if prim.kind == "rect":
        if prim.filled:
            return dwg.rect(insert=(prim.x, prim.y), size=(prim.width, prim.height), fill=prim.color)
        return dwg.rect(
            insert=(prim.x, prim.y), size=(prim.width, prim.height),
            fill="none", stroke=prim.color, stroke_width=prim.stroke_width,
        )

    return dwg.line(
        start=(prim.x1, prim.y1), end=(prim.x2, prim.y2),
        stroke=prim.color, stroke_width=prim.stroke_width, stroke_linecap="round",
    )


def add_pattern(dwg, parent, grid, config, target, outline=None):
    """
    Add outline and stitch groups to parent.

    Returns the number of stitch primitives added.
    """
    if outline is not None and not outline.is_empty:
        parent.add(dwg.path(
            d=outline.to_svg_path(),
            id="outline",
            fill="none",
            stroke=outline.color,
            stroke_width=outline.stroke_width,
        ))

    stitch_group = dwg.g(id="stitches")
    count = 0
    for prim in render_shapes(grid, config, target):
        stitch_group.add(primitive_element(dwg, prim))
        count += 1
    parent.add(stitch_group)

    return count


@trace(label="emit_pattern_svg")
def emit_pattern_svg(grid, config, target, outline=None):
    """
    Create a standalone SVG document for a pattern.

    Args:
        grid: bool array (rows, cols)
        config: GenerationConfig
        target: RenderTarget; its width and height become the document size
        outline: optional OutlinePath in the same coordinate space

    Returns:
        svgwrite.Drawing
    """
    tracer = get_tracer()

    dwg = svgwrite.Drawing(size=(f"{target.width}px", f"{target.height}px"))
    dwg.viewbox(0, 0, target.width, target.height)

    count = add_pattern(dwg, dwg, grid, config, target, outline)

    tracer.event(f"SVG emitted with {count} primitives")

    return dwg
