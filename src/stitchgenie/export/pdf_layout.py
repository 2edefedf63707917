"""
Fabrication page layout and PDF export for Stitch Genie.

Places a print-resolution render of the pattern on a page and overlays a
stitch grid with heavier lines and ruler numbers every fabric-count stitches.
"""

import base64
import os

import svgwrite

from stitchgenie.io.save_artifacts import encode_png, ensure_dir
from stitchgenie.layout.fit import fit_to_target, gridlines, pattern_box, scale_to_target
from stitchgenie.outline.contour import build_outline
from stitchgenie.render.raster import render_raster
from stitchgenie.tracer import get_tracer, trace

MINOR_LINE = ("rgb(220,220,220)", 0.5)
MAJOR_LINE = ("rgb(150,150,150)", 1.0)
RULER_COLOR = "rgb(100,100,100)"
POINTS_PER_INCH = 72.0


def print_raster(grid, exterior, generation, config, reference_target, box_width, box_height):
    """
    Render the pattern at the configured print DPI for a box given in points.

    The buffer is padded on every side so the outline is not clipped.

    Returns:
        (rgba buffer, padding in points)
    """
    grid_height, grid_width = grid.shape
    scale = config.pdf.dpi / POINTS_PER_INCH
    inner_width = max(1, int(round(box_width * scale)))
    inner_height = max(1, int(round(box_height * scale)))

    inner = fit_to_target(grid_width, grid_height, inner_width, inner_height)
    inflation = scale_to_target(generation.outline_inflation, reference_target, inner)
    stroke_width = scale_to_target(config.outline.stroke_width, reference_target, inner)
    pad = int(round(inflation + stroke_width)) + 1 if inflation > 0 else 0

    target = inner.model_copy(update={
        "width": inner.width + 2 * pad,
        "height": inner.height + 2 * pad,
        "origin_x": inner.origin_x + pad,
        "origin_y": inner.origin_y + pad,
    })

    outline = build_outline(
        grid, exterior, inflation, target,
        color=generation.thread_color, stroke_width=stroke_width,
    )
    img = render_raster(grid, generation, target, outline=outline)

    return img, pad / scale


def add_grid_overlay(dwg, page_target, grid_width, grid_height, fabric_count, font_size):
    """Add minor/major gridlines and ruler numbers for a pattern box."""
    lines = gridlines(grid_width, grid_height, fabric_count)
    left = page_target.origin_x
    top = page_target.origin_y
    cell_w = page_target.cell_width
    cell_h = page_target.cell_height
    right = left + grid_width * cell_w
    bottom = top + grid_height * cell_h

    for group_id, (stroke, width), xs, ys in (
        ("minor-grid", MINOR_LINE, lines.minor_x, lines.minor_y),
        ("major-grid", MAJOR_LINE, lines.major_x, lines.major_y),
    ):
        group = dwg.g(id=group_id, stroke=stroke, stroke_width=width)
        for i in xs:
            x = left + i * cell_w
            group.add(dwg.line(start=(x, top), end=(x, bottom)))
        for i in ys:
            y = top + i * cell_h
            group.add(dwg.line(start=(left, y), end=(right, y)))
        dwg.add(group)

    rulers = dwg.g(id="rulers", fill=RULER_COLOR, font_size=font_size, font_family="Helvetica, Arial, sans-serif")
    for i in lines.labeled_x:
        x = left + i * cell_w
        rulers.add(dwg.text(str(i), insert=(x, top - 5), text_anchor="middle"))
        rulers.add(dwg.text(str(i), insert=(x, bottom + 10), text_anchor="middle"))
    for i in lines.labeled_y:
        y = top + i * cell_h
        rulers.add(dwg.text(str(i), insert=(left - 5, y), text_anchor="end", dominant_baseline="middle"))
        rulers.add(dwg.text(str(i), insert=(right + 5, y), dominant_baseline="middle"))
    dwg.add(rulers)

    return lines


@trace(label="build_fabrication_page")
def build_fabrication_page(grid, exterior, generation, fabric_count, config, reference_target):
    """
    Build the fabrication page as an SVG document in points.

    Args:
        grid: bool array (rows, cols)
        exterior: exterior mask for the grid
        generation: GenerationConfig
        fabric_count: stitches per major grid square
        config: PipelineConfig (pdf and outline sections)
        reference_target: target the outline inflation was chosen on

    Returns:
        (svgwrite.Drawing, RenderTarget of the pattern on the page)
    """
    tracer = get_tracer()
    pdf = config.pdf
    grid_height, grid_width = grid.shape

    box_x, box_y, box_width, box_height = pattern_box(
        pdf.page_width, pdf.page_height, pdf.margin, pdf.ruler_space,
        pdf.max_height_ratio, grid_width / grid_height,
    )
    page_target = fit_to_target(
        grid_width, grid_height, box_width, box_height, origin=(box_x, box_y),
    )

    img, pad = print_raster(grid, exterior, generation, config, reference_target, box_width, box_height)
    href = "data:image/png;base64," + base64.b64encode(encode_png(img)).decode("ascii")

    dwg = svgwrite.Drawing(size=(f"{pdf.page_width}pt", f"{pdf.page_height}pt"))
    dwg.viewbox(0, 0, pdf.page_width, pdf.page_height)
    dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill="white"))
    dwg.add(dwg.image(
        href=href,
        insert=(page_target.origin_x - pad, page_target.origin_y - pad),
        size=(box_width + 2 * pad, box_height + 2 * pad),
    ))

    add_grid_overlay(dwg, page_target, grid_width, grid_height, fabric_count, pdf.ruler_font_size)

    tracer.event(
        f"Page layout: pattern {box_width:.1f}x{box_height:.1f}pt",
        cell=round(page_target.stitch_size, 2),
    )

    return dwg, page_target


@trace(label="generate_pdf")
def generate_pdf(dwg, pdf_path):
    """
    Convert a fabrication page to PDF with cairosvg.

    Returns the PDF path, or None when cairosvg or its native cairo library
    is unavailable or conversion fails.
    """
    tracer = get_tracer()

    try:
        import cairosvg
    except (ImportError, OSError) as e:
        tracer.event(f"cairosvg not available, skipping PDF generation: {e}", level="WARN")
        return None

    ensure_dir(os.path.dirname(pdf_path))

    try:
        cairosvg.svg2pdf(bytestring=dwg.tostring().encode("utf-8"), write_to=pdf_path)
    except Exception as e:
        tracer.event(f"PDF generation failed: {str(e)}", level="ERROR")
        return None

    tracer.event(f"PDF saved: {pdf_path}")

    return pdf_path
