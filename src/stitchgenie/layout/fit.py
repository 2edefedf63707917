"""
Layout helpers for Stitch Genie.

Fits a stitch grid into an output box and derives fabrication gridlines and
ruler numbers from the fabric count.
"""

import re

from stitchgenie.errors import InvalidConfig, InvalidTarget
from stitchgenie.models import Gridlines, RenderTarget

DEFAULT_FABRIC_COUNT = 14


def fit_to_target(grid_width, grid_height, target_width, target_height, stretch=False, origin=(0.0, 0.0)):
    """
    Compute the render target for a grid drawn inside a box.

    Stitches stay square and the grid is centered (letterboxed) unless
    stretch is set, in which case cells fill the box exactly.

    Args:
        grid_width, grid_height: stitch counts
        target_width, target_height: box size in output units
        stretch: allow non-square cells
        origin: top-left of the box in output coordinates

    Returns:
        RenderTarget sized to the box
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidTarget(target_width, target_height)
    if grid_width < 1 or grid_height < 1:
        raise InvalidConfig("grid", (grid_width, grid_height), "grid dimensions must be >= 1")

    if stretch:
        cell_width = target_width / grid_width
        cell_height = target_height / grid_height
        offset_x = offset_y = 0.0
    else:
        cell = min(target_width / grid_width, target_height / grid_height)
        cell_width = cell_height = cell
        offset_x = (target_width - grid_width * cell) / 2
        offset_y = (target_height - grid_height * cell) / 2

    return RenderTarget(
        width=target_width,
        height=target_height,
        origin_x=origin[0] + offset_x,
        origin_y=origin[1] + offset_y,
        cell_width=cell_width,
        cell_height=cell_height,
    )


def document_size(grid_width, grid_height, width):
    """Height of a document of the given width that matches the grid aspect."""
    return width, width * grid_height / grid_width


def gridlines(grid_width, grid_height, fabric_count):
    """
    Gridline and ruler indices for a fabrication chart.

    Minor lines sit on every stitch boundary; major lines and labels on every
    interior multiple of the fabric count.
    """
    if fabric_count < 1:
        raise InvalidConfig("fabric_count", fabric_count, "must be >= 1")

    major_x = list(range(fabric_count, grid_width, fabric_count))
    major_y = list(range(fabric_count, grid_height, fabric_count))

    return Gridlines(
        minor_x=list(range(grid_width + 1)),
        minor_y=list(range(grid_height + 1)),
        major_x=major_x,
        major_y=major_y,
        labeled_x=list(major_x),
        labeled_y=list(major_y),
    )


def parse_fabric_count(thread_count):
    """
    Parse a fabric count setting such as "14-count" or 18.

    Falls back to 14 when the value carries no positive number.
    """
    if isinstance(thread_count, int) and thread_count > 0:
        return thread_count
    match = re.match(r"\s*(\d+)", str(thread_count))
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return DEFAULT_FABRIC_COUNT


def scale_to_target(value, reference, target):
    """
    Carry a length measured on the reference target over to another target.

    Used for outline inflation and stroke widths, which are set on the
    preview and must look the same at print resolution.
    """
    if reference.stitch_size <= 0:
        raise InvalidTarget(reference.width, reference.height)
    return value * target.stitch_size / reference.stitch_size


def pattern_box(page_width, page_height, margin, ruler_space, max_height_ratio, aspect):
    """
    Box (x, y, width, height) for the pattern on a fabrication page.

    The pattern spans the content width, capped at max_height_ratio of the
    page height, leaving ruler_space above it for column numbers.
    """
    content_width = page_width - 2 * margin
    if content_width <= 0:
        raise InvalidTarget(content_width, page_height)

    box_width = content_width
    box_height = content_width / aspect
    if box_height > page_height * max_height_ratio:
        box_height = page_height * max_height_ratio
        box_width = box_height * aspect

    return margin, margin + ruler_space, box_width, box_height


def finished_size(grid_width, grid_height, fabric_count):
    """
    Physical size (width, height) in inches of the stitched pattern.

    One stitch covers one fabric square, so each side is its stitch count
    divided by the fabric count.
    """
    if fabric_count < 1:
        raise InvalidConfig("fabric_count", fabric_count, "must be >= 1")
    return grid_width / fabric_count, grid_height / fabric_count
