"""
Grid quantization for Stitch Genie.

Downsamples a source image to the stitch grid with area resampling and marks
each cell occupied when it is opaque enough and darker than the threshold.
"""

import cv2
import numpy as np

from stitchgenie.errors import InvalidConfig, InvalidImage
from stitchgenie.models import SourceImage
from stitchgenie.tracer import get_tracer, trace

ALPHA_CUTOFF = 128

# Rec. 601 luma weights, scaled by 1000 so the comparison is exact in integers.
LUMA_WEIGHTS = (299, 587, 114)


def grid_dimensions(image_width, image_height, target_grid_width):
    """
    Return (grid_width, grid_height) for an image.

    grid_height = max(1, floor(target_grid_width / aspect)), evaluated as an
    exact rational so the floor never lands one cell off.
    """
    if image_width < 1 or image_height < 1:
        raise InvalidImage(f"image has zero area ({image_width}x{image_height})")
    if target_grid_width < 1:
        raise InvalidConfig("target_grid_width", target_grid_width, "must be >= 1")

    grid_height = max(1, (target_grid_width * image_height) // image_width)
    return target_grid_width, grid_height


def luminance(rgb):
    """
    Luminance 0.299R + 0.587G + 0.114B of an (..., 3) array or RGB tuple.

    Returned as float64; exact for gray pixels.
    """
    arr = np.asarray(rgb, dtype=np.int64)
    weighted = arr[..., 0] * LUMA_WEIGHTS[0] + arr[..., 1] * LUMA_WEIGHTS[1] + arr[..., 2] * LUMA_WEIGHTS[2]
    return weighted / 1000.0


def downsample(pixels, grid_width, grid_height):
    """
    Resample straight RGBA pixels to grid size with an area filter.

    Color is averaged alpha-premultiplied so fully transparent pixels do not
    bleed their (usually black) RGB into neighboring samples.
    """
    rgba = pixels.astype(np.float32)
    alpha = rgba[:, :, 3:4] / 255.0
    premultiplied = np.concatenate([rgba[:, :, :3] * alpha, rgba[:, :, 3:4]], axis=2)

    small = cv2.resize(premultiplied, (grid_width, grid_height), interpolation=cv2.INTER_AREA)
    if small.ndim == 2:
        small = small[:, :, np.newaxis]

    out_alpha = small[:, :, 3:4]
    scale = np.divide(255.0, out_alpha, out=np.zeros_like(out_alpha), where=out_alpha > 0)
    rgb = small[:, :, :3] * scale

    result = np.concatenate([rgb, out_alpha], axis=2)
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def threshold_cells(samples, luminance_threshold):
    """
    Occupancy of downsampled RGBA samples.

    A cell is occupied iff alpha > 128 and luminance < threshold (strict).
    Transparency wins regardless of color.
    """
    rgb = samples[:, :, :3].astype(np.int64)
    weighted = rgb[:, :, 0] * LUMA_WEIGHTS[0] + rgb[:, :, 1] * LUMA_WEIGHTS[1] + rgb[:, :, 2] * LUMA_WEIGHTS[2]
    opaque = samples[:, :, 3] > ALPHA_CUTOFF
    dark = weighted < luminance_threshold * 1000
    return opaque & dark


@trace(label="quantize")
def quantize(image, target_grid_width, luminance_threshold):
    """
    Convert a source image into a read-only boolean stitch grid.

    Args:
        image: SourceImage (or an array accepted by SourceImage.from_array)
        target_grid_width: number of stitches across, >= 1
        luminance_threshold: integer in [0, 255]

    Returns:
        numpy bool array of shape (grid_height, grid_width), read-only
    """
    tracer = get_tracer()

    if not isinstance(image, SourceImage):
        image = SourceImage.from_array(image)

    if isinstance(target_grid_width, bool) or not isinstance(target_grid_width, (int, np.integer)):
        raise InvalidConfig("target_grid_width", target_grid_width, "must be an integer")
    if not 0 <= luminance_threshold <= 255:
        raise InvalidConfig("luminance_threshold", luminance_threshold, "must be in [0, 255]")

    grid_width, grid_height = grid_dimensions(image.width, image.height, int(target_grid_width))

    samples = downsample(image.pixels, grid_width, grid_height)
    grid = threshold_cells(samples, luminance_threshold)
    grid.flags.writeable = False

    tracer.event(
        f"Quantized {image.width}x{image.height} -> {grid_width}x{grid_height}",
        occupied=int(grid.sum()),
    )

    return grid
