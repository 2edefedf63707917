"""
Image loading utilities for Stitch Genie.

Decodes image files to straight RGBA so transparency survives into the
quantizer.
"""

import os

import cv2
import numpy as np

from stitchgenie.errors import InvalidImage
from stitchgenie.models import SourceImage
from stitchgenie.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp", ".webp"]


def to_rgba(decoded):
    """
    Convert an OpenCV-decoded array (gray, BGR or BGRA) to RGBA.
    """
    if decoded.dtype == np.uint16:
        decoded = (decoded >> 8).astype(np.uint8)

    if decoded.ndim == 2:
        return cv2.cvtColor(decoded, cv2.COLOR_GRAY2RGBA)
    channels = decoded.shape[2]
    if channels == 1:
        return cv2.cvtColor(decoded[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(decoded, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA)
    raise InvalidImage(f"unsupported channel count {channels}")


@trace(label="load_image")
def load_image(path):
    """
    Load an image from disk as a SourceImage.

    Raises FileNotFoundError if path does not exist.
    Raises InvalidImage if the file cannot be decoded.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    decoded = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if decoded is None:
        raise InvalidImage(f"failed to decode {path}")

    image = SourceImage(to_rgba(decoded), source_path=os.path.abspath(path))

    tracer.event(f"Loaded image: {image.width}x{image.height}")

    return image


def validate_image_input(path):
    """
    Validate that an input path exists and looks like a supported image.

    Returns a list of error messages (empty if valid).
    """
    errors = []

    if not os.path.exists(path):
        errors.append(f"File not found: {path}")
        return errors

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        errors.append(f"Unsupported image format: {path}")

    return errors
