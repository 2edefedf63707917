"""
Artifact saving utilities for Stitch Genie.

Writes rendered buffers, JSON summaries and SVG documents, plus the debug
mask images produced for each run.
"""

import json
import os

import cv2
import numpy as np

from stitchgenie.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def encode_png(img):
    """
    Encode an RGB, RGBA or single-channel buffer as PNG bytes.
    """
    if img.dtype == np.bool_:
        img = img.astype(np.uint8) * 255
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
    elif img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ok, buf = cv2.imencode(".png", img)
    if not ok:
        raise ValueError("PNG encoding failed")
    return buf.tobytes()


def save_image(img, path):
    """Save an RGB/RGBA/gray buffer as PNG."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))
    with open(path, "wb") as f:
        f.write(encode_png(img))

    tracer.event(f"Saved image: {path}")


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_svg(svg_content, path):
    """
    Save an svgwrite drawing or SVG string to file.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(svg_content, "tostring"):
        content = svg_content.tostring()
    else:
        content = str(svg_content)

    with open(path, "w", encoding="utf-8") as f:
        f.write(content)

    tracer.event(f"Saved SVG: {path}")


def mask_image(mask, cell_size=8):
    """
    Upscale a boolean grid to a viewable black-on-white image.

    Each cell becomes a cell_size square block.
    """
    img = np.where(np.asarray(mask, dtype=bool), 0, 255).astype(np.uint8)
    return cv2.resize(
        img,
        (img.shape[1] * cell_size, img.shape[0] * cell_size),
        interpolation=cv2.INTER_NEAREST,
    )


def cell_class_image(labels, cell_size=8):
    """
    Color-code a CellClass label array: stitched black, exterior white,
    holes orange.
    """
    palette = np.array([[0, 0, 0], [255, 255, 255], [255, 140, 0]], dtype=np.uint8)
    img = palette[np.asarray(labels, dtype=np.intp)]
    return cv2.resize(
        img,
        (img.shape[1] * cell_size, img.shape[0] * cell_size),
        interpolation=cv2.INTER_NEAREST,
    )


class DebugArtifactWriter:
    """
    Writes per-stage debug artifacts under <out_dir>/debug/<stage>/.
    """

    def __init__(self, out_dir, enabled=True, cell_size=8):
        self.out_dir = out_dir
        self.enabled = enabled
        self.cell_size = cell_size

    def get_stage_dir(self, stage_name):
        stage_dir = os.path.join(self.out_dir, "debug", stage_name)
        ensure_dir(stage_dir)
        return stage_dir

    def save_image(self, img, stage_name, filename):
        if not self.enabled:
            return
        save_image(img, os.path.join(self.get_stage_dir(stage_name), filename))

    def save_mask(self, mask, stage_name, filename):
        if not self.enabled:
            return
        self.save_image(mask_image(mask, self.cell_size), stage_name, filename)

    def save_json(self, data, stage_name, filename):
        if not self.enabled:
            return
        save_json(data, os.path.join(self.get_stage_dir(stage_name), filename))

    def save_svg(self, svg_content, stage_name, filename):
        if not self.enabled:
            return
        save_svg(svg_content, os.path.join(self.get_stage_dir(stage_name), filename))
