"""Pytest fixtures for Stitch Genie tests."""

import os
import tempfile

import cv2
import numpy as np
import pytest


def make_grid(rows):
    """Build a bool grid from '#'/'.' strings."""
    return np.array([[c == "#" for c in row] for row in rows], dtype=bool)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def black_disc_image():
    """White 200x100 RGB image with a black filled disc in the middle."""
    img = np.ones((100, 200, 3), dtype=np.uint8) * 255
    cv2.circle(img, (100, 50), 35, (0, 0, 0), -1)
    return img


@pytest.fixture
def ring_image():
    """White square image with a thick black ring (hole in the middle)."""
    img = np.ones((160, 160, 3), dtype=np.uint8) * 255
    cv2.rectangle(img, (20, 20), (139, 139), (0, 0, 0), -1)
    cv2.rectangle(img, (60, 60), (99, 99), (255, 255, 255), -1)
    return img


@pytest.fixture
def transparent_image():
    """RGBA image: left half opaque black, right half fully transparent black."""
    img = np.zeros((40, 80, 4), dtype=np.uint8)
    img[:, :40, 3] = 255
    return img


@pytest.fixture
def full_grid():
    """4x4 grid with every cell stitched."""
    return np.ones((4, 4), dtype=bool)


@pytest.fixture
def ring_grid():
    """8x8 grid: stitched square ring enclosing a single empty cell."""
    return make_grid([
        "........",
        ".######.",
        ".######.",
        ".##.###.",
        ".######.",
        ".######.",
        ".######.",
        "........",
    ])


@pytest.fixture
def notch_grid():
    """L-shaped silhouette with one concave corner."""
    return make_grid([
        "....",
        ".#..",
        ".##.",
        "....",
    ])


@pytest.fixture
def default_generation():
    """Default generation parameters."""
    from stitchgenie.models import GenerationConfig
    return GenerationConfig()


@pytest.fixture
def default_config():
    """Default pipeline configuration."""
    from stitchgenie.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def synthetic_input_file(temp_dir, ring_image):
    """Write the ring image to disk for integration tests."""
    path = os.path.join(temp_dir, "ring.png")
    cv2.imwrite(path, cv2.cvtColor(ring_image, cv2.COLOR_RGB2BGR))
    return path
