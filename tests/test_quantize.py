"""Tests for grid quantization."""

import numpy as np
import pytest


class TestGridDimensions:
    """Tests for grid size computation."""

    def test_height_follows_aspect(self):
        from stitchgenie.grid.quantize import grid_dimensions

        assert grid_dimensions(200, 100, 32) == (32, 16)
        assert grid_dimensions(100, 300, 10) == (10, 30)

    def test_height_floors(self):
        from stitchgenie.grid.quantize import grid_dimensions

        # 7 * 100 / 300 = 2.33
        assert grid_dimensions(300, 100, 7) == (7, 2)

    def test_height_at_least_one(self):
        """Very wide images still get one row."""
        from stitchgenie.grid.quantize import grid_dimensions

        assert grid_dimensions(1000, 10, 5) == (5, 1)

    def test_exact_ratio_does_not_drop_a_row(self):
        from stitchgenie.grid.quantize import grid_dimensions

        # 49 * 300 / 147 = 100 exactly
        assert grid_dimensions(147, 300, 49) == (49, 100)

    def test_rejects_zero_width_target(self):
        from stitchgenie.errors import InvalidConfig
        from stitchgenie.grid.quantize import grid_dimensions

        with pytest.raises(InvalidConfig):
            grid_dimensions(100, 100, 0)


class TestLuminance:
    def test_gray_is_exact(self):
        from stitchgenie.grid.quantize import luminance

        assert luminance((128, 128, 128)) == 128.0

    def test_weights(self):
        from stitchgenie.grid.quantize import luminance

        assert luminance((255, 0, 0)) == pytest.approx(76.245)
        assert luminance((0, 255, 0)) == pytest.approx(149.685)
        assert luminance((0, 0, 255)) == pytest.approx(29.07)


class TestQuantize:
    """Tests for the quantize function."""

    def test_grid_shape(self, black_disc_image):
        from stitchgenie.grid.quantize import quantize

        grid = quantize(black_disc_image, 32, 128)

        assert grid.shape == (16, 32)
        assert grid.dtype == np.bool_

    def test_grid_is_read_only(self, black_disc_image):
        from stitchgenie.grid.quantize import quantize

        grid = quantize(black_disc_image, 16, 128)

        with pytest.raises(ValueError):
            grid[0, 0] = True

    def test_disc_is_stitched(self, black_disc_image):
        """Center of the disc is stitched, corners are not."""
        from stitchgenie.grid.quantize import quantize

        grid = quantize(black_disc_image, 32, 128)

        assert grid[8, 16]
        assert not grid[0, 0]
        assert not grid[-1, -1]
        assert 0 < grid.sum() < grid.size

    def test_threshold_is_strict(self):
        """A cell of luminance L is stitched only when L < threshold."""
        from stitchgenie.grid.quantize import quantize

        img = np.full((4, 4, 3), 100, dtype=np.uint8)

        assert not quantize(img, 2, 100).any()
        assert quantize(img, 2, 101).all()

    def test_threshold_zero_stitches_nothing(self):
        from stitchgenie.grid.quantize import quantize

        black = np.zeros((10, 10, 3), dtype=np.uint8)

        assert not quantize(black, 5, 0).any()
        assert quantize(black, 5, 1).all()

    def test_threshold_max_leaves_white_empty(self):
        from stitchgenie.grid.quantize import quantize

        white = np.full((10, 10, 3), 255, dtype=np.uint8)

        assert not quantize(white, 5, 255).any()

    def test_transparent_pixels_never_stitched(self, transparent_image):
        """Transparent black stays empty regardless of threshold."""
        from stitchgenie.grid.quantize import quantize

        grid = quantize(transparent_image, 8, 255)

        assert grid.shape == (4, 8)
        assert grid[:, :4].all()
        assert not grid[:, 4:].any()

    def test_half_transparent_cutoff(self):
        """Alpha must be strictly above 128."""
        from stitchgenie.grid.quantize import quantize

        img = np.zeros((2, 2, 4), dtype=np.uint8)
        img[:, :, 3] = 128
        assert not quantize(img, 1, 255).any()

        img[:, :, 3] = 129
        assert quantize(img, 1, 255).all()

    def test_accepts_source_image(self, black_disc_image):
        from stitchgenie.grid.quantize import quantize
        from stitchgenie.models import SourceImage

        image = SourceImage.from_array(black_disc_image)

        np.testing.assert_array_equal(
            quantize(image, 20, 128),
            quantize(black_disc_image, 20, 128),
        )

    def test_deterministic(self, ring_image):
        from stitchgenie.grid.quantize import quantize

        first = quantize(ring_image, 24, 128)
        second = quantize(ring_image, 24, 128)

        np.testing.assert_array_equal(first, second)

    def test_grayscale_input(self):
        from stitchgenie.grid.quantize import quantize

        gray = np.zeros((6, 6), dtype=np.uint8)

        assert quantize(gray, 3, 128).all()

    def test_rejects_bad_width(self, black_disc_image):
        from stitchgenie.errors import InvalidConfig
        from stitchgenie.grid.quantize import quantize

        with pytest.raises(InvalidConfig):
            quantize(black_disc_image, 0, 128)
        with pytest.raises(InvalidConfig):
            quantize(black_disc_image, 2.5, 128)
        with pytest.raises(InvalidConfig):
            quantize(black_disc_image, True, 128)

    def test_rejects_bad_threshold(self, black_disc_image):
        from stitchgenie.errors import InvalidConfig
        from stitchgenie.grid.quantize import quantize

        with pytest.raises(InvalidConfig):
            quantize(black_disc_image, 10, 256)
        with pytest.raises(InvalidConfig):
            quantize(black_disc_image, 10, -1)

    def test_rejects_empty_image(self):
        from stitchgenie.errors import InvalidImage
        from stitchgenie.grid.quantize import quantize

        with pytest.raises(InvalidImage):
            quantize(np.zeros((0, 10, 3), dtype=np.uint8), 5, 128)

    def test_errors_are_value_errors(self):
        from stitchgenie.grid.quantize import quantize

        with pytest.raises(ValueError):
            quantize(np.zeros((0, 10, 3), dtype=np.uint8), 5, 128)

    def test_caller_buffer_left_writeable(self):
        """Quantizing does not freeze or alter the caller's pixels."""
        from stitchgenie.grid.quantize import quantize

        img = np.zeros((4, 4, 4), dtype=np.uint8)
        img[:, :, 3] = 255
        before = img.copy()

        quantize(img, 2, 128)

        assert img.flags.writeable
        img[0, 0, 0] = 1
        np.testing.assert_array_equal(img[1:], before[1:])
