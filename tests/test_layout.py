"""Tests for layout fitting and fabrication gridlines."""

import pytest


class TestFitToTarget:
    """Tests for fit_to_target."""

    def test_letterbox_wide_box(self):
        """A square grid in a wide box is centered horizontally."""
        from stitchgenie.layout.fit import fit_to_target

        target = fit_to_target(10, 10, 200, 100)

        assert target.cell_width == target.cell_height == 10
        assert target.origin_x == 50
        assert target.origin_y == 0

    def test_letterbox_tall_box(self):
        from stitchgenie.layout.fit import fit_to_target

        target = fit_to_target(20, 10, 100, 100)

        assert target.cell_width == 5
        assert target.origin_x == 0
        assert target.origin_y == 25

    def test_stretch(self):
        from stitchgenie.layout.fit import fit_to_target

        target = fit_to_target(10, 5, 100, 100, stretch=True)

        assert target.cell_width == 10
        assert target.cell_height == 20
        assert target.stitch_size == 10

    def test_origin_added(self):
        from stitchgenie.layout.fit import fit_to_target

        target = fit_to_target(10, 10, 100, 100, origin=(40, 70))

        assert target.cell_origin(0, 0) == (40, 70)
        assert target.cell_center(1, 2) == (65, 85)

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 10)])
    def test_invalid_target(self, width, height):
        from stitchgenie.errors import InvalidTarget
        from stitchgenie.layout.fit import fit_to_target

        with pytest.raises(InvalidTarget):
            fit_to_target(10, 10, width, height)

    def test_document_size(self):
        from stitchgenie.layout.fit import document_size

        assert document_size(32, 16, 600) == (600, 300)


class TestGridlines:
    def test_major_every_fabric_count(self):
        from stitchgenie.layout.fit import gridlines

        lines = gridlines(30, 20, 14)

        assert lines.minor_x == list(range(31))
        assert lines.minor_y == list(range(21))
        assert lines.major_x == [14, 28]
        assert lines.major_y == [14]
        assert lines.labeled_x == lines.major_x

    def test_no_major_on_exact_edge(self):
        from stitchgenie.layout.fit import gridlines

        assert gridlines(28, 14, 14).major_x == [14]
        assert gridlines(28, 14, 14).major_y == []

    def test_invalid_fabric_count(self):
        from stitchgenie.errors import InvalidConfig
        from stitchgenie.layout.fit import gridlines

        with pytest.raises(InvalidConfig):
            gridlines(10, 10, 0)


class TestFabricCount:
    @pytest.mark.parametrize("value,expected", [
        ("14-count", 14),
        ("18-count", 18),
        ("11", 11),
        (16, 16),
        ("", 14),
        ("count", 14),
        ("0-count", 14),
        (None, 14),
    ])
    def test_parse(self, value, expected):
        from stitchgenie.layout.fit import parse_fabric_count

        assert parse_fabric_count(value) == expected


class TestScaling:
    def test_scale_to_target(self):
        from stitchgenie.layout.fit import fit_to_target, scale_to_target

        preview = fit_to_target(10, 10, 100, 100)
        printed = fit_to_target(10, 10, 300, 300)

        assert scale_to_target(2.0, preview, printed) == pytest.approx(6.0)

    def test_pattern_box_width_limited(self):
        from stitchgenie.layout.fit import pattern_box

        x, y, w, h = pattern_box(600, 800, 50, 30, 0.7, 2.0)

        assert (x, y) == (50, 80)
        assert (w, h) == (500, 250)

    def test_pattern_box_height_limited(self):
        """Tall patterns are capped at the height ratio of the page."""
        from stitchgenie.layout.fit import pattern_box

        _, _, w, h = pattern_box(600, 800, 50, 30, 0.5, 0.5)

        assert h == 400
        assert w == 200


class TestFinishedSize:
    def test_inches_from_fabric_count(self):
        from stitchgenie.layout.fit import finished_size

        assert finished_size(28, 14, 14) == (2.0, 1.0)
        assert finished_size(36, 18, 18) == (2.0, 1.0)

    def test_invalid_fabric_count(self):
        from stitchgenie.errors import InvalidConfig
        from stitchgenie.layout.fit import finished_size

        with pytest.raises(InvalidConfig):
            finished_size(10, 10, 0)
