"""
Main pipeline orchestrator for Stitch Genie.

Loads an image, builds the stitch grid and exterior mask, and writes the
preview PNG, the SVG pattern, the fabrication PDF and the pattern summary.
"""

import os
from datetime import datetime

from stitchgenie.config import apply_overrides, load_config
from stitchgenie.export.pdf_layout import build_fabrication_page, generate_pdf
from stitchgenie.grid.exterior import classify_cells, classify_exterior, count_holes
from stitchgenie.grid.quantize import quantize
from stitchgenie.io.load_image import load_image, validate_image_input
from stitchgenie.io.save_artifacts import DebugArtifactWriter, cell_class_image, ensure_dir, save_image, save_json, save_svg
from stitchgenie.layout.fit import (
    document_size, finished_size, fit_to_target, gridlines, parse_fabric_count, scale_to_target,
)
from stitchgenie.models import (
    ImageMeta, PatternDocument, PatternStats,
    generate_pattern_id, grid_to_rows,
)
from stitchgenie.outline.contour import build_outline
from stitchgenie.palette import resolve_thread_color
from stitchgenie.render.raster import render_raster
from stitchgenie.render.svg_emit import emit_pattern_svg
from stitchgenie.tracer import get_tracer, trace
from stitchgenie.validate.report import generate_report
from stitchgenie.validate.rules import run_validation


def generate_pattern(image, generation):
    """
    Quantize an image and classify its exterior.

    Returns:
        (grid, exterior) read-only bool arrays
    """
    grid = quantize(image, generation.target_grid_width, generation.luminance_threshold)
    exterior = classify_exterior(grid)
    return grid, exterior


def render_outputs(grid, exterior, generation, config):
    """
    Render the preview buffer and SVG document in memory.

    The outline inflation and stroke width are given in preview pixels and
    scaled onto the SVG target.

    Returns:
        dict with preview (RGBA array), preview_target, svg (Drawing),
        svg_target and the preview outline
    """
    grid_height, grid_width = grid.shape
    color = generation.thread_color

    preview_target = fit_to_target(
        grid_width, grid_height,
        config.preview.width, config.preview.height,
        stretch=config.preview.stretch,
    )
    preview_outline = build_outline(
        grid, exterior, generation.outline_inflation, preview_target,
        color=color, stroke_width=config.outline.stroke_width,
    )
    preview = render_raster(grid, generation, preview_target, outline=preview_outline)

    svg_width, svg_height = document_size(grid_width, grid_height, config.svg.width)
    svg_target = fit_to_target(grid_width, grid_height, svg_width, svg_height)
    svg_outline = build_outline(
        grid, exterior,
        scale_to_target(generation.outline_inflation, preview_target, svg_target),
        svg_target,
        color=color,
        stroke_width=scale_to_target(config.outline.stroke_width, preview_target, svg_target),
    )
    svg = emit_pattern_svg(grid, generation, svg_target, outline=svg_outline)

    return {
        "preview": preview,
        "preview_target": preview_target,
        "preview_outline": preview_outline,
        "svg": svg,
        "svg_target": svg_target,
    }


@trace(label="run_pipeline")
def run_pipeline(input_path, out_dir, config=None, config_path=None, overrides=None, debug=False):
    """
    Run the full pattern pipeline for one image.

    Args:
        input_path: input image file path
        out_dir: output directory
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        overrides: dotted-key overrides such as {"grid.width": 48} (optional)
        debug: enable debug artifact generation

    Returns:
        PatternDocument describing the outputs
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)
    apply_overrides(config, overrides)
    config.debug.enabled = config.debug.enabled or debug

    errors = validate_image_input(input_path)
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ValueError(f"Input validation failed: {errors}")

    generation = config.generation_config()
    _, thread = resolve_thread_color(config.stitch.color)
    fabric_count = parse_fabric_count(config.fabric.thread_count)

    ensure_dir(out_dir)
    debug_writer = DebugArtifactWriter(
        out_dir, enabled=True, cell_size=config.debug.mask_cell_size,
    ) if config.debug.enabled else None

    image = load_image(input_path)

    with tracer.span("generate", module="pipeline"):
        grid, exterior = generate_pattern(image, generation)
        grid_height, grid_width = grid.shape
        holes = count_holes(grid, exterior)

        if debug_writer:
            debug_writer.save_mask(grid, "grid", "01_stitch_grid.png")
            debug_writer.save_mask(~exterior, "grid", "02_exterior_mask.png")
            debug_writer.save_image(
                cell_class_image(classify_cells(grid, exterior), debug_writer.cell_size),
                "grid", "03_cell_classes.png",
            )

    outputs = {}

    with tracer.span("render", module="pipeline"):
        rendered = render_outputs(grid, exterior, generation, config)

        preview_path = os.path.join(out_dir, "preview.png")
        save_image(rendered["preview"], preview_path)
        outputs["preview"] = preview_path

        svg_path = os.path.join(out_dir, "pattern.svg")
        save_svg(rendered["svg"], svg_path)
        outputs["svg"] = svg_path

    with tracer.span("fabrication", module="pipeline"):
        page, page_target = build_fabrication_page(
            grid, exterior, generation, fabric_count, config, rendered["preview_target"],
        )
        if debug_writer:
            debug_writer.save_svg(page, "page", "fabrication_page.svg")

        pdf_path = generate_pdf(page, os.path.join(out_dir, "pattern.pdf"))
        if pdf_path:
            outputs["pdf"] = pdf_path

    outline = rendered["preview_outline"]
    finished_width, finished_height = finished_size(grid_width, grid_height, fabric_count)
    document = PatternDocument(
        pattern_id=generate_pattern_id(image.digest(), generation),
        created_at=datetime.now().isoformat(),
        image_meta=ImageMeta(
            width=image.width,
            height=image.height,
            source_path=input_path,
        ),
        generation=generation,
        thread=thread,
        grid_width=grid_width,
        grid_height=grid_height,
        rows=grid_to_rows(grid),
        fabric_count=fabric_count,
        finished_width_in=round(finished_width, 3),
        finished_height_in=round(finished_height, 3),
        gridlines=gridlines(grid_width, grid_height, fabric_count),
        stats=PatternStats(
            occupied_count=int(grid.sum()),
            exterior_count=int(exterior.sum()),
            hole_count=holes,
            outline_commands=len(outline.commands),
            outline_arcs=len(outline.arcs()),
        ),
        outputs=outputs,
    )

    with tracer.span("validate", module="pipeline"):
        document.validation = run_validation(document, config, page_target.stitch_size)
        report_path, summary_path = generate_report(document, out_dir)
        document.outputs["report"] = report_path
        document.outputs["summary"] = summary_path

    pattern_path = os.path.join(out_dir, "pattern.json")
    document.outputs["pattern"] = pattern_path
    save_json(document, pattern_path)

    if debug_writer:
        debug_writer.save_json(document.stats, "grid", "grid_metrics.json")

    tracer.event(
        f"Pipeline complete: {grid_width}x{grid_height} stitches, {document.stats.occupied_count} filled"
    )

    return document
