"""
Configuration management for Stitch Genie.

Loads YAML configuration with sensible defaults for every output. The engine
itself never reads this module; the pipeline turns it into explicit
GenerationConfig and layout parameters.
"""

import os
from dataclasses import asdict, dataclass, field, fields

import yaml

from stitchgenie.models import GenerationConfig
from stitchgenie.palette import resolve_thread_color


@dataclass
class GridConfig:
    """Quantization settings."""
    width: int = 32
    threshold: int = 128


@dataclass
class StitchConfig:
    """Per-cell shape settings."""
    shape: str = "solid_circle"
    scale_percent: int = 50
    color: str = "310"  # DMC code, palette name or #RRGGBB


@dataclass
class OutlineConfig:
    """Exterior outline settings, in preview pixels."""
    inflation: float = 0.0
    stroke_width: float = 1.0


@dataclass
class PreviewConfig:
    """Raster preview canvas size."""
    width: int = 800
    height: int = 800
    stretch: bool = False


@dataclass
class SVGConfig:
    """Vector document size; height follows the grid aspect ratio."""
    width: float = 600.0


@dataclass
class PDFConfig:
    """Fabrication page layout, in points."""
    page_width: float = 595.28  # A4
    page_height: float = 841.89
    margin: float = 40.0
    ruler_space: float = 30.0
    max_height_ratio: float = 0.7
    dpi: int = 300
    ruler_font_size: float = 8.0
    min_stitch_size: float = 2.0


@dataclass
class FabricConfig:
    """Fabric (Aida) count, as stored by the settings screen."""
    thread_count: str = "14-count"


@dataclass
class TracingConfig:
    """Runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Debug artifact generation."""
    enabled: bool = False
    mask_cell_size: int = 8


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    grid: GridConfig = field(default_factory=GridConfig)
    stitch: StitchConfig = field(default_factory=StitchConfig)
    outline: OutlineConfig = field(default_factory=OutlineConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)
    svg: SVGConfig = field(default_factory=SVGConfig)
    pdf: PDFConfig = field(default_factory=PDFConfig)
    fabric: FabricConfig = field(default_factory=FabricConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    def generation_config(self):
        """
        Build the validated GenerationConfig for this configuration.

        Raises InvalidConfig for out-of-range values or unknown colors.
        """
        hex_color, _ = resolve_thread_color(self.stitch.color)
        return GenerationConfig.create(
            target_grid_width=self.grid.width,
            luminance_threshold=self.grid.threshold,
            fill_shape=self.stitch.shape,
            shape_scale_percent=self.stitch.scale_percent,
            outline_inflation=self.outline.inflation,
            thread_color=hex_color,
        )


SECTIONS = ("grid", "stitch", "outline", "preview", "svg", "pdf", "fabric", "tracing", "debug")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values; unknown keys are ignored.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for section in SECTIONS:
        values = yaml_data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        known = {f.name for f in fields(target)}
        for key, value in values.items():
            if key in known:
                setattr(target, key, value)

    return config


def apply_overrides(config, overrides):
    """
    Apply dotted-key overrides such as {"grid.width": 48}.

    None values are skipped so unset CLI flags leave the config alone.
    """
    for dotted, value in (overrides or {}).items():
        if value is None:
            continue
        section, key = dotted.split(".", 1)
        setattr(getattr(config, section), key, value)
    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()
    yaml_data = {section: asdict(getattr(config, section)) for section in SECTIONS}
    yaml_data["tracing"].pop("file_path", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
