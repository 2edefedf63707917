"""
Pydantic data models for Stitch Genie patterns.

Generation parameters, render targets, outline path commands and shape
primitives all flow through these validated models. Grids themselves stay
as read-only numpy arrays.
"""

import hashlib
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stitchgenie.errors import InvalidConfig, InvalidImage


class FillShape(str, Enum):
    """Shape drawn for each occupied stitch cell."""
    SOLID_CIRCLE = "solid_circle"
    HOLLOW_CIRCLE = "hollow_circle"
    SOLID_SQUARE = "solid_square"
    HOLLOW_SQUARE = "hollow_square"
    CROSS_STITCH = "cross_stitch"
    HALF_FORWARD = "half_forward"
    HALF_BACKWARD = "half_backward"


class Severity(str, Enum):
    """Severity levels for pattern checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class CellClass(int, Enum):
    """Partition of grid cells produced by exterior classification."""
    OCCUPIED = 0
    EXTERIOR = 1
    HOLE = 2


def hex_to_rgb(hex_color):
    """Convert '#RRGGBB' to an (r, g, b) tuple of ints."""
    value = hex_color.lstrip("#")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


class SourceImage:
    """
    Decoded raster image with straight (non-premultiplied) RGBA pixels.

    The pixel array is stored read-only; the engine never mutates it.
    """

    def __init__(self, pixels, source_path=""):
        pixels = np.asarray(pixels)
        if pixels.dtype != np.uint8:
            raise InvalidImage(f"expected uint8 pixels, got {pixels.dtype}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidImage(f"expected HxWx4 RGBA array, got shape {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise InvalidImage(f"image has zero area ({pixels.shape[1]}x{pixels.shape[0]})")

        # own copy, so the caller's buffer stays writeable
        self._pixels = np.array(pixels, dtype=np.uint8, order="C", copy=True)
        self._pixels.flags.writeable = False
        self.source_path = source_path

    @classmethod
    def from_array(cls, array, source_path=""):
        """
        Build from a grayscale (HxW or HxWx1), RGB or RGBA array.

        Missing alpha is treated as fully opaque. 16-bit samples keep their
        high byte; any dtype other than uint8 or uint16 is rejected.
        """
        arr = np.asarray(array)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3 or arr.shape[2] not in (1, 3, 4):
            raise InvalidImage(f"unsupported pixel layout {arr.shape}")
        if arr.shape[0] < 1 or arr.shape[1] < 1:
            raise InvalidImage(f"image has zero area ({arr.shape[1]}x{arr.shape[0]})")

        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            raise InvalidImage(f"unsupported pixel dtype {arr.dtype}")
        if arr.shape[2] == 1:
            arr = np.repeat(arr, 3, axis=2)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(arr, source_path=source_path)

    @property
    def pixels(self):
        return self._pixels

    @property
    def width(self):
        return self._pixels.shape[1]

    @property
    def height(self):
        return self._pixels.shape[0]

    def rgba(self, x, y):
        """Return the (r, g, b, a) tuple at column x, row y."""
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def digest(self):
        """Content hash of the pixel data, used for deterministic pattern IDs."""
        h = hashlib.sha256()
        h.update(f"{self.width}x{self.height}".encode())
        h.update(self._pixels.tobytes())
        return h.hexdigest()


class GenerationConfig(BaseModel):
    """Parameters for one pattern generation call."""
    target_grid_width: int = Field(default=32, ge=1)
    luminance_threshold: int = Field(default=128, ge=0, le=255)
    fill_shape: FillShape = FillShape.SOLID_CIRCLE
    shape_scale_percent: int = Field(default=50, gt=0, le=100)
    outline_inflation: float = Field(default=0.0, ge=0.0)
    thread_color: str = "#000000"

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("thread_color")
    @classmethod
    def _normalize_color(cls, value):
        text = value.strip()
        if not text.startswith("#"):
            text = "#" + text
        if len(text) != 7 or any(c not in "0123456789abcdefABCDEF" for c in text[1:]):
            raise ValueError(f"expected #RRGGBB, got {value!r}")
        return text.upper()

    @field_validator("outline_inflation")
    @classmethod
    def _finite_inflation(cls, value):
        if not math.isfinite(value):
            raise ValueError("inflation must be finite")
        return value

    @classmethod
    def create(cls, **values):
        """Validate values, reporting the first failure as InvalidConfig."""
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "generation"
            raise InvalidConfig(field, first.get("input"), first["msg"]) from e

    @property
    def rgb(self):
        return hex_to_rgb(self.thread_color)

    @property
    def size_multiplier(self):
        """Scale applied to round and square shapes (1.0 at 50%)."""
        return self.shape_scale_percent / 50.0

    @property
    def line_scale(self):
        """Fraction of the cell spanned by line-based stitches."""
        return self.shape_scale_percent / 100.0


class RenderTarget(BaseModel):
    """Output coordinate space for one render."""
    width: float
    height: float
    origin_x: float = 0.0
    origin_y: float = 0.0
    cell_width: float
    cell_height: float

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def stitch_size(self):
        return min(self.cell_width, self.cell_height)

    def cell_origin(self, row, col):
        """Top-left corner of a cell in output coordinates."""
        return (self.origin_x + col * self.cell_width,
                self.origin_y + row * self.cell_height)

    def cell_center(self, row, col):
        x, y = self.cell_origin(row, col)
        return x + self.cell_width / 2, y + self.cell_height / 2


class MoveTo(BaseModel):
    kind: Literal["move"] = "move"
    x: float
    y: float

    model_config = ConfigDict(frozen=True)


class LineTo(BaseModel):
    kind: Literal["line"] = "line"
    x: float
    y: float

    model_config = ConfigDict(frozen=True)


class ArcTo(BaseModel):
    """
    Circular arc from the current point to (x, y).

    Angles are in degrees in screen space (y down), so increasing angle
    runs clockwise on screen.
    """
    kind: Literal["arc"] = "arc"
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    clockwise: bool
    x: float
    y: float

    model_config = ConfigDict(frozen=True)


PathCommand = Union[MoveTo, LineTo, ArcTo]


def _fmt(value):
    return f"{round(value, 4):g}"


class OutlinePath(BaseModel):
    """Unordered collection of move/line/arc fragments around a silhouette."""
    commands: List[PathCommand] = Field(default_factory=list)
    color: str = "#000000"
    stroke_width: float = 1.0

    model_config = ConfigDict(extra="forbid")

    @property
    def is_empty(self):
        return not self.commands

    @property
    def fragment_count(self):
        return sum(1 for c in self.commands if c.kind == "move")

    def arcs(self):
        return [c for c in self.commands if c.kind == "arc"]

    def to_svg_path(self):
        """Serialize as SVG path data."""
        parts = []
        for cmd in self.commands:
            if cmd.kind == "move":
                parts.append(f"M {_fmt(cmd.x)},{_fmt(cmd.y)}")
            elif cmd.kind == "line":
                parts.append(f"L {_fmt(cmd.x)},{_fmt(cmd.y)}")
            else:
                sweep = 1 if cmd.clockwise else 0
                r = _fmt(cmd.radius)
                parts.append(f"A {r},{r} 0 0 {sweep} {_fmt(cmd.x)},{_fmt(cmd.y)}")
        return " ".join(parts)


class CirclePrimitive(BaseModel):
    kind: Literal["circle"] = "circle"
    row: int
    col: int
    cx: float
    cy: float
    r: float
    filled: bool = True
    stroke_width: float = 0.0
    color: str

    model_config = ConfigDict(frozen=True)


class RectPrimitive(BaseModel):
    kind: Literal["rect"] = "rect"
    row: int
    col: int
    x: float
    y: float
    width: float
    height: float
    filled: bool = True
    stroke_width: float = 0.0
    color: str

    model_config = ConfigDict(frozen=True)


class LinePrimitive(BaseModel):
    kind: Literal["line"] = "line"
    row: int
    col: int
    x1: float
    y1: float
    x2: float
    y2: float
    stroke_width: float
    color: str

    model_config = ConfigDict(frozen=True)


class Gridlines(BaseModel):
    """Stitch-boundary indices for fabrication grid overlays."""
    minor_x: List[int] = Field(default_factory=list)
    minor_y: List[int] = Field(default_factory=list)
    major_x: List[int] = Field(default_factory=list)
    major_y: List[int] = Field(default_factory=list)
    labeled_x: List[int] = Field(default_factory=list)
    labeled_y: List[int] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ThreadColor(BaseModel):
    """An embroidery floss color."""
    name: str
    dmc: str
    hex: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class CheckResult(BaseModel):
    """Result of a single pattern check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of pattern check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def error_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class ImageMeta(BaseModel):
    """Metadata for the source image."""
    width: int
    height: int
    source_path: str = ""

    model_config = ConfigDict(extra="forbid")


class PatternStats(BaseModel):
    """Cell counts and outline size for a generated pattern."""
    occupied_count: int = 0
    exterior_count: int = 0
    hole_count: int = 0
    outline_commands: int = 0
    outline_arcs: int = 0

    model_config = ConfigDict(extra="forbid")


class PatternDocument(BaseModel):
    """Summary of one generated pattern, saved as pattern.json."""
    pattern_id: str
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    image_meta: ImageMeta
    generation: GenerationConfig
    thread: Optional[ThreadColor] = None
    grid_width: int
    grid_height: int
    rows: List[str] = Field(default_factory=list)
    fabric_count: int = 14
    finished_width_in: float = 0.0
    finished_height_in: float = 0.0
    gridlines: Gridlines = Field(default_factory=Gridlines)
    stats: PatternStats = Field(default_factory=PatternStats)
    outputs: Dict[str, str] = Field(default_factory=dict)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


def grid_to_rows(grid):
    """Render a stitch grid as '#'/'.' strings, one per row."""
    return ["".join("#" if v else "." for v in row) for row in grid]


def generate_pattern_id(image_digest, generation):
    """
    Generate deterministic pattern ID from image content and generation config.
    """
    data = f"{image_digest}:{generation.model_dump_json()}"
    h = hashlib.sha256(data.encode()).hexdigest()[:16]
    return f"pattern_{h}"
