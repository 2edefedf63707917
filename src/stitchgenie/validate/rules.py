"""
Pattern checks for Stitch Genie.

Non-blocking sanity checks on a generated pattern. None of them stop the
pipeline; they end up in validation_report.json.
"""

from stitchgenie.models import CheckResult, Severity, ValidationReport
from stitchgenie.tracer import get_tracer, trace

RECOMMENDED_GRID_WIDTH = (16, 100)
RECOMMENDED_MAX_INFLATION = 10.0


@trace(label="run_validation")
def run_validation(document, config, page_stitch_size=None):
    """
    Run all pattern checks on a PatternDocument.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_not_empty(document),
        check_grid_width(document),
        check_outline_inflation(document),
        check_interior_holes(document),
    ]
    if page_stitch_size is not None:
        checks.append(check_print_stitch_size(page_stitch_size, config.pdf.min_stitch_size))

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_not_empty(document):
    """Warn when no cell passed the threshold."""
    occupied = document.stats.occupied_count
    return CheckResult(
        rule_id="pattern_not_empty",
        severity=Severity.WARN,
        passed=occupied > 0,
        message=(
            f"{occupied} stitches in pattern" if occupied
            else "No stitches: raise the threshold or use a darker image"
        ),
        evidence={"occupied": occupied},
    )


def check_grid_width(document):
    """Warn when the stitch count is outside the editor's slider range."""
    low, high = RECOMMENDED_GRID_WIDTH
    width = document.grid_width
    passed = low <= width <= high
    return CheckResult(
        rule_id="grid_width_range",
        severity=Severity.WARN,
        passed=passed,
        message=(
            f"Grid width {width} within {low}-{high}" if passed
            else f"Grid width {width} outside recommended range {low}-{high}"
        ),
        evidence={"grid_width": width, "grid_height": document.grid_height},
    )


def check_outline_inflation(document):
    """Warn when the outline offset exceeds the editor's slider range."""
    inflation = document.generation.outline_inflation
    passed = inflation <= RECOMMENDED_MAX_INFLATION
    return CheckResult(
        rule_id="outline_inflation_range",
        severity=Severity.WARN,
        passed=passed,
        message=(
            f"Outline offset {inflation:g}px" if passed
            else f"Outline offset {inflation:g}px exceeds {RECOMMENDED_MAX_INFLATION:g}px"
        ),
        evidence={"outline_inflation": inflation},
    )


def check_interior_holes(document):
    """Report enclosed empty cells, which are left without an outline."""
    holes = document.stats.hole_count
    return CheckResult(
        rule_id="interior_holes",
        severity=Severity.INFO,
        passed=holes == 0,
        message=(
            "No enclosed empty cells" if holes == 0
            else f"{holes} enclosed empty cells treated as interior background"
        ),
        evidence={"hole_count": holes},
    )


def check_print_stitch_size(stitch_size, min_size):
    """Warn when a stitch on the printed chart is too small to read."""
    passed = stitch_size >= min_size
    return CheckResult(
        rule_id="print_stitch_size",
        severity=Severity.WARN,
        passed=passed,
        message=(
            f"Printed stitch size {stitch_size:.2f}pt" if passed
            else f"Printed stitch size {stitch_size:.2f}pt below {min_size:g}pt"
        ),
        evidence={"stitch_size_pt": round(stitch_size, 3), "min_size_pt": min_size},
    )
