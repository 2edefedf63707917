"""
Validation report generation for Stitch Genie.

Creates JSON and plain-text summaries of the pattern checks.
"""

import os

from stitchgenie.io.save_artifacts import ensure_dir, save_json
from stitchgenie.tracer import get_tracer, trace


def summary_lines(document):
    """Human-readable lines describing a pattern and its checks."""
    report = document.validation
    passed = [c for c in report.checks if c.passed]
    failed = [c for c in report.checks if not c.passed]

    lines = ["Stitch Genie Pattern Report", "=" * 40, ""]
    lines.append(f"Pattern: {document.pattern_id}")
    lines.append(f"Stitches: {document.grid_width} x {document.grid_height} "
                 f"({document.stats.occupied_count} filled)")
    lines.append(f"Fabric: {document.fabric_count}-count")
    lines.append(f"Finished size: {document.finished_width_in:.2f} x {document.finished_height_in:.2f} in")
    if document.thread:
        lines.append(f"Thread: DMC {document.thread.dmc} {document.thread.name}")
    else:
        lines.append(f"Thread: {document.generation.thread_color}")
    lines.append("")
    lines.append(f"Total checks: {len(report.checks)}")
    lines.append(f"Passed: {len(passed)}")
    lines.append(f"Failed: {len(failed)}")

    if failed:
        lines.append("")
        lines.append("Failed checks:")
        for check in failed:
            lines.append(f"  [{check.severity.value.upper()}] {check.rule_id}: {check.message}")

    return lines


@trace(label="generate_report")
def generate_report(document, out_dir):
    """
    Write validation_report.json and validation_summary.txt.

    Returns the two paths.
    """
    tracer = get_tracer()
    ensure_dir(out_dir)

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(document.validation, report_path)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write("\n".join(summary_lines(document)) + "\n")

    tracer.event(f"Report saved: {report_path}")

    return report_path, summary_path
