"""
Command-line interface for Stitch Genie.

Provides commands for generating patterns, writing a default config and
listing the thread palette.
"""

import argparse
import sys

from stitchgenie.config import load_config, save_default_config
from stitchgenie.models import FillShape
from stitchgenie.palette import DMC_COLORS
from stitchgenie.tracer import configure_tracer, get_tracer


def build_parser():
    parser = argparse.ArgumentParser(
        description="Stitch Genie: turn an image into a silhouette cross-stitch pattern",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Generate a pattern from an image")
    run_parser.add_argument("--input", "-i", required=True, help="Input image file")
    run_parser.add_argument("--out", "-o", required=True, help="Output directory")
    run_parser.add_argument("--config", "-c", default=None, help="Path to YAML configuration file")
    run_parser.add_argument("--grid-width", type=int, default=None, help="Stitches across")
    run_parser.add_argument("--threshold", type=int, default=None, help="Silhouette threshold (0-255)")
    run_parser.add_argument(
        "--shape",
        default=None,
        choices=[s.value for s in FillShape],
        help="Stitch shape",
    )
    run_parser.add_argument("--scale", type=int, default=None, help="Shape size percent (1-100)")
    run_parser.add_argument("--outline", type=float, default=None, help="Outline offset in preview pixels")
    run_parser.add_argument("--color", default=None, help="DMC code, palette name or #RRGGBB")
    run_parser.add_argument("--thread-count", default=None, help="Fabric count, e.g. 14-count")
    run_parser.add_argument("--debug", action="store_true", help="Enable debug artifact generation")
    run_parser.add_argument("--trace", action="store_true", help="Enable runtime tracing")
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument("--trace-file", default=None, help="Path to write trace logs")
    run_parser.add_argument("--trace-json", action="store_true", help="Enable JSON trace output")

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="stitchgenie_config.yaml",
        help="Output path for config file",
    )

    subparsers.add_parser("colors", help="List the DMC thread palette")

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    if args.command == "init-config":
        return handle_init_config(args)
    if args.command == "colors":
        return handle_colors(args)

    return 0


def handle_run(args):
    """Handle the run command."""
    config = load_config(args.config)
    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    overrides = {
        "grid.width": args.grid_width,
        "grid.threshold": args.threshold,
        "stitch.shape": args.shape,
        "stitch.scale_percent": args.scale,
        "stitch.color": args.color,
        "outline.inflation": args.outline,
        "fabric.thread_count": args.thread_count,
    }

    try:
        from stitchgenie.pipeline import run_pipeline

        with tracer.span("cli_run", module="cli"):
            document = run_pipeline(
                input_path=args.input,
                out_dir=args.out,
                config=config,
                overrides=overrides,
                debug=args.debug,
            )

        print("\nPattern generated successfully.")
        print(f"  Stitches: {document.grid_width} x {document.grid_height}")
        print(f"  Filled cells: {document.stats.occupied_count}")
        print(f"  Enclosed holes: {document.stats.hole_count}")
        print(f"  Warnings: {document.validation.warning_count}")
        print(f"\nOutputs saved to: {args.out}/")
        for name, path in document.outputs.items():
            print(f"  - {name}: {path}")

        if "pdf" not in document.outputs:
            print("\n[!] PDF was not produced (cairosvg unavailable or failed)")

        return 0

    except Exception as e:
        tracer.event(f"Pipeline failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


def handle_colors(args):
    """Handle the colors command."""
    for color in DMC_COLORS:
        print(f"  DMC {color.dmc:>4}  {color.hex}  {color.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
