"""CLI interface for data-to-PDF conversion.

This module provides a command-line interface for converting CSV, JSON and
XML files using DocumentConverter under the hood.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .core.converter import ConversionError, DocumentConverter
from .core.surface import MemorySurface, PyMuPDFSurface
from .schemas.config import (
    FONT_SIZE_TIERS,
    LAYOUT_MODES,
    ORIENTATIONS,
    PAGE_SIZES,
    ConverterConfig,
    RenderOptions,
    load_options_file,
)
from .utils.detection import UnsupportedFormatError, detect_format

LOG_FORMAT = "%(asctime)s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def setup_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """Setup logging: console + optional file handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (UTF-8). If None, console only.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logging.getLogger().addHandler(fh)


def validate_arguments(input_path: Path) -> None:
    """Validate CLI arguments.

    Raises:
        SystemExit: If validation fails
    """
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    if not input_path.is_file():
        print(f"Error: Path is not a file: {input_path}", file=sys.stderr)
        sys.exit(1)

    try:
        detect_format(input_path)
    except UnsupportedFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabulon",
        description="Convert CSV, JSON or XML files into paginated PDF documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tabulon sales.csv
  tabulon catalog.xml --layout table --orientation landscape
  tabulon config.json --layout structured --watermark DRAFT -o out/config.pdf
  tabulon data.csv --options render.yaml --dry-run

Options given on the command line override values from --options.
        """,
    )

    parser.add_argument("input_path", type=Path, help="Path to .csv, .json or .xml file")
    parser.add_argument("--output", "-o", type=Path, help="Output PDF path")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for output when --output is not given (default: $TABULON_OUTPUT_DIR or .)",
    )
    parser.add_argument("--options", type=Path, help="YAML file with render options")

    parser.add_argument("--page-size", choices=sorted(PAGE_SIZES), help="Page size (default: a4)")
    parser.add_argument("--orientation", choices=ORIENTATIONS, help="Page orientation (default: portrait)")
    parser.add_argument("--font-size", choices=list(FONT_SIZE_TIERS), help="Font size tier (default: medium)")
    parser.add_argument("--layout", choices=LAYOUT_MODES, help="Layout mode (default: auto)")
    parser.add_argument(
        "--no-row-numbers",
        dest="show_row_numbers",
        action="store_false",
        default=None,
        help="Do not number table rows",
    )
    parser.add_argument(
        "--no-metadata",
        dest="show_metadata",
        action="store_false",
        default=None,
        help="Do not print the generation timestamp and counts",
    )

    parser.add_argument("--title", help="Custom document title")
    parser.add_argument("--logo", help="Logo image file")
    parser.add_argument("--header-text", help="Running header text (top right)")
    parser.add_argument("--footer-text", help="Custom footer text (bottom right)")
    parser.add_argument("--watermark", help="Diagonal watermark text")

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Write a YAML transcript of drawing calls instead of a PDF",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: $TABULON_LOG_LEVEL or INFO)",
    )
    parser.add_argument("--log-file", type=Path, help="Also write the log to this file")
    return parser


_OPTION_ARGS = ("page_size", "orientation", "font_size", "layout", "show_row_numbers", "show_metadata")
_DECORATION_ARGS = ("title", "logo", "header_text", "footer_text", "watermark")


def build_options(args: argparse.Namespace) -> RenderOptions:
    """Merge the options file (if any) with command-line overrides."""
    data: Dict[str, Any] = {}
    if args.options is not None:
        base = load_options_file(args.options)
        data.update({name: getattr(base, name) for name in _OPTION_ARGS})
        data.update({name: getattr(base.decorations, name) for name in _DECORATION_ARGS})
        data["filename"] = base.filename

    for name in _OPTION_ARGS + _DECORATION_ARGS:
        value = getattr(args, name)
        if value is not None:
            data[name] = value

    return RenderOptions.from_mapping(data)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        0 on success, 1 on error
    """
    args = build_parser().parse_args(argv)

    try:
        load_dotenv()
        config = ConverterConfig(output_dir=args.output_dir, log_level=args.log_level)

        validate_arguments(args.input_path)
        setup_logging(config.log_level, args.log_file)
        logger = logging.getLogger(__name__)

        options = build_options(args)
        surface_factory = MemorySurface if args.dry_run else PyMuPDFSurface

        output = args.output
        if args.dry_run:
            output = (output or config.output_dir / args.input_path.name).with_suffix(".yaml")

        converter = DocumentConverter(options=options, config=config, surface_factory=surface_factory)
        logger.info(f"Processing: {args.input_path}")
        result = converter.convert_file(args.input_path, output)

        print()
        print("=" * 60)
        print("Conversion completed successfully!")
        print("=" * 60)
        print(f"Input:    {args.input_path}")
        print(f"Format:   {result.source_format}")
        print(f"Layout:   {result.mode}")
        print(f"Pages:    {result.page_count}")
        print(f"Output:   {result.output_path}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\nConversion interrupted by user", file=sys.stderr)
        return 1

    except (ConversionError, ValueError, OSError) as e:
        logging.getLogger(__name__).exception(f"Error during conversion: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
