"""
Argument parsing logic for zipsort.
"""

import argparse
import dataclasses
from pathlib import Path
from typing import Any

from zipsort.models import AppConfig, colorize, colors


def get_default_value(field_name: str) -> Any:
    """Extract default value from AppConfig dataclass field."""
    f = AppConfig.__dataclass_fields__[field_name]
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def get_default_info(default_val: Any) -> str:
    """Generate a string with default settings for help message."""
    return f"(default: '{colorize(str(default_val), colors.yellow)}')"


def get_config(argv: list[str] | None = None) -> AppConfig:
    """Parse command line arguments and return the AppConfig object."""

    parser = argparse.ArgumentParser(
        prog="zipsort",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Organize photos from a ZIP export or a directory into date-based folders.\n"
        f"Dates come from EXIF {colorize('DateTimeOriginal', colors.green)}, "
        "with file name patterns as fallback.",
        epilog=f"Example: {colorize('zipsort', colors.green)} -i takeout.zip -o ~/Pictures/organized",
    )

    parser.add_argument(
        "-i",
        "--input",
        dest="input_path",
        type=str,
        default=None,
        metavar="PATH",
        help="ZIP file or directory with photos to organize",
    )

    def_output = get_default_value("output_dir")
    parser.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        type=str,
        default=str(def_output),
        metavar="DIR",
        help=f"Output directory for organized photos {get_default_info(def_output)}",
    )
    parser.add_argument(
        "-n",
        "--no-filter",
        dest="use_filter",
        action="store_false",
        default=get_default_value("use_filter"),
        help="Disable filtering (by default DSLR, Lightroom, GIF and derivative -MIX/-EDITED files are skipped)",
    )
    parser.add_argument(
        "-c",
        "--check",
        dest="check_mode",
        action="store_true",
        help="Check mode: report filtered, orphaned and undatable files without writing anything",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Quiet mode (suppress non-error messages)",
    )
    parser.add_argument(
        "-S",
        "--settings",
        dest="show_settings",
        action="store_true",
        help="Show raw settings (variable values)",
    )
    parser.add_argument(
        "-t",
        "--test",
        dest="test",
        action="store_true",
        help="Test mode: show what would be done without making changes",
    )
    parser.add_argument(
        "-v", "--version", dest="show_version", action="store_true", help="Print version and exit"
    )
    parser.add_argument(
        "-V",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Print one line per file during processing",
    )

    args = parser.parse_args(argv)

    input_path = Path(args.input_path).expanduser().resolve() if args.input_path else None

    # Construct and return the immutable AppConfig
    return AppConfig(
        input_path=input_path,
        output_dir=Path(args.output_dir).expanduser(),
        use_filter=args.use_filter,
        check_mode=args.check_mode,
        quiet=args.quiet,
        show_settings=args.show_settings,
        show_version=args.show_version,
        test=args.test,
        verbose=args.verbose,
    )
