"""
Output logic for zipsort.
"""

import sys
import time
from pathlib import Path

from zipsort.models import AppConfig, OrganizeResult, colorize, colors


def get_schema() -> str:
    """Get the target layout shown in the header."""
    arrow = colorize("→", colors.yellow)
    folder = colorize("YYYY/YYYY-MM-DD", colors.cyan)
    return f"FileName.Ext {arrow} {folder}/FileName.Ext"


def get_status(value: bool) -> str:
    """Get colored ON/OFF status."""
    return colorize("ON", colors.green) if value else colorize("OFF", colors.red)


def get_elapsed_time(start_time: float) -> tuple[str, str]:
    """Get elapsed time since script start."""
    elapsed_time = (time.time() - start_time) * 1000
    time_factor = "ms" if elapsed_time < 1000 else "s"
    elapsed_time = elapsed_time / 1000 if elapsed_time >= 1000 else elapsed_time
    return f"{elapsed_time:.2f}", time_factor


def print_progress(item: int, total: int, message: str, cfg: AppConfig) -> None:
    """Print progress of file processing."""
    percentage = (item / total) * 100 if total > 0 else 0
    msg = f"{cfg.terminal_clear}{cfg.indent}File {item} of {total}: {message} ({percentage:.0f}%)"
    print(msg, end="", flush=True)


def printe(message: str, exit_code: int = 1) -> None:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg)
    sys.exit(exit_code)


def print_settings(cfg: AppConfig) -> None:
    cfg.print_config()


def print_header(cfg: AppConfig) -> None:
    """Print the header information based on current configuration."""
    print(
        f"{colorize('Photo Organizer', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    if cfg.show_settings and not cfg.quiet:
        print_settings(cfg)
    if cfg.quiet:
        return
    print(f"{colorize('Schema:', colors.yellow)}")
    print(f"{cfg.indent}{get_schema()}")
    print(f"{colorize('Settings:', colors.yellow)}")
    print(f"{cfg.indent}Input: {colorize(str(cfg.input_path), colors.cyan)}")
    print(f"{cfg.indent}Output directory: {colorize(str(cfg.output_dir), colors.cyan)}")
    if cfg.use_filter:
        print(
            f"{cfg.indent}Filtering: {get_status(True)} "
            "(skipping DSLR, Lightroom, GIF and derivative -MIX/-EDITED/... files)"
        )
    else:
        print(f"{cfg.indent}Filtering: {get_status(False)} (organizing all photos)")
    if cfg.test or cfg.verbose:
        print(f"{cfg.indent}Test mode: {get_status(cfg.test)}")
    if cfg.check_mode or cfg.verbose:
        print(f"{cfg.indent}Check mode: {get_status(cfg.check_mode)}")


def print_process_entry(
    name: str, status: str, detail: str, item: int, total: int, cfg: AppConfig
) -> None:
    """
    Print the outcome of a single entry.

    Args:
        name: Source entry name
        status: One of "organized", "filtered", "error"
        detail: Target path, filter reason or error message
        item: 1-based position of the entry
        total: Number of entries
        cfg: Application configuration
    """
    if cfg.quiet:
        return
    if not cfg.verbose:
        print_progress(item, total, colorize(name, colors.cyan), cfg)
        return

    old = colorize(name, colors.cyan)
    if status == "organized":
        arr = colorize("→", colors.yellow)
        print(f"{cfg.indent}{old} {arr} {colorize(detail, colors.green)}")
    elif status == "filtered":
        print(f"{cfg.indent}{old}: filtered out ({colorize(detail, colors.yellow)})")
    else:
        print(f"{cfg.indent}{old}: error - {colorize(detail, colors.red)}")


def print_errors(failures: tuple[tuple[str, str], ...], cfg: AppConfig) -> None:
    """Print per-entry failures as name and reason."""
    if not failures:
        return
    print(f"{colorize('Errors:', colors.yellow)}")
    for name, reason in failures:
        print(f"{cfg.indent}{colorize(name, colors.cyan)}: {colorize(reason, colors.red)}")


def print_footer(result: OrganizeResult, output_dir: Path, cfg: AppConfig) -> None:
    """Print the summary of an organize run."""
    time_elapsed, time_factor = get_elapsed_time(cfg.start_time)
    if not cfg.verbose and not cfg.quiet and result.total_files:
        print(f"{cfg.terminal_clear}{cfg.indent}Done.")
    print(f"{colorize('Summary:', colors.yellow)}")
    if cfg.test:
        print(f"{cfg.indent}Test mode (no changes made).")
    print(f"{cfg.indent}Total files: {result.total_files}")
    print(f"{cfg.indent}Organized: {result.organized_files}")
    failed = result.skipped_files - result.filtered_files
    print(
        f"{cfg.indent}Skipped: {result.skipped_files} "
        f"(filtered: {result.filtered_files}, errors: {failed})"
    )
    print(f"{cfg.indent}Output: {colorize(str(output_dir), colors.cyan)}")
    print(f"{cfg.indent}Completed in: {colorize(time_elapsed, colors.cyan)} {time_factor}.")
    print_errors(result.failures, cfg)


def print_check_results(issues: dict[str, list[tuple[str, str]]], cfg: AppConfig) -> None:
    """Print results of check mode."""
    print(f"{colorize('Check results:', colors.yellow)}")

    total_issues = sum(len(file_list) for file_list in issues.values())
    if total_issues == 0:
        print(f"{cfg.indent}{colorize('No issues found!', colors.green)} All files would be organized.")
        return

    titles = {
        "filtered": "Files skipped by the filter",
        "orphaned": "Derivative files kept without their original",
        "no_date": "Files without a resolvable date",
    }
    for key, title in titles.items():
        entries = issues.get(key, [])
        if not entries:
            continue
        print(f"{cfg.indent}{colorize(f'{title} ({len(entries)}):', colors.yellow)}")
        for filename, reason in entries:
            print(f"{cfg.indent}{cfg.indent}{colorize(filename, colors.cyan)}: {reason}")
        print()
