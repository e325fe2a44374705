#!/usr/bin/env python3
"""
Sort photos from a ZIP export or a directory into date-based folders.
Dates come from EXIF metadata, with file name patterns as fallback.
Requires: Pillow, pillow-heif and piexif Python libraries.
"""

import datetime
from pathlib import Path
from typing import Protocol

from zipsort.args import get_config
from zipsort.dates import CompositeDateExtractor
from zipsort.filters import ExistingCollectionFilter, NoFilter, find_orphaned_derivatives
from zipsort.models import (
    AppConfig,
    DateExtractionError,
    OrganizeResult,
    PathGenerator,
    SourceEntry,
    SourceError,
    colorize,
    colors,
)
from zipsort.print import (
    print_check_results,
    print_footer,
    print_header,
    print_process_entry,
    printe,
)
from zipsort.sources import get_reader
from zipsort.writer import FileSystemWriter


class ImageReader(Protocol):
    def read_names(self) -> list[str]: ...

    def read_entries(self) -> list[SourceEntry]: ...


class DateExtractor(Protocol):
    def extract_date(self, filename: str, image_data: bytes) -> datetime.date: ...


class PhotoFilter(Protocol):
    def should_include(self, filename: str, image_data: bytes) -> bool: ...

    def get_reason(self, filename: str, image_data: bytes) -> str | None: ...


class EntryError(Exception):
    """Processing of a single entry failed; the run continues."""


class PhotoOrganizer:
    """
    Drives the per-entry pipeline: filter, resolve date, generate path, write.
    """

    def __init__(
        self,
        reader: ImageReader,
        date_extractor: DateExtractor,
        path_generator: PathGenerator,
        file_writer: FileSystemWriter,
        photo_filter: PhotoFilter,
        cfg: AppConfig | None = None,
    ):
        self.reader = reader
        self.date_extractor = date_extractor
        self.path_generator = path_generator
        self.file_writer = file_writer
        self.photo_filter = photo_filter
        self.cfg = cfg or AppConfig(quiet=True)

    def organize(self) -> OrganizeResult:
        """
        Organize every entry of the source.

        Returns:
            OrganizeResult with counters and per-entry error messages

        Raises:
            SourceError: If the source cannot be read
        """
        entries = self.reader.read_entries()

        total_files = len(entries)
        organized_files = 0
        skipped_files = 0
        filtered_files = 0
        failures: list[tuple[str, str]] = []

        for item, entry in enumerate(entries, start=1):
            reason = self.photo_filter.get_reason(entry.name, entry.data)
            if reason is not None:
                print_process_entry(entry.name, "filtered", reason, item, total_files, self.cfg)
                skipped_files += 1
                filtered_files += 1
                continue

            try:
                target_path = self.process_entry(entry)
            except EntryError as e:
                print_process_entry(entry.name, "error", str(e), item, total_files, self.cfg)
                skipped_files += 1
                failures.append((entry.name, str(e)))
                continue

            print_process_entry(
                entry.name, "organized", str(target_path), item, total_files, self.cfg
            )
            organized_files += 1

        return OrganizeResult(
            total_files=total_files,
            organized_files=organized_files,
            skipped_files=skipped_files,
            filtered_files=filtered_files,
            failures=tuple(failures),
        )

    def process_entry(self, entry: SourceEntry) -> Path:
        """
        Resolve the date of one entry and write it to its target path.

        Returns:
            Absolute path of the written file

        Raises:
            EntryError: If the date cannot be resolved or the file cannot be written
        """
        try:
            date = self.date_extractor.extract_date(entry.name, entry.data)
        except DateExtractionError as e:
            raise EntryError(f"Failed to extract date: {e}") from e

        target_path = self.path_generator.generate_path(date, entry.base_name)

        if not self.cfg.test:
            self.ensure_parent_directory_exists(target_path)
            try:
                self.file_writer.write_file(target_path, entry.data)
            except PermissionError as e:
                raise EntryError(f"Permission denied: cannot write file '{target_path}'.") from e
            except OSError as e:
                raise EntryError(f"Failed to write file '{target_path}': {e}") from e

        return self.file_writer.get_full_path(target_path)

    def ensure_parent_directory_exists(self, path: Path) -> None:
        parent = path.parent
        try:
            self.file_writer.create_directory(parent)
        except PermissionError as e:
            raise EntryError(f"Permission denied: cannot create directory '{parent}'.") from e
        except OSError as e:
            raise EntryError(f"Error creating directory '{parent}': {e}") from e


def collect_filenames(reader: ImageReader) -> list[str]:
    """Read the names of all entries, once, before any entry is processed."""
    return reader.read_names()


def build_filter(reader: ImageReader, cfg: AppConfig) -> PhotoFilter:
    """Create the filter selected by the configuration."""
    if not cfg.use_filter:
        return NoFilter()
    return ExistingCollectionFilter(collect_filenames(reader), cfg)


def check_conditions(cfg: AppConfig) -> None:
    """Check if all conditions are met to run the script."""
    # Show version and exit when requested with --version
    if cfg.show_version:
        date_str = f" ({cfg.script_date})" if cfg.script_date else ""
        author_str = f" by {colorize(cfg.script_author, colors.cyan)}" if cfg.script_author else ""
        license_str = f", {cfg.script_license} license" if cfg.script_license else ""
        msg = (
            f"{colorize(cfg.script_name, colors.green)} "
            f"version {colorize(cfg.script_version, colors.cyan)}{date_str}{author_str}{license_str}"
        )
        printe(msg, 0)

    if cfg.input_path is None:
        printe("No input specified. Use -i/--input with a ZIP file or a directory.", 1)

    if not cfg.input_path.exists():
        printe(
            f"The specified input '{colorize(str(cfg.input_path), colors.cyan)}' does not exist.",
            1,
        )

    if not (cfg.input_path.is_dir() or cfg.input_path.is_file()):
        printe(
            f"The specified input '{colorize(str(cfg.input_path), colors.cyan)}' is neither a file nor a directory.",
            1,
        )

    if cfg.output_dir.exists() and not cfg.output_dir.is_dir():
        printe(
            f"The output path '{colorize(str(cfg.output_dir), colors.cyan)}' exists and is not a directory.",
            1,
        )

    # Check for conflicting quiet and verbose modes
    if cfg.quiet and cfg.verbose:
        printe("Cannot use both quiet mode and verbose mode.", 1)


def check_entries(
    reader: ImageReader,
    photo_filter: PhotoFilter,
    date_extractor: DateExtractor,
    cfg: AppConfig,
) -> dict[str, list[tuple[str, str]]]:
    """
    Check entries for issues without writing anything.

    Returns a dictionary with issue categories and affected files:
    {
        "filtered": [(filename, reason), ...],
        "orphaned": [(filename, reason), ...],
        "no_date": [(filename, reason), ...],
    }
    """
    issues: dict[str, list[tuple[str, str]]] = {
        "filtered": [],
        "orphaned": [],
        "no_date": [],
    }

    entries = reader.read_entries()
    names = [entry.name for entry in entries]

    for entry in entries:
        reason = photo_filter.get_reason(entry.name, entry.data)
        if reason is not None:
            issues["filtered"].append((entry.name, reason))
            continue
        try:
            date_extractor.extract_date(entry.name, entry.data)
        except DateExtractionError as e:
            issues["no_date"].append((entry.name, str(e)))

    filtered = {name for name, _ in issues["filtered"]}
    for name in find_orphaned_derivatives(names, cfg.derivative_markers):
        if name not in filtered:
            issues["orphaned"].append((name, "original not found in source"))

    return issues


def main() -> None:
    """Main function to run the photo organizing process."""
    cfg = get_config()
    check_conditions(cfg)
    print_header(cfg)

    date_extractor = CompositeDateExtractor()
    file_writer = FileSystemWriter(cfg.output_dir)

    try:
        reader = get_reader(cfg.input_path, cfg)
        photo_filter = build_filter(reader, cfg)

        if cfg.check_mode:
            issues = check_entries(reader, photo_filter, date_extractor, cfg)
            print_check_results(issues, cfg)
            return

        organizer = PhotoOrganizer(
            reader,
            date_extractor,
            PathGenerator(file_writer),
            file_writer,
            photo_filter,
            cfg,
        )
        result = organizer.organize()
    except SourceError as e:
        printe(f"Failed to organize photos: {e}", 1)

    print_footer(result, file_writer.get_full_path(Path(".")), cfg)


if __name__ == "__main__":
    main()
