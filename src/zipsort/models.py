import datetime
import time
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Any, Protocol


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/zipsort/models.py
    """
    try:
        pyproject_path = Path(__file__).parents[2] / "pyproject.toml"

        if not pyproject_path.is_file():
            return {}

        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version from pyproject.toml [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_date() -> str:
    """Get release date from pyproject.toml [tool.zipsort] section."""
    data = _get_pyproject_data()
    return str(data.get("tool", {}).get("zipsort", {}).get("date", ""))


def _get_script_name() -> str:
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "zipsort"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


def _get_script_license() -> str:
    """Get license identifier from [project]."""
    data = _get_pyproject_data()
    # New format: license = "MIT" (string)
    # Old format: license = { text = "MIT" } (dict)
    lic = data.get("project", {}).get("license", "")
    if isinstance(lic, dict):
        return str(lic.get("text", ""))
    return str(lic)


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


def get_normalized_extension(name: str | PurePosixPath | Path) -> str:
    """
    Extract and normalize file extension from a name or path.

    Args:
        name: File name (may contain directory segments) or path object

    Returns:
        Lowercase extension without leading dot
    """
    return PurePosixPath(str(name)).suffix.lstrip(".").lower()


def get_base_name(name: str) -> str:
    """Return the last segment of a source entry name."""
    return PurePosixPath(name.replace("\\", "/")).name


class ZipsortError(Exception):
    """Base class for all errors raised by zipsort."""


class SourceError(ZipsortError):
    """The photo source could not be opened or listed."""


class DateExtractionError(ZipsortError):
    """No date could be resolved for an entry."""


class MetadataError(DateExtractionError):
    """Embedded metadata is missing, unreadable or holds no usable date."""


@dataclass(frozen=True)
class SourceEntry:
    """One photo read from the source: its stored name and raw bytes."""

    name: str
    data: bytes = field(repr=False)

    @property
    def base_name(self) -> str:
        return get_base_name(self.name)


@dataclass(frozen=True)
class OrganizeResult:
    """Counters and per-entry failures of one organize run."""

    total_files: int = 0
    organized_files: int = 0
    skipped_files: int = 0
    filtered_files: int = 0
    failures: tuple[tuple[str, str], ...] = ()

    @property
    def errors(self) -> tuple[str, ...]:
        """Failure messages in the form ``name: reason``."""
        return tuple(f"{name}: {reason}" for name, reason in self.failures)


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Settings
    image_extensions: tuple[str, ...] = (
        "jpg",
        "jpeg",
        "png",
        "heic",
        "heif",
        "gif",
        "webp",
        "bmp",
        "tiff",
        "tif",
    )
    excluded_extensions: tuple[str, ...] = ("gif",)
    derivative_markers: tuple[str, ...] = (
        "-MIX",
        "-EDITED",
        "-EFFECTS",
        "-ANIMATION",
        "-COLLAGE",
        "-SMILE",
        "-PANO",
    )
    lightroom_marker: str = "lightroom"
    nikon_marker: str = "NIKON"

    # Formatting
    indent: str = "    "
    terminal_clear: str = "\r\033[K\r"

    # Flags & Values
    check_mode: bool = False
    quiet: bool = False
    show_version: bool = False
    show_settings: bool = False
    test: bool = False
    use_filter: bool = True
    verbose: bool = False

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_date: str = field(default_factory=_get_script_date)
    script_author: str = field(default_factory=_get_script_author)
    script_license: str = field(default_factory=_get_script_license)

    # Runtime state
    start_time: float = field(default_factory=time.time)
    input_path: Path | None = None
    output_dir: Path = field(default_factory=lambda: Path("./organized_photos"))

    def print_config(self) -> None:
        """
        Print all configuration properties alphabetically.
        """
        print(f"{colorize('RAW Settings:', colors.yellow)}")

        for key in sorted(self.__dict__.keys()):
            if key == "terminal_clear":
                continue

            value = getattr(self, key)
            print(f"{self.indent}{key}: {colorize(str(value), colors.cyan)}")


class DateDirectoryLookup(Protocol):
    def find_existing_date_directory(self, year_path: Path, date_prefix: str) -> str | None: ...


class PathGenerator:
    """
    Generates target paths for organized photos.

    Paths have the form ``YYYY/YYYY-MM-DD/<filename>``. When the output tree
    already holds a directory under ``YYYY/`` whose name starts with the date
    (for example ``2025-10-28_special_event``), that directory is reused.
    """

    def __init__(self, lookup: DateDirectoryLookup | None = None):
        """
        Initialize PathGenerator.

        Args:
            lookup: Object able to scan the output tree for existing date
                directories (usually the FileSystemWriter). Without one the
                plain date directory is always used.
        """
        self.lookup = lookup

    @staticmethod
    def generate_year_dir(date: datetime.date) -> str:
        return f"{date.year:04d}"

    @staticmethod
    def generate_date_dir(date: datetime.date) -> str:
        """Zero-padded ``YYYY-MM-DD`` directory name."""
        return f"{date.year:04d}-{date.month:02d}-{date.day:02d}"

    def generate_subdir(self, date: datetime.date) -> Path:
        """
        Generate the relative directory for a date.

        Args:
            date: Resolved date of the photo

        Returns:
            Relative path ``YYYY/<date directory>``
        """
        year_dir = Path(self.generate_year_dir(date))
        date_dir = self.generate_date_dir(date)

        if self.lookup is not None:
            existing = self.lookup.find_existing_date_directory(year_dir, date_dir)
            if existing:
                date_dir = existing

        return year_dir / date_dir

    def generate_path(self, date: datetime.date, filename: str) -> Path:
        """
        Generate the relative target path for a photo.

        Args:
            date: Resolved date of the photo
            filename: Base file name (directory segments are dropped)

        Returns:
            Relative path ``YYYY/YYYY-MM-DD[_suffix]/filename``
        """
        return self.generate_subdir(date) / get_base_name(filename)
