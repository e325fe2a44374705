"""
Date resolution for photos.

Dates come from the EXIF ``DateTimeOriginal`` field first and from patterns
in the file name second. Requires Pillow (to open the image container),
pillow-heif (HEIC/HEIF support for Pillow) and piexif (to decode the EXIF block).
"""

import datetime
import io
import re
from typing import Any

import piexif
import pillow_heif
from PIL import Image

from zipsort.models import DateExtractionError, MetadataError, get_base_name

pillow_heif.register_heif_opener()

# TIFF files are themselves an EXIF container and are decoded directly.
TIFF_HEADERS = (b"II*\x00", b"MM\x00*")


def read_exif(image_data: bytes) -> dict[str, Any]:
    """
    Decode the EXIF block of an image held in memory.

    TIFF data is handed to piexif as is. Other containers (JPEG, PNG, WebP,
    HEIC/HEIF through pillow-heif) are opened with Pillow, which exposes the
    embedded block as ``info["exif"]``.

    Args:
        image_data: Raw bytes of the image file

    Returns:
        piexif dictionary with "0th", "Exif", "GPS", ... IFDs

    Raises:
        MetadataError: If the bytes are not an image or carry no EXIF block
    """
    if image_data[:4] in TIFF_HEADERS:
        exif_bytes = image_data
    else:
        try:
            with Image.open(io.BytesIO(image_data)) as img:
                exif_bytes = img.info.get("exif")
        except Exception as e:
            raise MetadataError(f"Failed to read EXIF data from image: {e}") from e

    if not exif_bytes:
        raise MetadataError("No EXIF data found in image")

    try:
        return piexif.load(exif_bytes)
    except Exception as e:
        raise MetadataError(f"Invalid EXIF data: {e}") from e


def get_exif_text(exif: dict[str, Any], ifd: str, tag: int) -> str | None:
    """Return an EXIF ASCII field as text, or None when it is absent."""
    value = exif.get(ifd, {}).get(tag)
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value).strip("\x00").strip()


def parse_exif_date(value: str) -> datetime.date:
    """
    Parse the date portion of an EXIF timestamp.

    EXIF dates use the format ``YYYY:MM:DD HH:MM:SS``; only the text before
    the first whitespace is used.

    Raises:
        MetadataError: If the value holds no valid calendar date
    """
    parts = value.split()
    if not parts:
        raise MetadataError("Invalid EXIF date format: empty value")

    normalized = parts[0].replace(":", "-")
    try:
        return datetime.datetime.strptime(normalized, "%Y-%m-%d").date()
    except ValueError as e:
        raise MetadataError(f"Failed to parse date from EXIF value '{value}': {e}") from e


class MetadataDateExtractor:
    """Extracts the original capture date from embedded EXIF metadata."""

    def extract_date(self, filename: str, image_data: bytes) -> datetime.date:
        exif = read_exif(image_data)
        value = get_exif_text(exif, "Exif", piexif.ExifIFD.DateTimeOriginal)
        if not value:
            raise MetadataError("No DateTimeOriginal field found in EXIF data")
        return parse_exif_date(value)


# Order matters: later patterns are looser or overlap earlier ones.
FILENAME_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("screenshot", re.compile(r"Screenshot_(\d{4})-(\d{2})-(\d{2})")),
    ("dashed", re.compile(r"(\d{4})-(\d{2})-(\d{2})")),
    ("compact", re.compile(r"(\d{4})(\d{2})(\d{2})_\d{6}")),
    ("img_compact", re.compile(r"IMG_(\d{4})(\d{2})(\d{2})_\d{6}")),
    ("img_dash", re.compile(r"IMG-(\d{4})(\d{2})(\d{2})-")),
)


class FilenameDateExtractor:
    """
    Recovers a date from the file name alone.

    Patterns are tried in order; a match that is not a real calendar date
    falls through to the next pattern.
    """

    def __init__(self, patterns: tuple[tuple[str, re.Pattern[str]], ...] = FILENAME_PATTERNS):
        self.patterns = patterns

    def extract_date(self, filename: str, image_data: bytes = b"") -> datetime.date:
        name = get_base_name(filename)
        for _, pattern in self.patterns:
            match = pattern.search(name)
            if match is None:
                continue
            year, month, day = (int(g) for g in match.groups())
            try:
                return datetime.date(year, month, day)
            except ValueError:
                continue

        raise DateExtractionError(f"No date pattern found in filename '{name}'")


class CompositeDateExtractor:
    """EXIF date first, file name patterns as fallback."""

    def __init__(
        self,
        metadata_extractor: MetadataDateExtractor | None = None,
        filename_extractor: FilenameDateExtractor | None = None,
    ):
        self.metadata_extractor = metadata_extractor or MetadataDateExtractor()
        self.filename_extractor = filename_extractor or FilenameDateExtractor()

    def extract_date(self, filename: str, image_data: bytes) -> datetime.date:
        try:
            return self.metadata_extractor.extract_date(filename, image_data)
        except DateExtractionError as e:
            metadata_reason = str(e)

        try:
            return self.filename_extractor.extract_date(filename, image_data)
        except DateExtractionError as e:
            raise DateExtractionError(f"{metadata_reason}; {e}") from e
