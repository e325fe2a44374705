"""
Filters deciding which photos from the source are organized.
"""

import re
from collections.abc import Iterable

import piexif

from zipsort.dates import get_exif_text, read_exif
from zipsort.models import AppConfig, MetadataError, get_normalized_extension


def get_marker_pattern(markers: Iterable[str]) -> re.Pattern[str]:
    """Case-insensitive pattern matching any of the derivative markers."""
    return re.compile("|".join(re.escape(m) for m in markers), re.IGNORECASE)


def strip_markers(filename: str, markers: Iterable[str]) -> str:
    """
    Remove every occurrence of every derivative marker from a file name.

    Example: ``DSC_9157-edited.JPG`` -> ``DSC_9157.JPG``
    """
    return get_marker_pattern(markers).sub("", filename)


def has_marker(filename: str, markers: Iterable[str]) -> bool:
    return get_marker_pattern(markers).search(filename) is not None


def find_orphaned_derivatives(names: Iterable[str], markers: Iterable[str]) -> list[str]:
    """
    List derivative files whose original is missing from the source.

    Args:
        names: All entry names in the source, in source order
        markers: Derivative markers such as "-EDITED"

    Returns:
        Names carrying a marker whose stripped original is not in names
    """
    markers = tuple(markers)
    names = list(names)
    known = set(names)
    return [n for n in names if has_marker(n, markers) and strip_markers(n, markers) not in known]


class NoFilter:
    """Accepts every photo."""

    def should_include(self, filename: str, image_data: bytes) -> bool:
        return True

    def get_reason(self, filename: str, image_data: bytes) -> str | None:
        return None


class ExistingCollectionFilter:
    """
    Skips photos that already belong to an existing collection.

    Rules, evaluated in order:
      1. GIF files are always skipped.
      2. Files with a derivative marker (-EDITED, -MIX, ...) are skipped when
         their original is present in the source, kept otherwise.
      3. Photos processed with Lightroom or shot with a Nikon camera
         (according to EXIF) are skipped.
    """

    def __init__(self, all_filenames: Iterable[str], cfg: AppConfig | None = None):
        self.cfg = cfg or AppConfig()
        self.all_filenames = frozenset(all_filenames)
        self.marker_pattern = get_marker_pattern(self.cfg.derivative_markers)

    def should_include(self, filename: str, image_data: bytes) -> bool:
        return self.get_reason(filename, image_data) is None

    def get_reason(self, filename: str, image_data: bytes) -> str | None:
        """
        Return why a photo is skipped, or None if it is kept.
        """
        if get_normalized_extension(filename) in self.cfg.excluded_extensions:
            return "GIF file"

        if self.marker_pattern.search(filename):
            original = self.marker_pattern.sub("", filename)
            if original in self.all_filenames:
                return f"derivative of {original}"
            return None

        return self._get_metadata_reason(image_data)

    def _get_metadata_reason(self, image_data: bytes) -> str | None:
        try:
            exif = read_exif(image_data)
        except MetadataError:
            return None

        software = get_exif_text(exif, "0th", piexif.ImageIFD.Software)
        if software and self.cfg.lightroom_marker.lower() in software.lower():
            return f"processed with {software}"

        nikon = self.cfg.nikon_marker.upper()
        for tag in (piexif.ImageIFD.Make, piexif.ImageIFD.Model):
            value = get_exif_text(exif, "0th", tag)
            if value and nikon in value.upper():
                return f"taken with {value}"

        return None
