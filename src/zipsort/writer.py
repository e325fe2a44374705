"""
File system access for the output tree.
"""

import os
from pathlib import Path


class FileSystemWriter:
    """Writes organized photos below a base output directory."""

    def __init__(self, base_output_dir: Path):
        self.base_output_dir = Path(base_output_dir)

    def get_full_path(self, path: Path) -> Path:
        return (self.base_output_dir / path).absolute()

    def create_directory(self, path: Path) -> None:
        """Create a directory (and its parents); existing ones are fine."""
        self.get_full_path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, data: bytes) -> None:
        """Write data to a file, replacing any file already there."""
        self.get_full_path(path).write_bytes(data)

    def find_existing_date_directory(self, year_path: Path, date_prefix: str) -> str | None:
        """
        Look for a directory under year_path whose name starts with date_prefix.

        Args:
            year_path: Relative year directory, e.g. "2025"
            date_prefix: Date directory name, e.g. "2025-10-28"

        Returns:
            Name of the first matching directory in sorted order, or None
        """
        full_year_path = self.get_full_path(year_path)
        if not full_year_path.is_dir():
            return None

        try:
            names = sorted(os.listdir(full_year_path))
        except OSError:
            return None

        for name in names:
            if name.startswith(date_prefix) and (full_year_path / name).is_dir():
                return name
        return None
