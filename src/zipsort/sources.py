"""
Readers providing the photos to organize, from a ZIP archive or a directory.
"""

import zipfile
import zlib
from pathlib import Path

from zipsort.models import AppConfig, SourceEntry, SourceError, get_normalized_extension


def is_image_file(name: str, extensions: tuple[str, ...] | None = None) -> bool:
    """Check the (case-insensitive) extension against the known image types."""
    if extensions is None:
        extensions = AppConfig().image_extensions
    return get_normalized_extension(name) in extensions


class ZipImageReader:
    """Reads image entries from a ZIP archive on disk."""

    def __init__(self, path: Path, extensions: tuple[str, ...] | None = None):
        self.path = Path(path)
        self.extensions = extensions or AppConfig().image_extensions

    def _open(self) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self.path, "r")
        except FileNotFoundError as e:
            raise SourceError(f"ZIP file not found: {self.path}") from e
        except zipfile.BadZipFile as e:
            raise SourceError(f"Failed to read ZIP archive {self.path}: {e}") from e
        except OSError as e:
            raise SourceError(f"Failed to open ZIP file {self.path}: {e}") from e

    def _image_infos(self, zf: zipfile.ZipFile) -> list[zipfile.ZipInfo]:
        return [
            info
            for info in zf.infolist()
            if not info.is_dir() and is_image_file(info.filename, self.extensions)
        ]

    def read_names(self) -> list[str]:
        with self._open() as zf:
            return [info.filename for info in self._image_infos(zf)]

    def read_entries(self) -> list[SourceEntry]:
        entries = []
        with self._open() as zf:
            for info in self._image_infos(zf):
                try:
                    data = zf.read(info)
                except (
                    zipfile.BadZipFile,
                    zlib.error,
                    EOFError,
                    NotImplementedError,
                    OSError,
                    RuntimeError,
                ) as e:
                    raise SourceError(f"Failed to read data for file {info.filename}: {e}") from e
                entries.append(SourceEntry(info.filename, data))
        return entries


class DirectoryImageReader:
    """Reads image files from a directory tree, recursively."""

    def __init__(self, path: Path, extensions: tuple[str, ...] | None = None):
        self.path = Path(path)
        self.extensions = extensions or AppConfig().image_extensions

    def _image_files(self) -> list[Path]:
        if not self.path.is_dir():
            raise SourceError(f"Not a directory: {self.path}")
        try:
            files = [
                p
                for p in self.path.rglob("*")
                if p.is_file() and is_image_file(p.name, self.extensions)
            ]
        except OSError as e:
            raise SourceError(f"Failed to list directory {self.path}: {e}") from e
        return sorted(files, key=lambda p: self._entry_name(p).lower())

    def _entry_name(self, path: Path) -> str:
        return path.relative_to(self.path).as_posix()

    def read_names(self) -> list[str]:
        return [self._entry_name(p) for p in self._image_files()]

    def read_entries(self) -> list[SourceEntry]:
        entries = []
        for p in self._image_files():
            try:
                data = p.read_bytes()
            except OSError as e:
                raise SourceError(f"Failed to read file {p}: {e}") from e
            entries.append(SourceEntry(self._entry_name(p), data))
        return entries


def get_reader(path: Path, cfg: AppConfig) -> ZipImageReader | DirectoryImageReader:
    """Pick the reader matching the input: a directory or a ZIP file."""
    if Path(path).is_dir():
        return DirectoryImageReader(path, cfg.image_extensions)
    return ZipImageReader(path, cfg.image_extensions)
