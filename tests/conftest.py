"""
Shared fixtures: in-memory JPEG and TIFF images with chosen EXIF fields,
and a damaged ZIP archive.
"""
import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import piexif
import pytest
from PIL import Image


def build_jpeg(
    date_original: str | None = None,
    software: str | None = None,
    make: str | None = None,
    model: str | None = None,
) -> bytes:
    """Create a 1x1 JPEG carrying only the requested EXIF fields."""
    zeroth: dict[int, bytes] = {}
    exif: dict[int, bytes] = {}
    if software is not None:
        zeroth[piexif.ImageIFD.Software] = software.encode()
    if make is not None:
        zeroth[piexif.ImageIFD.Make] = make.encode()
    if model is not None:
        zeroth[piexif.ImageIFD.Model] = model.encode()
    if date_original is not None:
        exif[piexif.ExifIFD.DateTimeOriginal] = date_original.encode()

    buf = io.BytesIO()
    img = Image.new("RGB", (1, 1), "white")
    if zeroth or exif:
        exif_bytes = piexif.dump({"0th": zeroth, "Exif": exif})
        img.save(buf, "JPEG", exif=exif_bytes)
    else:
        img.save(buf, "JPEG")
    return buf.getvalue()


def build_tiff(make: str | None = None, software: str | None = None) -> bytes:
    """Create a 1x1 TIFF with Make/Software written into its first IFD."""
    tiffinfo: dict[int, str] = {}
    if make is not None:
        tiffinfo[piexif.ImageIFD.Make] = make
    if software is not None:
        tiffinfo[piexif.ImageIFD.Software] = software

    buf = io.BytesIO()
    Image.new("RGB", (1, 1), "white").save(buf, "TIFF", tiffinfo=tiffinfo)
    return buf.getvalue()


def build_exif_tiff(date_original: str) -> bytes:
    """Bare TIFF structure (header and IFDs) holding a DateTimeOriginal field."""
    exif = {piexif.ExifIFD.DateTimeOriginal: date_original.encode()}
    # piexif.dump prefixes the TIFF structure with the "Exif\0\0" marker
    return piexif.dump({"0th": {}, "Exif": exif})[6:]


@pytest.fixture
def make_jpeg() -> Callable[..., bytes]:
    return build_jpeg


@pytest.fixture
def make_tiff() -> Callable[..., bytes]:
    return build_tiff


@pytest.fixture
def exif_jpeg() -> bytes:
    """Phone photo taken on 2012-10-06."""
    return build_jpeg(date_original="2012:10:06 13:09:32", make="Google", model="Pixel")


@pytest.fixture
def plain_jpeg() -> bytes:
    """Valid JPEG without any EXIF block."""
    return build_jpeg()


@pytest.fixture
def exif_tiff() -> bytes:
    """TIFF structure with DateTimeOriginal 2019-05-04."""
    return build_exif_tiff("2019:05:04 12:00:00")


@pytest.fixture
def corrupt_zip(tmp_path: Path) -> Path:
    """Deflated archive whose single member has a damaged payload."""
    path = tmp_path / "damaged.zip"
    name = "photo.jpg"
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(name, bytes(range(256)) * 16)

    raw = bytearray(path.read_bytes())
    # local file header is 30 bytes, followed by the name and the payload
    start = 30 + len(name) + 40
    raw[start:start + 8] = bytes(b ^ 0xFF for b in raw[start:start + 8])
    path.write_bytes(bytes(raw))
    return path
