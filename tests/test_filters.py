"""
Tests for photo filters in filters.py
"""
import dataclasses

import pytest

from zipsort.filters import (
    ExistingCollectionFilter,
    NoFilter,
    find_orphaned_derivatives,
    has_marker,
    strip_markers,
)
from zipsort.models import AppConfig

MARKERS = AppConfig().derivative_markers
MINIMAL_JPEG = b"\xff\xd8\xff\xd9"


def make_filter(*names: str) -> ExistingCollectionFilter:
    return ExistingCollectionFilter(list(names))


# --- NoFilter ---

@pytest.mark.parametrize("name", ["any_file.jpg", "anim.gif", "DSC_9157-edited.JPG"])
def test_no_filter_accepts_all(name):
    assert NoFilter().should_include(name, b"any data")
    assert NoFilter().get_reason(name, b"any data") is None


# --- Markers ---

@pytest.mark.parametrize("name, expected", [
    ("DSC_9157-edited.JPG", "DSC_9157.JPG"),
    ("DSC_9157-MIX.jpg", "DSC_9157.jpg"),
    ("Photo-MiX.jpg", "Photo.jpg"),
    ("IMG_1-EDITED-PANO.jpg", "IMG_1.jpg"),
    ("a-collage-smile-effects-animation.png", "a.png"),
    ("plain.jpg", "plain.jpg"),
])
def test_strip_markers(name, expected):
    assert strip_markers(name, MARKERS) == expected


def test_has_marker_case_insensitive():
    assert has_marker("photo-Edited.jpg", MARKERS)
    assert not has_marker("photo_edited.jpg", MARKERS)


# --- ExistingCollectionFilter ---

def test_derivative_with_original_is_rejected():
    f = make_filter("DSC_9157.JPG", "DSC_9157-edited.JPG")
    assert not f.should_include("DSC_9157-edited.JPG", MINIMAL_JPEG)
    assert f.should_include("DSC_9157.JPG", MINIMAL_JPEG)


def test_orphaned_derivative_is_kept():
    f = make_filter("DSC_9157-edited.JPG")
    assert f.should_include("DSC_9157-edited.JPG", MINIMAL_JPEG)


@pytest.mark.parametrize("name, original", [
    ("photo-mix.jpg", "photo.jpg"),
    ("PHOTO-MIX.JPG", "PHOTO.JPG"),
    ("Photo-MiX.jpg", "Photo.jpg"),
])
def test_mix_files_case_insensitive(name, original):
    f = make_filter(original, name)
    assert not f.should_include(name, MINIMAL_JPEG)


@pytest.mark.parametrize("marker", MARKERS)
def test_every_marker_is_recognized(marker):
    name = f"IMG_0001{marker.lower()}.jpg"
    assert not make_filter("IMG_0001.jpg", name).should_include(name, MINIMAL_JPEG)
    assert make_filter(name).should_include(name, MINIMAL_JPEG)


def test_original_must_match_with_directory():
    f = make_filter("Takeout/Photos/DSC_1.jpg", "Takeout/Photos/DSC_1-edited.jpg")
    assert not f.should_include("Takeout/Photos/DSC_1-edited.jpg", MINIMAL_JPEG)

    other_dir = make_filter("Other/DSC_1.jpg", "Takeout/Photos/DSC_1-edited.jpg")
    assert other_dir.should_include("Takeout/Photos/DSC_1-edited.jpg", MINIMAL_JPEG)


def test_marker_inside_base_name_is_stripped_too():
    """
    "-PANO" inside "-PANORAMA" is stripped as well. The file is only dropped
    when the stripped name happens to exist, otherwise it is kept.
    """
    assert strip_markers("BEACH-PANORAMA.jpg", MARKERS) == "BEACHRAMA.jpg"
    assert make_filter("BEACH-PANORAMA.jpg").should_include("BEACH-PANORAMA.jpg", MINIMAL_JPEG)
    f = make_filter("BEACHRAMA.jpg", "BEACH-PANORAMA.jpg")
    assert not f.should_include("BEACH-PANORAMA.jpg", MINIMAL_JPEG)


@pytest.mark.parametrize("name, names", [
    ("anim.gif", ["anim.gif"]),
    ("ANIM.GIF", ["ANIM.GIF"]),
    ("DSC_1-animation.gif", ["DSC_1-animation.gif"]),
    ("DSC_1-animation.gif", ["DSC_1.gif", "DSC_1-animation.gif"]),
])
def test_gif_always_rejected(name, names):
    f = ExistingCollectionFilter(names)
    assert not f.should_include(name, MINIMAL_JPEG)
    assert f.get_reason(name, MINIMAL_JPEG) == "GIF file"


def test_rejects_lightroom_photos(make_jpeg):
    data = make_jpeg(software="Adobe Photoshop Lightroom 3.6 (Windows)")
    f = make_filter("DSC_9157.JPG")
    assert not f.should_include("DSC_9157.JPG", data)
    assert "Lightroom" in f.get_reason("DSC_9157.JPG", data)


@pytest.mark.parametrize("make, model", [
    ("NIKON CORPORATION", "D750"),
    ("Nikon", "Z 6"),
    ("Unknown", "NIKON D3200"),
])
def test_rejects_nikon_photos(make_jpeg, make, model):
    data = make_jpeg(make=make, model=model)
    assert not make_filter("DSC_0001.JPG").should_include("DSC_0001.JPG", data)


def test_rejects_nikon_tiff(make_tiff):
    data = make_tiff(make="NIKON CORPORATION")
    f = make_filter("DSC_1.tif")
    assert not f.should_include("DSC_1.tif", data)
    assert f.get_reason("DSC_1.tif", data) == "taken with NIKON CORPORATION"


def test_rejects_lightroom_tiff(make_tiff):
    data = make_tiff(software="Adobe Photoshop Lightroom Classic 12.0")
    assert not make_filter("export.tiff").should_include("export.tiff", data)


def test_accepts_tiff_from_other_camera(make_tiff):
    data = make_tiff(make="Canon")
    assert make_filter("IMG_1.tif").should_include("IMG_1.tif", data)


def test_accepts_mobile_photos(make_jpeg):
    data = make_jpeg(software="HDR+ 1.0", make="Google", model="Pixel 7")
    assert make_filter("PXL_1.jpg").should_include("PXL_1.jpg", data)


@pytest.mark.parametrize("data", [MINIMAL_JPEG, b"", b"\x00\x01\x02\x03"])
def test_accepts_photos_without_exif(data):
    assert make_filter("photo.jpg").should_include("photo.jpg", data)


def test_accepts_plain_jpeg(plain_jpeg):
    assert make_filter("photo.jpg").should_include("photo.jpg", plain_jpeg)


def test_orphan_marker_rule_takes_priority_over_metadata(make_jpeg):
    data = make_jpeg(make="NIKON CORPORATION")
    f = make_filter("DSC_1-edited.jpg")
    assert f.should_include("DSC_1-edited.jpg", data)


def test_filter_does_not_mutate_names():
    names = ["DSC_1.jpg", "DSC_1-edited.jpg"]
    f = ExistingCollectionFilter(names)
    f.should_include("DSC_1-edited.jpg", MINIMAL_JPEG)
    assert names == ["DSC_1.jpg", "DSC_1-edited.jpg"]
    assert f.all_filenames == frozenset(names)


def test_filter_uses_configured_markers():
    cfg = dataclasses.replace(AppConfig(), derivative_markers=("-COPY",))
    f = ExistingCollectionFilter(["a.jpg", "a-copy.jpg", "b-edited.jpg", "b.jpg"], cfg)
    assert not f.should_include("a-copy.jpg", MINIMAL_JPEG)
    assert f.should_include("b-edited.jpg", MINIMAL_JPEG)


# --- Orphans ---

def test_find_orphaned_derivatives():
    names = [
        "DSC_1.jpg",
        "DSC_1-edited.jpg",
        "DSC_2-edited.jpg",
        "IMG_3-MIX.jpg",
        "IMG_4.jpg",
    ]
    assert find_orphaned_derivatives(names, MARKERS) == ["DSC_2-edited.jpg", "IMG_3-MIX.jpg"]


def test_find_orphaned_derivatives_empty():
    assert find_orphaned_derivatives([], MARKERS) == []
    assert find_orphaned_derivatives(["a.jpg", "a-edited.jpg"], MARKERS) == []
