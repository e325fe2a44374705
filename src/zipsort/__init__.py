"""
zipsort - sort photos into date-based folders

zipsort reads photos from a ZIP export (such as Google Takeout) or a
directory and copies them into a YYYY/YYYY-MM-DD tree using their EXIF
capture date.
"""

from .core import main

__all__ = ["main"]
