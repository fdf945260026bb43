"""
Program-wide constants, date formats and shared console/logger accessors.
"""

import logging

from rich.console import Console

PROGRAM = "photostamp"

# EXIF DateTimeOriginal canonical encoding, e.g. "2024:03:15 09:07:00"
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Prefix prepended to every relocated file, e.g. "20240315-090700"
PREFIX_DATE_FORMAT = "%Y%m%d-%H%M%S"
PREFIX_SEPARATOR = "_"

# EXIF tag numbers
TAG_EXIF_IFD = 0x8769
TAG_DATE_TIME_ORIGINAL = 0x9003

# Leading bytes of the containers that can carry an EXIF IFD
JPEG_MAGIC = b"\xff\xd8\xff"
TIFF_MAGICS = (b"II*\x00", b"MM\x00*")

# JPEG markers; standalone markers (TEM, RSTn) carry no length field
JPEG_APP1 = 0xE1
JPEG_SOS = 0xDA
JPEG_EOI = 0xD9
JPEG_STANDALONE_MARKERS = frozenset([0x01, *range(0xD0, 0xD8)])
EXIF_HEADER = b"Exif\x00\x00"

CONFIG_FILENAME = "config.yml"

_console = None


def get_console() -> Console:
    """Return the shared rich console used for logging and progress output."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger() -> logging.Logger:
    return logging.getLogger(PROGRAM)
