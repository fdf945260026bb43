"""
EXIF DateTimeOriginal extraction for JPEG and TIFF containers.
"""

import os
import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional

from PIL import Image

from .constants import (EXIF_HEADER, JPEG_APP1, JPEG_EOI, JPEG_MAGIC, JPEG_SOS,
                        JPEG_STANDALONE_MARKERS, TAG_DATE_TIME_ORIGINAL, TAG_EXIF_IFD, TIFF_MAGICS,
                        get_logger)

logger = get_logger()


class Container(Enum):
    """Image container families that can carry an EXIF IFD."""
    JPEG = "JPEG"
    TIFF = "TIFF"


class MetadataStatus(Enum):
    FOUND = "found"
    NOT_PRESENT = "not_present"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class MetadataReading:
    """Result of looking up DateTimeOriginal in a file."""
    status: MetadataStatus
    value: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is MetadataStatus.FOUND


NOT_PRESENT = MetadataReading(MetadataStatus.NOT_PRESENT)
UNREADABLE = MetadataReading(MetadataStatus.UNREADABLE)


def detect_container(header: bytes) -> Optional[Container]:
    """Identify the container from the file's leading bytes."""
    if header.startswith(JPEG_MAGIC):
        return Container.JPEG
    if header[:4] in TIFF_MAGICS:
        return Container.TIFF
    return None


def read_date_time_original(path: Path) -> MetadataReading:
    """Return the raw DateTimeOriginal string of an image, if it carries one.

    Only the EXIF directories are read; the image frame is never decoded, so
    image dimensions play no part. OSError from opening the file propagates to
    the caller. Errors raised while parsing a recognized container are reported
    as UNREADABLE.
    """
    with open(path, "rb") as fh:
        container = detect_container(fh.read(4))
        if container is None:
            return NOT_PRESENT
        fh.seek(0)
        return _read_from_container(fh, container, path)


def _read_from_container(fh: BinaryIO, container: Container, path: Path) -> MetadataReading:
    try:
        if container is Container.JPEG:
            exif = _load_jpeg_exif(fh)
        else:
            exif = _load_tiff_exif(fh)
        if exif is None:
            return NOT_PRESENT
        # IFD0 first (some TIFF-based raw formats store it there), then the Exif IFD
        value = exif.get(TAG_DATE_TIME_ORIGINAL)
        if value is None:
            value = exif.get_ifd(TAG_EXIF_IFD).get(TAG_DATE_TIME_ORIGINAL)
    except Exception as e:
        logger.debug(f"Could not parse {container.value} metadata of {path}: {e}")
        return UNREADABLE

    if value is None:
        return NOT_PRESENT
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    return MetadataReading(MetadataStatus.FOUND, str(value))


def _read_exactly(fh: BinaryIO, size: int) -> bytes:
    data = fh.read(size)
    if len(data) != size:
        raise ValueError(f"truncated data: expected {size} bytes, got {len(data)}")
    return data


def _load_jpeg_exif(fh: BinaryIO) -> Optional[Image.Exif]:
    """Walk the JPEG markers up to the first scan and load the APP1 Exif segment."""
    _read_exactly(fh, 2)  # SOI
    while True:
        if _read_exactly(fh, 1) != b"\xff":
            raise ValueError("expected a JPEG marker")
        marker = _read_exactly(fh, 1)[0]
        while marker == 0xFF:  # fill bytes
            marker = _read_exactly(fh, 1)[0]
        if marker in JPEG_STANDALONE_MARKERS:
            continue
        if marker in (JPEG_SOS, JPEG_EOI):
            return None

        length = struct.unpack(">H", _read_exactly(fh, 2))[0]
        if length < 2:
            raise ValueError(f"invalid JPEG segment length {length}")
        payload = _read_exactly(fh, length - 2)
        if marker == JPEG_APP1 and payload.startswith(EXIF_HEADER):
            exif = Image.Exif()
            exif.load(payload)
            return exif


def _load_tiff_exif(fh: BinaryIO) -> Image.Exif:
    header = _read_exactly(fh, 8)
    endian = "<" if header[:2] == b"II" else ">"
    ifd0_offset = struct.unpack(endian + "L", header[4:])[0]
    size = os.fstat(fh.fileno()).st_size
    if not 8 <= ifd0_offset <= size - 2:
        raise ValueError(f"IFD0 offset {ifd0_offset} outside file of {size} bytes")

    fh.seek(0)
    exif = Image.Exif()
    exif.load_from_fp(fh)
    return exif
