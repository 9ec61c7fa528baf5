"""BMP file header and DIB info header parsing."""

import struct
from dataclasses import dataclass

_FILE_HEADER = struct.Struct("<HIHHI")
_BMP_INFO = struct.Struct("<IiiHHIIiiIIIII")

FILE_HEADER_SIZE = _FILE_HEADER.size
BMP_INFO_SIZE = _BMP_INFO.size
METADATA_SIZE = FILE_HEADER_SIZE + BMP_INFO_SIZE

BMP_SIGNATURE = 19778  # "BM" read as a little-endian 16-bit value


@dataclass(frozen=True)
class FileHeader:
    """The 14-byte header at the start of every BMP file."""

    file_identifier: int
    file_size: int
    reserved1: int
    reserved2: int
    image_data_offset: int


@dataclass(frozen=True)
class BmpInfo:
    """The DIB header, including the colour masks that follow a 40-byte header."""

    header_size: int
    image_width: int
    image_height: int
    color_planes: int
    bits_per_pixel: int
    compression_method: int
    image_size: int
    horizontal_res: int
    vertical_res: int
    colors_in_palette: int
    num_important_colors: int
    mask_r: int
    mask_g: int
    mask_b: int


@dataclass(frozen=True)
class BmpMetadata:
    """The file header together with the DIB header."""

    file_header: FileHeader
    bmp_info: BmpInfo


def parse_metadata(data):
    """Parse the first ``METADATA_SIZE`` bytes of a BMP file."""
    if len(data) < METADATA_SIZE:
        raise ValueError(
            f"BMP metadata needs {METADATA_SIZE} bytes, got {len(data)}"
        )
    file_header = FileHeader(*_FILE_HEADER.unpack_from(data, 0))
    bmp_info = BmpInfo(*_BMP_INFO.unpack_from(data, FILE_HEADER_SIZE))
    return BmpMetadata(file_header, bmp_info)


def row_size(bits_per_pixel, width):
    """Return the size in bytes of one pixel row, padded to a multiple of 4."""
    return ((bits_per_pixel * width + 31) // 32) * 4