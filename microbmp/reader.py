"""Row-wise BMP decoding from an in-memory image or through a load callback."""

from .bits import stretch_to_8bit, to_rgb565, trailing_zeros
from .header import BMP_SIGNATURE, FILE_HEADER_SIZE, METADATA_SIZE, parse_metadata, row_size

_SUPPORTED_BITS = frozenset({1, 4, 8, 16, 24, 32})
_BI_RGB = 0
_BI_BITFIELDS = 3


class BmpError(Exception):
    """Base class for errors raised while opening a BMP image."""


class CacheBufferTooSmallError(BmpError):
    """The buffer cannot hold the metadata, the palette and at least one row."""


class UnsupportedFileTypeError(BmpError):
    """The data does not start with the BMP signature."""


class UnsupportedBmpFormatError(BmpError):
    """The BMP uses a pixel format or compression that is not supported."""


def _compression_supported(info):
    if info.compression_method == _BI_RGB:
        return True
    if info.compression_method != _BI_BITFIELDS:
        return False
    if info.bits_per_pixel == 16:
        return True
    return (
        info.bits_per_pixel in (24, 32)
        and info.mask_r == 0x00FF0000
        and info.mask_g == 0x0000FF00
        and info.mask_b == 0x000000FF
    )


class BmpReader:
    """Reads a BMP image one row at a time, top row first.

    Without ``load_data`` the buffer must hold the whole file. With
    ``load_data`` the buffer is a writable cache of ``buffer_size`` bytes
    (allocated if ``buffer`` is None) and ``load_data(offset, size)`` must
    return up to ``size`` bytes of the file starting at ``offset``.
    """

    def __init__(self, buffer=None, buffer_size=None, load_data=None):
        if buffer is None:
            if load_data is None:
                raise CacheBufferTooSmallError("no image buffer given")
            if buffer_size is None:
                raise ValueError("buffer_size is required when no buffer is given")
            buffer = bytearray(buffer_size)
        view = memoryview(buffer).cast("B")
        if buffer_size is None:
            buffer_size = len(view)
        elif buffer_size > len(view):
            raise ValueError("buffer_size exceeds the length of the buffer")
        if buffer_size < METADATA_SIZE:
            raise CacheBufferTooSmallError(
                f"buffer must hold at least {METADATA_SIZE} bytes"
            )

        self._load_data = load_data
        if load_data is not None:
            self._load(view[:METADATA_SIZE], 0)

        self.metadata = parse_metadata(view[:METADATA_SIZE])
        file_header = self.metadata.file_header
        info = self.metadata.bmp_info
        if file_header.file_identifier != BMP_SIGNATURE:
            raise UnsupportedFileTypeError("data is not a BMP file")
        if (
            info.bits_per_pixel not in _SUPPORTED_BITS
            or not _compression_supported(info)
            or info.color_planes != 1
        ):
            raise UnsupportedBmpFormatError(
                f"unsupported BMP format: {info.bits_per_pixel} bits per pixel, "
                f"compression {info.compression_method}, {info.color_planes} planes"
            )

        self.width = info.image_width & 0xFFFF
        self.height = info.image_height & 0xFFFF
        self.bits_per_pixel = info.bits_per_pixel
        self.bytes_per_pixel = self.bits_per_pixel // 8
        self.colors_in_palette = info.colors_in_palette & 0xFFFF
        self.bytes_per_row = row_size(info.bits_per_pixel, info.image_width)
        if self.bytes_per_row <= 0:
            raise UnsupportedBmpFormatError("image has no pixel columns")
        data_offset = file_header.image_data_offset
        self._end_of_image = (
            data_offset + self.bytes_per_row * info.image_height
        ) & 0xFFFFFFFF

        self._shifts = (10, 5, 0)
        self._masks = (0x1F, 0x1F, 0x1F)
        if self.bits_per_pixel == 16 and info.compression_method == _BI_BITFIELDS:
            full_masks = (info.mask_r, info.mask_g, info.mask_b)
            self._shifts = tuple(trailing_zeros(m) for m in full_masks)
            self._masks = tuple(
                (m >> s) & 0xFF for m, s in zip(full_masks, self._shifts)
            )

        self._current_row = 0
        self._palette = None
        image = view[:buffer_size]
        if self.bits_per_pixel <= 8:
            palette_offset = FILE_HEADER_SIZE + info.header_size
            # 1-bit files often report zero colours while still carrying a palette.
            if (
                self.bits_per_pixel == 1
                and self.colors_in_palette == 0
                and data_offset > palette_offset
            ):
                self.colors_in_palette = 2
            palette_size = self.colors_in_palette * 4
            if palette_size + self.bytes_per_row > buffer_size:
                raise CacheBufferTooSmallError(
                    "buffer cannot hold the palette and one row"
                )
            if load_data is not None:
                self._palette = view[:palette_size]
                self._load(self._palette, palette_offset)
                image = view[palette_size:buffer_size]
                buffer_size -= palette_size
            else:
                self._palette = view[palette_offset:]

        self._cached_rows = 0
        self._cache_rows = (buffer_size // self.bytes_per_row) & 0xFFFF
        self._cache_bytes = self._cache_rows * self.bytes_per_row
        self._image = image
        self._row_start = 0
        self._row = None
        if self._cache_rows == 0:
            raise CacheBufferTooSmallError("buffer cannot hold a single row")

    @property
    def current_row(self):
        """Index of the row that the next call to ``next_row`` returns."""
        return self._current_row

    @property
    def palette(self):
        """The raw BGRA palette bytes, or None for true-colour images."""
        if self._palette is None:
            return None
        return bytes(self._palette[: self.colors_in_palette * 4])

    def _load(self, target, offset):
        size = len(target)
        skip = 0
        if offset < 0:
            # Rows before the start of the file: keep row positions, fill with zeros.
            skip = min(-offset, size)
            target[:skip] = bytes(skip)
            offset = 0
        if skip == size:
            return
        data = bytes(self._load_data(offset, size - skip))[: size - skip]
        target[skip:skip + len(data)] = data

    def next_row(self):
        """Return the raw bytes of the next row, or None after the last row."""
        if self._current_row == self.height:
            return None
        bpr = self.bytes_per_row
        if self._cached_rows == 0:
            if self._load_data is not None:
                # Rows are stored bottom-up, so the cache starts further back in the file.
                offset = self._end_of_image - bpr * (self._current_row + self._cache_rows)
                self._load(self._image[: self._cache_bytes], offset)
                self._cached_rows = self._cache_rows
                self._row_start = bpr * (self._cache_rows - 1)
            else:
                self._row_start = self._end_of_image - bpr * (self._current_row + 1)
                self._cached_rows = 1
        else:
            self._row_start -= bpr
        self._cached_rows -= 1
        self._current_row += 1
        self._row = bytes(self._image[self._row_start:self._row_start + bpr])
        return self._row

    def set_next_row(self, row):
        """Make ``row`` the next row returned by ``next_row``."""
        if not 0 <= row <= self.height:
            raise ValueError(f"row {row} is outside 0..{self.height}")
        self._current_row = row
        self._cached_rows = 0

    def _color_at(self, x):
        row = self._row
        if self._palette is not None:
            bit_offset = x * self.bits_per_pixel
            index = row[bit_offset // 8]
            if self.bits_per_pixel == 4:
                index = index & 0xF if x & 1 else index >> 4
            elif self.bits_per_pixel == 1:
                index = 1 if (index << (bit_offset % 8)) & 0x80 else 0
            b, g, r = self._palette[index * 4:index * 4 + 3]
            return r, g, b
        if self.bytes_per_pixel == 2:
            pixel = int.from_bytes(row[2 * x:2 * x + 2], "little")
            return tuple(
                stretch_to_8bit((pixel >> shift) & mask, mask)
                for shift, mask in zip(self._shifts, self._masks)
            )
        start = x * self.bytes_per_pixel
        b, g, r = row[start:start + 3]
        return r, g, b

    def _columns(self, x1, x2):
        if self._row is None:
            raise RuntimeError("no current row; call next_row first")
        return range(x1, self.width if x2 is None else x2)

    def row_to_rgb(self, x1=0, x2=None):
        """Return pixels [x1, x2) of the current row as packed RGB bytes."""
        return bytes(
            channel for x in self._columns(x1, x2) for channel in self._color_at(x)
        )

    def row_to_565(self, x1=0, x2=None):
        """Return pixels [x1, x2) of the current row as RGB565 integers."""
        return [to_rgb565(*self._color_at(x)) for x in self._columns(x1, x2)]

    def __iter__(self):
        while (row := self.next_row()) is not None:
            yield row