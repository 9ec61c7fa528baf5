# microbmp

A small BMP reader that decodes an image one row at a time. It works either
on a complete in-memory file or through a loader callback that fetches byte
ranges on demand. With the callback, only a fixed-size buffer of rows is kept
in memory.

## Supported formats

- 1, 4 and 8 bits per pixel, with a palette
- 16 bits per pixel, either plain (5-5-5) or with bit-field masks, such as RGB565
- 24 and 32 bits per pixel, plain or with the standard BGR bit-field masks

Only single-plane, uncompressed or bit-field images are accepted. Anything
else is rejected with an error.

## Installation

```
pip install microbmp
```

## Usage

### Reading from a complete file in memory

```python
from microbmp.reader import BmpReader

with open("image.bmp", "rb") as fh:
    data = fh.read()

reader = BmpReader(data)
for raw_row in reader:
    rgb = reader.row_to_rgb()        # bytes: r, g, b, r, g, b, ...
    rgb565 = reader.row_to_565()     # list of 16-bit ints
```

Iterating over a reader yields the raw bytes of each row (palette indices or
BGR/BGRA data). Rows come top to bottom, even though BMP stores them bottom
to top. `row_to_rgb(x1=0, x2=None)` and `row_to_565(x1=0, x2=None)` convert
pixels `[x1, x2)` of the current row; `x2` defaults to the image width. They
raise `RuntimeError` if no row has been read yet.

### Reading through a loader callback

Pass a loader `load_data(offset, size)` that returns up to `size` bytes of the
file starting at `offset`, together with a cache buffer or just its size.
The reader keeps as many rows in the cache as fit.

```python
from microbmp.reader import BmpReader

with open("image.bmp", "rb") as fh:
    def load(offset, size):
        fh.seek(offset)
        return fh.read(size)

    reader = BmpReader(buffer_size=512, load_data=load)
    while reader.next_row() is not None:
        pixels = reader.row_to_rgb(0, reader.width)
```

A writable buffer such as `bytearray(512)` may be passed as `buffer` instead;
it is then used as the cache. For palette images the palette is stored at the
start of the cache, so the buffer must hold the palette plus at least one row.

### Reader state

- `width`, `height`, `bits_per_pixel`, `bytes_per_pixel`, `bytes_per_row`,
  `colors_in_palette`
- `metadata`: the parsed headers (`BmpMetadata`)
- `palette`: the raw BGRA palette bytes, or `None` for true-colour images
- `current_row`: index of the row the next `next_row()` call returns

`set_next_row(row)` moves to another row; the next call to `next_row()`
returns it. A row outside `0..height` raises `ValueError`.

### Errors

Errors about the image derive from `microbmp.reader.BmpError`:

- `CacheBufferTooSmallError`: no buffer was given, or the buffer cannot hold
  the headers, or the palette and one row.
- `UnsupportedFileTypeError`: the data does not start with `BM`.
- `UnsupportedBmpFormatError`: the bit depth, compression or plane count is
  not supported.

### Lower-level helpers

`microbmp.header.parse_metadata` decodes the file header and info header into
`FileHeader`, `BmpInfo` and `BmpMetadata`; it raises `ValueError` on short
input. `microbmp.header.row_size` gives the padded row length in bytes.
`microbmp.bits` holds the bit helpers used for colour conversion:
`popcount`, `trailing_zeros`, `stretch_to_8bit` and `to_rgb565`.

## What it does not do

The package only reads. It does not write BMP files, does not decode
RLE-compressed or other compressed images, and has no command-line tool or
image display.