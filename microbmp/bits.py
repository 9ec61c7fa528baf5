"""Small bit-twiddling helpers used when decoding pixel data."""


def trailing_zeros(value):
    """Return the number of zero bits below the lowest set bit of a 32-bit value.

    A value of zero has 32 trailing zeros.
    """
    value &= 0xFFFFFFFF
    if value == 0:
        return 32
    return (value & -value).bit_length() - 1


def popcount(value):
    """Return the number of set bits in a 32-bit value."""
    return bin(value & 0xFFFFFFFF).count("1")


def stretch_to_8bit(value, mask):
    """Shift a colour channel described by ``mask`` up to the 8-bit range."""
    bits = popcount(mask)
    if bits < 8:
        value <<= 8 - bits
    return value & 0xFF


def to_rgb565(r, g, b):
    """Pack 8-bit red, green and blue channels into a 16-bit RGB565 value."""
    return ((r & 0xF8) << 8) | ((g & 0xFC) << 3) | ((b & 0xFF) >> 3)