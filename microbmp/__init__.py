"""Row-wise BMP image reading with a bounded row cache."""

__version__ = "0.1.0"
__all__ = ["bits", "header", "reader"]