"""Exceptions raised while reading, writing and editing bitmaps."""

from __future__ import annotations

import os


class BitmapError(Exception):
    """Base class for errors tied to a bitmap file on disk."""

    def __init__(self, path: str | os.PathLike | None, message: str | None = None):
        self.path = path
        super().__init__(message or f"Bitmap error: {path}")

    def get_absolute_path(self) -> str:
        return os.path.abspath(self.path) if self.path is not None else "<stream>"


class BitmapNotFoundError(BitmapError):
    def __init__(self, path, message: str | None = None):
        super().__init__(path, message or f"File not found: {path}")


class NotABitmapError(BitmapError):
    """The file exists but is not an uncompressed 24-bit BMP."""

    def __init__(self, path, message: str | None = None):
        super().__init__(path, message or f"Not a valid 24-bit bitmap: {path}")


class InvalidArgumentError(ValueError):
    pass


class NullArgumentError(InvalidArgumentError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Value cannot be null. Parameter name: {name}.")


class EmptyAverageError(InvalidArgumentError, ZeroDivisionError):
    def __init__(self):
        super().__init__("Cannot average zero pixels; call avg_add() with a valid pixel first.")


class BoundsError(IndexError):
    pass
