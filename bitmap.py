"""24-bit bitmap model and its parallel pixel transforms.

The colour buffer is a ``(height, width * 3)`` uint8 NumPy array holding the
BGR bytes of each row exactly as they appear in the file, minus the row
padding. Rows are kept in file order. Transforms either edit the buffer in
place or render into a fresh Bitmap that this one then adopts, so callers
never see a half-transformed image.
"""

from __future__ import annotations

import logging
import operator
import os

import numpy as np
from PIL import Image

import binarycodec
import parallel
from BMPHeader import BMPHeader, TRAILER_SIZE
from errors import (
    BitmapNotFoundError,
    InvalidArgumentError,
    NotABitmapError,
    NullArgumentError,
)
from pixelview import PixelView

logger = logging.getLogger(__name__)

# radius, in pixels, of the square window blur() averages over
BLUR_RADIUS = 2


class Bitmap:
    def __init__(self, width: int = 0, height: int = 0, threads: int = 1):
        self.header = BMPHeader.from_dimensions(width, height)
        self.colors: np.ndarray = np.zeros((height, self.header.row_bytes), dtype=np.uint8)
        self.threads = 1
        if not self.set_threads(threads):
            raise InvalidArgumentError("threads must be at least 1.")

    def __repr__(self):
        return f"Bitmap({self.width}x{self.height}, threads={self.threads})"

    # ───────────────────────── properties ────────────────────────── #
    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def row_bytes(self) -> int:
        return self.header.row_bytes

    def set_threads(self, n: int) -> bool:
        """Set the worker count used by transforms. Rejects values below 1."""
        if isinstance(n, bool):
            return False
        try:
            n = operator.index(n)
        except TypeError:
            return False
        if n >= 1:
            self.threads = n
            return True
        return False

    # ───────────────────────── IO helpers ────────────────────────── #
    @classmethod
    def read(cls, path: str | os.PathLike, threads: int = 1) -> Bitmap:
        """Decode a 24-bit uncompressed BMP file.

        Raises:
            BitmapNotFoundError: if ``path`` does not name a readable file.
            NotABitmapError: if the header is unsupported or the pixel data is short.
        """
        try:
            f = open(path, "rb")
        except OSError as exc:
            raise BitmapNotFoundError(path) from exc

        with f:
            try:
                header = BMPHeader.parse(f)
                remaining = os.fstat(f.fileno()).st_size - f.tell()
                if header.data_size > remaining:
                    raise EOFError(f"{header.width}x{header.height} pixels need "
                                   f"{header.data_size} bytes, {remaining} left")
                bitmap = cls(header.width, header.height, threads)
                for row in bitmap.colors:
                    row[:] = np.frombuffer(binarycodec.read_bytes(f, header.row_bytes), dtype=np.uint8)
                    binarycodec.skip(f, header.padding)
            except (EOFError, OSError) as exc:
                logger.warning("Could not read pixel data from %s: %s", path, exc)
                raise NotABitmapError(path) from exc

        logger.debug("Read %r from %s", bitmap, path)
        return bitmap

    def write(self, path: str | os.PathLike) -> None:
        """Encode to ``path``, creating or overwriting it.

        OSError propagates; a partially written file is left as is.
        """
        padding = bytes(self.header.padding)
        with open(path, "wb") as f:
            self.header.serialize(f)
            for row in self.colors:
                f.write(row.tobytes())
                f.write(padding)
            # two trailing zero bytes keep the file size even
            f.write(bytes(TRAILER_SIZE))
        logger.debug("Wrote %r to %s", self, path)

    @classmethod
    def from_image(cls, image: Image.Image, threads: int = 1) -> Bitmap:
        """Build a bitmap from a PIL image (any mode; alpha is dropped)."""
        if image is None:
            raise NullArgumentError("image")
        rgb = np.asarray(image.convert("RGB"), dtype=np.uint8)
        height, width = rgb.shape[:2]
        bitmap = cls(width, height, threads)
        # PIL is top-down RGB, BMP rows are bottom-up BGR
        bitmap.colors[...] = rgb[::-1, :, ::-1].reshape(height, width * 3)
        return bitmap

    def to_image(self) -> Image.Image:
        """Return a top-down RGB PIL image of the current pixels."""
        pixels = self.colors.reshape(self.height, self.width, 3)[::-1, :, ::-1]
        return Image.fromarray(np.ascontiguousarray(pixels))

    # ───────────────────────── pixel access ──────────────────────── #
    def new_pixel(self, x: int, y: int) -> PixelView:
        return PixelView(self, x, y)

    def new_empty_pixel(self) -> PixelView:
        """Return a view that must be moved with move_to() before use."""
        return PixelView(self)

    def copy_from(self, source: Bitmap) -> None:
        """Make this bitmap an exact copy of ``source``'s pixels."""
        if source is None:
            raise NullArgumentError("bitmap")
        if source.width != self.width or source.height != self.height:
            self.header = BMPHeader.from_dimensions(source.width, source.height)
            self.colors = np.empty_like(source.colors)
        np.copyto(self.colors, source.colors)

    def copy(self) -> Bitmap:
        clone = Bitmap(self.width, self.height, self.threads)
        clone.copy_from(self)
        return clone

    def _run(self, name: str, total: int, body, result: Bitmap | None = None) -> Bitmap:
        """Run ``body`` over ``[0, total)`` then adopt ``result``, if given."""
        parallel.run(total, self.threads, body)
        if result is not None:
            self.copy_from(result)
        logger.debug("%s done: %dx%d on %d threads", name, self.width, self.height, self.threads)
        return self

    # ──────────────────────── transforms ─────────────────────────── #
    def invert(self) -> Bitmap:
        colors = self.colors

        def body(x_start, x_end):
            block = colors[:, x_start * 3:x_end * 3]
            block[...] = 255 - block

        return self._run("invert", self.width, body)

    def grayscale(self) -> Bitmap:
        """Set every channel to the luma 0.30R + 0.59G + 0.11B, truncated."""
        colors = self.colors
        height = self.height

        def body(x_start, x_end):
            block = colors[:, x_start * 3:x_end * 3]
            bgr = block.reshape(height, x_end - x_start, 3).astype(np.uint32)
            # integer weights keep gray pixels gray: (30 + 59 + 11) * v // 100 == v
            luma = (11 * bgr[..., 0] + 59 * bgr[..., 1] + 30 * bgr[..., 2]) // 100
            block[...] = np.repeat(luma.astype(np.uint8), 3, axis=1)

        return self._run("grayscale", self.width, body)

    def horizontal_mirror(self) -> Bitmap:
        width = self.width

        def body(y_start, y_end):
            left, right = self.new_empty_pixel(), self.new_empty_pixel()
            for y in range(y_start, y_end):
                for x in range(width // 2):
                    PixelView.swap(left.move_to(x, y), right.move_to(width - x - 1, y))

        return self._run("horizontal_mirror", self.height, body)

    def rotate90(self) -> Bitmap:
        """Move pixel (x, y) to (y, x); width and height swap."""
        width, height = self.width, self.height
        rotated = Bitmap(height, width, self.threads)
        src = self.colors.reshape(height, width, 3)
        dest = rotated.colors.reshape(width, height, 3)

        def body(y_start, y_end):
            dest[:, y_start:y_end] = src[y_start:y_end].transpose(1, 0, 2)

        return self._run("rotate90", height, body, rotated)

    def blur(self) -> Bitmap:
        """Average every pixel with its neighbours within BLUR_RADIUS, clamped to the edges."""
        width, height = self.width, self.height
        blurred = Bitmap(width, height, self.threads)

        def body(x_start, x_end):
            dest, src = blurred.new_empty_pixel(), self.new_empty_pixel()
            for x in range(x_start, x_end):
                x_lo, x_hi = max(x - BLUR_RADIUS, 0), min(x + BLUR_RADIUS, width - 1)
                for y in range(height):
                    y_lo, y_hi = max(y - BLUR_RADIUS, 0), min(y + BLUR_RADIUS, height - 1)
                    dest.move_to(x, y)
                    dest.avg_start()
                    for sx in range(x_lo, x_hi + 1):
                        for sy in range(y_lo, y_hi + 1):
                            dest.avg_add(src.move_to(sx, sy))
                    dest.avg_stop()

        return self._run("blur", width, body, blurred)

    def shrink(self) -> Bitmap:
        """Halve both dimensions, averaging each 2x2 block. Odd trailing rows/columns are dropped."""
        shrunk = Bitmap(self.width // 2, self.height // 2, self.threads)

        def body(x_start, x_end):
            dest, src = shrunk.new_empty_pixel(), self.new_empty_pixel()
            for x in range(x_start, x_end):
                old_x = x * 2
                for y in range(shrunk.height):
                    old_y = y * 2
                    dest.move_to(x, y)
                    dest.avg_start()
                    dest.avg_add(src.move_to(old_x, old_y))
                    dest.avg_add(src.move_to(old_x + 1, old_y))
                    dest.avg_add(src.move_to(old_x, old_y + 1))
                    dest.avg_add(src.move_to(old_x + 1, old_y + 1))
                    dest.avg_stop()

        return self._run("shrink", shrunk.width, body, shrunk)

    def double_size(self) -> Bitmap:
        """Double both dimensions, replicating each pixel into a 2x2 block."""
        width, height = self.width, self.height
        doubled = Bitmap(width * 2, height * 2, self.threads)
        src = self.colors.reshape(height, width, 3)
        dest = doubled.colors.reshape(height * 2, width * 2, 3)

        def body(x_start, x_end):
            block = src[:, x_start:x_end]
            dest[:, x_start * 2:x_end * 2] = block.repeat(2, axis=0).repeat(2, axis=1)

        return self._run("double_size", width, body, doubled)
