"""A movable cursor over one pixel of a Bitmap's raw BGR buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from errors import BoundsError, EmptyAverageError, NullArgumentError

if TYPE_CHECKING:
    from bitmap import Bitmap

BLUE = 0
GREEN = 1
RED = 2


class _PixelAverage:
    """Running per-channel sums for PixelView.avg_*."""

    __slots__ = ("blue", "green", "red", "count")

    def __init__(self):
        self.reset()

    def reset(self):
        self.blue = 0
        self.green = 0
        self.red = 0
        self.count = 0

    def add(self, pixel: PixelView | None):
        if pixel is not None and pixel.is_valid():
            self.blue += pixel.get_blue()
            self.green += pixel.get_green()
            self.red += pixel.get_red()
            self.count += 1

    def store(self, out: PixelView):
        if self.count == 0:
            raise EmptyAverageError()
        out.set_colors_to(self.blue // self.count,
                          self.green // self.count,
                          self.red // self.count)


class PixelView:
    """Points at (x, y) in a bitmap without copying any pixel data.

    ``x`` is kept as a byte offset into the row (pixel x * 3). A view is
    meant to be moved around and reused by a single worker thread; the
    averaging accumulator it carries is not shared between threads.
    """

    __slots__ = ("bitmap", "offset_x", "offset_y", "_average")

    def __init__(self, bitmap: Bitmap, x: int = -1, y: int = -1):
        if bitmap is None:
            raise NullArgumentError("bitmap")
        self.bitmap = bitmap
        self._average = None
        # negative coordinates give an unpositioned view
        if x < 0 or y < 0:
            self.invalidate()
        else:
            self.move_to(x, y)

    def __repr__(self):
        if not self.is_valid():
            return "PixelView(<invalid>)"
        return f"PixelView(x={self.offset_x // 3}, y={self.offset_y})"

    def invalidate(self) -> None:
        self.offset_x = -1
        self.offset_y = -1

    def is_valid(self) -> bool:
        return (0 <= self.offset_y < self.bitmap.height
                and 0 <= self.offset_x < self.bitmap.row_bytes)

    def move_to(self, x: int, y: int) -> PixelView:
        if not 0 <= x < self.bitmap.width:
            raise BoundsError(f"x={x} outside [0, {self.bitmap.width})")
        if not 0 <= y < self.bitmap.height:
            raise BoundsError(f"y={y} outside [0, {self.bitmap.height})")
        self.offset_y = y
        self.offset_x = x * 3
        return self

    def _get(self, channel: int) -> int:
        if not self.is_valid():
            raise BoundsError(f"{self!r} does not point at a pixel")
        return int(self.bitmap.colors[self.offset_y, self.offset_x + channel])

    def _set(self, channel: int, value: int) -> None:
        if not self.is_valid():
            raise BoundsError(f"{self!r} does not point at a pixel")
        self.bitmap.colors[self.offset_y, self.offset_x + channel] = int(value) & 0xFF

    def get_blue(self) -> int:
        return self._get(BLUE)

    def get_green(self) -> int:
        return self._get(GREEN)

    def get_red(self) -> int:
        return self._get(RED)

    def set_blue(self, value: int) -> None:
        self._set(BLUE, value)

    def set_green(self, value: int) -> None:
        self._set(GREEN, value)

    def set_red(self, value: int) -> None:
        self._set(RED, value)

    def set_colors_to(self, blue: int, green: int, red: int) -> None:
        self.set_blue(blue)
        self.set_green(green)
        self.set_red(red)

    def set_all_colors_to(self, value: int) -> None:
        self.set_colors_to(value, value, value)

    def set_colors_from(self, other: PixelView) -> None:
        if other is None:
            raise NullArgumentError("other")
        self.set_colors_to(other.get_blue(), other.get_green(), other.get_red())

    def avg_start(self) -> None:
        """Begin a new average; the accumulator is created once and reused."""
        if self._average is None:
            self._average = _PixelAverage()
        else:
            self._average.reset()

    def avg_add(self, other: PixelView | None) -> None:
        """Add ``other``'s channels. Invalid or missing views are skipped."""
        if self._average is not None:
            self._average.add(other)

    def avg_stop(self) -> None:
        """Store the truncated average at this view's position and reset."""
        if self._average is not None:
            try:
                self._average.store(self)
            finally:
                self._average.reset()

    @staticmethod
    def swap(first: PixelView, second: PixelView) -> None:
        """Exchange all three channels of two views (possibly on different bitmaps)."""
        if first is None:
            raise NullArgumentError("first")
        if second is None:
            raise NullArgumentError("second")
        blue, green, red = second.get_blue(), second.get_green(), second.get_red()
        second.set_colors_from(first)
        first.set_colors_to(blue, green, red)
