import numpy as np
import pytest

from bitmap import Bitmap


@pytest.fixture
def make_bitmap():
    """Factory for bitmaps filled with reproducible random pixels."""
    def _make(width, height, threads=1, seed=0):
        bitmap = Bitmap(width, height, threads)
        rng = np.random.default_rng(seed)
        bitmap.colors[...] = rng.integers(0, 256, size=bitmap.colors.shape, dtype=np.uint8)
        return bitmap
    return _make
