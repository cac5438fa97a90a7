import numpy as np
import pytest

from .fixtures.rasters import make_rectangle


@pytest.fixture
def rectangle():
    return make_rectangle()


@pytest.fixture
def rectangle_rgba():
    gray = make_rectangle()
    return np.dstack([gray, gray, gray, np.full_like(gray, 255)])


@pytest.fixture
def blank():
    return np.full((50, 50), 255, dtype=np.uint8)
