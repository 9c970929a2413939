"""Tests for the CMYK8 pixel container."""
import numpy as np
import pytest

from lenticular.core.exceptions import InvalidInputError
from lenticular.core.pixel_matrix import DpiInfo, PixelMatrix

from helpers.image_factory import make_cmyk


class TestPixelMatrix:

    def test_zeros(self):
        matrix = PixelMatrix.zeros(width=5, height=3)
        assert (matrix.width, matrix.height) == (5, 3)
        assert matrix.data.shape == (3, 5, 4)
        assert not matrix.data.any()
        assert matrix.dpi is None

    @pytest.mark.parametrize("data", [
        np.zeros((2, 2, 3), dtype=np.uint8),
        np.zeros((2, 2, 4), dtype=np.uint16),
        np.zeros((2, 2), dtype=np.uint8),
    ])
    def test_rejects_other_layouts(self, data):
        with pytest.raises(InvalidInputError):
            PixelMatrix(data)

    def test_write_columns_later_write_wins(self):
        matrix = PixelMatrix.zeros(width=4, height=2)
        matrix.write_columns(np.array([1, 2]), make_cmyk(2, 2, 5), np.array([0, 1]))
        matrix.write_columns(np.array([2]), make_cmyk(1, 2, 9), np.array([0]))
        assert matrix.data[0, :, 0].tolist() == [0, 5, 9, 0]
        assert matrix.data[:, 2, 3].tolist() == [9, 9]

    def test_dpi_metadata(self):
        matrix = PixelMatrix.zeros(2, 2)
        matrix.set_dpi(DpiInfo(dpi_h=10, dpi_w=20))
        assert not matrix.dpi.is_uniform
        assert matrix.dpi == DpiInfo(dpi_h=10, dpi_w=20)
