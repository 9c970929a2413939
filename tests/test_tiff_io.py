"""Tests for TIFF decode/encode."""
import io

import numpy as np
import pytest
import tifffile

from lenticular.constants import RESOLUTION_UNIT_INCH
from lenticular.core.exceptions import CodecError, InvalidInputError
from lenticular.core.pixel_matrix import DpiInfo, PixelMatrix
from lenticular.io.tiff import read_geometry, read_pixels, resolution_rational, write_tiff

from helpers.image_factory import CMYK8, make_gradient, write_cmyk_tiff


def _rational_value(tag):
    numerator, denominator = tag.value
    return numerator / denominator


class TestReadTiff:

    def test_geometry_without_resolution(self, tmp_path):
        path = write_cmyk_tiff(tmp_path / "a.tif", make_gradient(12, 7))
        geometry = read_geometry(path)
        assert geometry.color_type == CMYK8
        assert (geometry.width, geometry.height) == (12, 7)
        assert geometry.resolution_unit is None
        assert geometry.x_resolution is None

    def test_geometry_with_resolution(self, tmp_path):
        path = write_cmyk_tiff(tmp_path / "a.tif", make_gradient(12, 7), dpi=300)
        geometry = read_geometry(path, read_resolution=True)
        assert geometry.resolution_unit == RESOLUTION_UNIT_INCH
        assert geometry.x_resolution[0] / geometry.x_resolution[1] == pytest.approx(300)
        assert geometry.y_resolution[0] / geometry.y_resolution[1] == pytest.approx(300)

    def test_pixels_from_path_bytes_and_stream(self, tmp_path):
        data = make_gradient(9, 5)
        path = write_cmyk_tiff(tmp_path / "a.tif", data)
        raw = path.read_bytes()

        np.testing.assert_array_equal(read_pixels(path), data)
        np.testing.assert_array_equal(read_pixels(raw), data)
        stream = io.BytesIO(raw)
        stream.read(10)
        np.testing.assert_array_equal(read_pixels(stream), data)

    def test_planar_separate_is_interleaved(self, tmp_path):
        data = make_gradient(6, 3)
        path = tmp_path / "planar.tif"
        tifffile.imwrite(path, np.moveaxis(data, -1, 0), photometric="separated", planarconfig="separate")
        np.testing.assert_array_equal(read_pixels(path), data)

    def test_rgb_is_rejected(self, tmp_path):
        path = tmp_path / "rgb.tif"
        tifffile.imwrite(path, np.zeros((4, 4, 3), dtype=np.uint8), photometric="rgb")
        assert read_geometry(path).color_type != CMYK8
        with pytest.raises(InvalidInputError):
            read_pixels(path)

    def test_sixteen_bit_cmyk_is_rejected(self, tmp_path):
        path = tmp_path / "cmyk16.tif"
        tifffile.imwrite(path, np.zeros((4, 4, 4), dtype=np.uint16), photometric="separated")
        with pytest.raises(InvalidInputError):
            read_pixels(path)

    def test_garbage_bytes(self):
        with pytest.raises(CodecError):
            read_geometry(b"definitely not a tiff")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CodecError):
            read_pixels(tmp_path / "missing.tif")


class TestWriteTiff:

    def test_tags_and_pixels(self, tmp_path):
        data = make_gradient(8, 6)
        path = tmp_path / "out.tif"
        write_tiff(path, PixelMatrix(data, DpiInfo(dpi_h=20.5, dpi_w=20.5)), software="lenticular test")

        with tifffile.TiffFile(path) as tif:
            page = tif.pages[0]
            assert page.photometric == tifffile.PHOTOMETRIC.SEPARATED
            assert int(page.tags["ResolutionUnit"].value) == RESOLUTION_UNIT_INCH
            assert _rational_value(page.tags["XResolution"]) == pytest.approx(20.5)
            assert _rational_value(page.tags["YResolution"]) == pytest.approx(20.5)
            assert page.tags["Software"].value == "lenticular test"
            np.testing.assert_array_equal(page.asarray(), data)

    def test_anisotropic_tags(self, tmp_path):
        path = tmp_path / "out.tif"
        write_tiff(path, PixelMatrix(make_gradient(4, 4), DpiInfo(dpi_h=10, dpi_w=20)), software="x")
        with tifffile.TiffFile(path) as tif:
            page = tif.pages[0]
            assert _rational_value(page.tags["XResolution"]) == pytest.approx(20)
            assert _rational_value(page.tags["YResolution"]) == pytest.approx(10)

    def test_stream_round_trip(self):
        data = make_gradient(5, 5)
        buffer = io.BytesIO()
        write_tiff(buffer, PixelMatrix(data, DpiInfo(300, 300)), software="x")
        np.testing.assert_array_equal(read_pixels(buffer.getvalue()), data)

    def test_compressed_output(self, tmp_path):
        data = make_gradient(16, 16)
        path = tmp_path / "out.tif"
        write_tiff(path, PixelMatrix(data, DpiInfo(300, 300)), software="x", compression="zlib")
        with tifffile.TiffFile(path) as tif:
            assert tif.pages[0].compression == tifffile.COMPRESSION.ADOBE_DEFLATE
        np.testing.assert_array_equal(read_pixels(path), data)

    def test_missing_dpi_writes_nothing(self, tmp_path):
        path = tmp_path / "out.tif"
        with pytest.raises(InvalidInputError):
            write_tiff(path, PixelMatrix(make_gradient(4, 4)), software="x")
        assert not path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_resolution_rational(self):
        assert resolution_rational(91.6 * 7) == (int(91.6 * 7 * 10000), 10000)
        assert resolution_rational(20) == (200000, 10000)
