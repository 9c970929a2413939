"""End-to-end composition runs."""
import numpy as np
import pytest

from lenticular import LenticularConfig, PrintConfig, render_to_file, run
from lenticular.constants import RESOLUTION_UNIT_INCH, SizingStrategy
from lenticular.core.compositor import ArrayImageSource, TiffImageSource
from lenticular.core.config import AutoWidthConfig, OutputConfig
from lenticular.core.exceptions import InvalidInputError, SearchExhaustedError
from lenticular.core.pipeline import as_image_sources, plan_run
from lenticular.core.pixel_matrix import DpiInfo
from lenticular.io.tiff import read_geometry, read_pixels

from helpers.image_factory import make_cmyk, write_cmyk_tiff


class TestRun:

    def test_fixed_widths(self, cmyk_tiffs, fixed_width_config):
        result = run(cmyk_tiffs, [1, 1], fixed_width_config)

        assert result.stripe_widths == (1, 1)
        assert (result.output_info.width, result.output_info.height) == (20, 10)
        assert (result.output_info.dpi_h, result.output_info.dpi_w) == (10, 20)
        assert (result.composite.width, result.composite.height) == (20, 20)
        assert result.composite.dpi == DpiInfo(dpi_h=20, dpi_w=20)
        assert result.dropped_columns == 0

    def test_columns_alternate_between_inputs(self, cmyk_tiffs, fixed_width_config):
        data = run(cmyk_tiffs, [1, 1], fixed_width_config).composite.data
        assert np.all(data[:, 0::2, :] == 10)
        assert np.all(data[:, 1::2, :] == 200)

    def test_auto_width_grows_stripes(self, cmyk_tiffs, one_inch_print):
        result = run(cmyk_tiffs, [1, 1], LenticularConfig(print=one_inch_print))

        assert result.stripe_widths == (10, 10)
        assert (result.output_info.width, result.output_info.height) == (200, 100)
        assert (result.composite.width, result.composite.height) == (200, 200)
        assert result.composite.dpi.dpi_h == result.composite.dpi.dpi_w == 200

    def test_auto_width_not_needed(self, cmyk_tiffs):
        config = LenticularConfig(print=PrintConfig(lpi=10, physical_width_cm=25.4))
        result = run(cmyk_tiffs, [1, 1], config)
        assert result.stripe_widths == (1, 1)
        assert result.output_info.height == 100

    def test_auto_width_exhausted(self, cmyk_tiffs, one_inch_print):
        config = LenticularConfig(print=one_inch_print, auto_width=AutoWidthConfig(max_iterations=2))
        with pytest.raises(SearchExhaustedError):
            run(cmyk_tiffs, [1, 1], config)

    def test_without_normalization(self, cmyk_tiffs, one_inch_print):
        config = LenticularConfig(
            print=one_inch_print,
            auto_width=AutoWidthConfig(enabled=False),
            output=OutputConfig(normalize_resolution=False),
        )
        composite = run(cmyk_tiffs, [1, 1], config).composite
        assert (composite.width, composite.height) == (20, 10)
        assert composite.dpi == DpiInfo(dpi_h=10, dpi_w=20)

    def test_line_count_strategy(self, cmyk_tiffs):
        config = LenticularConfig(
            print=PrintConfig(lpi=10, physical_width_cm=2.54, sizing_strategy=SizingStrategy.LINE_COUNT),
        )
        result = run(cmyk_tiffs, [1, 1], config)
        assert (result.output_info.width, result.output_info.height) == (100, 100)
        assert result.composite.dpi == DpiInfo(dpi_h=100, dpi_w=100)
        assert result.stripe_widths == (5, 5)

        period = sum(result.stripe_widths)
        assert period == result.composite.dpi.dpi_w / config.print.lpi
        assert result.composite.data[0, :, 0].tolist() == ([10] * 5 + [200] * 5) * 10

    def test_bytes_and_array_sources(self, cmyk_tiffs, fixed_width_config):
        sources = [cmyk_tiffs[0].read_bytes(), ArrayImageSource(make_cmyk(100, 100, 200))]
        data = run(sources, [1, 1], fixed_width_config).composite.data
        assert np.all(data[:, 1::2, :] == 200)

    def test_mismatched_width_count(self, cmyk_tiffs, fixed_width_config):
        with pytest.raises(InvalidInputError, match="does not match"):
            run(cmyk_tiffs, [1, 1, 1], fixed_width_config)

    def test_no_sources(self, fixed_width_config):
        with pytest.raises(InvalidInputError):
            plan_run([], [1], fixed_width_config)

    def test_first_source_reads_resolution(self, cmyk_tiffs):
        wrapped = as_image_sources(cmyk_tiffs)
        assert all(isinstance(source, TiffImageSource) for source in wrapped)
        assert wrapped[0].read_resolution is True
        assert wrapped[1].read_resolution is False
        assert wrapped[0].geometry().resolution_unit == 2


class TestRenderToFile:

    def test_writes_normalized_tiff(self, cmyk_tiffs, fixed_width_config, tmp_path):
        output = tmp_path / "out" / "composite.tif"
        render_to_file(cmyk_tiffs, [1, 1], fixed_width_config, output)

        geometry = read_geometry(output, read_resolution=True)
        assert (geometry.width, geometry.height) == (20, 20)
        assert geometry.resolution_unit == RESOLUTION_UNIT_INCH
        assert geometry.x_resolution[0] / geometry.x_resolution[1] == pytest.approx(20)
        assert geometry.y_resolution[0] / geometry.y_resolution[1] == pytest.approx(20)
        assert read_pixels(output).shape == (20, 20, 4)

    def test_geometry_mismatch_writes_nothing(self, tmp_path, fixed_width_config):
        first = write_cmyk_tiff(tmp_path / "01.tif", make_cmyk(100, 100, 10))
        second = write_cmyk_tiff(tmp_path / "02.tif", make_cmyk(50, 100, 10))
        output = tmp_path / "out.tif"

        with pytest.raises(InvalidInputError, match="does not match the baseline"):
            render_to_file([first, second], [1, 1], fixed_width_config, output)
        assert not output.exists()
