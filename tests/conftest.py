"""Global pytest configuration and shared fixtures for lenticular tests."""
import logging

import pytest

from lenticular.constants import ScaleAlgorithm
from lenticular.core.config import AutoWidthConfig, LenticularConfig, PrintConfig
from lenticular.core.planner import SourceGeometry

from helpers.image_factory import CMYK8, make_cmyk, write_cmyk_tiff


def pytest_configure(config):
    """Keep library logging quiet unless a test asks for it."""
    logging.getLogger("lenticular").setLevel(logging.WARNING)


@pytest.fixture
def baseline_100():
    return SourceGeometry(color_type=CMYK8, width=100, height=100)


@pytest.fixture
def one_inch_print():
    """10 LPI over 2.54 cm (one inch)."""
    return PrintConfig(lpi=10, physical_width_cm=2.54)


@pytest.fixture
def fixed_width_config(one_inch_print):
    return LenticularConfig(print=one_inch_print, auto_width=AutoWidthConfig(enabled=False))


@pytest.fixture
def nearest_config():
    return LenticularConfig(
        print=PrintConfig(lpi=10, physical_width_cm=2.54, scale_algorithm=ScaleAlgorithm.NEAREST),
        auto_width=AutoWidthConfig(enabled=False),
    )


@pytest.fixture
def cmyk_tiffs(tmp_path):
    """Two 100x100 CMYK TIFFs with distinct constant values."""
    first = write_cmyk_tiff(tmp_path / "01.tif", make_cmyk(100, 100, 10))
    second = write_cmyk_tiff(tmp_path / "02.tif", make_cmyk(100, 100, 200))
    return [first, second]
