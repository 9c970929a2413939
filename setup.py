from setuptools import setup, find_packages
import os

# Read version from __init__.py
def get_version():
    """Get version from lenticular/__init__.py"""
    init_file = os.path.join(os.path.dirname(__file__), "lenticular", "__init__.py")
    with open(init_file, "r") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"\'')
    raise RuntimeError("Unable to find version string.")

# Installation Examples:
# - Base package only: pip install lenticular
# - With test tooling: pip install "lenticular[dev]"

extras_require = {
    # Development dependencies
    "dev": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "coverage>=7.3.2",
    ],
}

setup(
    name="lenticular",
    version=get_version(),
    description="Interleaves CMYK images into lenticular print composites sized from LPI and print width",
    long_description=open("README.md", "r", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
        "Topic :: Printing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    keywords="lenticular, printing, interlacing, cmyk, tiff, image-processing",
    packages=find_packages(include=["lenticular", "lenticular.*"]),
    install_requires=[
        # Core image processing and scientific computing
        "numpy>=1.26.4",

        # Image I/O and formats
        "tifffile>=2025.6.11",  # Modern tifffile with resolutionunit support
        "imagecodecs>=2025.3.30",  # Compressed TIFF output (lzw, zstd, ...)
        "Pillow>=10.1.0",  # CMYK resampling with Image.Resampling filters

        # Configuration
        "PyYAML>=6.0.2",
    ],
    extras_require=extras_require,

    # Console script entry points
    entry_points={
        "console_scripts": [
            "lenticular=lenticular.__main__:main",
        ],
    },
)
