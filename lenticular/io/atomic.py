"""
Atomic file output for lenticular.

Writes go to a temporary file in the destination directory and are renamed
into place only once the writer returns, so a failed encode never leaves a
partial artifact at the destination path.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtomicConfig:
    """Configuration constants for atomic writes."""
    TEMP_PREFIX: str = '.tmp'


ATOMIC_CONFIG = AtomicConfig()


def atomic_write(
    file_path: Union[str, Path],
    writer: Callable[[BinaryIO], None],
    ensure_directory: bool = True
) -> None:
    """
    Atomically write a binary file using temporary file + rename.

    Args:
        file_path: Final destination
        writer: Callable that writes the full content to the given binary handle
        ensure_directory: Create missing parent directories

    Raises:
        Whatever `writer` raises, or OSError from the filesystem. The
        temporary file is removed in both cases.
    """
    file_path = Path(file_path)

    if ensure_directory:
        file_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = _write_to_temp_file(file_path, writer)
    try:
        os.replace(tmp_path, str(file_path))
    except OSError:
        _remove_quietly(tmp_path)
        raise
    logger.debug(f"Atomically wrote {file_path}")


def _write_to_temp_file(file_path: Path, writer: Callable[[BinaryIO], None]) -> str:
    """Write data to temporary file and return path."""
    with tempfile.NamedTemporaryFile(
        mode='wb',
        dir=file_path.parent,
        prefix=f"{ATOMIC_CONFIG.TEMP_PREFIX}{file_path.name}",
        suffix=file_path.suffix,
        delete=False
    ) as tmp_file:
        try:
            writer(tmp_file)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        except BaseException:
            tmp_file.close()
            _remove_quietly(tmp_file.name)
            raise
        return tmp_file.name


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.warning(f"Error removing temporary file {path}: {e}")
