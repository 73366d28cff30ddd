"""
I/O utilities for the PDF combine pipeline.

Handles:
- Building InputFile values from paths and folders
- Writing the combined PDF
- Directory management
- Human-readable sizes
"""

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Union

from ..config import PDF_EXTENSIONS, IMAGE_EXTENSIONS
from .items import InputFile

logger = logging.getLogger(__name__)


# ============================================================================
# Input Acquisition
# ============================================================================

def guess_mime_type(path: Union[str, Path]) -> str:
    """Declared type for a filesystem input, empty when unknown."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or ""


def load_input_file(path: Union[str, Path]) -> InputFile:
    """
    Wrap a file path as an InputFile; content is read later.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    return InputFile(name=path.name, mime_type=guess_mime_type(path), path=path)


def load_input_files(
    paths: Iterable[Union[str, Path]],
    extensions: tuple = PDF_EXTENSIONS + IMAGE_EXTENSIONS
) -> List[InputFile]:
    """
    Build InputFiles from files and folders, keeping argument order.

    Folders contribute their files with a matching extension, sorted by
    name. Files given explicitly are passed through unfiltered so that
    classification can reject them.

    Args:
        paths: Files and/or folders
        extensions: Extensions picked up from folders

    Returns:
        List of InputFile in order
    """
    inputs = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            found = sorted(
                f for f in path.iterdir()
                if f.is_file() and f.suffix.lower() in extensions
            )
            logger.info(f"Found {len(found)} file(s) in {path}")
            inputs.extend(load_input_file(f) for f in found)
        else:
            inputs.append(load_input_file(path))
    return inputs


# ============================================================================
# Output
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Path to the directory

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_output(data: bytes, output_dir: Union[str, Path], filename: str) -> Path:
    """Write the combined PDF and return its path."""
    output_path = ensure_dir(output_dir) / filename
    output_path.write_bytes(data)
    logger.debug(f"Saved PDF: {output_path}")
    return output_path


# ============================================================================
# Formatting
# ============================================================================

def format_bytes(size: int) -> str:
    """Format a byte count as B, KB, MB or GB with one decimal above bytes."""
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    i = 0
    value = float(size)
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{value:.0f} {units[i]}" if i == 0 else f"{value:.1f} {units[i]}"
