"""
Utility modules for the PDF combine pipeline.
"""

from .errors import (
    AssemblyError, NoSupportedFilesError, ParseFailureError,
    EmbedFailureError, SerializationFailureError,
)
from .items import InputFile, Item, ItemKind, WorkingSet, classify_file, classify_files
from .layout import ImageLayout, compute_image_layout
from .progress import ProgressReporter, RunState
from .preload import RunContext, WorkPlan, count_units, preload_documents
from .assembler import DocumentAssembler, AssemblyResult, RunStatus, normalize_output_name
from .io import load_input_files, write_output, ensure_dir, format_bytes

__all__ = [
    # Errors
    "AssemblyError", "NoSupportedFilesError", "ParseFailureError",
    "EmbedFailureError", "SerializationFailureError",
    # Items
    "InputFile", "Item", "ItemKind", "WorkingSet", "classify_file", "classify_files",
    # Layout
    "ImageLayout", "compute_image_layout",
    # Progress
    "ProgressReporter", "RunState",
    # Preload
    "RunContext", "WorkPlan", "count_units", "preload_documents",
    # Assembly
    "DocumentAssembler", "AssemblyResult", "RunStatus", "normalize_output_name",
    # IO
    "load_input_files", "write_output", "ensure_dir", "format_bytes",
]
