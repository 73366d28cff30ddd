"""
Error taxonomy for the PDF combine pipeline.

Only NoSupportedFilesError is recoverable; it is raised before any run
starts. Every other AssemblyError aborts the run that raised it.
"""

from typing import Optional


class AssemblyError(Exception):
    """Base class for pipeline errors exposed to callers."""
    kind = "assembly_error"
    summary = "Failed to create PDF. Ensure files are valid."

    def __init__(self, message: str, item_name: Optional[str] = None):
        super().__init__(message)
        self.item_name = item_name

    def to_dict(self):
        return {
            "kind": self.kind,
            "summary": self.summary,
            "item": self.item_name,
        }


class NoSupportedFilesError(AssemblyError):
    """Classification accepted none of the candidate files."""
    kind = "no_supported_files"
    summary = "Please select PDFs or JPEG/PNG images only."

    def __init__(self, rejected_count: int = 0):
        super().__init__(f"No supported files among {rejected_count} candidate(s)")
        self.rejected_count = rejected_count


class ParseFailureError(AssemblyError):
    """A PDF input could not be opened during preload."""
    kind = "parse_failure"


class EmbedFailureError(AssemblyError):
    """A raster input could not be decoded or embedded."""
    kind = "embed_failure"


class SerializationFailureError(AssemblyError):
    """The output document could not be encoded."""
    kind = "serialization_failure"
