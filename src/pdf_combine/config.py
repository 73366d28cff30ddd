"""
Configuration and constants for the PDF combine pipeline.

This module provides:
- Global logging configuration
- Page geometry used when placing images
- Output naming and document metadata
- Environment overrides
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Tuple
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("pdf_combine")


# ============================================================================
# Page Sizes (PDF points, portrait)
# ============================================================================

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "A4": (595.28, 841.89),
    "LETTER": (612.0, 792.0),
}

# Subtracted from each page dimension before fitting an image
DEFAULT_MARGIN = 72.0

DEFAULT_OUTPUT_NAME = "combined.pdf"

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = ("image/jpeg", "image/png")
PDF_EXTENSIONS = (".pdf",)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class PageConfig:
    """Geometry of pages created for raster images."""
    page_size: str = "A4"
    margin: float = DEFAULT_MARGIN

    @property
    def dimensions(self) -> Tuple[float, float]:
        return PAGE_SIZES[self.page_size]


@dataclass
class OutputConfig:
    """Output naming and document metadata."""
    default_name: str = DEFAULT_OUTPUT_NAME
    title: str = "Combined PDF"
    author: str = "PDF Tools"
    producer: str = "PyMuPDF"
    creator: str = "PDF Tools (pdf-combine)"


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    page: PageConfig = field(default_factory=PageConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Global settings
    debug_mode: bool = False


# ============================================================================
# Default Configuration Instance
# ============================================================================

def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    if os.environ.get("PDF_COMBINE_DEBUG", "").lower() == "true":
        config.debug_mode = True

    default_name = os.environ.get("PDF_COMBINE_DEFAULT_NAME", "").strip()
    if default_name.lower().endswith(".pdf"):
        config.output.default_name = default_name
    elif default_name:
        logger.warning(f"Ignoring PDF_COMBINE_DEFAULT_NAME without .pdf extension: {default_name}")

    author = os.environ.get("PDF_COMBINE_AUTHOR")
    if author:
        config.output.author = author

    page_size = os.environ.get("PDF_COMBINE_PAGE_SIZE", "").upper()
    if page_size in PAGE_SIZES:
        config.page.page_size = page_size
    elif page_size:
        logger.warning(f"Unknown page size {page_size!r}, using {config.page.page_size}")

    return config
