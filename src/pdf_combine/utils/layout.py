"""
Image-to-page layout for the PDF combine pipeline.

Provides:
- Page orientation from image aspect
- Fit-inside-margins scaling (never upscales)
- Centered draw rectangle

Pure geometry, in PDF points. No I/O.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from ..config import PAGE_SIZES, DEFAULT_MARGIN

logger = logging.getLogger(__name__)


A4 = PAGE_SIZES["A4"]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class ImageLayout:
    """Page size and draw rectangle for one image."""
    page_width: float
    page_height: float
    x: float
    y: float
    width: float
    height: float
    scale: float

    @property
    def landscape(self) -> bool:
        return self.page_width > self.page_height

    @property
    def page_size(self) -> Tuple[float, float]:
        return (self.page_width, self.page_height)

    def to_rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


# ============================================================================
# Layout Computation
# ============================================================================

def compute_image_layout(
    image_width: float,
    image_height: float,
    page_size: Tuple[float, float] = A4,
    margin: float = DEFAULT_MARGIN
) -> ImageLayout:
    """
    Place an image on a single page.

    Wider-than-tall images get a landscape page; ties stay portrait. The
    margin is subtracted once from each page dimension. Images are only
    ever scaled down.

    Args:
        image_width: Intrinsic image width in pixels
        image_height: Intrinsic image height in pixels
        page_size: Portrait (width, height) of the page in points
        margin: Amount subtracted from page width and height

    Returns:
        ImageLayout with page size and centered draw rectangle

    Raises:
        ValueError: If an image dimension is not positive
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size: {image_width}x{image_height}")

    portrait_w, portrait_h = page_size
    if image_width > image_height:
        page_w, page_h = portrait_h, portrait_w
    else:
        page_w, page_h = portrait_w, portrait_h

    max_w = page_w - margin
    max_h = page_h - margin
    scale = min(max_w / image_width, max_h / image_height, 1.0)

    draw_w = image_width * scale
    draw_h = image_height * scale

    return ImageLayout(
        page_width=page_w,
        page_height=page_h,
        x=(page_w - draw_w) / 2,
        y=(page_h - draw_h) / 2,
        width=draw_w,
        height=draw_h,
        scale=scale,
    )
