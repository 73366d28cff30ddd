"""
Document-model backend for the PDF combine pipeline.

The pipeline only talks to PDFs through this module:
- open a PDF and enumerate its pages
- copy single pages into an output document
- decode and embed a raster image
- create a page and draw an image on it
- set metadata and serialize once

PyMuPDF (fitz) does the PDF work; Pillow decodes images to validate them
and read their intrinsic size.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import fitz
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


# Pillow reports some camera JPEGs as MPO
_ACCEPTED_FORMATS = {
    "PNG": ("PNG",),
    "JPEG": ("JPEG", "MPO"),
}


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class EmbeddedImage:
    """A decoded raster image ready to be drawn."""
    data: bytes = field(repr=False)
    width: int
    height: int
    format: str


class SourceDocument:
    """A parsed input PDF."""

    def __init__(self, doc: "fitz.Document", name: str = ""):
        self._doc = doc
        self.name = name

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def page_indices(self) -> List[int]:
        return list(range(self._doc.page_count))

    @property
    def closed(self) -> bool:
        return self._doc.is_closed

    def close(self):
        if not self._doc.is_closed:
            self._doc.close()


class OutputDocument:
    """
    The PDF under construction.

    serialize() may only be called once; after that every mutating call
    raises RuntimeError.
    """

    def __init__(self):
        self._doc = fitz.open()
        self._serialized = False

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def serialized(self) -> bool:
        return self._serialized

    def _check_writable(self):
        if self._serialized:
            raise RuntimeError("Output document is already serialized")

    def set_metadata(
        self,
        title: str,
        author: str,
        producer: str,
        creator: str,
        created: Optional[datetime] = None
    ):
        self._check_writable()
        stamp = (created or datetime.now()).strftime("D:%Y%m%d%H%M%S")
        self._doc.set_metadata({
            "title": title,
            "author": author,
            "producer": producer,
            "creator": creator,
            "creationDate": stamp,
            "modDate": stamp,
        })

    def copy_page(self, source: SourceDocument, index: int) -> "fitz.Page":
        """Append page `index` of `source` to the end of this document."""
        self._check_writable()
        self._doc.insert_pdf(source._doc, from_page=index, to_page=index)
        return self._doc[self._doc.page_count - 1]

    def embed_image(self, data: bytes, image_format: str) -> EmbeddedImage:
        """
        Decode image bytes with the requested decoder.

        Args:
            data: Raw image bytes
            image_format: "PNG" or "JPEG"

        Returns:
            EmbeddedImage with intrinsic pixel size

        Raises:
            ValueError: If the bytes do not decode as the requested format
        """
        self._check_writable()
        expected = image_format.upper()
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                actual = img.format
                width, height = img.size
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Could not decode {expected} image: {e}") from e

        if actual not in _ACCEPTED_FORMATS.get(expected, (expected,)):
            raise ValueError(f"Expected {expected} data, found {actual}")

        logger.debug(f"Decoded {expected} image {width}x{height}")
        return EmbeddedImage(data=data, width=width, height=height, format=expected)

    def add_page(self, width: float, height: float) -> "fitz.Page":
        self._check_writable()
        return self._doc.new_page(width=width, height=height)

    def draw_image(
        self,
        page: "fitz.Page",
        image: EmbeddedImage,
        x: float,
        y: float,
        width: float,
        height: float
    ):
        # Centered rectangles are the same in top-left and bottom-left origins
        self._check_writable()
        rect = fitz.Rect(x, y, x + width, y + height)
        page.insert_image(rect, stream=image.data)

    def serialize(self) -> bytes:
        self._check_writable()
        data = self._doc.tobytes()
        self._serialized = True
        return data

    def close(self):
        if not self._doc.is_closed:
            self._doc.close()


# ============================================================================
# Backend
# ============================================================================

class PyMuPDFBackend:
    """Opens input PDFs and creates output documents."""

    def open_document(self, data: bytes, name: str = "") -> SourceDocument:
        """
        Parse PDF bytes.

        Raises:
            ValueError: If the document is encrypted
            fitz.FileDataError: If the bytes are not a readable PDF
        """
        doc = fitz.open(stream=data, filetype="pdf")
        if doc.needs_pass:
            doc.close()
            raise ValueError(f"Encrypted PDF is not supported: {name}")
        return SourceDocument(doc, name=name)

    def create_document(self) -> OutputDocument:
        return OutputDocument()
