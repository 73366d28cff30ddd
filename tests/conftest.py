"""
Shared fixtures: in-memory PDFs and images.
"""

import io
import sys
from pathlib import Path

import pytest
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def make_pdf_bytes(label: str, pages: int = 1, size=(595.28, 841.89)) -> bytes:
    """Create a PDF whose pages carry the text '<label> page <n>'."""
    import fitz

    doc = fitz.open()
    for n in range(1, pages + 1):
        page = doc.new_page(width=size[0], height=size[1])
        page.insert_text((72, 72), f"{label} page {n}")
    data = doc.tobytes()
    doc.close()
    return data


def make_image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    """Create a solid-color image in the given format."""
    from PIL import Image

    pixels = np.full((height, width, 3), 180, dtype=np.uint8)
    pixels[: height // 2, : width // 2] = [200, 30, 30]
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format=fmt)
    return buf.getvalue()


def page_texts(pdf_bytes: bytes):
    """Text of every page of a PDF, stripped."""
    import fitz

    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


@pytest.fixture
def pdf_input():
    """Factory for PDF InputFiles."""
    from pdf_combine.utils.items import InputFile

    def _make(name: str, pages: int = 1, label: str = None):
        data = make_pdf_bytes(label or name, pages)
        return InputFile(name=name, mime_type="application/pdf", data=data)

    return _make


@pytest.fixture
def image_input():
    """Factory for image InputFiles."""
    from pdf_combine.utils.items import InputFile

    def _make(name: str, width: int = 400, height: int = 300, fmt: str = None):
        fmt = fmt or ("PNG" if name.lower().endswith(".png") else "JPEG")
        mime = "image/png" if fmt == "PNG" else "image/jpeg"
        return InputFile(name=name, mime_type=mime, data=make_image_bytes(width, height, fmt))

    return _make
