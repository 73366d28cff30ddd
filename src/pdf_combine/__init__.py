"""
PDF Combine
===========

Combines an ordered list of PDFs and JPEG/PNG images into one PDF.

Main components:
- Input classification by MIME type and extension
- Concurrent preload of input PDFs
- Unit-based progress reporting
- Page copying and image placement on A4 pages
- Command-line and Streamlit front ends
"""

__version__ = "1.0.0"
__author__ = "PDF Tools"
