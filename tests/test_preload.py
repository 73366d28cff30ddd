"""
Tests for the preload stage and unit accounting.
"""

import asyncio
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pdf_combine.utils.backend import PyMuPDFBackend


class RecordingBackend(PyMuPDFBackend):
    """Backend that remembers every document it opened."""

    def __init__(self):
        self.opened = []
        self.attempted = []

    def open_document(self, data, name=""):
        self.attempted.append(name)
        document = super().open_document(data, name)
        self.opened.append(document)
        return document


def _items(*sources):
    from pdf_combine.utils.items import classify_files
    return classify_files(sources)


class TestPreloadDocuments:
    """Test concurrent PDF preload."""

    def test_counts_pages_and_images(self, pdf_input, image_input):
        """Units are pages for PDFs and one per image."""
        from pdf_combine.utils.preload import preload_documents, count_units

        items = _items(pdf_input("a.pdf", pages=2), image_input("b.png"), pdf_input("c.pdf", pages=3))
        context = asyncio.run(preload_documents(items, PyMuPDFBackend()))
        try:
            assert len(context) == 2
            assert context.page_indices(items[0].id) == [0, 1]
            assert context.page_indices(items[2].id) == [0, 1, 2]
            assert count_units(items, context) == 6
        finally:
            context.close()

    def test_images_not_opened(self, image_input):
        from pdf_combine.utils.preload import preload_documents, count_units

        backend = RecordingBackend()
        items = _items(image_input("a.png"), image_input("b.jpg"))
        context = asyncio.run(preload_documents(items, backend))

        assert backend.attempted == []
        assert len(context) == 0
        assert count_units(items, context) == 2

    def test_failure_closes_everything(self, pdf_input):
        """A bad second PDF fails the stage after all loads settle."""
        from pdf_combine.utils.items import InputFile
        from pdf_combine.utils.preload import preload_documents
        from pdf_combine.utils.errors import ParseFailureError

        backend = RecordingBackend()
        bad = InputFile(name="broken.pdf", mime_type="application/pdf", data=b"not a pdf")
        items = _items(pdf_input("good.pdf", pages=2), bad, pdf_input("late.pdf"))

        with pytest.raises(ParseFailureError) as exc_info:
            asyncio.run(preload_documents(items, backend))

        assert exc_info.value.item_name == "broken.pdf"
        assert exc_info.value.kind == "parse_failure"
        assert sorted(backend.attempted) == ["broken.pdf", "good.pdf", "late.pdf"]
        assert len(backend.opened) == 2
        assert all(document.closed for document in backend.opened)

    def test_duplicate_item_rejected_before_opening(self, pdf_input):
        """The same item twice fails without leaving documents open."""
        from pdf_combine.utils.preload import preload_documents
        from pdf_combine.utils.errors import AssemblyError

        backend = RecordingBackend()
        item = _items(pdf_input("twice.pdf", pages=2))[0]

        with pytest.raises(AssemblyError) as exc_info:
            asyncio.run(preload_documents([item, item], backend))

        assert exc_info.value.item_name == "twice.pdf"
        assert backend.attempted == []
        assert all(document.closed for document in backend.opened)

    def test_first_failure_in_item_order_reported(self):
        from pdf_combine.utils.items import InputFile
        from pdf_combine.utils.preload import preload_documents
        from pdf_combine.utils.errors import ParseFailureError

        items = _items(
            InputFile(name="one.pdf", data=b"garbage"),
            InputFile(name="two.pdf", data=b"also garbage"),
        )

        with pytest.raises(ParseFailureError) as exc_info:
            asyncio.run(preload_documents(items, PyMuPDFBackend()))

        assert exc_info.value.item_name == "one.pdf"


class TestRunContext:
    """Test the per-run document map."""

    def test_missing_item(self):
        from pdf_combine.utils.preload import RunContext

        with pytest.raises(RuntimeError):
            RunContext().document("nope")

    def test_close_clears(self, pdf_input):
        from pdf_combine.utils.preload import RunContext

        backend = PyMuPDFBackend()
        document = backend.open_document(pdf_input("a.pdf").read_bytes(), "a.pdf")
        context = RunContext()
        context.add("a", document)
        context.close()

        assert document.closed
        assert "a" not in context
        assert len(context) == 0


class TestWorkPlan:

    def test_complete_unit_bounded(self):
        from pdf_combine.utils.preload import WorkPlan

        plan = WorkPlan(items=(), total_units=2)

        assert plan.complete_unit() == 1
        assert plan.complete_unit() == 2
        with pytest.raises(RuntimeError):
            plan.complete_unit()
