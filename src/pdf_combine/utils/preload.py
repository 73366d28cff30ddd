"""
Preload stage and unit accounting.

Provides:
- WorkPlan: the snapshot of items for one run and its unit counters
- RunContext: parsed PDFs for one run, keyed by item id
- preload_documents: concurrent open of every PDF in the run
- count_units: pages per PDF plus one per image
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .backend import PyMuPDFBackend, SourceDocument
from .errors import AssemblyError, ParseFailureError
from .items import Item, ItemKind

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class WorkPlan:
    """Items of one run, frozen at run start, and its unit counters."""
    items: Tuple[Item, ...]
    total_units: int = 0
    completed_units: int = 0

    def complete_unit(self) -> int:
        if self.completed_units >= self.total_units:
            raise RuntimeError(f"Work plan has only {self.total_units} units")
        self.completed_units += 1
        return self.completed_units


class RunContext:
    """
    Parsed input documents owned by a single run.

    Documents are never attached to items; close() releases all of them
    and must run on every exit path.
    """

    def __init__(self):
        self._documents: Dict[str, SourceDocument] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._documents

    def add(self, item_id: str, document: SourceDocument):
        if item_id in self._documents:
            raise ValueError(f"Document already loaded for item {item_id}")
        self._documents[item_id] = document

    def document(self, item_id: str) -> SourceDocument:
        try:
            return self._documents[item_id]
        except KeyError:
            raise RuntimeError(f"Item {item_id} was not preloaded") from None

    def page_indices(self, item_id: str) -> List[int]:
        return self.document(item_id).page_indices

    def close(self):
        for document in self._documents.values():
            document.close()
        self._documents.clear()


# ============================================================================
# Unit Accounting
# ============================================================================

def count_units(items: Iterable[Item], context: RunContext) -> int:
    """Total units: every page of every PDF, plus one per image."""
    total = 0
    for item in items:
        if item.kind is ItemKind.PDF:
            total += len(context.page_indices(item.id))
        else:
            total += 1
    return total


# ============================================================================
# Preload
# ============================================================================

async def _open_document(item: Item, backend: PyMuPDFBackend) -> SourceDocument:
    data = await asyncio.to_thread(item.read_bytes)
    # PyMuPDF is not thread-safe, so parsing stays on the loop thread
    return backend.open_document(data, name=item.name)


async def preload_documents(
    items: Sequence[Item],
    backend: PyMuPDFBackend
) -> RunContext:
    """
    Open every PDF item concurrently and wait for all of them.

    Images are not opened here. All loads settle before any failure is
    reported; the first failure in item order is raised.

    Args:
        items: Items of the run, in output order
        backend: Document backend used to parse PDFs

    Returns:
        RunContext holding one SourceDocument per PDF item

    Raises:
        AssemblyError: If the same item appears more than once
        ParseFailureError: If any PDF could not be opened
    """
    seen = set()
    for item in items:
        if item.id in seen:
            raise AssemblyError(f"Item listed more than once: {item.name}", item_name=item.name)
        seen.add(item.id)

    pdf_items = [item for item in items if item.kind is ItemKind.PDF]
    logger.info(f"Preloading {len(pdf_items)} PDF(s)")

    results = await asyncio.gather(
        *(_open_document(item, backend) for item in pdf_items),
        return_exceptions=True
    )

    context = RunContext()
    failures = []
    for item, result in zip(pdf_items, results):
        if isinstance(result, BaseException):
            failures.append((item, result))
        else:
            context.add(item.id, result)

    if failures:
        context.close()
        item, error = failures[0]
        if not isinstance(error, Exception):
            raise error
        logger.error(f"Failed to open {item.name}: {error}")
        if len(failures) > 1:
            logger.error(f"{len(failures) - 1} more PDF(s) failed to open")
        raise ParseFailureError(f"Could not open {item.name}: {error}", item_name=item.name) from error

    return context
