"""
Document assembler for the PDF combine pipeline.

Provides:
- Run orchestration (preload, assemble, finalize)
- Run state machine with one active run at a time
- Page copying and image placement in item order
- Output naming and user-facing status
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import PipelineConfig, DEFAULT_OUTPUT_NAME, get_config
from .backend import OutputDocument, PyMuPDFBackend
from .errors import (
    AssemblyError,
    EmbedFailureError,
    ParseFailureError,
    SerializationFailureError,
)
from .items import Item, ItemKind
from .layout import compute_image_layout
from .preload import RunContext, WorkPlan, count_units, preload_documents
from .progress import ProgressCallback, ProgressReporter, RunState

logger = logging.getLogger(__name__)


_TRANSITIONS: Dict[RunState, Tuple[RunState, ...]] = {
    RunState.IDLE: (RunState.PRELOADING,),
    RunState.PRELOADING: (RunState.ASSEMBLING, RunState.FAILED),
    RunState.ASSEMBLING: (RunState.FINALIZING, RunState.FAILED),
    RunState.FINALIZING: (RunState.SUCCEEDED, RunState.FAILED),
    RunState.SUCCEEDED: (RunState.IDLE,),
    RunState.FAILED: (RunState.IDLE,),
}


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class AssemblyResult:
    """The finished PDF of a successful run."""
    data: bytes = field(repr=False)
    filename: str
    item_count: int
    page_count: int

    def to_dict(self):
        return {
            "filename": self.filename,
            "item_count": self.item_count,
            "page_count": self.page_count,
            "size_bytes": len(self.data),
        }


@dataclass
class RunStatus:
    """Single user-facing status line."""
    message: str = ""
    variant: str = "info"  # info, success, warning, danger


def normalize_output_name(name: Optional[str], default: str = DEFAULT_OUTPUT_NAME) -> str:
    """Trimmed name, or the default when empty or not ending in .pdf."""
    name = (name or "").strip()
    if not name or not name.lower().endswith(".pdf"):
        return default
    return name


# ============================================================================
# Document Assembler
# ============================================================================

class DocumentAssembler:
    """
    Orchestrates one assembly run at a time.

    A run snapshots the items, preloads every PDF, then copies pages and
    places images strictly in item order. Progress is published after
    every unit. A run either returns the serialized PDF or raises; parsed
    documents are released on every exit path.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        backend: Optional[PyMuPDFBackend] = None
    ):
        self.config = config or get_config()
        self.backend = backend or PyMuPDFBackend()
        self.progress = ProgressReporter()
        self.state = RunState.IDLE
        self.status = RunStatus()
        self.transitions: List[RunState] = []
        self._context: Optional[RunContext] = None

    @property
    def is_running(self) -> bool:
        return self.state is not RunState.IDLE

    def _transition(self, new_state: RunState):
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid run transition {self.state.value} -> {new_state.value}")
        logger.debug(f"Run state {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.transitions.append(new_state)

    async def assemble(
        self,
        items: Iterable[Item],
        output_name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> Optional[AssemblyResult]:
        """
        Build one PDF from the given items.

        Args:
            items: Working set (or any iterable of items), in output order
            output_name: Requested filename, normalized at finalization
            on_progress: Called with the integer percentage after every unit

        Returns:
            AssemblyResult, or None when the request was ignored because a
            run is already active or there is nothing to assemble

        Raises:
            AssemblyError: On any failure; no partial output is returned
        """
        if self.is_running:
            logger.warning("Assembly already in progress, ignoring request")
            return None

        snapshot = tuple(items)
        if not snapshot:
            logger.info("No items to assemble")
            return None

        self.transitions = []
        self._transition(RunState.PRELOADING)
        self.progress.reset()
        self.status = RunStatus("Processing…", "info")
        unsubscribe = self.progress.subscribe(on_progress) if on_progress else None
        start_time = time.time()
        output = None

        try:
            self._context = await preload_documents(snapshot, self.backend)
            plan = WorkPlan(items=snapshot, total_units=count_units(snapshot, self._context))
            if plan.total_units == 0:
                raise ParseFailureError("The selected PDFs contain no pages")
            logger.info(f"Assembling {len(snapshot)} item(s), {plan.total_units} unit(s)")

            self._transition(RunState.ASSEMBLING)
            output = self._create_output()
            for item in plan.items:
                if item.kind is ItemKind.PDF:
                    self._copy_pages(output, item, plan)
                else:
                    await self._place_image(output, item, plan)

            self._transition(RunState.FINALIZING)
            filename = normalize_output_name(output_name, self.config.output.default_name)
            page_count = output.page_count
            data = self._serialize(output)

            self._transition(RunState.SUCCEEDED)
            self.status = RunStatus(f"Created PDF from {len(snapshot)} item(s).", "success")
            elapsed = time.time() - start_time
            logger.info(f"Created {filename}: {page_count} page(s), {len(data)} bytes in {elapsed:.2f}s")
            return AssemblyResult(
                data=data,
                filename=filename,
                item_count=len(snapshot),
                page_count=page_count,
            )

        except AssemblyError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise AssemblyError(str(e)) from e

        finally:
            if output is not None:
                output.close()
            if self._context is not None:
                self._context.close()
                self._context = None
            if unsubscribe is not None:
                unsubscribe()
            self.progress.reset()
            if self.state not in (RunState.SUCCEEDED, RunState.FAILED):
                self._transition(RunState.FAILED)
                self.status = RunStatus("Failed to create PDF. Ensure files are valid.", "danger")
            self._transition(RunState.IDLE)

    def assemble_sync(
        self,
        items: Iterable[Item],
        output_name: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> Optional[AssemblyResult]:
        """Run assemble() on a fresh event loop."""
        return asyncio.run(self.assemble(items, output_name, on_progress))

    def _fail(self, error: Exception):
        logger.error(f"Assembly failed: {error}")
        self._transition(RunState.FAILED)
        self.status = RunStatus("Failed to create PDF. Ensure files are valid.", "danger")

    def _create_output(self) -> OutputDocument:
        output = self.backend.create_document()
        meta = self.config.output
        output.set_metadata(
            title=meta.title,
            author=meta.author,
            producer=meta.producer,
            creator=meta.creator,
            created=datetime.now(),
        )
        return output

    def _unit_completed(self, plan: WorkPlan):
        completed = plan.complete_unit()
        self.progress.unit_completed(completed, plan.total_units)

    def _copy_pages(self, output: OutputDocument, item: Item, plan: WorkPlan):
        """Append every page of a preloaded PDF in its original order."""
        source = self._context.document(item.id)
        for index in source.page_indices:
            try:
                output.copy_page(source, index)
            except (RuntimeError, ValueError) as e:
                raise AssemblyError(
                    f"Could not copy page {index + 1} of {item.name}: {e}",
                    item_name=item.name
                ) from e
            self._unit_completed(plan)
        logger.debug(f"Copied {source.page_count} page(s) from {item.name}")

    async def _place_image(self, output: OutputDocument, item: Item, plan: WorkPlan):
        """Put one image on a new page sized and oriented for it."""
        image_format = "PNG" if item.extension == ".png" else "JPEG"
        try:
            data = await asyncio.to_thread(item.read_bytes)
            image = output.embed_image(data, image_format)
            layout = compute_image_layout(
                image.width,
                image.height,
                page_size=self.config.page.dimensions,
                margin=self.config.page.margin
            )
            page = output.add_page(layout.page_width, layout.page_height)
            output.draw_image(page, image, layout.x, layout.y, layout.width, layout.height)
        except (OSError, RuntimeError, ValueError) as e:
            raise EmbedFailureError(f"Could not place image {item.name}: {e}", item_name=item.name) from e

        logger.debug(
            f"Placed {item.name} ({image.width}x{image.height}) at scale {layout.scale:.3f}"
            f"{' landscape' if layout.landscape else ''}"
        )
        self._unit_completed(plan)

    def _serialize(self, output: OutputDocument) -> bytes:
        try:
            return output.serialize()
        except (OSError, RuntimeError, ValueError) as e:
            raise SerializationFailureError(f"Could not write PDF: {e}") from e
