"""
Input items and classification for the PDF combine pipeline.

Provides:
- InputFile: a caller-supplied blob (in memory or on disk)
- Item: an accepted input with a stable id and a kind
- Classification by declared MIME type and filename
- WorkingSet: the ordered, user-curated list of items
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..config import PDF_MIME_TYPE, IMAGE_MIME_TYPES, PDF_EXTENSIONS, IMAGE_EXTENSIONS
from .errors import NoSupportedFilesError

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes and Enums
# ============================================================================

class ItemKind(Enum):
    """Kinds of accepted inputs."""
    PDF = "pdf"
    IMAGE = "image"


@dataclass
class InputFile:
    """A candidate input as handed over by the caller."""
    name: str
    mime_type: str = ""
    data: Optional[bytes] = field(default=None, repr=False)
    path: Optional[Path] = None

    def __post_init__(self):
        if self.data is None and self.path is None:
            raise ValueError(f"InputFile {self.name!r} needs either data or a path")
        if self.path is not None:
            self.path = Path(self.path)

    @property
    def size_bytes(self) -> int:
        if self.data is not None:
            return len(self.data)
        return self.path.stat().st_size

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        return self.path.read_bytes()


@dataclass(frozen=True)
class Item:
    """An accepted input in the working set."""
    id: str
    kind: ItemKind
    name: str
    size_bytes: int
    source: InputFile = field(repr=False, compare=False)

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    def read_bytes(self) -> bytes:
        """Return the raw content from the original input."""
        return self.source.read_bytes()

    @classmethod
    def from_input(cls, source: InputFile, kind: ItemKind) -> 'Item':
        size = source.size_bytes
        return cls(
            id=f"{source.name}-{size}-{uuid.uuid4().hex[:10]}",
            kind=kind,
            name=source.name,
            size_bytes=size,
            source=source,
        )


# ============================================================================
# Classification
# ============================================================================

def classify_file(name: str, mime_type: str = "") -> Optional[ItemKind]:
    """
    Decide the kind of an input from its declared MIME type and name.

    The declared type wins when it is exact; otherwise the extension decides.
    PDF checks run before image checks. File contents are never read.

    Args:
        name: Filename (only the extension is inspected)
        mime_type: Declared MIME type, may be empty or wrong

    Returns:
        ItemKind, or None when the input is not supported
    """
    name = (name or "").lower()
    mime_type = (mime_type or "").strip().lower()

    if mime_type == PDF_MIME_TYPE or name.endswith(PDF_EXTENSIONS):
        return ItemKind.PDF
    if mime_type in IMAGE_MIME_TYPES or name.endswith(IMAGE_EXTENSIONS):
        return ItemKind.IMAGE
    return None


def classify_files(files: Iterable[InputFile]) -> List[Item]:
    """
    Classify a batch of candidates, keeping accepted ones in order.

    Args:
        files: Candidate inputs

    Returns:
        Accepted items in original relative order (empty for no candidates)

    Raises:
        NoSupportedFilesError: If there were candidates but none was accepted
    """
    files = list(files)
    accepted = []
    for source in files:
        kind = classify_file(source.name, source.mime_type)
        if kind is None:
            logger.debug(f"Skipping unsupported file: {source.name} ({source.mime_type or 'no type'})")
            continue
        accepted.append(Item.from_input(source, kind))

    if files and not accepted:
        raise NoSupportedFilesError(rejected_count=len(files))

    logger.info(f"Accepted {len(accepted)} of {len(files)} file(s)")
    return accepted


# ============================================================================
# Working Set
# ============================================================================

class WorkingSet:
    """
    Ordered list of items; list order is output order.

    The list belongs to the caller. Assembly runs take a snapshot and
    never see later mutations.
    """

    def __init__(self, items: Optional[Iterable[Item]] = None):
        self._items: List[Item] = []
        for item in items or ():
            self._append(item)

    def _append(self, item: Item):
        if any(existing.id == item.id for existing in self._items):
            raise ValueError(f"Duplicate item id: {item.id}")
        self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __getitem__(self, index: int) -> Item:
        return self._items[index]

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    def add_files(self, files: Iterable[InputFile]) -> List[Item]:
        """Classify candidates and append the accepted ones."""
        added = classify_files(files)
        for item in added:
            self._append(item)
        return added

    def remove(self, index: int) -> Optional[Item]:
        if index < 0 or index >= len(self._items):
            return None
        return self._items.pop(index)

    def move(self, from_index: int, to_index: int):
        """Move one item; out-of-range targets are ignored."""
        if from_index < 0 or from_index >= len(self._items):
            return
        if to_index < 0 or to_index >= len(self._items) or from_index == to_index:
            return
        moved = self._items.pop(from_index)
        self._items.insert(to_index, moved)

    def clear(self):
        self._items = []

    def snapshot(self) -> Tuple[Item, ...]:
        return tuple(self._items)
