"""
Data models for checklist extraction.

Defines the dataclasses flowing through the parse -> merge pipeline.
Storage models for the dashboard document live in hq.core.store.models.
"""

from dataclasses import dataclass, field


@dataclass
class ChecklistItem:
    """
    A single checklist line parsed from a markdown document.

    Produced by the parser in source order; carries the heading it
    appeared under so the merger can group it.
    """

    text: str
    """Trimmed task text after the checkbox."""

    done: bool
    """True when the box is checked ([x] or [X])."""

    section: str
    """Heading the item appeared under (or the filename-derived label)."""

    source: str = ""
    """Path of the document the item was read from."""

    line: int = 0
    """1-based line number in the source document."""


@dataclass
class Section:
    """
    A named group of checklist items, possibly merged from several documents.

    `current` and `current_index` are assigned by merge_sections().
    """

    name: str
    slug: str
    items: list[ChecklistItem] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    current: bool = False
    current_index: int | None = None
    """Index of the frontier item (first undone with all predecessors done)."""

    @property
    def done(self) -> bool:
        """A section is done when every item in it is done."""
        return all(item.done for item in self.items)

    @property
    def done_count(self) -> int:
        return sum(1 for item in self.items if item.done)

    @property
    def source(self) -> str:
        """Originating paths, comma-joined when merged."""
        return ", ".join(self.sources)
