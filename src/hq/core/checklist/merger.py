"""
Section merging for parsed checklists.

Groups checklist items into sections keyed by a normalized slug, merges
same-slug sections coming from different documents, and assigns the
"current" pointers:

- section.current: the first section (in merge order) that is not done
- section.current_index: the first undone item whose predecessors are done
"""

import re
from collections.abc import Iterable

from hq.core.checklist.models import ChecklistItem, Section

SLUG_MAX_LENGTH = 50


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """
    Normalize a label into a grouping key.

    Labels differing only in case or punctuation collide on purpose.

    Example:
        >>> slugify("Phase 1: Core!")
        'phase-1-core'
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def group_by_section(items: Iterable[ChecklistItem]) -> list[tuple[str, list[ChecklistItem]]]:
    """Group one document's items by section label, in first-seen order."""
    groups: dict[str, list[ChecklistItem]] = {}
    for item in items:
        groups.setdefault(item.section, []).append(item)
    return list(groups.items())


def frontier_index(items: list[ChecklistItem]) -> int | None:
    """Index of the first undone item when every earlier item is done."""
    for index, item in enumerate(items):
        if not item.done:
            return index
    return None


def merge_sections(groups: Iterable[tuple[str, list[ChecklistItem]]]) -> list[Section]:
    """
    Merge (label, items) groups into deduplicated sections.

    Groups whose labels slugify to the same key are combined: later items
    are appended unless their exact text is already in the section.

    Args:
        groups: Ordered (section label, items) pairs, possibly spanning
            several source documents.

    Returns:
        Sections in first-seen order with current pointers assigned.
    """
    merged: dict[str, Section] = {}

    for label, items in groups:
        slug = slugify(label) or "untitled"
        section = merged.get(slug)
        if section is None:
            section = Section(name=label, slug=slug)
            merged[slug] = section

        existing = {item.text for item in section.items}
        for item in items:
            if item.text in existing:
                continue
            section.items.append(item)
            existing.add(item.text)
            if item.source and item.source not in section.sources:
                section.sources.append(item.source)

    sections = [section for section in merged.values() if section.items]

    current_assigned = False
    for section in sections:
        section.current_index = frontier_index(section.items)
        if not current_assigned and not section.done:
            section.current = True
            current_assigned = True

    return sections
