"""
Markdown checklist parser.

Scans markdown line by line and yields checklist items tagged with the
heading they appeared under. Two syntaxes are recognized:

- Bullet checklists: ``- [ ] text``, ``* [x] text``, ``- [X] text``
- Table rows with a checkbox status cell (opt-in, used by the migrator):
  ``| 3 | Task name | M | [x] | notes |``

Malformed lines are skipped silently; empty content yields nothing.
"""

import re
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from hq.core.checklist.models import ChecklistItem

HEADING_PATTERN = re.compile(r"^(#{1,3})\s+(.+)")
BULLET_PATTERN = re.compile(r"^\s*[-*]\s*\[([ xX])\]\s*(.+)")
STATUS_CELL_PATTERN = re.compile(r"^\[([ xX])\]$")
DIVIDER_PATTERN = re.compile(r"^[-:\s]+$")

# Column holding the task name in PRD tables: | # | Task | Complexity | [x] | Notes |
DEFAULT_NAME_COLUMN = 1


def default_section_label(source: str) -> str:
    """
    Derive a section label from a source filename.

    Example:
        >>> default_section_label("docs/tweet-carousel_prd.md")
        'tweet carousel prd'
    """
    name = PurePosixPath(source.replace("\\", "/")).name
    name = re.sub(r"\.md$", "", name, flags=re.IGNORECASE)
    return name.replace("-", " ").replace("_", " ")


def _parse_table_row(line: str, name_column: int) -> tuple[str, bool] | None:
    """Return (name, done) for a table row with a checkbox cell, else None."""
    stripped = line.strip()
    if not stripped.startswith("|"):
        return None

    cells = [cell.strip() for cell in stripped.strip("|").split("|")]
    status: bool | None = None
    for cell in cells:
        if match := STATUS_CELL_PATTERN.match(cell):
            status = match.group(1).lower() == "x"
            break
    if status is None or name_column >= len(cells):
        return None

    name = cells[name_column]
    if not name or DIVIDER_PATTERN.match(name) or name.lower() == "task":
        return None
    if STATUS_CELL_PATTERN.match(name):
        return None
    return name, status


def parse_checklist(
    content: str,
    source: str,
    *,
    tables: bool = False,
    name_column: int = DEFAULT_NAME_COLUMN,
    min_heading_level: int = 1,
    require_heading: bool = False,
) -> Iterator[ChecklistItem]:
    """
    Parse checklist items out of markdown content.

    This is a generator: items are produced lazily, in input line order.

    Args:
        content: Raw markdown text.
        source: Path or label of the document (used for the default section).
        tables: Also recognize table rows carrying a checkbox status cell.
        name_column: Table column index holding the task name.
        min_heading_level: Headings shallower than this (e.g. ``#`` when 2)
            do not start a section.
        require_heading: Drop items that appear before any section heading.

    Yields:
        ChecklistItem for each recognized checklist line.

    Example:
        >>> items = list(parse_checklist("## Phase 1\\n- [x] A\\n- [ ] B", "ROADMAP.md"))
        >>> [(i.text, i.done, i.section) for i in items]
        [('A', True, 'Phase 1'), ('B', False, 'Phase 1')]
    """
    section: str | None = None
    fallback = default_section_label(source)

    for line_no, line in enumerate(content.splitlines(), start=1):
        heading = HEADING_PATTERN.match(line)
        if heading:
            if len(heading.group(1)) >= min_heading_level:
                section = heading.group(2).strip()
            continue

        label = section if section is not None else (None if require_heading else fallback)

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            if label is None:
                continue
            yield ChecklistItem(
                text=bullet.group(2).strip(),
                done=bullet.group(1).lower() == "x",
                section=label,
                source=source,
                line=line_no,
            )
            continue

        if tables and label is not None:
            row = _parse_table_row(line, name_column)
            if row:
                yield ChecklistItem(
                    text=row[0], done=row[1], section=label, source=source, line=line_no
                )


def parse_checklist_file(path: Path, **kwargs: object) -> list[ChecklistItem]:
    """
    Parse a markdown file from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    content = path.read_text(encoding="utf-8")
    return list(parse_checklist(content, str(path), **kwargs))  # type: ignore[arg-type]
