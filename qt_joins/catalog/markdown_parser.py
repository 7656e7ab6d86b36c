"""Extracts query catalog entries from the markdown tutorial.

Format:
- every ``##`` or ``###`` heading opens a section; the heading text is the
  business question
- fenced ```sql blocks in a section are the queries; the prose line just
  before a block says which schema it targets ("normalized" or
  "denormalized"); unlabelled blocks are taken in order
- prose saying the question "cannot be performed on the denormalized
  schema" marks the entry as not representable there
- ``<!-- ordering: ignore -->`` / ``<!-- ordering: strict -->`` overrides
  ORDER BY detection for the section
- sections without SQL (introductions, notes) are skipped
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..errors import CatalogError
from .schemas import CatalogEntry, QueryCatalog

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).resolve().parent / "data" / "supermarket_joins.md"

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
FENCE_RE = re.compile(r"^\s*(```|~~~)\s*([\w+-]*)\s*$")
NUMBER_PREFIX_RE = re.compile(r"^\d+[.)]\s*")
DENORMALIZED_RE = re.compile(r"\bdenormali[sz]ed\b", re.IGNORECASE)
NORMALIZED_RE = re.compile(r"\bnormali[sz]ed\b", re.IGNORECASE)
NOT_REPRESENTABLE_RE = re.compile(
    r"cannot\s+be\s+(?:performed|answered|expressed|represented)\s+"
    r"(?:on|with|in|against)\s+the\s+denormali[sz]ed",
    re.IGNORECASE,
)
ORDERING_RE = re.compile(r"<!--\s*ordering:\s*(ignore|strict)\s*-->", re.IGNORECASE)
COMMENT_RE = re.compile(r"<!--.*?-->")

NORMALIZED = "normalized"
DENORMALIZED = "denormalized"


@dataclass
class _SqlBlock:
    sql: str
    label: Optional[str]
    line: int


@dataclass
class _Section:
    question: str
    line: int
    prose: List[str] = field(default_factory=list)
    blocks: List[_SqlBlock] = field(default_factory=list)
    description: List[str] = field(default_factory=list)


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated identifier for a heading."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "entry"


def _label_for(prose_line: str) -> Optional[str]:
    if DENORMALIZED_RE.search(prose_line):
        return DENORMALIZED
    if NORMALIZED_RE.search(prose_line):
        return NORMALIZED
    return None


def _split_sections(text: str) -> List[_Section]:
    sections: List[_Section] = []
    current: Optional[_Section] = None
    last_prose = ""

    fence: Optional[str] = None
    fence_lang = ""
    fence_start = 0
    fence_lines: List[str] = []

    for line_no, line in enumerate(text.splitlines(), start=1):
        fence_match = FENCE_RE.match(line)

        if fence is not None:
            if fence_match and fence_match.group(1) == fence and not fence_match.group(2):
                if fence_lang == "sql" and current is not None:
                    current.blocks.append(
                        _SqlBlock(
                            sql="\n".join(fence_lines).strip(),
                            label=_label_for(last_prose),
                            line=fence_start,
                        )
                    )
                    last_prose = ""
                fence = None
                fence_lines = []
            else:
                fence_lines.append(line)
            continue

        if fence_match:
            fence = fence_match.group(1)
            fence_lang = fence_match.group(2).lower()
            fence_start = line_no
            continue

        heading = HEADING_RE.match(line)
        level = len(heading.group(1)) if heading else 0
        if level in (1, 2, 3):
            current = None
            if level > 1:
                question = NUMBER_PREFIX_RE.sub("", heading.group(2)).strip()
                current = _Section(question=question, line=line_no)
                sections.append(current)
            last_prose = ""
            continue

        stripped = line.strip()
        if current is None or not stripped:
            continue
        current.prose.append(stripped)
        visible = COMMENT_RE.sub("", stripped).strip()
        if visible:
            # The not-representable note names the denormalized schema but
            # does not label the block after it
            last_prose = "" if NOT_REPRESENTABLE_RE.search(visible) else visible
            if not current.blocks:
                current.description.append(visible)

    if fence is not None:
        raise CatalogError(f"unterminated code fence opened on line {fence_start}")

    return sections


def _assign_blocks(section: _Section) -> tuple[str, Optional[str]]:
    if len(section.blocks) > 2:
        raise CatalogError(
            f"section '{section.question}' (line {section.line}) has "
            f"{len(section.blocks)} SQL blocks, expected at most 2"
        )

    slots: dict[str, Optional[str]] = {NORMALIZED: None, DENORMALIZED: None}
    unlabelled: List[_SqlBlock] = []
    for block in section.blocks:
        if block.label is None:
            unlabelled.append(block)
        elif slots[block.label] is not None:
            raise CatalogError(
                f"section '{section.question}' has two {block.label} queries "
                f"(second on line {block.line})"
            )
        else:
            slots[block.label] = block.sql

    for block in unlabelled:
        role = NORMALIZED if slots[NORMALIZED] is None else DENORMALIZED
        slots[role] = block.sql

    if slots[NORMALIZED] is None:
        raise CatalogError(
            f"section '{section.question}' (line {section.line}) has no normalized query"
        )

    return slots[NORMALIZED], slots[DENORMALIZED]


def parse_catalog(text: str, source: str = "<string>") -> QueryCatalog:
    """Parse markdown text into a QueryCatalog.

    A section whose SQL blocks cannot be assigned (too many blocks, two
    blocks for one schema, no normalized block) still yields an entry; its
    ``parse_error`` is set and the validator reports it as an error.

    Args:
        text: Markdown content.
        source: Label recorded on the catalog (usually the file path).

    Returns:
        QueryCatalog with entries in document order.

    Raises:
        CatalogError: Unterminated code fence.
    """
    catalog = QueryCatalog(source=source)
    seen: dict[str, int] = {}

    for section in _split_sections(text):
        if not section.blocks:
            continue

        parse_error = None
        try:
            normalized_sql, denormalized_sql = _assign_blocks(section)
        except CatalogError as e:
            logger.warning("%s: %s", source, e)
            parse_error = str(e)
            normalized_sql, denormalized_sql = section.blocks[0].sql, None

        prose = " ".join(section.prose)
        ordering_match = ORDERING_RE.search(prose)
        ordering = None
        if ordering_match:
            ordering = ordering_match.group(1).lower() == "strict"

        base_id = slugify(section.question)
        seen[base_id] = seen.get(base_id, 0) + 1
        entry_id = base_id if seen[base_id] == 1 else f"{base_id}-{seen[base_id]}"

        catalog.entries.append(
            CatalogEntry(
                entry_id=entry_id,
                question=section.question,
                normalized_sql=normalized_sql,
                denormalized_sql=denormalized_sql,
                expect_equivalent=NOT_REPRESENTABLE_RE.search(prose) is None,
                ordering=ordering,
                description=" ".join(section.description),
                line=section.line,
                parse_error=parse_error,
            )
        )

    logger.info("Parsed %d catalog entries from %s", len(catalog), source)
    return catalog


def load_catalog(path: Optional[str | Path] = None) -> QueryCatalog:
    """Load a markdown catalog, or the bundled tutorial when no path is given.

    Raises:
        CatalogError: File missing/unreadable or malformed.
    """
    catalog_path = Path(path) if path is not None else BUNDLED_CATALOG
    if not catalog_path.exists():
        raise CatalogError("file not found", path=catalog_path)

    try:
        text = catalog_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(str(e), path=catalog_path) from e

    try:
        return parse_catalog(text, source=str(catalog_path))
    except CatalogError as e:
        if e.path is None:
            raise CatalogError(str(e), path=catalog_path) from e
        raise
