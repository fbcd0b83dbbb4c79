"""Taxonomy seeding from path notation.

Each line names one node by its full path, parents first:

    Electronics
    Electronics > Computers
    Electronics > Computers > Laptops

Lines may carry a Google Product Taxonomy style ID prefix ("328 - ...");
the ID is ignored since node IDs are assigned by the database.
Blank lines and lines starting with "#" are skipped.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from storeadmin.catalog.service import TaxonomyService
from storeadmin.domain.exceptions import DuplicateSlugError

logger = structlog.get_logger()

PATH_SEPARATOR = ">"

EMBEDDED_TAXONOMY = """
# Demo storefront taxonomy
Електроніка
Електроніка > Ноутбуки
Електроніка > Смартфони
Електроніка > Аудіо
Електроніка > Аудіо > Навушники
Home & Garden
Home & Garden > Kitchen & Dining
Home & Garden > Home Decor
Apparel & Accessories
Apparel & Accessories > Clothing
Apparel & Accessories > Clothing > Outerwear
Apparel & Accessories > Shoes
Sporting Goods
Sporting Goods > Exercise & Fitness
Toys & Games
Toys & Games > Board Games
""".strip()


@dataclass(frozen=True)
class SeedEntry:
    """A node to seed.

    Attributes:
        name: Node name (last path part).
        path: Full path parts from root to this node.
    """

    name: str
    path: tuple[str, ...]

    @property
    def parent_path(self) -> tuple[str, ...]:
        """Path parts of the parent node (empty for roots)."""
        return self.path[:-1]

    @property
    def level(self) -> int:
        """Depth in the tree (1 = root)."""
        return len(self.path)


@dataclass
class SeedResult:
    """Counts from one seeding run."""

    created: int = 0
    existing: int = 0
    skipped: int = 0


def parse_lines(lines: Iterable[str]) -> list[SeedEntry]:
    """Parse path-notation lines into seed entries.

    Missing intermediate parents are added, duplicates are dropped, and the
    result is ordered so every parent comes before its children.

    Args:
        lines: Raw lines.

    Returns:
        Entries sorted by level, then input order.
    """
    seen: dict[tuple[str, ...], SeedEntry] = {}

    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        id_part, sep, rest = line.partition(" - ")
        if sep and id_part.strip().isdigit():
            line = rest

        parts = tuple(p.strip() for p in line.split(PATH_SEPARATOR) if p.strip())
        for depth in range(1, len(parts) + 1):
            path = parts[:depth]
            if path not in seen:
                seen[path] = SeedEntry(name=path[-1], path=path)

    order = {path: i for i, path in enumerate(seen)}
    return sorted(seen.values(), key=lambda e: (e.level, order[e.path]))


def parse_embedded() -> list[SeedEntry]:
    """Parse the embedded demo taxonomy."""
    return parse_lines(EMBEDDED_TAXONOMY.splitlines())


def parse_file(path: str | Path) -> list[SeedEntry]:
    """Parse a taxonomy file.

    Args:
        path: Path to a UTF-8 text file.

    Returns:
        Seed entries.
    """
    with open(path, encoding="utf-8") as f:
        return parse_lines(f.readlines())


async def seed_taxonomy(service: TaxonomyService, entries: Iterable[SeedEntry]) -> SeedResult:
    """Create missing nodes, reusing existing ones with the same name and parent.

    Entries whose slug belongs to a node elsewhere in the tree are skipped
    along with their descendants.

    Args:
        service: Taxonomy service for the target tree.
        entries: Entries ordered parents first.

    Returns:
        Seeding counts.
    """
    result = SeedResult()
    ids: dict[tuple[str, ...], int] = {}

    for entry in entries:
        parent_id = None
        if entry.parent_path:
            parent_id = ids.get(entry.parent_path)
            if parent_id is None:
                result.skipped += 1
                continue

        existing = await service.repository.find_by_name(entry.name, parent_id)
        if existing is not None:
            ids[entry.path] = existing.id
            result.existing += 1
            continue

        try:
            record = await service.create(entry.name, parent_id=parent_id)
        except DuplicateSlugError as e:
            logger.warning("Seed entry skipped", path=" > ".join(entry.path), reason=e.message)
            result.skipped += 1
            continue
        ids[entry.path] = record.id
        result.created += 1

    return result
