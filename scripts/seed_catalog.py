#!/usr/bin/env python3
"""Seed taxonomy script.

Creates category and/or search tree nodes from path-notation text,
either the embedded demo taxonomy or a file.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --tree search-tree
    python scripts/seed_catalog.py --tree both --file taxonomy.txt
"""

import argparse
import asyncio

from storeadmin.catalog.seed import SeedEntry, SeedResult, parse_embedded, parse_file, seed_taxonomy
from storeadmin.catalog.service import CATEGORY, SEARCH_TREE, TaxonomyKind, TaxonomyService
from storeadmin.infrastructure.config import settings
from storeadmin.infrastructure.database import async_session_factory, create_tables
from storeadmin.infrastructure.logging import configure_logging

TREES = {
    "categories": [CATEGORY],
    "search-tree": [SEARCH_TREE],
    "both": [CATEGORY, SEARCH_TREE],
}


async def seed_tree(kind: TaxonomyKind, entries: list[SeedEntry]) -> SeedResult:
    """Seed one taxonomy.

    Args:
        kind: Target taxonomy.
        entries: Entries ordered parents first.

    Returns:
        Seeding result.
    """
    async with async_session_factory() as session:
        service = TaxonomyService(session, kind)
        return await seed_taxonomy(service, entries)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed category and search tree taxonomies",
    )
    parser.add_argument(
        "--tree",
        choices=sorted(TREES),
        default="categories",
        help="Which taxonomy to seed (default: categories)",
    )
    parser.add_argument(
        "--file",
        help="Path-notation taxonomy file (default: embedded demo taxonomy)",
    )
    parser.add_argument(
        "--no-create-tables",
        action="store_true",
        help="Don't create missing tables before seeding",
    )

    args = parser.parse_args()
    configure_logging(settings)

    entries = parse_file(args.file) if args.file else parse_embedded()

    print("=" * 60)
    print("Storefront Taxonomy Seeder")
    print("=" * 60)
    print(f"Source: {args.file or 'embedded'} ({len(entries)} nodes)")
    print()

    if not args.no_create_tables:
        print("Creating database tables...")
        await create_tables()
        print("Tables ready.")
        print()

    for kind in TREES[args.tree]:
        print(f"Seeding {kind.entity_type.lower()} taxonomy...")
        result = await seed_tree(kind, entries)
        print(f"  Created: {result.created}")
        print(f"  Existing: {result.existing}")
        print(f"  Skipped: {result.skipped}")
        print()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
