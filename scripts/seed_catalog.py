"""Seed the competence catalog and its Swedish translations.

Safe to run repeatedly: competences that already exist are left untouched.

Usage:
    python -m scripts.seed_catalog
"""

import asyncio
import logging

from recruitment.config import get_settings
from recruitment.main import seed_competences, seed_roles
from recruitment.models.base import Database

# Competence id -> (canonical English name, translations)
COMPETENCE_CATALOG = {
    1: ("ticket sales", {"sv": "biljettförsäljning"}),
    2: ("lotteries", {"sv": "lotterier"}),
    3: ("roller coaster operation", {"sv": "berg- och dalbanedrift"}),
}


async def main():
    db = Database.from_settings(get_settings())
    try:
        await seed_roles(db)
        added = await seed_competences(db, COMPETENCE_CATALOG)
        print(f"Added {added} competences ({len(COMPETENCE_CATALOG) - added} already present)")
    finally:
        await db.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
