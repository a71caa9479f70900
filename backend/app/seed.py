"""Master Data Seeder — `python -m app.seed` inserts built-in catalog rows.

Invariants:
    - Idempotent: only missing natural keys are inserted
    - Uses its own session factory (no FastAPI app, no lifespan)
"""

import asyncio
import logging

from app.config import get_settings
from app.db.session import create_session_factory
from app.infrastructure.observability import setup_logging
from app.services.catalog_service import seed_master_data

logger = logging.getLogger(__name__)


async def run(database_url: str) -> dict[str, int]:
    factory = create_session_factory(database_url)
    try:
        async with factory() as db:
            return await seed_master_data(db)
    finally:
        await factory.kw["bind"].dispose()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    inserted = asyncio.run(run(settings.database_url))
    for slug, count in inserted.items():
        logger.info(f"{slug}: {count} inserted")


if __name__ == "__main__":
    main()
