import asyncio
import logging

from config.logging import setup_logging
from services.database import AsyncSessionLocal, close_db, init_db
from services.loader import load_sample_data

logger = logging.getLogger(__name__)


async def main() -> None:
    await init_db()
    try:
        async with AsyncSessionLocal() as session:
            if not await load_sample_data(session):
                logger.warning("Database already holds data; nothing seeded.")
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
