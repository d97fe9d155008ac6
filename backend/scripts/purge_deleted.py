"""Physically remove soft-deleted products.

Rows are removed in a single transaction; either all matching rows go or
none do.

Environment Variables:
    PURGE_OLDER_THAN_DAYS: Only purge products deleted at least this many
        days ago (default: 30, 0 purges every soft-deleted product)

Usage:
    cd backend && uv run python -m scripts.purge_deleted
"""

import asyncio
import os
from datetime import datetime, timedelta

from shopcatalog.core.config import settings
from shopcatalog.core.database import build_engine, build_session_maker
from shopcatalog.services.product_mutation_service import ProductMutationService

PURGE_OLDER_THAN_DAYS = int(os.getenv("PURGE_OLDER_THAN_DAYS", "30"))


async def main():
    print("=" * 60)
    print("Purging soft-deleted products...")
    print("=" * 60)

    older_than = None
    if PURGE_OLDER_THAN_DAYS > 0:
        # deleted_at is TIMESTAMP WITHOUT TIME ZONE, written by NOW()
        older_than = datetime.now() - timedelta(days=PURGE_OLDER_THAN_DAYS)
        print(f"  Cutoff: deleted before {older_than.isoformat(timespec='seconds')}")

    engine = build_engine(settings)
    session_maker = build_session_maker(engine)

    try:
        async with session_maker() as session:
            service = ProductMutationService(session)
            removed = await service.purge_deleted(older_than=older_than)
            print(f"  Removed {removed} products")
    finally:
        await engine.dispose()

    print("=" * 60)
    print("Purge complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
