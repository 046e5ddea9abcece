"""
Script to print the status of every import job
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from core.config import settings
from core.exceptions import ImportStatusException
from core.logging import setup_logging
from imports.factory import create_status_manager

logger = logging.getLogger(__name__)


async def list_imports(check_liveness: bool, as_json: bool):
    """Print enriched statuses for all sites"""

    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    try:
        async with AsyncSessionLocal() as session:
            manager = create_status_manager(session)
            statuses = await manager.get_all_statuses(check_liveness=check_liveness)

            if not statuses:
                logger.info("No imports found.")
                return

            for status in statuses:
                if as_json:
                    print(status.model_dump_json(by_alias=True))
                    continue

                site_name = status.site.name if status.site else "(deleted site)"
                print(
                    f"{status.site_id:>6}  {site_name:<30}  {status.state.value:<12}  "
                    f"last={status.last_date_imported or '-'}  "
                    f"range={status.import_range_start or '-'}..{status.import_range_end or '-'}  "
                    f"eta={status.estimated_days_left_to_finish if status.estimated_days_left_to_finish is not None else '-'}  "
                    f"reimports={len(status.reimport_ranges)}"
                )
    except ImportStatusException as e:
        logger.error(f"Could not list imports: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--check-liveness", action="store_true", help="report jobs without a live worker as killed")
    parser.add_argument("--json", action="store_true", help="one JSON document per line")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(list_imports(args.check_liveness, args.json))
