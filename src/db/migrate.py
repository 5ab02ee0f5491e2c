"""Apply SQL migrations from db/migrations/ in sorted order."""

import asyncio
import glob
import os

import asyncpg
import structlog

from src.config.settings import get_settings
from src.utils.logger import setup_logging

log = structlog.get_logger()


async def run_migrations() -> None:
    pool = await asyncpg.create_pool(get_settings().database_url)
    assert pool is not None

    await pool.execute("""
        CREATE TABLE IF NOT EXISTS _migrations (
            name TEXT PRIMARY KEY,
            applied_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    migration_dir = os.path.join(os.path.dirname(__file__), "migrations")
    for path in sorted(glob.glob(f"{migration_dir}/*.sql")):
        name = os.path.basename(path)
        exists = await pool.fetchval("SELECT 1 FROM _migrations WHERE name = $1", name)
        if exists:
            log.info("migration_skipped", name=name)
            continue
        with open(path) as f:
            sql = f.read()
        async with pool.acquire() as conn, conn.transaction():
            await conn.execute(sql)
            await conn.execute("INSERT INTO _migrations (name) VALUES ($1)", name)
        log.info("migration_applied", name=name)

    await pool.close()
    log.info("migrations_complete")


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run_migrations())
