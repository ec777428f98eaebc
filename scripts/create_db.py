"""
Create the PostgreSQL database named in DATABASE_URL, then its tables.

Run from the repository root:

    python scripts/create_db.py
"""
import asyncio
import os
import sys

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'backend', 'src'))

from core.config import settings
from core.database import init_db, close_db


async def create_database():
    # Connect to the maintenance database to create the target one
    db_url = settings.DATABASE_URL
    base_url = db_url.rsplit('/', 1)[0] + '/postgres'
    target_db = db_url.rsplit('/', 1)[1].split('?', 1)[0]

    print(f"Connecting to {base_url} to create {target_db}...")

    engine = create_async_engine(base_url, isolation_level="AUTOCOMMIT")

    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": target_db},
            )
            if result.scalar():
                print(f"Database {target_db} already exists.")
            else:
                print(f"Creating database {target_db}...")
                await conn.execute(text(f'CREATE DATABASE "{target_db}"'))
                print(f"Database {target_db} created successfully!")
    finally:
        await engine.dispose()

    await init_db()
    await close_db()
    print("Tables created.")


if __name__ == "__main__":
    asyncio.run(create_database())
