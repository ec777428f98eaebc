"""
Add unique constraint on matches (job_id, candidate_id)

For databases created before the constraint existed. Duplicate pairs are
collapsed first, keeping the most recently updated row.
"""
import asyncio
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), 'backend', 'src'))

from sqlalchemy import text
from core.database import engine


CONSTRAINT_NAME = "uq_matches_job_candidate"


async def add_unique_constraint():
    """Add unique constraint on matches table for (job_id, candidate_id)"""
    async with engine.begin() as conn:
        try:
            result = await conn.execute(
                text("""
                SELECT constraint_name
                FROM information_schema.table_constraints
                WHERE table_name = 'matches'
                AND constraint_type = 'UNIQUE'
                AND constraint_name = :name;
                """),
                {"name": CONSTRAINT_NAME},
            )
            if result.fetchone():
                print("Unique constraint already exists.")
                return

            print("Removing duplicate matches...")
            result = await conn.execute(text("""
                DELETE FROM matches
                WHERE id NOT IN (
                    SELECT DISTINCT ON (job_id, candidate_id) id
                    FROM matches
                    ORDER BY job_id, candidate_id, updated_at DESC
                );
            """))
            print(f"Deleted {result.rowcount} duplicate matches")

            print("Adding unique constraint...")
            await conn.execute(text(f"""
                ALTER TABLE matches
                ADD CONSTRAINT {CONSTRAINT_NAME}
                UNIQUE (job_id, candidate_id);
            """))

            print("Unique constraint added successfully")

        except Exception as e:
            print(f"Error: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(add_unique_constraint())
