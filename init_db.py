"""Create the opt-in, analytics and pairing copy tables

Usage:
    python init_db.py           # create missing tables
    python init_db.py --reset   # drop and recreate (loses stored opt-ins)
"""
import argparse
import asyncio

from menu_backend.database import engine, Base, create_tables, database_url
from menu_backend.models import OptIn, AnalyticsEvent, PairingDescription  # noqa: F401


async def init(reset: bool = False):
    await create_tables(reset=reset)
    await engine.dispose()
    tables = ", ".join(sorted(Base.metadata.tables))
    print(f"Tables ready on {database_url}: {tables}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--reset", action="store_true", help="drop existing tables first")
    args = parser.parse_args()
    asyncio.run(init(reset=args.reset))
