# bookstore/cli/create_tables.py
import asyncio

import click

from bookstore.database import Base, build_engine

# Import all models to ensure they're registered with the Base
import bookstore.models  # noqa: F401


async def _create_tables(database_url: str = None, drop: bool = False):
    engine = build_engine(database_url)
    try:
        async with engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
            # This will create all tables defined in models that inherit from Base
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


@click.command("create-tables")
@click.option("--database-url", default=None, help="Override DATABASE_URL from settings.")
@click.option("--drop", is_flag=True, help="Drop existing tables first.")
def create_tables(database_url, drop):
    """Create all database tables directly using SQLAlchemy"""
    asyncio.run(_create_tables(database_url, drop))
    click.echo("All tables created successfully!")


if __name__ == "__main__":
    create_tables()
