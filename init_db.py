"""Create the database tables; pass --seed to load the demo suppliers"""
import asyncio
import sys

from chanakya.database import AsyncSessionLocal, create_tables, dispose_engine
from chanakya.main import seed_demo_suppliers


async def init(seed: bool = False):
    await create_tables()
    print("Database tables created successfully.")

    if seed:
        async with AsyncSessionLocal() as session:
            added = await seed_demo_suppliers(session)
        print(f"Seeded {added} demo suppliers." if added else "Suppliers already present, nothing seeded.")

    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(init(seed="--seed" in sys.argv[1:]))
