import asyncio

from app.database.db import engine, init_db


async def create_tables():
    await init_db(engine)
    await engine.dispose()
    print("Tables created successfully.")

if __name__ == "__main__":
    asyncio.run(create_tables())
