#!/usr/bin/env python3
"""
Database initialization script
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

DEMO_PROFILES = [
    {"user_id": "00000000-0000-0000-0000-00000000a11c", "full_name": "Alice Adams"},
    {"user_id": "00000000-0000-0000-0000-000000000b0b", "full_name": "Bob Brown"},
]

async def init_database(seed: bool) -> None:
    """Initialize database with tables"""
    from socialfeed.db.session import init_db, close_db
    from socialfeed.config import settings

    print(f"🚀 Initializing database: {settings.database_url}")

    try:
        await init_db()
        print("✅ Database initialized successfully")

        if seed:
            await create_demo_profiles()
    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        sys.exit(1)
    finally:
        await close_db()

async def create_demo_profiles() -> None:
    """Create demo profiles and print access tokens for them"""
    from socialfeed.db.client import DataClient
    from socialfeed.db.session import AsyncSessionLocal
    from socialfeed.models import Profile
    from socialfeed.services.redis_service import RedisService
    from socialfeed.services.session_service import SessionService

    print("👤 Creating demo profiles...")

    session_service = SessionService(RedisService())
    async with AsyncSessionLocal() as db:
        client = DataClient(db)
        for data in DEMO_PROFILES:
            if await client.get(Profile, user_id=data["user_id"]) is None:
                await client.insert(Profile, **data)
                print(f"✅ Created profile: {data['full_name']}")

            token = session_service.create_access_token(
                data["user_id"],
                metadata={"full_name": data["full_name"]}
            )
            print(f"🔑 {data['full_name']}: {token}")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the feed tables")
    parser.add_argument("--seed", action="store_true", help="also create demo profiles")
    args = parser.parse_args()

    asyncio.run(init_database(args.seed))
