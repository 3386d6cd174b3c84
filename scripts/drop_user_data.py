"""Drop all data for a specific user."""
import asyncio
import sys

from motor.motor_asyncio import AsyncIOMotorClient

COLLECTIONS = ["time_entries", "projects"]


async def drop_user_data(mongodb_url: str, user_id: str, db_name: str = "worklog"):
    """Delete a user's time entries and projects."""
    client = AsyncIOMotorClient(mongodb_url)
    db = client[db_name]

    # Entries first so no entry outlives its project
    for collection_name in COLLECTIONS:
        result = await db[collection_name].delete_many({"user_id": user_id})
        print(f"Deleted {result.deleted_count} documents from {collection_name}")

    client.close()
    print("Done!")


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python drop_user_data.py <mongodb_url> <user_id> [db_name]")
        sys.exit(1)

    asyncio.run(drop_user_data(*sys.argv[1:]))
