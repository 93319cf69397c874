# -------------------------------------------------------------
# 🌍 MongoDB Connection Manager (one client per process)
# -------------------------------------------------------------
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from itinerary_gen.config import settings
import asyncio
import logging

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_db: Optional[AsyncIOMotorDatabase] = None
_lock = asyncio.Lock()


def _masked_host(uri: str) -> str:
    """Strip credentials and scheme from a Mongo URI for logging."""
    return uri.split("@")[-1].split("://")[-1] or "<hidden>"


def _new_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True)


async def init_mongo() -> AsyncIOMotorDatabase:
    """
    Connect and ping once per process; later calls return the same handle.
    A failed ping closes the client so the next attempt starts clean.
    """
    global _mongo_client, _mongo_db

    async with _lock:
        if _mongo_db is not None:
            return _mongo_db

        logger.info("🧩 Connecting to MongoDB: %s", _masked_host(settings.MONGO_URI))
        client = _mongo_client if _mongo_client is not None else _new_client()
        try:
            db = client[settings.MONGO_DB]

            # Lightweight connectivity check
            await db.command("ping")
        except Exception:
            logger.exception("❌ MongoDB connection failed")
            client.close()
            _mongo_client = None
            raise

        _mongo_client = client
        _mongo_db = db
        logger.info("✅ MongoDB connection established successfully.")

    return _mongo_db


def get_mongo_client() -> AsyncIOMotorDatabase:
    """Database handle for job documents; unpinged until init_mongo() has run."""
    global _mongo_client

    if _mongo_db is not None:
        return _mongo_db

    if _mongo_client is None:
        _mongo_client = _new_client()
    return _mongo_client[settings.MONGO_DB]


def get_collection(name: str) -> AsyncIOMotorCollection:
    if not name:
        raise ValueError("Collection name is required")
    return get_mongo_client()[name]


def close_mongo() -> None:
    """Close the process-wide client, if any."""
    global _mongo_client, _mongo_db

    if _mongo_client is not None:
        _mongo_client.close()
    _mongo_client = None
    _mongo_db = None
