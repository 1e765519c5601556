import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from gastos.core.config import settings

logger = logging.getLogger(__name__)

class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(
        settings.MONGODB_URL,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        socketTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        tz_aware=True
    )
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes(mongodb.db)
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes(db: AsyncIOMotorDatabase):
    """Create database indexes."""
    # Events: membership lookups and creator listings
    await db["eventos"].create_index("participantes_uids")
    await db["eventos"].create_index("creado_por")

    # Balances are keyed by the sorted pair; "entre" serves per-user listings
    await db["balances"].create_index("entre")

    # Invitations are keyed by token
    await db["invitaciones"].create_index("evento_id")

    await db["fcm_tokens"].create_index([("userId", 1), ("active", 1)])
    await db["auditorias"].create_index("evento_id")

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
