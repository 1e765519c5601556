import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from gastos.models.audit import AuditEntry

logger = logging.getLogger(__name__)


class AuditRepository:
    """Audit trail. Writes are best-effort: a failure is logged, never raised."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["auditorias"]

    async def record(self, entry: AuditEntry) -> bool:
        try:
            await self.collection.insert_one(entry.to_document())
        except PyMongoError:
            logger.exception("Could not record audit entry %s for event %s", entry.tipo.value, entry.evento_id)
            return False
        logger.info("Audit entry recorded: %s (event %s)", entry.tipo.value, entry.evento_id)
        return True

    async def list_for_event(self, evento_id: str) -> list[AuditEntry]:
        cursor = self.collection.find({"evento_id": evento_id}).sort("en", 1)
        docs = await cursor.to_list(None)
        return [AuditEntry(**doc) for doc in docs]
