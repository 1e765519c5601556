from typing import Optional
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase

from gastos.models.user import PushToken
from gastos.repositories.base import storage_guard

class PushTokenRepository:
    """Device push tokens. A token belongs to one user at a time."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["fcm_tokens"]

    async def register(self, uid: str, token: str) -> PushToken:
        now = datetime.now(timezone.utc)
        with storage_guard("registrar el token de notificaciones"):
            await self.collection.update_one(
                {"_id": token},
                {"$set": {"token": token, "userId": uid, "active": True, "updated_at": now}},
                upsert=True
            )
        return PushToken(token=token, userId=uid, active=True, updated_at=now)

    async def deactivate(self, uid: str, token: str) -> bool:
        with storage_guard("desactivar el token de notificaciones"):
            result = await self.collection.update_one(
                {"_id": token, "userId": uid},
                {"$set": {"active": False, "updated_at": datetime.now(timezone.utc)}}
            )
        return result.matched_count == 1

    async def find_active(self, uid: str) -> Optional[PushToken]:
        with storage_guard("buscar el token de notificaciones"):
            doc = await self.collection.find_one(
                {"userId": uid, "active": True},
                sort=[("updated_at", -1)]
            )
        if doc:
            return PushToken(**doc)
        return None
