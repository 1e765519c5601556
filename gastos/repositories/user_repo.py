from typing import Optional
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase

from gastos.models.user import UserProfile
from gastos.repositories.base import storage_guard

class UserRepository:
    """User profile operations. Profiles are keyed by caller identity."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["usuarios"]

    async def get_profile(self, uid: str) -> Optional[UserProfile]:
        with storage_guard("leer el perfil"):
            doc = await self.collection.find_one({"_id": uid})
        if doc:
            doc.setdefault("uid", uid)
            return UserProfile(**doc)
        return None

    async def save_profile(
        self,
        uid: str,
        email: str | None = None,
        display_name: str | None = None
    ) -> UserProfile:
        """Merge the given fields into the profile, creating it if needed."""
        updates = {"uid": uid, "updated_at": datetime.now(timezone.utc)}
        if email is not None:
            updates["email"] = email
        if display_name is not None:
            updates["displayName"] = display_name

        with storage_guard("guardar el perfil"):
            await self.collection.update_one(
                {"_id": uid},
                {"$set": updates},
                upsert=True
            )
        return await self.get_profile(uid)

    async def resolve_alias(self, uid: str, fallback: str = "Usuario") -> str:
        """displayName, else local part of the email, else the fallback."""
        profile = await self.get_profile(uid)
        if profile is None:
            return fallback
        return profile.alias(fallback)
