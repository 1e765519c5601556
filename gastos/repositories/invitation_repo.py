from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from gastos.models.invitation import Invitation
from gastos.repositories.base import storage_guard


class InvitationRepository:
    """Invitation tokens, stored with the token as _id."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["invitaciones"]

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        with storage_guard("crear la invitación"):
            await self.collection.insert_one(invitation.to_document())
        return invitation

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        with storage_guard("leer la invitación"):
            doc = await self.collection.find_one({"_id": token})
        if doc:
            return Invitation(**doc)
        return None

    async def reserve_use(self, invitation: Invitation) -> Optional[Invitation]:
        """
        Increment usos only while it is below max_usos.

        max_usos never changes after creation, so filtering on the value read
        earlier keeps the check-and-increment a single atomic update.
        Returns None when the cap was already reached.
        """
        with storage_guard("registrar el uso de la invitación"):
            doc = await self.collection.find_one_and_update(
                {"_id": invitation.token, "usos": {"$lt": invitation.max_usos}},
                {"$inc": {"usos": 1}},
                return_document=ReturnDocument.AFTER
            )
        if doc:
            return Invitation(**doc)
        return None

    async def release_use(self, token: str) -> None:
        """Give back a reserved use when the join could not be completed."""
        with storage_guard("liberar el uso de la invitación"):
            await self.collection.update_one(
                {"_id": token, "usos": {"$gt": 0}},
                {"$inc": {"usos": -1}}
            )
