"""
EventRepository - event documents and their atomic state changes.

Every mutation here is a single-document conditional update so concurrent
handlers never overwrite each other's work:
- close: only matches an event that is still abierto
- settlement claim: only matches a closed event not yet liquidado
- participant append: compare-and-set on version, and only if the uid is
  not already in participantes_uids
"""

from typing import List, Optional, Tuple
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from gastos.models.event import Event, EventStatus, Participant
from gastos.repositories.base import storage_guard


class EventRepository:
    """Event database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["eventos"]

    async def insert_event(self, event: Event) -> Event:
        with storage_guard("crear el evento"):
            await self.collection.insert_one(event.to_document())
        return event

    async def get_event(self, event_id: str) -> Optional[Event]:
        with storage_guard("leer el evento"):
            doc = await self.collection.find_one({"_id": event_id})
        if doc:
            return Event(**doc)
        return None

    async def list_for_participant(self, uid: str) -> List[Event]:
        """Events where uid is a participant, newest first."""
        with storage_guard("listar eventos"):
            cursor = self.collection.find({"participantes_uids": uid}).sort("creado_en", -1)
            docs = await cursor.to_list(None)
        return [Event(**doc) for doc in docs]

    async def close_event(
        self,
        event_id: str,
        quien_pago: str,
        fecha_pago: datetime
    ) -> Optional[Tuple[Event, Event]]:
        """
        Flip abierto -> cerrado.

        Returns (before, after) snapshots, or None when the event was not
        open (absent or already closed).
        """
        with storage_guard("cerrar el evento"):
            before = await self.collection.find_one_and_update(
                {"_id": event_id, "estado": EventStatus.ABIERTO.value},
                {
                    "$set": {
                        "estado": EventStatus.CERRADO.value,
                        "quien_pago": quien_pago,
                        "fecha_pago": fecha_pago
                    }
                },
                return_document=ReturnDocument.BEFORE
            )
        if before is None:
            return None

        before_event = Event(**before)
        after_event = before_event.model_copy(update={
            "estado": EventStatus.CERRADO.value,
            "quien_pago": quien_pago,
            "fecha_pago": fecha_pago
        })
        return before_event, after_event

    async def claim_settlement(self, event_id: str) -> bool:
        """Set the liquidado marker; False if another handler already did."""
        with storage_guard("marcar la liquidación"):
            result = await self.collection.update_one(
                {
                    "_id": event_id,
                    "estado": EventStatus.CERRADO.value,
                    "liquidado": {"$ne": True}
                },
                {"$set": {"liquidado": True}}
            )
        return result.modified_count == 1

    async def revert_close(self, event_id: str, claimed: bool = False) -> bool:
        """
        Compensating write after a failed close transition.

        Only the handler holding the settlement claim may clear it; any other
        handler can revert only an event nobody has settled yet.
        Returns False when the event was left untouched.
        """
        liquidado = True if claimed else {"$ne": True}
        with storage_guard("revertir el cierre"):
            result = await self.collection.update_one(
                {"_id": event_id, "liquidado": liquidado},
                {
                    "$set": {"estado": EventStatus.ABIERTO.value, "liquidado": False},
                    "$unset": {"quien_pago": "", "fecha_pago": ""}
                }
            )
        return result.modified_count == 1

    async def append_participant(
        self,
        event: Event,
        participantes: List[Participant],
        uid: str
    ) -> Optional[Event]:
        """
        Replace the participant list with `participantes` (which already
        includes uid) if nobody changed the event since `event` was read.

        Returns the updated event, or None on a lost compare-and-set.
        """
        with storage_guard("agregar el participante"):
            result = await self.collection.find_one_and_update(
                {
                    "_id": event.id,
                    "estado": EventStatus.ABIERTO.value,
                    "version": event.version,
                    "participantes_uids": {"$ne": uid}
                },
                {
                    "$set": {"participantes": [p.model_dump() for p in participantes]},
                    "$push": {"participantes_uids": uid},
                    "$inc": {"version": 1}
                },
                return_document=ReturnDocument.AFTER
            )
        if result:
            return Event(**result)
        return None

    async def set_payment_mark(self, event_id: str, uid: str, pagado: bool) -> bool:
        with storage_guard("registrar el pago"):
            result = await self.collection.update_one(
                {"_id": event_id, "participantes_uids": uid},
                {"$set": {f"pagos.{uid}": pagado}}
            )
        return result.matched_count == 1

    async def set_alias(self, event_id: str, uid: str, alias: str) -> bool:
        with storage_guard("actualizar el alias"):
            result = await self.collection.update_one(
                {"_id": event_id, "participantes.uid": uid},
                {"$set": {"participantes.$.alias": alias}}
            )
        return result.matched_count == 1
