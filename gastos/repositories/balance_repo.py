from typing import List, Optional
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase

from gastos.models.balance import Balance, balance_key, sorted_pair
from gastos.repositories.base import storage_guard


class BalanceRepository:
    """Pairwise balance records, one per (sorted pair, currency)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["balances"]

    async def add_to_saldo(
        self,
        uid_1: str,
        uid_2: str,
        moneda: str,
        delta: float,
        now: datetime
    ) -> None:
        """
        Add delta to the pair's saldo, creating the record on first use.

        One upsert with $inc, so concurrent accruals on the same pair add up
        instead of overwriting each other.
        """
        key = balance_key(uid_1, uid_2, moneda)
        with storage_guard("actualizar el balance"):
            await self.collection.update_one(
                {"_id": key},
                {
                    "$inc": {"saldo": delta},
                    "$set": {"actualizado_en": now},
                    "$setOnInsert": {"entre": list(sorted_pair(uid_1, uid_2)), "moneda": moneda}
                },
                upsert=True
            )

    async def get_balance(self, uid_1: str, uid_2: str, moneda: str) -> Optional[Balance]:
        with storage_guard("leer el balance"):
            doc = await self.collection.find_one({"_id": balance_key(uid_1, uid_2, moneda)})
        if doc:
            return Balance(**doc)
        return None

    async def list_for_user(self, uid: str) -> List[Balance]:
        """All balances involving uid, most recently updated first."""
        with storage_guard("listar balances"):
            cursor = self.collection.find({"entre": uid}).sort("actualizado_en", -1)
            docs = await cursor.to_list(None)
        return [Balance(**doc) for doc in docs]
