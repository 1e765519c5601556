from datetime import datetime
from typing import List
from pydantic import BaseModel

from gastos.models.balance import Balance


class BalanceResponse(BaseModel):
    """A balance seen from one user: positive amount means the counterparty owes them."""
    key: str
    entre: List[str]
    moneda: str
    saldo: float
    contraparte: str
    a_favor: float
    actualizado_en: datetime

    @classmethod
    def for_user(cls, balance: Balance, uid: str) -> "BalanceResponse":
        return cls(
            key=balance.key,
            entre=balance.entre,
            moneda=balance.moneda,
            saldo=balance.saldo,
            contraparte=balance.counterparty(uid),
            a_favor=balance.owed_to(uid),
            actualizado_en=balance.actualizado_en
        )
