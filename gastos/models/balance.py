"""
Balance model - canonical net debt between two identities in one currency.

Exactly one record per (unordered pair, currency): the _id is built from the
lexicographically sorted pair, so key(x, y, c) == key(y, x, c).

Sign convention, with entre == [A, B] and A < B:
- saldo > 0: B owes A
- saldo < 0: A owes B
- saldo == 0: settled
"""

from typing import List, Tuple
from datetime import datetime
from pydantic import Field

from gastos.models.base import DocumentModel, _utcnow

KEY_SEPARATOR = "|"


def sorted_pair(uid_1: str, uid_2: str) -> Tuple[str, str]:
    first, second = sorted((uid_1, uid_2))
    return first, second


def balance_key(uid_1: str, uid_2: str, moneda: str) -> str:
    first, second = sorted_pair(uid_1, uid_2)
    return KEY_SEPARATOR.join((first, second, moneda))


class Balance(DocumentModel):
    entre: List[str]
    moneda: str
    saldo: float = 0.0
    actualizado_en: datetime = Field(default_factory=_utcnow)

    @property
    def key(self) -> str:
        return self.id

    def owed_to(self, uid: str) -> float:
        """Signed amount from uid's point of view: positive means the other side owes uid."""
        if uid == self.entre[0]:
            return self.saldo
        if uid == self.entre[1]:
            return -self.saldo
        raise ValueError(f"{uid} is not part of balance {self.id}")

    def counterparty(self, uid: str) -> str:
        return self.entre[1] if uid == self.entre[0] else self.entre[0]
