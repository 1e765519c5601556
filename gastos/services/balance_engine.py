"""
Balance Engine - folds a closed event's debts into pairwise balances.

For every participant other than the payer:
    debt = event.monto * participant.participacion
and the debt is accrued on the balance of (participant, payer) in the
event's currency.

Accrual is additive, not idempotent: running settle twice for the same event
doubles its effect. The lifecycle controller guarantees one run per close.
"""

from typing import Callable, List, NamedTuple
from datetime import datetime
import logging

from gastos.core.errors import InvalidArgument, InvalidState
from gastos.models.base import _utcnow
from gastos.models.balance import sorted_pair
from gastos.models.event import Event
from gastos.repositories.balance_repo import BalanceRepository

logger = logging.getLogger(__name__)


class Debt(NamedTuple):
    debtor: str
    creditor: str
    amount: float


def resolve_payer(event: Event) -> str:
    """quien_pago, or the creator when unset. An explicit payer must be a participant."""
    if event.quien_pago and not event.has_participant(event.quien_pago):
        raise InvalidState(f"Usuario {event.quien_pago} no es participante del evento")
    return event.payer()


def compute_debts(event: Event) -> List[Debt]:
    payer = resolve_payer(event)
    debts = []
    for participant in event.participantes:
        if participant.uid == payer:
            continue
        amount = event.share_of(participant)
        if amount == 0:
            continue
        debts.append(Debt(participant.uid, payer, amount))
    return debts


class BalanceEngine:
    def __init__(
        self,
        balance_repo: BalanceRepository,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.balance_repo = balance_repo
        self.clock = clock

    async def settle(self, event: Event) -> List[Debt]:
        """Accrue every participant's share of a closed event. Returns the debts applied."""
        if not event.is_closed:
            raise InvalidState(f"El evento {event.id} no está cerrado")

        debts = compute_debts(event)
        for debt in debts:
            await self.accrue(debt.debtor, debt.creditor, event.moneda, debt.amount)

        logger.info("Settled event %s: %d debts in %s", event.id, len(debts), event.moneda)
        return debts

    async def accrue(self, debtor: str, creditor: str, moneda: str, amount: float) -> None:
        if debtor == creditor:
            raise InvalidArgument("Deudor y acreedor deben ser distintos")

        first, _ = sorted_pair(debtor, creditor)
        # saldo is seen from the first uid of the sorted pair
        delta = -amount if first == debtor else amount
        await self.balance_repo.add_to_saldo(debtor, creditor, moneda, delta, self.clock())
