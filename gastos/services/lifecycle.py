"""
Event Lifecycle Controller - the abierto -> cerrado transition.

The transition is a function of two snapshots of the same event. Only the
edge abierto -> cerrado produces work:

    plan_transition(before, after) -> [Settle, SpawnRecurring?, NotifyClose...]

Applying the plan:
1. claim the event's `liquidado` marker (conditional update); if another
   delivery of the same change already claimed it, nothing is applied
2. settle balances
3. spawn next month's event for mensual events
4. notify every debtor of their share (best-effort)

A failure in validation, settlement or spawning reverts the event to abierto
(quien_pago, fecha_pago and the marker cleared) and re-raises. A delivery that
did not win the claim never reverts an event that is already settled. Balance
accruals already written by a partial settle are not undone.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Union
from datetime import datetime
import logging

from gastos.core.errors import InvalidState, NotFound, PermissionDenied, StorageFailure
from gastos.models.audit import AuditEntry, AuditType
from gastos.models.base import _utcnow
from gastos.models.event import Event, Recurrence
from gastos.repositories.audit_repo import AuditRepository
from gastos.repositories.event_repo import EventRepository
from gastos.services.balance_engine import BalanceEngine, resolve_payer
from gastos.services.notifications import NotificationDispatcher
from gastos.services.recurrence import RecurringEventSpawner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settle:
    event: Event


@dataclass(frozen=True)
class SpawnRecurring:
    event: Event


@dataclass(frozen=True)
class NotifyClose:
    event: Event
    uid: str
    amount: float


Effect = Union[Settle, SpawnRecurring, NotifyClose]


def is_close_edge(before: Optional[Event], after: Event) -> bool:
    return before is not None and before.is_open and after.is_closed


def plan_transition(before: Optional[Event], after: Event) -> List[Effect]:
    """Effects of a write on an event. Raises InvalidState for a payer outside the event."""
    if not is_close_edge(before, after):
        return []

    payer = resolve_payer(after)
    effects: List[Effect] = [Settle(after)]
    if after.repeticion == Recurrence.MENSUAL:
        effects.append(SpawnRecurring(after))
    effects.extend(
        NotifyClose(after, p.uid, after.share_of(p))
        for p in after.participantes
        if p.uid != payer
    )
    return effects


class EventLifecycleController:
    def __init__(
        self,
        event_repo: EventRepository,
        balance_engine: BalanceEngine,
        spawner: RecurringEventSpawner,
        notifier: NotificationDispatcher,
        audit_repo: AuditRepository,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.event_repo = event_repo
        self.balance_engine = balance_engine
        self.spawner = spawner
        self.notifier = notifier
        self.audit_repo = audit_repo
        self.clock = clock

    async def close_event(
        self,
        event_id: str,
        uid: str,
        quien_pago: Optional[str] = None
    ) -> Event:
        """Creator closes an open event, naming who paid (default: the creator)."""
        event = await self.event_repo.get_event(event_id)
        if event is None:
            raise NotFound("Evento no encontrado")
        if event.creado_por != uid:
            raise PermissionDenied("Solo el creador puede cerrar el evento")
        if not event.is_open:
            raise InvalidState("Evento ya cerrado")

        payer = quien_pago or uid
        if not event.has_participant(payer):
            raise InvalidState(f"Usuario {payer} no es participante del evento")

        snapshots = await self.event_repo.close_event(event_id, payer, self.clock())
        if snapshots is None:
            raise InvalidState("Evento ya cerrado")

        before, after = snapshots
        await self.on_event_update(before, after)
        return after

    async def on_event_update(self, before: Optional[Event], after: Event) -> List[Effect]:
        """Run the close transition for one change delivery. Returns the effects applied."""
        if not is_close_edge(before, after):
            return []

        logger.info("Processing close of event %s", after.id)
        claimed = False
        try:
            effects = plan_transition(before, after)
            claimed = await self.event_repo.claim_settlement(after.id)
            if not claimed:
                logger.warning("Event %s already settled, ignoring duplicate close", after.id)
                return []
            for effect in effects:
                await self._apply(effect)
        except Exception:
            logger.exception("Close of event %s failed, reverting to abierto", after.id)
            await self._revert(after.id, claimed)
            raise

        await self.audit_repo.record(AuditEntry(
            tipo=AuditType.EVENTO_CERRADO,
            evento_id=after.id,
            actor=after.creado_por,
            en=self.clock(),
            payload={"quien_pago": after.payer(), "monto": after.monto, "moneda": after.moneda}
        ))
        logger.info("Event %s closed and settled", after.id)
        return effects

    async def _apply(self, effect: Effect) -> None:
        if isinstance(effect, Settle):
            await self.balance_engine.settle(effect.event)
        elif isinstance(effect, SpawnRecurring):
            await self.spawner.spawn_next(effect.event)
        elif isinstance(effect, NotifyClose):
            await self.notifier.notify_event_closed(effect.event, effect.uid, effect.amount)

    async def _revert(self, event_id: str, claimed: bool) -> None:
        try:
            reverted = await self.event_repo.revert_close(event_id, claimed)
        except StorageFailure:
            logger.error("Could not revert event %s to abierto", event_id)
            return
        if not reverted:
            logger.warning("Event %s already settled by another close, not reverting", event_id)
