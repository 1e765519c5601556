"""
Invitation Gate - admits a user into an open event with an invitation token.

Redeeming never rewrites documents blindly:
1. a use is reserved with a conditional $inc (usos < max_usos), so the
   counter can never pass the cap even with concurrent redemptions
2. the participant list is replaced with a compare-and-set on the event's
   version, filtered on the uid not being a participant yet
3. if step 2 cannot complete, the reserved use is given back

Fractions are reset to 1/n for every participant on each join.
"""

from typing import Callable, List
from datetime import datetime
import logging

from gastos.core.errors import (
    AlreadyExists,
    Exhausted,
    Expired,
    InvalidArgument,
    InvalidState,
    NotFound,
    StorageFailure,
)
from gastos.models.audit import AuditEntry, AuditType
from gastos.models.base import _utcnow
from gastos.models.event import Event, Participant
from gastos.repositories.audit_repo import AuditRepository
from gastos.repositories.event_repo import EventRepository
from gastos.repositories.invitation_repo import InvitationRepository
from gastos.repositories.user_repo import UserRepository
from gastos.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

MAX_JOIN_ATTEMPTS = 5


def rebalance(participantes: List[Participant], uid: str, alias: str) -> List[Participant]:
    """Existing participants plus the newcomer, everyone at 1/n."""
    fraction = 1 / (len(participantes) + 1)
    updated = [p.model_copy(update={"participacion": fraction}) for p in participantes]
    updated.append(Participant(uid=uid, alias=alias, participacion=fraction))
    return updated


def ensure_joinable(event: Event, uid: str) -> None:
    if not event.is_open:
        raise InvalidState("Evento ya cerrado")
    if event.has_participant(uid):
        raise AlreadyExists("Usuario ya es participante del evento")


class InvitationGate:
    def __init__(
        self,
        event_repo: EventRepository,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        audit_repo: AuditRepository,
        notifier: NotificationDispatcher,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.event_repo = event_repo
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.audit_repo = audit_repo
        self.notifier = notifier
        self.clock = clock

    async def redeem(self, token: str | None, uid: str) -> Event:
        """Join the event behind `token`. Returns the updated event."""
        token = (token or "").strip()
        if not token:
            raise InvalidArgument("Token de invitación requerido")

        logger.info("User %s redeeming invitation %s", uid, token)

        invitation = await self.invitation_repo.get_by_token(token)
        if invitation is None:
            raise NotFound("Token de invitación inválido")
        if invitation.is_expired(self.clock()):
            raise Expired("Token de invitación expirado")
        if invitation.is_exhausted():
            raise Exhausted("Token de invitación agotado")

        event = await self.event_repo.get_event(invitation.evento_id)
        if event is None:
            raise NotFound("Evento no encontrado")
        ensure_joinable(event, uid)

        alias = await self.user_repo.resolve_alias(uid)

        if await self.invitation_repo.reserve_use(invitation) is None:
            raise Exhausted("Token de invitación agotado")

        try:
            updated = await self._append(event, uid, alias)
        except Exception:
            await self.invitation_repo.release_use(token)
            raise

        await self.audit_repo.record(AuditEntry(
            tipo=AuditType.INVITAR,
            evento_id=updated.id,
            actor=uid,
            en=self.clock(),
            payload={"token": token, "alias": alias}
        ))
        await self.notifier.notify_new_participant(updated, alias)

        logger.info("User %s joined event %s", uid, updated.id)
        return updated

    async def _append(self, event: Event, uid: str, alias: str) -> Event:
        for attempt in range(1, MAX_JOIN_ATTEMPTS + 1):
            updated = await self.event_repo.append_participant(
                event,
                rebalance(event.participantes, uid, alias),
                uid
            )
            if updated is not None:
                return updated

            logger.info("Event %s changed while joining (attempt %d), reloading", event.id, attempt)
            event = await self.event_repo.get_event(event.id)
            if event is None:
                raise NotFound("Evento no encontrado")
            ensure_joinable(event, uid)

        raise StorageFailure("No se pudo agregar el participante por actualizaciones concurrentes")
