from typing import Any, Callable, List, Optional
from datetime import datetime
import logging
import math

from gastos.core.config import settings
from gastos.core.errors import InvalidArgument, NotFound, PermissionDenied
from gastos.models.base import _utcnow
from gastos.models.event import Event, EventStatus, Participant, Recurrence
from gastos.models.invitation import Invitation
from gastos.repositories.event_repo import EventRepository
from gastos.repositories.invitation_repo import InvitationRepository
from gastos.repositories.user_repo import UserRepository
from gastos.services.recurrence import period_of
from gastos.services.tokens import generate_token

logger = logging.getLogger(__name__)


def validate_new_event(
    titulo: Any,
    monto: Any,
    moneda: Any,
    repeticion: Any,
    participantes_definidos: Any = None
) -> tuple[str, float, str, str, Optional[int]]:
    """
    Normalise createEvento input. Raises InvalidArgument on the first problem.

    Rules:
    - titulo: non-empty after trimming, at most MAX_TITLE_LENGTH characters
    - monto: finite number > 0
    - moneda: one of SUPPORTED_CURRENCIES
    - repeticion: unico | mensual
    - participantes_definidos: ignored unless a positive integer
    """
    titulo = str(titulo or "").strip()
    if not titulo:
        raise InvalidArgument("El título es requerido")
    if len(titulo) > settings.MAX_TITLE_LENGTH:
        raise InvalidArgument(f"El título no puede superar {settings.MAX_TITLE_LENGTH} caracteres")

    try:
        monto = float(monto)
    except (TypeError, ValueError):
        raise InvalidArgument("Monto inválido")
    if not math.isfinite(monto) or monto <= 0:
        raise InvalidArgument("Monto inválido")

    moneda = str(moneda or "")
    if moneda not in settings.SUPPORTED_CURRENCIES:
        raise InvalidArgument("Moneda inválida")

    repeticion = str(repeticion or "")
    if repeticion not in {r.value for r in Recurrence}:
        raise InvalidArgument("Repetición inválida")

    definidos = None
    if participantes_definidos is not None:
        try:
            definidos = int(participantes_definidos)
        except (TypeError, ValueError):
            definidos = None
        if definidos is not None and definidos <= 0:
            definidos = None

    return titulo, monto, moneda, repeticion, definidos


class EventService:
    def __init__(
        self,
        event_repo: EventRepository,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        token_factory: Callable[[], str] = generate_token,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.event_repo = event_repo
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.token_factory = token_factory
        self.clock = clock

    async def create_event(
        self,
        uid: str,
        titulo: Any,
        monto: Any,
        moneda: Any,
        repeticion: Any,
        participantes_definidos: Any = None,
        detalle: Optional[str] = None,
        forma_pago: Optional[str] = None,
        vence_el: Optional[datetime] = None
    ) -> Event:
        """Create an open event with the caller as sole participant, plus its invitation."""
        titulo, monto, moneda, repeticion, definidos = validate_new_event(
            titulo, monto, moneda, repeticion, participantes_definidos
        )

        now = self.clock()
        token = self.token_factory()
        alias = await self.user_repo.resolve_alias(uid, fallback="Creador")

        event = Event(
            titulo=titulo,
            moneda=moneda,
            monto=monto,
            repeticion=repeticion,
            estado=EventStatus.ABIERTO,
            forma_pago=(forma_pago or "").strip() or "desconocida",
            vence_el=vence_el,
            creado_por=uid,
            creado_en=now,
            participantes=[Participant(uid=uid, alias=alias, participacion=1)],
            participantes_uids=[uid],
            token_invitacion=token,
            detalle=(detalle or "").strip(),
            participantes_definidos=definidos,
            periodo=period_of(now) if repeticion == Recurrence.MENSUAL else None
        )
        await self.event_repo.insert_event(event)

        await self.invitation_repo.create_invitation(Invitation(
            id=token,
            evento_id=event.id,
            token=token,
            creado_por=uid,
            creado_en=now,
            usos=0,
            max_usos=settings.INVITATION_MAX_USES
        ))

        logger.info("Event %s created by %s", event.id, uid)
        return event

    async def list_events(self, uid: str) -> List[Event]:
        return await self.event_repo.list_for_participant(uid)

    async def get_event(self, event_id: str, uid: str) -> Event:
        event = await self.event_repo.get_event(event_id)
        if event is None or not event.has_participant(uid):
            raise NotFound("Evento no encontrado")
        return event

    async def set_payment_mark(self, event_id: str, uid: str, participant_uid: str, pagado: bool) -> Event:
        event = await self._owned_event(event_id, uid)
        if not event.has_participant(participant_uid):
            raise NotFound("Participante no encontrado")
        await self.event_repo.set_payment_mark(event_id, participant_uid, pagado)
        return await self.get_event(event_id, uid)

    async def set_alias(self, event_id: str, uid: str, participant_uid: str, alias: str) -> Event:
        event = await self._owned_event(event_id, uid)
        alias = (alias or "").strip()
        if not alias:
            raise InvalidArgument("El alias es requerido")
        if not event.has_participant(participant_uid):
            raise NotFound("Participante no encontrado")
        await self.event_repo.set_alias(event_id, participant_uid, alias)
        return await self.get_event(event_id, uid)

    async def _owned_event(self, event_id: str, uid: str) -> Event:
        event = await self.get_event(event_id, uid)
        if event.creado_por != uid:
            raise PermissionDenied("Solo el creador puede modificar el evento")
        return event
