"""
Recurring event creation.

A closed monthly event spawns its successor: same amount, currency and
participants, a fresh id and invitation, the title advanced by one month
and the due date moved one calendar month forward.

The title rewrite matches Spanish month names in free text, so it only works
for titles that spell the month out; the exact billing month is carried in
the `periodo` field instead.
"""

from typing import Callable, Tuple
from datetime import datetime, timedelta
import calendar
import logging
import re

from gastos.core.config import settings
from gastos.models.audit import AuditEntry, AuditType
from gastos.models.base import _utcnow
from gastos.models.event import Event, EventStatus
from gastos.models.invitation import Invitation
from gastos.repositories.audit_repo import AuditRepository
from gastos.repositories.event_repo import EventRepository
from gastos.repositories.invitation_repo import InvitationRepository
from gastos.services.tokens import generate_token

logger = logging.getLogger(__name__)

MESES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

# "setiembre" is the common rioplatense spelling
_MONTH_INDEX = {name: index for index, name in enumerate(MESES)} | {"setiembre": 8}

# Month names are not matched inside longer words ("mayonesa")
_MONTH_PATTERN = re.compile(
    r"(?<![a-záéíóúñ])(" + "|".join(sorted(_MONTH_INDEX, key=len, reverse=True)) + r")(?![a-záéíóúñ])",
    re.IGNORECASE
)


def add_months(value: datetime, months: int = 1) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def period_of(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def next_period(periodo: str) -> str:
    year, month = (int(part) for part in periodo.split("-"))
    return period_of(add_months(datetime(year, month, 1)))


def next_month_title(titulo: str) -> str:
    """Replace the first month name in the title with the following month's name."""
    match = _MONTH_PATTERN.search(titulo)
    if match is None:
        return titulo

    found = match.group(0)
    following = MESES[(_MONTH_INDEX[found.lower()] + 1) % 12]
    if found.isupper():
        following = following.upper()
    elif found[0].isupper():
        following = following.capitalize()
    return titulo[:match.start()] + following + titulo[match.end():]


def build_next_event(original: Event, now: datetime, token: str) -> Event:
    base_period = original.periodo or period_of(original.creado_en)
    return Event(
        titulo=next_month_title(original.titulo),
        moneda=original.moneda,
        monto=original.monto,
        repeticion=original.repeticion,
        estado=EventStatus.ABIERTO,
        forma_pago=original.forma_pago,
        vence_el=add_months(original.vence_el) if original.vence_el else None,
        creado_por=original.creado_por,
        creado_en=now,
        participantes=[p.model_copy() for p in original.participantes],
        participantes_uids=list(original.participantes_uids),
        token_invitacion=token,
        detalle=original.detalle,
        participantes_definidos=original.participantes_definidos,
        periodo=next_period(base_period)
    )


class RecurringEventSpawner:
    def __init__(
        self,
        event_repo: EventRepository,
        invitation_repo: InvitationRepository,
        audit_repo: AuditRepository,
        token_factory: Callable[[], str] = generate_token,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.event_repo = event_repo
        self.invitation_repo = invitation_repo
        self.audit_repo = audit_repo
        self.token_factory = token_factory
        self.clock = clock

    async def spawn_next(self, original: Event) -> Tuple[Event, Invitation]:
        now = self.clock()
        token = self.token_factory()

        successor = build_next_event(original, now, token)
        await self.event_repo.insert_event(successor)

        invitation = Invitation(
            id=token,
            evento_id=successor.id,
            token=token,
            creado_por=original.creado_por,
            creado_en=now,
            expira_en=now + timedelta(days=settings.RECURRING_INVITATION_TTL_DAYS),
            usos=0,
            max_usos=settings.RECURRING_INVITATION_MAX_USES
        )
        await self.invitation_repo.create_invitation(invitation)

        await self.audit_repo.record(AuditEntry(
            tipo=AuditType.EVENTO_RECURRENTE_CREADO,
            evento_id=successor.id,
            actor="system",
            en=now,
            payload={"origen": original.id, "periodo": successor.periodo}
        ))
        logger.info("Recurring event %s created from %s", successor.id, original.id)
        return successor, invitation
