"""
Event model - one shared-expense occasion.

Lifecycle: abierto -> cerrado, single forward transition. The participant
list is rewritten only while open (equal split, every fraction 1/n);
quien_pago and fecha_pago are set only by the close transition.
"""

from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from gastos.models.base import DocumentModel, _utcnow


class Currency(str, Enum):
    ARS = "ARS"
    USD = "USD"


class Recurrence(str, Enum):
    UNICO = "unico"
    MENSUAL = "mensual"


class EventStatus(str, Enum):
    ABIERTO = "abierto"
    CERRADO = "cerrado"


# Embedded documents don't need DocumentModel (no separate _id)
class Participant(BaseModel):
    uid: str
    alias: str
    participacion: float


class Attachment(BaseModel):
    path: str
    tipo: str
    bytes: int
    subido_por: str
    subido_en: datetime = Field(default_factory=_utcnow)


class Event(DocumentModel):
    titulo: str
    moneda: Currency
    monto: float
    repeticion: Recurrence
    estado: EventStatus = EventStatus.ABIERTO
    forma_pago: str = "desconocida"
    vence_el: Optional[datetime] = None

    creado_por: str
    creado_en: datetime = Field(default_factory=_utcnow)

    # Set only at close time
    quien_pago: Optional[str] = None
    fecha_pago: Optional[datetime] = None

    participantes: List[Participant] = []
    participantes_uids: List[str] = []  # mirror of participantes[].uid for atomic filters
    token_invitacion: str
    adjuntos: List[Attachment] = []
    detalle: str = ""
    participantes_definidos: Optional[int] = None  # display estimate only
    pagos: Dict[str, bool] = {}
    periodo: Optional[str] = None  # "YYYY-MM" for monthly events

    liquidado: bool = False
    version: int = 1

    @property
    def is_open(self) -> bool:
        return self.estado == EventStatus.ABIERTO

    @property
    def is_closed(self) -> bool:
        return self.estado == EventStatus.CERRADO

    def payer(self) -> str:
        """Who paid: explicit quien_pago, otherwise the creator."""
        return self.quien_pago or self.creado_por

    def has_participant(self, uid: str) -> bool:
        return any(p.uid == uid for p in self.participantes)

    def share_of(self, participant: Participant) -> float:
        return self.monto * participant.participacion
