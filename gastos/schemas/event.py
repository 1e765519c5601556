from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from gastos.models.event import Event


class EventCreate(BaseModel):
    """createEvento input. Values are checked by the service so errors use the API codes."""
    titulo: Any = None
    monto: Any = None
    moneda: Any = None
    repeticion: Any = None
    participantes_definidos: Any = None
    detalle: Optional[str] = None
    forma_pago: Optional[str] = None
    vence_el: Optional[datetime] = None


class EventCreateResponse(BaseModel):
    id: str
    token: str


class EventClose(BaseModel):
    quien_pago: Optional[str] = None


class PaymentMarkUpdate(BaseModel):
    pagado: bool


class AliasUpdate(BaseModel):
    alias: str = Field(..., max_length=80)


class ParticipantResponse(BaseModel):
    uid: str
    alias: str
    participacion: float

    model_config = {"from_attributes": True}


class AttachmentResponse(BaseModel):
    path: str
    tipo: str
    bytes: int
    subido_por: str
    subido_en: datetime

    model_config = {"from_attributes": True}


class EventResponse(BaseModel):
    id: str
    titulo: str
    moneda: str
    monto: float
    repeticion: str
    estado: str
    forma_pago: str
    vence_el: Optional[datetime] = None
    creado_por: str
    creado_en: datetime
    quien_pago: Optional[str] = None
    fecha_pago: Optional[datetime] = None
    participantes: List[ParticipantResponse]
    token_invitacion: str
    adjuntos: List[AttachmentResponse]
    detalle: str
    participantes_definidos: Optional[int] = None
    pagos: Dict[str, bool]
    periodo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls.model_validate(event)
