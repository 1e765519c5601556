from typing import Any, Dict
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from gastos.models.base import _utcnow


class AuditType(str, Enum):
    INVITAR = "INVITAR"
    SUBIR_ADJUNTO_RECHAZADO = "SUBIR_ADJUNTO_RECHAZADO"
    EVENTO_CERRADO = "EVENTO_CERRADO"
    EVENTO_RECURRENTE_CREADO = "EVENTO_RECURRENTE_CREADO"


class AuditEntry(BaseModel):
    tipo: AuditType
    evento_id: str
    actor: str
    en: datetime = Field(default_factory=_utcnow)
    payload: Dict[str, Any] = {}

    def to_document(self) -> dict:
        return self.model_dump(mode="python") | {"tipo": self.tipo.value}
