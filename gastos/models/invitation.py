from typing import Optional
from datetime import datetime
from pydantic import Field

from gastos.models.base import DocumentModel, _utcnow, as_utc


class Invitation(DocumentModel):
    """Capped, expirable token admitting participants to one event. _id is the token."""
    evento_id: str
    token: str
    creado_por: str
    creado_en: datetime = Field(default_factory=_utcnow)
    expira_en: Optional[datetime] = None
    usos: int = 0
    max_usos: int

    def is_expired(self, now: datetime) -> bool:
        return self.expira_en is not None and as_utc(self.expira_en) < as_utc(now)

    def is_exhausted(self) -> bool:
        return self.usos >= self.max_usos
