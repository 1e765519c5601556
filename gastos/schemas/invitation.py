from typing import Optional
from pydantic import BaseModel


class JoinRequest(BaseModel):
    token: Optional[str] = None


class JoinedEvent(BaseModel):
    id: str
    titulo: str
    participantes: int


class JoinResponse(BaseModel):
    success: bool = True
    evento: JoinedEvent
