from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from gastos.models.base import _utcnow


class UserProfile(BaseModel):
    """Profile document; _id is the caller identity."""
    uid: str
    email: str = ""
    displayName: str = ""
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(extra="ignore")

    def alias(self, fallback: str = "Usuario") -> str:
        if self.displayName:
            return self.displayName
        if self.email:
            local_part = self.email.split("@")[0]
            if local_part:
                return local_part
        return fallback


class PushToken(BaseModel):
    """Registered device token; _id is the token itself."""
    token: str
    userId: str
    active: bool = True
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(extra="ignore")
