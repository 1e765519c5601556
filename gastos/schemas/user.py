from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    displayName: Optional[str] = Field(None, max_length=100)


class ProfileResponse(BaseModel):
    uid: str
    email: str
    displayName: str
    updated_at: datetime

    model_config = {"from_attributes": True}


class PushTokenRegister(BaseModel):
    token: str = Field(..., min_length=1)


class PushTokenResponse(BaseModel):
    token: str
    active: bool
