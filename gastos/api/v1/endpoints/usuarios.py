from fastapi import APIRouter, Depends, status

from gastos.core.auth import get_current_uid
from gastos.core.errors import NotFound
from gastos.db.mongo import get_db
from gastos.repositories.push_token_repo import PushTokenRepository
from gastos.repositories.user_repo import UserRepository
from gastos.schemas.user import ProfileResponse, ProfileUpdate, PushTokenRegister, PushTokenResponse

router = APIRouter()

@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(uid: str = Depends(get_current_uid), db = Depends(get_db)):
    profile = await UserRepository(db).get_profile(uid)
    if profile is None:
        raise NotFound("Perfil no encontrado")
    return profile

@router.put("/me", response_model=ProfileResponse)
async def save_my_profile(
    payload: ProfileUpdate,
    uid: str = Depends(get_current_uid),
    db = Depends(get_db)
):
    """Merge email/displayName into the caller's profile."""
    return await UserRepository(db).save_profile(
        uid,
        email=str(payload.email) if payload.email else None,
        display_name=payload.displayName
    )

@router.post("/me/push-tokens", response_model=PushTokenResponse, status_code=status.HTTP_201_CREATED)
async def register_push_token(
    payload: PushTokenRegister,
    uid: str = Depends(get_current_uid),
    db = Depends(get_db)
):
    push_token = await PushTokenRepository(db).register(uid, payload.token)
    return PushTokenResponse(token=push_token.token, active=push_token.active)

@router.delete("/me/push-tokens/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_push_token(
    token: str,
    uid: str = Depends(get_current_uid),
    db = Depends(get_db)
):
    if not await PushTokenRepository(db).deactivate(uid, token):
        raise NotFound("Token no encontrado")
