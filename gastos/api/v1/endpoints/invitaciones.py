from fastapi import APIRouter, Depends

from gastos.api.deps import get_invitation_gate
from gastos.core.auth import get_current_uid
from gastos.schemas.invitation import JoinedEvent, JoinRequest, JoinResponse
from gastos.services.invitation_gate import InvitationGate

router = APIRouter()

@router.post("/join", response_model=JoinResponse)
async def join_by_token(
    payload: JoinRequest,
    uid: str = Depends(get_current_uid),
    gate: InvitationGate = Depends(get_invitation_gate)
):
    """joinByToken: redeem an invitation token for the caller."""
    event = await gate.redeem(payload.token, uid)
    return JoinResponse(
        success=True,
        evento=JoinedEvent(id=event.id, titulo=event.titulo, participantes=len(event.participantes))
    )
