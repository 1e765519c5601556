from typing import List
from fastapi import APIRouter, Depends, status

from gastos.api.deps import get_event_service, get_lifecycle_controller
from gastos.core.auth import get_current_uid
from gastos.schemas.event import (
    AliasUpdate,
    EventClose,
    EventCreate,
    EventCreateResponse,
    EventResponse,
    PaymentMarkUpdate,
)
from gastos.services.event_service import EventService
from gastos.services.lifecycle import EventLifecycleController

router = APIRouter()

@router.post("", response_model=EventCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_evento(
    payload: EventCreate,
    uid: str = Depends(get_current_uid),
    service: EventService = Depends(get_event_service)
):
    """createEvento: open event with the caller as only participant."""
    event = await service.create_event(
        uid,
        titulo=payload.titulo,
        monto=payload.monto,
        moneda=payload.moneda,
        repeticion=payload.repeticion,
        participantes_definidos=payload.participantes_definidos,
        detalle=payload.detalle,
        forma_pago=payload.forma_pago,
        vence_el=payload.vence_el
    )
    return EventCreateResponse(id=event.id, token=event.token_invitacion)

@router.get("", response_model=List[EventResponse])
async def list_eventos(
    uid: str = Depends(get_current_uid),
    service: EventService = Depends(get_event_service)
):
    """Events the caller participates in."""
    return [EventResponse.from_event(event) for event in await service.list_events(uid)]

@router.get("/{event_id}", response_model=EventResponse)
async def get_evento(
    event_id: str,
    uid: str = Depends(get_current_uid),
    service: EventService = Depends(get_event_service)
):
    return EventResponse.from_event(await service.get_event(event_id, uid))

@router.post("/{event_id}/cerrar", response_model=EventResponse)
async def cerrar_evento(
    event_id: str,
    payload: EventClose,
    uid: str = Depends(get_current_uid),
    controller: EventLifecycleController = Depends(get_lifecycle_controller)
):
    """Close the event, settle balances and spawn next month's event if recurring."""
    event = await controller.close_event(event_id, uid, payload.quien_pago)
    return EventResponse.from_event(event)

@router.put("/{event_id}/pagos/{participant_uid}", response_model=EventResponse)
async def set_pago(
    event_id: str,
    participant_uid: str,
    payload: PaymentMarkUpdate,
    uid: str = Depends(get_current_uid),
    service: EventService = Depends(get_event_service)
):
    event = await service.set_payment_mark(event_id, uid, participant_uid, payload.pagado)
    return EventResponse.from_event(event)

@router.put("/{event_id}/aliases/{participant_uid}", response_model=EventResponse)
async def set_alias(
    event_id: str,
    participant_uid: str,
    payload: AliasUpdate,
    uid: str = Depends(get_current_uid),
    service: EventService = Depends(get_event_service)
):
    event = await service.set_alias(event_id, uid, participant_uid, payload.alias)
    return EventResponse.from_event(event)
