"""Platform trigger endpoints: document changes and storage finalize events."""
from fastapi import APIRouter, Depends

from gastos.api.deps import get_attachment_validator, get_lifecycle_controller, verify_trigger_secret
from gastos.schemas.trigger import (
    AttachmentValidationResponse,
    EventChange,
    EventChangeResponse,
    FinalizedFile,
)
from gastos.services.attachments import AttachmentValidator
from gastos.services.lifecycle import EventLifecycleController

router = APIRouter(dependencies=[Depends(verify_trigger_secret)])

@router.post("/eventos", response_model=EventChangeResponse)
async def on_evento_update(
    change: EventChange,
    controller: EventLifecycleController = Depends(get_lifecycle_controller)
):
    effects = await controller.on_event_update(change.before, change.after)
    return EventChangeResponse(
        evento_id=change.after.id,
        effects=[type(effect).__name__ for effect in effects]
    )

@router.post("/storage/finalize", response_model=AttachmentValidationResponse)
async def on_storage_finalize(
    file: FinalizedFile,
    validator: AttachmentValidator = Depends(get_attachment_validator)
):
    outcome = await validator.validate(file)
    return AttachmentValidationResponse(path=file.path, outcome=outcome.value)
