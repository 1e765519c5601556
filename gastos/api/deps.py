"""Per-request construction of services from the active database."""
from fastapi import Depends, Header
from motor.motor_asyncio import AsyncIOMotorDatabase

from gastos.core.config import settings
from gastos.core.errors import PermissionDenied
from gastos.db.mongo import get_db
from gastos.repositories.audit_repo import AuditRepository
from gastos.repositories.balance_repo import BalanceRepository
from gastos.repositories.event_repo import EventRepository
from gastos.repositories.invitation_repo import InvitationRepository
from gastos.repositories.push_token_repo import PushTokenRepository
from gastos.repositories.user_repo import UserRepository
from gastos.services.attachments import AttachmentValidator
from gastos.services.balance_engine import BalanceEngine
from gastos.services.event_service import EventService
from gastos.services.invitation_gate import InvitationGate
from gastos.services.lifecycle import EventLifecycleController
from gastos.services.notifications import HttpPushSender, NotificationDispatcher, PushSender
from gastos.services.recurrence import RecurringEventSpawner
from gastos.services.storage import FileStorage, LocalFileStorage


def get_push_sender() -> PushSender:
    return HttpPushSender()


def get_file_storage() -> FileStorage:
    return LocalFileStorage()


def get_notifier(
    db: AsyncIOMotorDatabase = Depends(get_db),
    sender: PushSender = Depends(get_push_sender)
) -> NotificationDispatcher:
    return NotificationDispatcher(PushTokenRepository(db), sender)


def get_event_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> EventService:
    return EventService(EventRepository(db), InvitationRepository(db), UserRepository(db))


def get_lifecycle_controller(
    db: AsyncIOMotorDatabase = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
) -> EventLifecycleController:
    event_repo = EventRepository(db)
    audit_repo = AuditRepository(db)
    return EventLifecycleController(
        event_repo=event_repo,
        balance_engine=BalanceEngine(BalanceRepository(db)),
        spawner=RecurringEventSpawner(event_repo, InvitationRepository(db), audit_repo),
        notifier=notifier,
        audit_repo=audit_repo
    )


def get_invitation_gate(
    db: AsyncIOMotorDatabase = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
) -> InvitationGate:
    return InvitationGate(
        EventRepository(db),
        InvitationRepository(db),
        UserRepository(db),
        AuditRepository(db),
        notifier
    )


def get_attachment_validator(
    db: AsyncIOMotorDatabase = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage)
) -> AttachmentValidator:
    return AttachmentValidator(storage, AuditRepository(db))


async def verify_trigger_secret(x_trigger_secret: str | None = Header(default=None)) -> None:
    """Trigger endpoints are called by the platform, not by users."""
    if x_trigger_secret != settings.TRIGGER_SECRET:
        raise PermissionDenied("Trigger secret inválido")
