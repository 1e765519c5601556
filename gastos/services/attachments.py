"""
Attachment Validator - gatekeeper for uploaded event files.

Invoked once per finalized object. Objects live under
events/<evento_id>/<file>. Non-conforming objects are deleted from storage;
the event's adjuntos list is never touched here.

The per-event limit is checked by counting the other objects under the
event's prefix at validation time. Two uploads validated at the same moment
can both see one existing file and both be accepted.
"""

from enum import Enum
import logging

from gastos.core.config import settings
from gastos.models.audit import AuditEntry, AuditType
from gastos.repositories.audit_repo import AuditRepository
from gastos.schemas.trigger import FinalizedFile
from gastos.services.storage import FileStorage

logger = logging.getLogger(__name__)


class AttachmentOutcome(str, Enum):
    IGNORED = "ignored"
    ACCEPTED = "accepted"
    REJECTED_TYPE = "rejected_type"
    REJECTED_SIZE = "rejected_size"
    REJECTED_LIMIT = "rejected_limit"


class AttachmentValidator:
    def __init__(
        self,
        storage: FileStorage,
        audit_repo: AuditRepository,
        prefix: str = settings.ATTACHMENT_PREFIX,
        allowed_types: list[str] = settings.ALLOWED_ATTACHMENT_TYPES,
        max_bytes: int = settings.MAX_ATTACHMENT_BYTES,
        max_files: int = settings.MAX_ATTACHMENTS_PER_EVENT
    ):
        self.storage = storage
        self.audit_repo = audit_repo
        self.prefix = prefix
        self.allowed_types = set(allowed_types)
        self.max_bytes = max_bytes
        self.max_files = max_files

    async def validate(self, file: FinalizedFile) -> AttachmentOutcome:
        logger.info("File uploaded: %s, size: %s, type: %s", file.path, file.size, file.content_type)

        if not file.path.startswith(self.prefix):
            return AttachmentOutcome.IGNORED

        parts = file.path.split("/")
        if len(parts) < 3 or not parts[1]:
            logger.warning("Invalid attachment path: %s", file.path)
            return AttachmentOutcome.IGNORED
        evento_id = parts[1]

        rejection = None
        if file.content_type not in self.allowed_types:
            logger.warning("Attachment type not allowed: %s (%s)", file.content_type, file.path)
            rejection = AttachmentOutcome.REJECTED_TYPE
        elif file.size > self.max_bytes:
            logger.warning("Attachment too large: %s bytes (%s)", file.size, file.path)
            rejection = AttachmentOutcome.REJECTED_SIZE

        # The limit is audited whether or not the file is valid on its own
        existing = await self._count_others(evento_id, file.path)
        over_limit = existing >= self.max_files
        if rejection is None and not over_limit:
            logger.info("Attachment %s accepted", file.path)
            return AttachmentOutcome.ACCEPTED

        await self._delete(file.path)
        if over_limit:
            logger.warning("Event %s already has %d attachments, deleted %s", evento_id, existing, file.path)
            await self.audit_repo.record(AuditEntry(
                tipo=AuditType.SUBIR_ADJUNTO_RECHAZADO,
                evento_id=evento_id,
                actor="system",
                payload={
                    "filePath": file.path,
                    "fileSize": file.size,
                    "contentType": file.content_type,
                    "motivo": "Límite de archivos excedido"
                }
            ))
        return rejection or AttachmentOutcome.REJECTED_LIMIT

    async def _count_others(self, evento_id: str, path: str) -> int:
        try:
            names = await self.storage.list(f"{self.prefix}{evento_id}/")
        except Exception:
            logger.exception("Could not count attachments of event %s", evento_id)
            return 0
        return sum(1 for name in names if name != path)

    async def _delete(self, path: str) -> None:
        try:
            await self.storage.delete(path)
        except Exception:
            logger.exception("Could not delete %s", path)
            return
        logger.info("Deleted %s", path)
