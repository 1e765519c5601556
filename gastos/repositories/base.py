from contextlib import contextmanager
import logging

from pymongo.errors import PyMongoError

from gastos.core.errors import StorageFailure

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(action: str):
    """Re-raise driver errors as StorageFailure so callers see one failure type."""
    try:
        yield
    except PyMongoError as exc:
        logger.error("Storage failure while %s: %s", action, exc)
        raise StorageFailure(f"Error de almacenamiento al {action}") from exc
