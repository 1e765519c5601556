import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from gastos.api.deps import get_file_storage, get_push_sender
from gastos.core.auth import create_access_token
from gastos.db.mongo import create_indexes, get_db
from gastos.main import app
from gastos.repositories.audit_repo import AuditRepository
from gastos.repositories.balance_repo import BalanceRepository
from gastos.repositories.event_repo import EventRepository
from gastos.repositories.invitation_repo import InvitationRepository
from gastos.repositories.push_token_repo import PushTokenRepository
from gastos.repositories.user_repo import UserRepository
from gastos.services.balance_engine import BalanceEngine
from gastos.services.event_service import EventService
from gastos.services.invitation_gate import InvitationGate
from gastos.services.lifecycle import EventLifecycleController
from gastos.services.notifications import NotificationDispatcher
from gastos.services.recurrence import RecurringEventSpawner
from gastos.services.storage import LocalFileStorage

TEST_DATABASE_NAME = "gastos_test"


class RecordingSender:
    """PushSender that keeps messages in memory, or fails every delivery."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, token, message):
        if self.fail:
            raise httpx.ConnectError("push gateway unreachable")
        self.sent.append((token, message))


@pytest_asyncio.fixture
async def db():
    """In-memory Motor database, fresh for every test."""
    client = AsyncMongoMockClient()
    database = client[TEST_DATABASE_NAME]
    await create_indexes(database)
    return database


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def failing_sender():
    return RecordingSender(fail=True)


@pytest.fixture
def event_repo(db):
    return EventRepository(db)


@pytest.fixture
def invitation_repo(db):
    return InvitationRepository(db)


@pytest.fixture
def balance_repo(db):
    return BalanceRepository(db)


@pytest.fixture
def user_repo(db):
    return UserRepository(db)


@pytest.fixture
def audit_repo(db):
    return AuditRepository(db)


@pytest.fixture
def push_token_repo(db):
    return PushTokenRepository(db)


@pytest.fixture
def notifier(push_token_repo, sender):
    return NotificationDispatcher(push_token_repo, sender)


@pytest.fixture
def event_service(event_repo, invitation_repo, user_repo):
    return EventService(event_repo, invitation_repo, user_repo)


@pytest.fixture
def gate(event_repo, invitation_repo, user_repo, audit_repo, notifier):
    return InvitationGate(event_repo, invitation_repo, user_repo, audit_repo, notifier)


@pytest.fixture
def balance_engine(balance_repo):
    return BalanceEngine(balance_repo)


@pytest.fixture
def spawner(event_repo, invitation_repo, audit_repo):
    return RecurringEventSpawner(event_repo, invitation_repo, audit_repo)


@pytest.fixture
def controller(event_repo, balance_engine, spawner, notifier, audit_repo):
    return EventLifecycleController(
        event_repo=event_repo,
        balance_engine=balance_engine,
        spawner=spawner,
        notifier=notifier,
        audit_repo=audit_repo
    )


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "bucket"


@pytest_asyncio.fixture
async def client(db, sender, storage_root):
    """API client bound to the in-memory database; the lifespan is not run."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_push_sender] = lambda: sender
    app.dependency_overrides[get_file_storage] = lambda: LocalFileStorage(storage_root)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer header for a caller identity."""
    def _headers(uid: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(uid)}"}
    return _headers
