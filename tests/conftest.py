"""
Pytest fixtures for testing
"""
import os
import uuid

# Keep the module-level engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from followuply import deps
from followuply.middleware.rate_limiter import RateLimitGate, RateLimiter, get_rate_limit_gate
from followuply.models.database import create_db_engine, init_db
from followuply.services.audit_service import AuditService, get_audit_service
from followuply.services.client_gateway import ClientGateway
from followuply.services.expense_gateway import ExpenseGateway
from followuply.services.invoice_gateway import InvoiceGateway
from followuply.services.notification_gateway import NotificationGateway
from followuply.services.preferences import PreferencesStore, get_preferences_store
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.reminder_gateway import ReminderGateway
from followuply.services.undo import UndoRegistry, get_undo_registry


class FakeClock:
    """Manually advanced clock; call it to read the time"""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, amount: float):
        self.now += amount


class RecordingWorksheet:
    """Stands in for a gspread worksheet"""

    def __init__(self):
        self.rows = []

    def append_row(self, row):
        self.rows.append(row)


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite so worker threads each get their own connection"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'followuply-test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def other_user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def clients(session_factory) -> ClientGateway:
    return ClientGateway(session_factory)


@pytest.fixture
def invoices(session_factory) -> InvoiceGateway:
    return InvoiceGateway(session_factory)


@pytest.fixture
def reminders(session_factory) -> ReminderGateway:
    return ReminderGateway(session_factory)


@pytest.fixture
def expenses(session_factory) -> ExpenseGateway:
    return ExpenseGateway(session_factory)


@pytest.fixture
def profiles(session_factory) -> ProfileGateway:
    return ProfileGateway(session_factory)


@pytest.fixture
def notifications(session_factory) -> NotificationGateway:
    return NotificationGateway(session_factory)


@pytest.fixture
def rate_clock() -> FakeClock:
    """Milliseconds, as the rate limiter counts them"""
    return FakeClock(0.0)


@pytest.fixture
def rate_gate(rate_clock) -> RateLimitGate:
    return RateLimitGate(RateLimiter(clock=rate_clock))


@pytest.fixture
def undo_clock() -> FakeClock:
    """Seconds, as the undo registry counts them"""
    return FakeClock(1000.0)


@pytest.fixture
def undo_registry(undo_clock) -> UndoRegistry:
    return UndoRegistry(window_seconds=6, clock=undo_clock)


@pytest.fixture
def worksheet() -> RecordingWorksheet:
    return RecordingWorksheet()


@pytest.fixture
def audit(worksheet) -> AuditService:
    return AuditService(worksheet=worksheet)


@pytest.fixture
def preferences_store(tmp_path) -> PreferencesStore:
    return PreferencesStore(str(tmp_path / "preferences.json"))


@pytest.fixture
def api(clients, invoices, reminders, expenses, profiles, notifications,
        rate_gate, undo_registry, audit, preferences_store):
    """TestClient wired to the test database and fresh in-memory state"""
    from followuply.main import app

    app.dependency_overrides.update({
        deps.get_client_gateway: lambda: clients,
        deps.get_invoice_gateway: lambda: invoices,
        deps.get_reminder_gateway: lambda: reminders,
        deps.get_expense_gateway: lambda: expenses,
        deps.get_profile_gateway: lambda: profiles,
        deps.get_notification_gateway: lambda: notifications,
        get_rate_limit_gate: lambda: rate_gate,
        get_undo_registry: lambda: undo_registry,
        get_audit_service: lambda: audit,
        get_preferences_store: lambda: preferences_store,
    })
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers(user_id) -> dict:
    return {"X-User-Id": user_id}
