"""
SQLAlchemy database models for FollowUply

Every table except profiles carries the owning user_id; ids are generated
UUID strings and timestamps are filled in by the store.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    create_engine, event, Boolean, Column, Date, DateTime, ForeignKey,
    Integer, JSON, Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from followuply.config import config


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as naive UTC, the convention for every DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_db_engine(url: str = None) -> Engine:
    """Create an engine; SQLite gets foreign key enforcement switched on"""
    url = url or config.get_database_url()
    is_sqlite = url.startswith("sqlite")
    db_engine = create_engine(
        url,
        echo=False,
        pool_pre_ping=not is_sqlite,
        connect_args={"check_same_thread": False} if is_sqlite else {}
    )
    if is_sqlite:
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
    return db_engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class Profile(Base):
    """Per-user settings, keyed by the user id itself"""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    full_name = Column(String(100), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    timezone = Column(String(64), nullable=False, default="UTC")
    language = Column(String(5), nullable=False, default="en")
    plan = Column(String(20), nullable=False, default="free")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Client(Base):
    """Client/Customer model"""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=True)
    phone = Column(String(32), nullable=True)
    company = Column(String(100), nullable=True)
    platform = Column(String(20), nullable=False, default="direct")
    contact_method = Column(String(20), nullable=False, default="email")
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="active")
    total_projects = Column(Integer, nullable=False, default=0)
    total_earned = Column(Numeric(12, 2), nullable=False, default=0)
    last_contact = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Invoice(Base):
    """Invoice model; a client with invoices cannot be deleted"""
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("user_id", "invoice_number", name="uq_invoices_user_number"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False)
    invoice_number = Column(String(32), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    due_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="unpaid")
    payment_method = Column(String(100), nullable=True)
    payment_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    client = relationship("Client", lazy="joined")

    @property
    def client_name(self):
        return self.client.name if self.client else None


class Reminder(Base):
    """Reminder model"""
    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    reminder_type = Column(String(20), nullable=False, default="custom")
    status = Column(String(20), nullable=False, default="pending")
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    client = relationship("Client", lazy="joined")

    @property
    def client_name(self):
        return self.client.name if self.client else None


class Expense(Base):
    """Expense model"""
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category = Column(String(50), nullable=False)
    subcategory = Column(String(100), nullable=True)
    expense_date = Column(Date, nullable=False)
    payment_method = Column(String(100), nullable=True)
    tax_deductible = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="pending")
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Notification(Base):
    """In-app notification shown in the notification center"""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")
    is_read = Column(Boolean, nullable=False, default=False)
    action_url = Column(String(500), nullable=True)
    related_id = Column(String(36), nullable=True)
    related_type = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


def init_db(bind: Engine = None):
    """Create all tables"""
    Base.metadata.create_all(bind=bind or engine)
