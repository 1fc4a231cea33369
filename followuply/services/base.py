"""
Shared plumbing for the record gateways.

A gateway method maps one entity operation onto one unit of work against the
store. The work runs in a worker thread with its own session, so concurrent
loads never share a session. Store failures are translated once, here, and
never retried.
"""
import logging
from typing import Any, Callable, List, Optional, Type

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from followuply.constants import LIST_LIMIT, SEARCH_RESULT_LIMIT
from followuply.errors import AppError, AuthorizationError, NotFoundError, ValidationError, translate_db_error
from followuply.models.database import SessionLocal
from followuply.models.schemas import ValidationResult
from followuply.validation.fields import is_uuid
from followuply.validation.forms import validate_search_query

logger = logging.getLogger(__name__)


def ensure_valid(result: ValidationResult) -> dict:
    """Raise ValidationError unless the pass produced no errors"""
    if not result.is_valid:
        raise ValidationError(result.errors, result.warnings)
    return result.sanitized_value


def require_user_id(user_id: str):
    if not is_uuid(user_id):
        raise ValidationError(["Invalid user ID format"])


def require_record_id(record_id: str):
    if not is_uuid(record_id):
        raise ValidationError(["Invalid ID format"])


class RecordGateway:
    """Base for per-entity gateways; subclasses set the class attributes"""

    entity: str = ""
    model: Any = None
    record: Type = None
    # Newest first unless a subclass says otherwise
    order_by: Callable[[Any], Any] = None
    search_columns: tuple = ()
    validator: Callable[..., ValidationResult] = None

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    # ---------- execution ----------

    async def _run(self, operation: str, work: Callable[[Session], Any]) -> Any:
        return await run_in_threadpool(self._execute, operation, work)

    def _execute(self, operation: str, work: Callable[[Session], Any]) -> Any:
        db = self._session_factory()
        try:
            return work(db)
        except AppError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            error = translate_db_error(e)
            logger.warning(f"{self.entity}.{operation} failed: {error.error_code} ({e.__class__.__name__})")
            raise error from e
        finally:
            db.close()

    # ---------- helpers ----------

    def _ordering(self):
        if self.order_by is not None:
            return self.order_by(self.model)
        return self.model.created_at.desc()

    def _owned(self, db: Session, record_id: str, user_id: str):
        # Filter on owner too, even though the store has its own checks
        obj = db.query(self.model).filter(
            self.model.id == record_id,
            self.model.user_id == user_id
        ).first()
        if obj is None:
            raise NotFoundError(f"{self.entity.capitalize()} not found")
        return obj

    def _to_record(self, obj):
        return self.record.model_validate(obj)

    def _validate(self, data: dict, partial: bool = False) -> dict:
        return ensure_valid(self.validator(data, partial=partial))

    # ---------- operations ----------

    async def list(self, user_id: str, limit: int = LIST_LIMIT) -> List[Any]:
        require_user_id(user_id)
        limit = max(1, min(limit, LIST_LIMIT))

        def work(db: Session):
            rows = db.query(self.model).filter(
                self.model.user_id == user_id
            ).order_by(self._ordering()).limit(limit).all()
            return [self._to_record(r) for r in rows]

        return await self._run("list", work)

    async def get(self, user_id: str, record_id: str):
        require_user_id(user_id)
        require_record_id(record_id)

        def work(db: Session):
            return self._to_record(self._owned(db, record_id, user_id))

        return await self._run("get", work)

    async def count(self, user_id: str) -> int:
        require_user_id(user_id)

        def work(db: Session):
            return db.query(self.model).filter(self.model.user_id == user_id).count()

        return await self._run("count", work)

    async def search(self, user_id: str, query: str, limit: int = SEARCH_RESULT_LIMIT) -> List[Any]:
        require_user_id(user_id)
        q = ensure_valid(validate_search_query(query))["query"]
        limit = max(1, min(limit, SEARCH_RESULT_LIMIT))

        def work(db: Session):
            matches = [
                getattr(self.model, column).icontains(q, autoescape=True)
                for column in self.search_columns
            ]
            rows = db.query(self.model).filter(
                self.model.user_id == user_id,
                or_(*matches)
            ).order_by(self._ordering()).limit(limit).all()
            return [self._to_record(r) for r in rows]

        return await self._run("search", work)

    async def _insert(self, user_id: str, values: dict):
        def work(db: Session):
            obj = self.model(user_id=user_id, **values)
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run("create", work)

    async def _apply(self, user_id: str, record_id: str, values: dict, operation: str = "update"):
        def work(db: Session):
            obj = self._owned(db, record_id, user_id)
            for key, value in values.items():
                setattr(obj, key, value)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run(operation, work)

    async def delete(self, user_id: str, record_id: str):
        """Delete and hand back the removed record so it can be restored"""
        require_user_id(user_id)
        require_record_id(record_id)

        def work(db: Session):
            obj = self._owned(db, record_id, user_id)
            snapshot = self._to_record(obj)
            db.delete(obj)
            db.commit()
            return snapshot

        return await self._run("delete", work)

    async def restore(self, user_id: str, snapshot):
        """Put a deleted record back with its original id and timestamps"""
        require_user_id(user_id)
        if snapshot.user_id != user_id:
            raise AuthorizationError()
        self._validate(snapshot.model_dump())

        columns = {c.name for c in self.model.__table__.columns}
        values = {k: v for k, v in snapshot.model_dump().items() if k in columns}

        def work(db: Session):
            obj = self.model(**values)
            db.add(obj)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run("restore", work)
