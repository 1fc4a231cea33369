"""
Profile persistence. A profile row is keyed by the user id itself.
"""
from typing import Optional

from sqlalchemy.orm import Session

from followuply.constants import DEFAULT_CURRENCY, DEFAULT_LANGUAGE
from followuply.models.database import Profile
from followuply.models.schemas import ProfileRecord, ProfileUpdate
from followuply.services.base import RecordGateway, ensure_valid, require_user_id
from followuply.validation.forms import validate_profile_form


class ProfileGateway(RecordGateway):
    entity = "profile"
    model = Profile
    record = ProfileRecord

    async def get(self, user_id: str) -> Optional[ProfileRecord]:
        """The profile, or None if the user has none yet"""
        require_user_id(user_id)

        def work(db: Session):
            obj = db.query(Profile).filter(Profile.id == user_id).first()
            return self._to_record(obj) if obj else None

        return await self._run("get", work)

    async def ensure(self, user_id: str) -> ProfileRecord:
        """Return the profile, creating one with defaults on first use"""
        require_user_id(user_id)

        def work(db: Session):
            obj = db.query(Profile).filter(Profile.id == user_id).first()
            if obj is None:
                obj = Profile(
                    id=user_id,
                    currency=DEFAULT_CURRENCY,
                    language=DEFAULT_LANGUAGE,
                    plan="free"
                )
                db.add(obj)
                db.commit()
                db.refresh(obj)
            return self._to_record(obj)

        return await self._run("ensure", work)

    async def update(self, user_id: str, changes: ProfileUpdate) -> ProfileRecord:
        require_user_id(user_id)
        values = ensure_valid(validate_profile_form(changes.model_dump(exclude_unset=True)))

        def work(db: Session):
            obj = db.query(Profile).filter(Profile.id == user_id).first()
            if obj is None:
                obj = Profile(id=user_id)
                db.add(obj)
            for key, value in values.items():
                setattr(obj, key, value)
            db.commit()
            db.refresh(obj)
            return self._to_record(obj)

        return await self._run("update", work)
