"""
Profile endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from followuply.deps import get_audit_trail, get_current_user_id, get_profile_gateway
from followuply.middleware.rate_limiter import RateLimitGate, get_rate_limit_gate
from followuply.models.schemas import ProfileUpdate
from followuply.routers.common import check_form, gate_action, respond
from followuply.services.audit_service import AuditTrail
from followuply.services.profile_gateway import ProfileGateway
from followuply.validation.forms import validate_profile_form

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/")
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileGateway = Depends(get_profile_gateway),
):
    """The caller's profile, created with defaults on first visit"""
    return await profiles.ensure(user_id)


@router.put("/")
async def update_profile(
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    profiles: ProfileGateway = Depends(get_profile_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_profile_form(data))
    gate_action(rate_gate, user_id, "profiles:update")

    profile = await profiles.update(user_id, ProfileUpdate(**form.sanitized_value))
    audit.log_action(user_id, "profile_updated", "profile", profile.id, {"fields": sorted(form.sanitized_value)})
    return respond(profile, "Profile updated successfully")
