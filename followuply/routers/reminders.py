"""
Reminder endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query

from followuply.deps import get_audit_trail, get_current_user_id, get_profile_gateway, get_reminder_gateway
from followuply.middleware.rate_limiter import RateLimitGate, get_rate_limit_gate, rate_limited
from followuply.models.schemas import ReminderCreate, ReminderUpdate
from followuply.routers.common import check_form, gate_action, respond
from followuply.services.audit_service import AuditTrail
from followuply.services.plans import ensure_within_plan
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.reminder_gateway import ReminderGateway
from followuply.services.undo import UndoRegistry, get_undo_registry
from followuply.validation.forms import validate_reminder_form

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("/")
async def list_reminders(
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
):
    """List all reminders, soonest due first"""
    return await reminders.list(user_id)


@router.get("/upcoming")
async def list_upcoming_reminders(
    days: int = Query(7, ge=1, le=365),
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
):
    return await reminders.upcoming(user_id, days)


@router.get("/search", dependencies=[Depends(rate_limited("reminders:search"))])
async def search_reminders(
    q: str = "",
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
):
    return await reminders.search(user_id, q)


@router.post("/")
async def create_reminder(
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
    profiles: ProfileGateway = Depends(get_profile_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_reminder_form(data))
    gate_action(rate_gate, user_id, "reminders:create")
    await ensure_within_plan(profiles, reminders, user_id, "reminders")

    reminder = await reminders.create(user_id, ReminderCreate(**form.sanitized_value))
    audit.log_action(user_id, "reminder_created", "reminder", reminder.id, {"due_date": reminder.due_date})
    return respond(reminder, "Reminder created successfully", form.warnings)


@router.get("/{reminder_id}")
async def get_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
):
    return await reminders.get(user_id, reminder_id)


@router.put("/{reminder_id}")
async def update_reminder(
    reminder_id: str,
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    form = check_form(validate_reminder_form(data, partial=True))
    gate_action(rate_gate, user_id, "reminders:update")

    reminder = await reminders.update(user_id, reminder_id, ReminderUpdate(**form.sanitized_value))
    audit.log_action(user_id, "reminder_updated", "reminder", reminder.id, {"fields": sorted(form.sanitized_value)})
    return respond(reminder, "Reminder updated successfully", form.warnings)


@router.post("/{reminder_id}/complete", dependencies=[Depends(rate_limited("reminders:update"))])
async def complete_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
    audit: AuditTrail = Depends(get_audit_trail),
):
    reminder = await reminders.mark_completed(user_id, reminder_id)
    audit.log_action(user_id, "reminder_completed", "reminder", reminder.id)
    return respond(reminder, "Reminder marked as completed")


@router.delete("/{reminder_id}", dependencies=[Depends(rate_limited("reminders:delete"))])
async def delete_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id),
    reminders: ReminderGateway = Depends(get_reminder_gateway),
    undo: UndoRegistry = Depends(get_undo_registry),
    audit: AuditTrail = Depends(get_audit_trail),
):
    snapshot = await reminders.delete(user_id, reminder_id)
    token = undo.register(user_id, "reminder", snapshot, reminders.restore)
    audit.log_action(user_id, "reminder_deleted", "reminder", snapshot.id)
    return respond(
        {"id": snapshot.id, "undo_token": token, "undo_window_seconds": undo.window_seconds},
        "Reminder deleted"
    )
