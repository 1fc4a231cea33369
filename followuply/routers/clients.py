"""
Client endpoints
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from followuply.deps import get_audit_trail, get_client_gateway, get_current_user_id, get_profile_gateway
from followuply.middleware.rate_limiter import RateLimitGate, get_rate_limit_gate, rate_limited
from followuply.models.schemas import ClientCreate, ClientUpdate
from followuply.routers.common import check_form, gate_action, respond
from followuply.services.audit_service import AuditTrail
from followuply.services.client_gateway import ClientGateway
from followuply.services.plans import ensure_within_plan
from followuply.services.profile_gateway import ProfileGateway
from followuply.services.undo import UndoRegistry, get_undo_registry
from followuply.validation.forms import validate_client_form

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("/")
async def list_clients(
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
):
    """List all clients, newest first"""
    return await clients.list(user_id)


@router.get("/search", dependencies=[Depends(rate_limited("clients:search"))])
async def search_clients(
    q: str = "",
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
):
    return await clients.search(user_id, q)


@router.post("/")
async def create_client(
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
    profiles: ProfileGateway = Depends(get_profile_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Create a new client"""
    form = check_form(validate_client_form(data))
    gate_action(rate_gate, user_id, "clients:create")
    await ensure_within_plan(profiles, clients, user_id, "clients")

    client = await clients.create(user_id, ClientCreate(**form.sanitized_value))
    audit.log_action(user_id, "client_created", "client", client.id, {"name": client.name})
    return respond(client, "Client added successfully", form.warnings)


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
):
    """Get a single client"""
    return await clients.get(user_id, client_id)


@router.put("/{client_id}")
async def update_client(
    client_id: str,
    data: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
    rate_gate: RateLimitGate = Depends(get_rate_limit_gate),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Update the fields that were sent"""
    form = check_form(validate_client_form(data, partial=True))
    gate_action(rate_gate, user_id, "clients:update")

    client = await clients.update(user_id, client_id, ClientUpdate(**form.sanitized_value))
    audit.log_action(user_id, "client_updated", "client", client.id, {"fields": sorted(form.sanitized_value)})
    return respond(client, "Client updated successfully", form.warnings)


@router.delete("/{client_id}", dependencies=[Depends(rate_limited("clients:delete"))])
async def delete_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    clients: ClientGateway = Depends(get_client_gateway),
    undo: UndoRegistry = Depends(get_undo_registry),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Delete a client; the delete can be undone for a few seconds"""
    snapshot = await clients.delete(user_id, client_id)
    token = undo.register(user_id, "client", snapshot, clients.restore)
    audit.log_action(user_id, "client_deleted", "client", snapshot.id, {"name": snapshot.name})
    return respond(
        {"id": snapshot.id, "undo_token": token, "undo_window_seconds": undo.window_seconds},
        "Client deleted"
    )
