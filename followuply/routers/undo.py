"""
Undo for recent deletes
"""
from fastapi import APIRouter, Depends

from followuply.deps import get_audit_trail, get_current_user_id
from followuply.middleware.rate_limiter import rate_limited
from followuply.models.schemas import Toast
from followuply.routers.common import respond
from followuply.services.audit_service import AuditTrail
from followuply.services.undo import UndoRegistry, get_undo_registry

router = APIRouter(prefix="/api/undo", tags=["undo"])


@router.post("/{token}", dependencies=[Depends(rate_limited("undo"))])
async def undo_delete(
    token: str,
    user_id: str = Depends(get_current_user_id),
    undo: UndoRegistry = Depends(get_undo_registry),
    audit: AuditTrail = Depends(get_audit_trail),
):
    """Bring back a deleted record while the undo window is open"""
    restored = await undo.undo(user_id, token)
    if restored is None:
        # Window closed: nothing to do
        return {
            "data": None,
            "restored": False,
            "toast": Toast(message="Undo is no longer available", kind="info").model_dump(),
        }

    entity = type(restored).__name__.removesuffix("Record").lower()
    audit.log_action(user_id, f"{entity}_restored", entity, restored.id)
    body = respond(restored, "Delete undone")
    body["restored"] = True
    return body
