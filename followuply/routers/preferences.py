"""
Local UI preference endpoints
"""
from fastapi import APIRouter, Depends

from followuply.models.schemas import PreferencesUpdate
from followuply.routers.common import respond
from followuply.services.preferences import PreferencesStore, get_preferences_store

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("/")
def get_preferences(store: PreferencesStore = Depends(get_preferences_store)):
    return store.as_dict()


@router.put("/")
def update_preferences(
    data: PreferencesUpdate,
    store: PreferencesStore = Depends(get_preferences_store),
):
    values = store.update(data.model_dump(exclude_unset=True))
    return respond(values, "Preferences saved")
