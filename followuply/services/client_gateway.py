"""
Client persistence
"""
from followuply.models.database import Client
from followuply.models.schemas import ClientCreate, ClientRecord, ClientUpdate
from followuply.services.base import RecordGateway, require_record_id, require_user_id
from followuply.validation.forms import validate_client_form


class ClientGateway(RecordGateway):
    """Clients, newest first"""

    entity = "client"
    model = Client
    record = ClientRecord
    search_columns = ("name", "email", "company", "notes")
    validator = staticmethod(validate_client_form)

    async def create(self, user_id: str, client: ClientCreate) -> ClientRecord:
        require_user_id(user_id)
        values = self._validate(client.model_dump())
        return await self._insert(user_id, values)

    async def update(self, user_id: str, client_id: str, changes: ClientUpdate) -> ClientRecord:
        require_user_id(user_id)
        require_record_id(client_id)
        values = self._validate(changes.model_dump(exclude_unset=True), partial=True)
        return await self._apply(user_id, client_id, values)
