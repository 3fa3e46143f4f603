# shopfloor/business_logic/client_manager.py

import logging
from typing import List, Optional

from shopfloor.business_logic.entities.client_entity import ClientEntity
from shopfloor.data_access.clients_repository import ClientsRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class ClientManager:
    def __init__(self, clients_repository: ClientsRepository):
        if clients_repository is None:
            raise ValueError("clients_repository cannot be None")
        self.clients_repository = clients_repository

    def add_client(self, name: str, address: str = "", email: Optional[str] = None) -> int:
        """Adds a client and returns its new id."""
        if not name or not name.strip():
            raise InvalidInputError("Client name cannot be empty.")
        client = self.clients_repository.add(ClientEntity(name=name.strip(), address=(address or "").strip(), email=email or None))
        logger.info(f"Client '{client.name}' (ID: {client.id}) added.")
        return client.id

    def get_client_by_id(self, client_id: int) -> Optional[ClientEntity]:
        return self.clients_repository.get_by_id(client_id)

    def get_all_clients(self) -> List[ClientEntity]:
        return self.clients_repository.get_all()

    def update_client(self, client_id: int, name: str, address: str = "", email: Optional[str] = None) -> ClientEntity:
        if not name or not name.strip():
            raise InvalidInputError("Client name cannot be empty.")
        updated = self.clients_repository.update_fields(client_id, {
            "name": name.strip(),
            "address": (address or "").strip(),
            "email": email or None,
        })
        logger.info(f"Client ID {client_id} updated.")
        return updated

    def delete_client(self, client_id: int) -> None:
        if not self.clients_repository.delete(client_id):
            raise NotFoundError(f"Client {client_id} not found.")
        logger.info(f"Client ID {client_id} deleted.")
