# shopfloor/data_access/clients_repository.py

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.client_entity import ClientEntity


class ClientsRepository(BaseRepository[ClientEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ClientEntity,
                         table_name="clients")
