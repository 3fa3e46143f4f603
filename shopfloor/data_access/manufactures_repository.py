# shopfloor/data_access/manufactures_repository.py

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.manufacture_entity import ManufactureEntity


class ManufacturesRepository(BaseRepository[ManufactureEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ManufactureEntity,
                         table_name="manufactures")
