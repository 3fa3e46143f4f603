# shopfloor/data_access/reps_repository.py

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.rep_entity import RepEntity


class RepsRepository(BaseRepository[RepEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=RepEntity,
                         table_name="reps")
