# shopfloor/data_access/parts_repository.py

import logging
from typing import List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.part_entity import PartEntity

logger = logging.getLogger(__name__)


class PartsRepository(BaseRepository[PartEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PartEntity,
                         table_name="parts")

    def get_low_stock(self, threshold: int) -> List[PartEntity]:
        return self.find_by_criteria({"units_left": ("<=", threshold)}, order_by="units_left, id")

    def adjust_units_left(self, part_id: int, delta: int) -> None:
        query = f"UPDATE {self._table_name} SET units_left = units_left + ? WHERE id = ?"
        self.db_manager.execute_query(query, (delta, part_id))
