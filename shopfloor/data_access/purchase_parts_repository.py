# shopfloor/data_access/purchase_parts_repository.py

from typing import List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.purchase_part_entity import PurchasePartEntity


class PurchasePartsRepository(BaseRepository[PurchasePartEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PurchasePartEntity,
                         table_name="purchase_parts")

    def get_by_purchase_id(self, purchase_id: int) -> List[PurchasePartEntity]:
        query = """
            SELECT pp.*, p.name AS part_name
            FROM purchase_parts pp
            JOIN parts p ON p.id = pp.part_id
            WHERE pp.purchase_id = ?
            ORDER BY pp.id
        """
        rows = self.db_manager.fetch_all(query, (purchase_id,))
        return self._entities_from_joined_rows(rows, {"part_name": "part_name"})
