# shopfloor/data_access/product_parts_repository.py

import logging
from decimal import Decimal
from typing import Dict, List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.product_part_entity import ProductPartEntity

logger = logging.getLogger(__name__)


class ProductPartsRepository(BaseRepository[ProductPartEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ProductPartEntity,
                         table_name="product_parts")

    def get_by_product_id(self, product_id: int) -> List[ProductPartEntity]:
        query = """
            SELECT pp.*, p.name AS part_name
            FROM product_parts pp
            JOIN parts p ON p.id = pp.part_id
            WHERE pp.product_id = ?
            ORDER BY pp.id
        """
        rows = self.db_manager.fetch_all(query, (product_id,))
        return self._entities_from_joined_rows(rows, {"part_name": "part_name"})

    def get_by_part_id(self, part_id: int) -> List[ProductPartEntity]:
        return self.find_by_criteria({"part_id": part_id})

    def get_grouped_by_product(self) -> Dict[int, List[ProductPartEntity]]:
        grouped: Dict[int, List[ProductPartEntity]] = {}
        for pp in self.get_all(order_by="product_id, id"):
            grouped.setdefault(pp.product_id, []).append(pp)
        return grouped

    def update_cost_for_part(self, part_id: int, cost: Decimal) -> int:
        query = f"UPDATE {self._table_name} SET cost = ? WHERE part_id = ?"
        cursor = self.db_manager.execute_query(query, (float(cost), part_id))
        logger.debug(f"Refreshed cost snapshot of part {part_id} on {cursor.rowcount} product lines.")
        return cursor.rowcount
