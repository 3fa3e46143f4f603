# shopfloor/data_access/products_repository.py

import logging
from typing import List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.product_entity import ProductEntity

logger = logging.getLogger(__name__)


class ProductsRepository(BaseRepository[ProductEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ProductEntity,
                         table_name="products")

    def get_low_stock(self, threshold: int) -> List[ProductEntity]:
        return self.find_by_criteria({"units": ("<=", threshold)}, order_by="units, id")

    def adjust_units(self, product_id: int, delta: int) -> None:
        query = f"UPDATE {self._table_name} SET units = units + ? WHERE id = ?"
        self.db_manager.execute_query(query, (delta, product_id))
