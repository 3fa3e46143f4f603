# shopfloor/data_access/manufacture_products_repository.py

from typing import List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.manufacture_product_entity import ManufactureProductEntity


class ManufactureProductsRepository(BaseRepository[ManufactureProductEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ManufactureProductEntity,
                         table_name="manufacture_products")

    def get_by_manufacture_id(self, manufacture_id: int) -> List[ManufactureProductEntity]:
        query = """
            SELECT mp.*, p.name AS product_name
            FROM manufacture_products mp
            JOIN products p ON p.id = mp.product_id
            WHERE mp.manufacture_id = ?
            ORDER BY mp.id
        """
        rows = self.db_manager.fetch_all(query, (manufacture_id,))
        return self._entities_from_joined_rows(rows, {"product_name": "product_name"})
