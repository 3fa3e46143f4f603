# shopfloor/data_access/sale_products_repository.py

from typing import List

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.sale_product_entity import SaleProductEntity


class SaleProductsRepository(BaseRepository[SaleProductEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=SaleProductEntity,
                         table_name="sale_products")

    def get_by_sale_id(self, sale_id: int) -> List[SaleProductEntity]:
        query = """
            SELECT sp.*, p.name AS product_name, p.units AS product_units
            FROM sale_products sp
            JOIN products p ON p.id = sp.product_id
            WHERE sp.sale_id = ?
            ORDER BY sp.id
        """
        rows = self.db_manager.fetch_all(query, (sale_id,))
        return self._entities_from_joined_rows(rows, {"product_name": "product_name", "product_units": "product_units"})
