# shopfloor/data_access/sales_repository.py

import logging
from typing import List, Optional

from shopfloor.constants import SaleStatus
from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.sale_entity import SaleEntity

logger = logging.getLogger(__name__)

# Sales without a rep are kept by the LEFT JOIN.
_SALES_WITH_NAMES = """
    SELECT s.*, c.name AS client_name, r.name AS rep_name, r.percentage AS rep_percentage
    FROM sales s
    JOIN clients c ON c.id = s.client_id
    LEFT JOIN reps r ON r.id = s.rep_id
"""

_DISPLAY_COLUMNS = {
    "client_name": "client_name",
    "rep_name": "rep_name",
    "rep_percentage": "rep_percentage",
}


class SalesRepository(BaseRepository[SaleEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=SaleEntity,
                         table_name="sales")

    def get_all_with_names(self) -> List[SaleEntity]:
        rows = self.db_manager.fetch_all(_SALES_WITH_NAMES + " ORDER BY s.id")
        return self._entities_from_joined_rows(rows, _DISPLAY_COLUMNS)

    def get_by_status(self, status: SaleStatus) -> List[SaleEntity]:
        rows = self.db_manager.fetch_all(_SALES_WITH_NAMES + " WHERE s.status = ? ORDER BY s.id", (status.value,))
        return self._entities_from_joined_rows(rows, _DISPLAY_COLUMNS)

    def get_with_names(self, sale_id: int) -> Optional[SaleEntity]:
        rows = self.db_manager.fetch_all(_SALES_WITH_NAMES + " WHERE s.id = ?", (sale_id,))
        entities = self._entities_from_joined_rows(rows, _DISPLAY_COLUMNS)
        return entities[0] if entities else None

    def set_status(self, sale_id: int, status: SaleStatus) -> None:
        self.update_fields(sale_id, {"status": status})
