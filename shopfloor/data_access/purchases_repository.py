# shopfloor/data_access/purchases_repository.py

from shopfloor.data_access.base_repository import BaseRepository
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.business_logic.entities.purchase_entity import PurchaseEntity


class PurchasesRepository(BaseRepository[PurchaseEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PurchaseEntity,
                         table_name="purchases")
