# shopfloor/business_logic/dashboard_manager.py

import logging
from dataclasses import dataclass, field
from typing import List

from shopfloor.business_logic.entities.part_entity import PartEntity
from shopfloor.business_logic.entities.product_entity import ProductEntity
from shopfloor.business_logic.entities.sale_entity import SaleEntity
from shopfloor.business_logic.part_manager import PartManager
from shopfloor.business_logic.product_manager import ProductManager
from shopfloor.business_logic.sale_manager import SaleManager
from shopfloor.config import LOW_STOCK_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass
class HomeSnapshot:
    draft_sales: List[SaleEntity] = field(default_factory=list)
    low_stock_products: List[ProductEntity] = field(default_factory=list)
    low_stock_parts: List[PartEntity] = field(default_factory=list)


class DashboardManager:
    """What needs attention: unfulfilled sales and items running low."""

    def __init__(self,
                 sale_manager: SaleManager,
                 product_manager: ProductManager,
                 part_manager: PartManager,
                 low_stock_threshold: int = LOW_STOCK_THRESHOLD):
        if sale_manager is None: raise ValueError("sale_manager cannot be None")
        if product_manager is None: raise ValueError("product_manager cannot be None")
        if part_manager is None: raise ValueError("part_manager cannot be None")
        self.sale_manager = sale_manager
        self.product_manager = product_manager
        self.part_manager = part_manager
        self.low_stock_threshold = low_stock_threshold

    def get_home(self) -> HomeSnapshot:
        snapshot = HomeSnapshot(
            draft_sales=self.sale_manager.get_draft_sales(),
            low_stock_products=self.product_manager.get_low_stock_products(self.low_stock_threshold),
            low_stock_parts=self.part_manager.get_low_stock_parts(self.low_stock_threshold),
        )
        logger.debug(
            f"Home: {len(snapshot.draft_sales)} draft sales, {len(snapshot.low_stock_products)} low products, "
            f"{len(snapshot.low_stock_parts)} low parts."
        )
        return snapshot
