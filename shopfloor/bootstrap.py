# shopfloor/bootstrap.py

import logging
from dataclasses import dataclass

from shopfloor.config import LOW_STOCK_THRESHOLD
from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.data_access.clients_repository import ClientsRepository
from shopfloor.data_access.manufacture_products_repository import ManufactureProductsRepository
from shopfloor.data_access.manufactures_repository import ManufacturesRepository
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.data_access.product_parts_repository import ProductPartsRepository
from shopfloor.data_access.products_repository import ProductsRepository
from shopfloor.data_access.purchase_parts_repository import PurchasePartsRepository
from shopfloor.data_access.purchases_repository import PurchasesRepository
from shopfloor.data_access.reps_repository import RepsRepository
from shopfloor.data_access.sale_products_repository import SaleProductsRepository
from shopfloor.data_access.sales_repository import SalesRepository
from shopfloor.business_logic.client_manager import ClientManager
from shopfloor.business_logic.dashboard_manager import DashboardManager
from shopfloor.business_logic.manufacture_manager import ManufactureManager
from shopfloor.business_logic.part_manager import PartManager
from shopfloor.business_logic.product_manager import ProductManager
from shopfloor.business_logic.purchase_manager import PurchaseManager
from shopfloor.business_logic.rep_manager import RepManager
from shopfloor.business_logic.sale_manager import SaleManager

logger = logging.getLogger(__name__)


@dataclass
class Services:
    db_manager: DatabaseManager
    part_manager: PartManager
    product_manager: ProductManager
    purchase_manager: PurchaseManager
    manufacture_manager: ManufactureManager
    sale_manager: SaleManager
    client_manager: ClientManager
    rep_manager: RepManager
    dashboard_manager: DashboardManager


def build_services(db_manager: DatabaseManager, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> Services:
    logger.info("Initializing Repositories...")
    parts_repo = PartsRepository(db_manager)
    products_repo = ProductsRepository(db_manager)
    product_parts_repo = ProductPartsRepository(db_manager)
    purchases_repo = PurchasesRepository(db_manager)
    purchase_parts_repo = PurchasePartsRepository(db_manager)
    manufactures_repo = ManufacturesRepository(db_manager)
    manufacture_products_repo = ManufactureProductsRepository(db_manager)
    sales_repo = SalesRepository(db_manager)
    sale_products_repo = SaleProductsRepository(db_manager)
    clients_repo = ClientsRepository(db_manager)
    reps_repo = RepsRepository(db_manager)

    logger.info("Initializing Managers...")
    part_manager = PartManager(parts_repo)
    client_manager = ClientManager(clients_repo)
    rep_manager = RepManager(reps_repo)
    product_manager = ProductManager(
        products_repository=products_repo,
        product_parts_repository=product_parts_repo,
        parts_repository=parts_repo,
    )
    purchase_manager = PurchaseManager(
        purchases_repository=purchases_repo,
        purchase_parts_repository=purchase_parts_repo,
        parts_repository=parts_repo,
        product_parts_repository=product_parts_repo,
        product_manager=product_manager,
    )
    manufacture_manager = ManufactureManager(
        manufactures_repository=manufactures_repo,
        manufacture_products_repository=manufacture_products_repo,
        products_repository=products_repo,
        product_parts_repository=product_parts_repo,
        parts_repository=parts_repo,
    )
    sale_manager = SaleManager(
        sales_repository=sales_repo,
        sale_products_repository=sale_products_repo,
        products_repository=products_repo,
        clients_repository=clients_repo,
        reps_repository=reps_repo,
    )
    dashboard_manager = DashboardManager(
        sale_manager=sale_manager,
        product_manager=product_manager,
        part_manager=part_manager,
        low_stock_threshold=low_stock_threshold,
    )
    return Services(
        db_manager=db_manager,
        part_manager=part_manager,
        product_manager=product_manager,
        purchase_manager=purchase_manager,
        manufacture_manager=manufacture_manager,
        sale_manager=sale_manager,
        client_manager=client_manager,
        rep_manager=rep_manager,
        dashboard_manager=dashboard_manager,
    )
