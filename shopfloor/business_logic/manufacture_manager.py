# shopfloor/business_logic/manufacture_manager.py

import logging
from datetime import date
from typing import Dict, List, Sequence, Tuple

from shopfloor.business_logic import costing
from shopfloor.business_logic.entities.manufacture_entity import ManufactureEntity
from shopfloor.business_logic.entities.manufacture_product_entity import ManufactureProductEntity
from shopfloor.data_access.manufacture_products_repository import ManufactureProductsRepository
from shopfloor.data_access.manufactures_repository import ManufacturesRepository
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.data_access.product_parts_repository import ProductPartsRepository
from shopfloor.data_access.products_repository import ProductsRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class ManufactureManager:
    def __init__(self,
                 manufactures_repository: ManufacturesRepository,
                 manufacture_products_repository: ManufactureProductsRepository,
                 products_repository: ProductsRepository,
                 product_parts_repository: ProductPartsRepository,
                 parts_repository: PartsRepository):
        if manufactures_repository is None: raise ValueError("manufactures_repository cannot be None")
        if manufacture_products_repository is None: raise ValueError("manufacture_products_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if product_parts_repository is None: raise ValueError("product_parts_repository cannot be None")
        if parts_repository is None: raise ValueError("parts_repository cannot be None")

        self.manufactures_repo = manufactures_repository
        self.manufacture_products_repo = manufacture_products_repository
        self.products_repo = products_repository
        self.product_parts_repo = product_parts_repository
        self.parts_repo = parts_repository

    def get_all_manufactures(self) -> List[ManufactureEntity]:
        return self.manufactures_repo.get_all()

    def get_manufacture_products(self, manufacture_id: int) -> List[ManufactureProductEntity]:
        return self.manufacture_products_repo.get_by_manufacture_id(manufacture_id)

    def create_manufacture(self, manufacture_date: date, lines: Sequence[Tuple[int, int]]) -> ManufactureEntity:
        """
        Records a manufacturing run of (product_id, qty) lines.

        Each product gains ``qty`` units and each of its parts loses
        ``qty`` times the per-unit quantity from the bill of materials. Parts
        may go below zero; those are reported in ``stock_warnings``.
        """
        if not lines:
            raise InvalidInputError("A manufacturing run needs at least one product.")
        for product_id, qty in lines:
            if qty <= 0:
                raise InvalidInputError(f"Quantity of product {product_id} must be positive.")

        logger.info(f"Recording manufacture of {len(lines)} product lines.")
        with self.manufactures_repo.db_manager.transaction():
            manufacture = self.manufactures_repo.add(ManufactureEntity(date=manufacture_date))

            product_parts: Dict[int, list] = {}
            for product_id, qty in lines:
                product = self.products_repo.get_by_id(product_id)
                if product is None:
                    raise NotFoundError(f"Product {product_id} not found.")
                item = self.manufacture_products_repo.add(ManufactureProductEntity(
                    manufacture_id=manufacture.id, product_id=product_id, qty=qty))
                item.product_name = product.name
                manufacture.items.append(item)
                if product_id not in product_parts:
                    product_parts[product_id] = self.product_parts_repo.get_by_product_id(product_id)

            deltas = costing.manufacture_deltas(lines, product_parts)
            for product_id, delta in deltas.product_units.items():
                self.products_repo.adjust_units(product_id, delta)
            for part_id, delta in deltas.part_units.items():
                self.parts_repo.adjust_units_left(part_id, delta)

            consumed = [self.parts_repo.get_by_id(part_id) for part_id in deltas.part_units]
            manufacture.stock_warnings = costing.negative_stock_warnings(
                "Part",
                {p.id: p.name for p in consumed if p},
                {p.id: p.units_left for p in consumed if p},
            )

        for warning in manufacture.stock_warnings:
            logger.warning(f"Manufacture ID {manufacture.id}: {warning}.")
        logger.info(f"Manufacture ID {manufacture.id} recorded.")
        return manufacture

    def update_manufacture(self, manufacture_id: int, manufacture_date: date) -> ManufactureEntity:
        updated = self.manufactures_repo.update_fields(manufacture_id, {"date": manufacture_date})
        logger.info(f"Manufacture ID {manufacture_id} date set to {manufacture_date}.")
        return updated

    def delete_manufacture(self, manufacture_id: int) -> None:
        if not self.manufactures_repo.delete(manufacture_id):
            raise NotFoundError(f"Manufacture {manufacture_id} not found.")
        logger.warning(f"Manufacture ID {manufacture_id} deleted. Product and part stock were NOT reversed.")
