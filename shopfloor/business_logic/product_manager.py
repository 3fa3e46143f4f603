# shopfloor/business_logic/product_manager.py

import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from shopfloor.business_logic import costing
from shopfloor.business_logic.entities.product_entity import ProductEntity
from shopfloor.business_logic.entities.product_part_entity import ProductPartEntity
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.data_access.product_parts_repository import ProductPartsRepository
from shopfloor.data_access.products_repository import ProductsRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class ProductManager:
    def __init__(self,
                 products_repository: ProductsRepository,
                 product_parts_repository: ProductPartsRepository,
                 parts_repository: PartsRepository):
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if product_parts_repository is None: raise ValueError("product_parts_repository cannot be None")
        if parts_repository is None: raise ValueError("parts_repository cannot be None")

        self.products_repo = products_repository
        self.product_parts_repo = product_parts_repository
        self.parts_repo = parts_repository

    def get_all_products(self) -> List[ProductEntity]:
        return self.products_repo.get_all()

    def get_product_by_id(self, product_id: int) -> Optional[ProductEntity]:
        return self.products_repo.get_by_id(product_id)

    def get_product_parts(self, product_id: int) -> List[ProductPartEntity]:
        """Bill of materials of a product, each line with its part name."""
        return self.product_parts_repo.get_by_product_id(product_id)

    def get_low_stock_products(self, threshold: int) -> List[ProductEntity]:
        return self.products_repo.get_low_stock(threshold)

    def create_product(self, name: str, msrp: Decimal, parts: Sequence[Tuple[int, int]]) -> ProductEntity:
        """
        Creates a product from (part_id, qty per unit) pairs.

        The product cost is the sum of each part's current cost times its
        quantity, and every bill-of-materials line keeps that part cost as
        its snapshot.
        """
        if not name or not name.strip():
            raise InvalidInputError("Product name cannot be empty.")
        if msrp < 0:
            raise InvalidInputError("MSRP cannot be negative.")
        for part_id, qty in parts:
            if qty <= 0:
                raise InvalidInputError(f"Quantity of part {part_id} must be positive.")

        logger.info(f"Creating product '{name}' from {len(parts)} part lines.")
        with self.products_repo.db_manager.transaction():
            chosen = []
            for part_id, qty in parts:
                part = self.parts_repo.get_by_id(part_id)
                if part is None:
                    raise NotFoundError(f"Part {part_id} not found.")
                chosen.append((part, qty))

            cost = costing.assembly_cost((part.cost, qty) for part, qty in chosen)
            product = self.products_repo.add(ProductEntity(name=name.strip(), cost=cost, msrp=msrp))
            for part, qty in chosen:
                self.product_parts_repo.add(ProductPartEntity(
                    product_id=product.id, part_id=part.id, qty=qty, cost=part.cost))

        logger.info(f"Product '{product.name}' (ID: {product.id}) created with cost {product.cost}.")
        return product

    def update_product(self, product_id: int, name: str, units: int, cost: Decimal, msrp: Decimal) -> ProductEntity:
        """Direct edit of a product row. Stock and cost set here are taken as is."""
        if not name or not name.strip():
            raise InvalidInputError("Product name cannot be empty.")
        updated = self.products_repo.update_fields(product_id, {
            "name": name.strip(),
            "units": units,
            "cost": cost,
            "msrp": msrp,
        })
        logger.info(f"Product ID {product_id} updated.")
        return updated

    def delete_product(self, product_id: int) -> None:
        if not self.products_repo.delete(product_id):
            raise NotFoundError(f"Product {product_id} not found.")
        logger.info(f"Product ID {product_id} and its part lines deleted.")

    def recompute_all_costs(self) -> int:
        """Recomputes every product's cost from its part snapshots. Returns how many changed."""
        grouped = self.product_parts_repo.get_grouped_by_product()
        changed = 0
        for product in self.products_repo.get_all():
            new_cost = costing.product_cost(grouped.get(product.id, []))
            if new_cost != product.cost:
                self.products_repo.update_fields(product.id, {"cost": new_cost})
                changed += 1
        logger.debug(f"Recomputed product costs, {changed} changed.")
        return changed
