# shopfloor/business_logic/purchase_manager.py

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from shopfloor.business_logic import costing
from shopfloor.business_logic.entities.purchase_entity import PurchaseEntity
from shopfloor.business_logic.entities.purchase_part_entity import PurchasePartEntity
from shopfloor.business_logic.product_manager import ProductManager
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.data_access.product_parts_repository import ProductPartsRepository
from shopfloor.data_access.purchase_parts_repository import PurchasePartsRepository
from shopfloor.data_access.purchases_repository import PurchasesRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class PurchaseManager:
    def __init__(self,
                 purchases_repository: PurchasesRepository,
                 purchase_parts_repository: PurchasePartsRepository,
                 parts_repository: PartsRepository,
                 product_parts_repository: ProductPartsRepository,
                 product_manager: ProductManager):
        if purchases_repository is None: raise ValueError("purchases_repository cannot be None")
        if purchase_parts_repository is None: raise ValueError("purchase_parts_repository cannot be None")
        if parts_repository is None: raise ValueError("parts_repository cannot be None")
        if product_parts_repository is None: raise ValueError("product_parts_repository cannot be None")
        if product_manager is None: raise ValueError("product_manager cannot be None")

        self.purchases_repo = purchases_repository
        self.purchase_parts_repo = purchase_parts_repository
        self.parts_repo = parts_repository
        self.product_parts_repo = product_parts_repository
        self.product_manager = product_manager

    def get_all_purchases(self) -> List[PurchaseEntity]:
        return self.purchases_repo.get_all()

    def get_purchase_parts(self, purchase_id: int) -> List[PurchasePartEntity]:
        return self.purchase_parts_repo.get_by_purchase_id(purchase_id)

    def create_purchase(self,
                        purchase_date: date,
                        lines: Sequence[Tuple[int, int, Decimal]],
                        note: Optional[str] = None) -> PurchaseEntity:
        """
        Records a purchase of (part_id, qty, line_cost) lines.

        For every line the part's stock and running totals grow and its
        weighted-average cost is recomputed; the new cost is pushed to every
        bill-of-materials line using that part. Once all lines are in, the
        cost of every product is recomputed. Runs as one transaction.
        """
        if not lines:
            raise InvalidInputError("A purchase needs at least one part.")
        for part_id, qty, line_cost in lines:
            if qty < 0:
                raise InvalidInputError(f"Quantity of part {part_id} cannot be negative.")
            if line_cost < 0:
                raise InvalidInputError(f"Cost of part {part_id} cannot be negative.")

        total = costing.purchase_total(line_cost for _, _, line_cost in lines)
        logger.info(f"Recording purchase of {len(lines)} lines, total {total}.")

        with self.purchases_repo.db_manager.transaction():
            purchase = self.purchases_repo.add(PurchaseEntity(date=purchase_date, total=total, note=note))

            for part_id, qty, line_cost in lines:
                part = self.parts_repo.get_by_id(part_id)
                if part is None:
                    raise NotFoundError(f"Part {part_id} not found.")
                item = self.purchase_parts_repo.add(PurchasePartEntity(
                    purchase_id=purchase.id, part_id=part_id, qty=qty, cost=line_cost))
                item.part_name = part.name
                purchase.items.append(item)

                updated_part = costing.apply_purchase(part, qty, line_cost)
                self.parts_repo.update(updated_part)
                self.product_parts_repo.update_cost_for_part(part_id, updated_part.cost)
                logger.debug(f"Part '{part.name}' cost {part.cost} -> {updated_part.cost}, units {updated_part.units_left}.")

            self.product_manager.recompute_all_costs()

        logger.info(f"Purchase ID {purchase.id} recorded.")
        return purchase

    def update_purchase(self, purchase_id: int, purchase_date: date, note: Optional[str] = None) -> PurchaseEntity:
        """Edits the header only; lines and the costs derived from them stay as they are."""
        updated = self.purchases_repo.update_fields(purchase_id, {"date": purchase_date, "note": note})
        logger.info(f"Purchase ID {purchase_id} header updated.")
        return updated

    def delete_purchase(self, purchase_id: int) -> None:
        if not self.purchases_repo.delete(purchase_id):
            raise NotFoundError(f"Purchase {purchase_id} not found.")
        logger.warning(f"Purchase ID {purchase_id} deleted. Part stock and costs were NOT reversed.")
