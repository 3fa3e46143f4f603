# shopfloor/business_logic/sale_manager.py

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from shopfloor.business_logic import costing
from shopfloor.business_logic.entities.client_entity import ClientEntity
from shopfloor.business_logic.entities.product_entity import ProductEntity
from shopfloor.business_logic.entities.rep_entity import RepEntity
from shopfloor.business_logic.entities.sale_entity import SaleEntity
from shopfloor.business_logic.entities.sale_product_entity import SaleProductEntity
from shopfloor.constants import SaleStatus
from shopfloor.data_access.clients_repository import ClientsRepository
from shopfloor.data_access.products_repository import ProductsRepository
from shopfloor.data_access.reps_repository import RepsRepository
from shopfloor.data_access.sale_products_repository import SaleProductsRepository
from shopfloor.data_access.sales_repository import SalesRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class SaleDetails:
    sale: SaleEntity
    products: List[SaleProductEntity] = field(default_factory=list)
    client: Optional[ClientEntity] = None


@dataclass
class SaleCandidates:
    products: List[ProductEntity] = field(default_factory=list)
    clients: List[ClientEntity] = field(default_factory=list)
    reps: List[RepEntity] = field(default_factory=list)


class SaleManager:
    def __init__(self,
                 sales_repository: SalesRepository,
                 sale_products_repository: SaleProductsRepository,
                 products_repository: ProductsRepository,
                 clients_repository: ClientsRepository,
                 reps_repository: RepsRepository):
        if sales_repository is None: raise ValueError("sales_repository cannot be None")
        if sale_products_repository is None: raise ValueError("sale_products_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if clients_repository is None: raise ValueError("clients_repository cannot be None")
        if reps_repository is None: raise ValueError("reps_repository cannot be None")

        self.sales_repo = sales_repository
        self.sale_products_repo = sale_products_repository
        self.products_repo = products_repository
        self.clients_repo = clients_repository
        self.reps_repo = reps_repository

    def get_all_sales(self) -> List[SaleEntity]:
        return self.sales_repo.get_all_with_names()

    def get_draft_sales(self) -> List[SaleEntity]:
        return self.sales_repo.get_by_status(SaleStatus.DRAFT)

    def get_sale_details(self, sale_id: int) -> SaleDetails:
        sale = self.sales_repo.get_with_names(sale_id)
        if sale is None:
            raise NotFoundError(f"Sale {sale_id} not found.")
        return SaleDetails(
            sale=sale,
            products=self.sale_products_repo.get_by_sale_id(sale_id),
            client=self.clients_repo.get_by_id(sale.client_id),
        )

    def get_sale_candidates(self) -> SaleCandidates:
        return SaleCandidates(
            products=self.products_repo.get_all(),
            clients=self.clients_repo.get_all(),
            reps=self.reps_repo.get_all(),
        )

    def create_sale(self,
                    client_id: int,
                    sale_date: date,
                    lines: Sequence[Tuple[int, int]],
                    rep_id: Optional[int] = None,
                    discount: Optional[Decimal] = None,
                    note: Optional[str] = None) -> SaleEntity:
        """
        Records a draft sale of (product_id, qty) lines.

        Cost and MSRP of every product are frozen on its sale line, the sale
        totals come from ``costing.sale_economics`` and product stock is
        taken out right away. ``discount`` is stored but does not change the
        totals.
        """
        if not lines:
            raise InvalidInputError("A sale needs at least one product.")
        for product_id, qty in lines:
            if qty <= 0:
                raise InvalidInputError(f"Quantity of product {product_id} must be positive.")

        with self.sales_repo.db_manager.transaction():
            client = self.clients_repo.get_by_id(client_id)
            if client is None:
                raise NotFoundError(f"Client {client_id} not found.")
            rep = None
            if rep_id is not None:
                rep = self.reps_repo.get_by_id(rep_id)
                if rep is None:
                    raise NotFoundError(f"Rep {rep_id} not found.")

            products = {}
            sale_lines = []
            for product_id, qty in lines:
                product = self.products_repo.get_by_id(product_id)
                if product is None:
                    raise NotFoundError(f"Product {product_id} not found.")
                products[product_id] = product
                sale_lines.append(costing.SaleLine(product_id=product_id, qty=qty, cost=product.cost, msrp=product.msrp))

            economics = costing.sale_economics(sale_lines, rep.percentage if rep else None)
            sale = self.sales_repo.add(SaleEntity(
                client_id=client_id,
                date=sale_date,
                rep_id=rep_id,
                total=economics.total,
                cost=economics.cost,
                net=economics.net,
                shipping=economics.shipping,
                discount=discount,
                rep_cut=economics.rep_cut,
                note=note,
                status=SaleStatus.DRAFT,
            ))
            sale.client_name = client.name
            sale.rep_name = rep.name if rep else None
            sale.rep_percentage = rep.percentage if rep else None

            for line in sale_lines:
                item = self.sale_products_repo.add(SaleProductEntity(
                    sale_id=sale.id, product_id=line.product_id, qty=line.qty,
                    cost_at_sale=line.cost, msrp_at_sale=line.msrp))
                item.product_name = products[line.product_id].name
                sale.items.append(item)
                self.products_repo.adjust_units(line.product_id, -line.qty)

            remaining = {pid: self.products_repo.get_by_id(pid).units for pid in products}
            sale.stock_warnings = costing.negative_stock_warnings(
                "Product", {pid: p.name for pid, p in products.items()}, remaining)

        for warning in sale.stock_warnings:
            logger.warning(f"Sale ID {sale.id}: {warning}.")
        logger.info(f"Sale ID {sale.id} recorded for client '{client.name}': total {economics.total}, net {economics.net}.")
        return sale

    def update_sale(self,
                    sale_id: int,
                    client_id: int,
                    sale_date: date,
                    discount: Optional[Decimal] = None,
                    note: Optional[str] = None) -> SaleEntity:
        """Edits discount, date, client and note. Totals are left untouched."""
        if self.clients_repo.get_by_id(client_id) is None:
            raise NotFoundError(f"Client {client_id} not found.")
        self.sales_repo.update_fields(sale_id, {
            "discount": discount,
            "date": sale_date,
            "client_id": client_id,
            "note": note,
        })
        logger.info(f"Sale ID {sale_id} updated.")
        return self.sales_repo.get_with_names(sale_id)

    def fulfill_sale(self, sale_id: int) -> SaleEntity:
        """Marks a sale COMPLETED. Stock was already taken when the sale was created."""
        sale = self.sales_repo.get_by_id(sale_id)
        if sale is None:
            raise NotFoundError(f"Sale {sale_id} not found.")
        if sale.status == SaleStatus.COMPLETED:
            logger.debug(f"Sale ID {sale_id} is already completed.")
        else:
            self.sales_repo.set_status(sale_id, SaleStatus.COMPLETED)
            logger.info(f"Sale ID {sale_id} fulfilled.")
        return self.sales_repo.get_with_names(sale_id)

    def delete_sale(self, sale_id: int) -> None:
        if not self.sales_repo.delete(sale_id):
            raise NotFoundError(f"Sale {sale_id} not found.")
        logger.warning(f"Sale ID {sale_id} deleted. Product stock was NOT restored.")
