# shopfloor/business_logic/entities/sale_product_entity.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
from .base_entity import BaseEntity


@dataclass
class SaleProductEntity(BaseEntity):
    sale_id: int
    product_id: int
    qty: int
    cost_at_sale: Decimal
    msrp_at_sale: Decimal

    product_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
    product_units: Optional[int] = field(default=None, compare=False, repr=False, init=False)
