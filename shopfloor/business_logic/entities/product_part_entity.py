# shopfloor/business_logic/entities/product_part_entity.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
from .base_entity import BaseEntity


@dataclass
class ProductPartEntity(BaseEntity):
    product_id: int
    part_id: int
    qty: int  # parts per finished unit
    cost: Decimal = field(default_factory=lambda: Decimal("0"))

    # display fields, filled by joined queries
    part_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
