# shopfloor/business_logic/entities/purchase_part_entity.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
from .base_entity import BaseEntity


@dataclass
class PurchasePartEntity(BaseEntity):
    purchase_id: int
    part_id: int
    qty: int
    cost: Decimal  # what was paid for the whole line

    part_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
