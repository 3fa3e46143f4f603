# shopfloor/business_logic/entities/manufacture_product_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .base_entity import BaseEntity


@dataclass
class ManufactureProductEntity(BaseEntity):
    manufacture_id: int
    product_id: int
    qty: int

    product_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
