# shopfloor/business_logic/entities/product_entity.py
from dataclasses import dataclass, field
from decimal import Decimal
from .base_entity import BaseEntity


@dataclass
class ProductEntity(BaseEntity):
    name: str
    units: int = 0
    cost: Decimal = field(default_factory=lambda: Decimal("0"))
    msrp: Decimal = field(default_factory=lambda: Decimal("0"))
