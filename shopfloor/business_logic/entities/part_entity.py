# shopfloor/business_logic/entities/part_entity.py
from dataclasses import dataclass, field
from decimal import Decimal
from .base_entity import BaseEntity


@dataclass
class PartEntity(BaseEntity):
    name: str
    units_left: int = 0
    cost: Decimal = field(default_factory=lambda: Decimal("0"))  # weighted-average unit cost
    total_spent: Decimal = field(default_factory=lambda: Decimal("0"))
    total_units_purchased: int = 0
