# shopfloor/business_logic/entities/purchase_entity.py
from dataclasses import dataclass, field
import datetime
from decimal import Decimal
from typing import List, Optional
from .base_entity import BaseEntity
from .purchase_part_entity import PurchasePartEntity


@dataclass
class PurchaseEntity(BaseEntity):
    date: datetime.date = field(default_factory=datetime.date.today)
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    note: Optional[str] = None

    # Lines live in purchase_parts, not in this row.
    items: List[PurchasePartEntity] = field(default_factory=list, compare=False, repr=False, init=False)
