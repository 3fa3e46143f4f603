# shopfloor/business_logic/entities/sale_entity.py
from dataclasses import dataclass, field
import datetime
from decimal import Decimal
from typing import List, Optional
from .base_entity import BaseEntity
from .sale_product_entity import SaleProductEntity
from shopfloor.constants import SaleStatus


@dataclass
class SaleEntity(BaseEntity):
    client_id: int
    date: datetime.date = field(default_factory=datetime.date.today)
    rep_id: Optional[int] = None
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    cost: Decimal = field(default_factory=lambda: Decimal("0"))
    net: Decimal = field(default_factory=lambda: Decimal("0"))
    shipping: Decimal = field(default_factory=lambda: Decimal("0"))
    discount: Optional[Decimal] = None  # recorded, not applied to the totals
    rep_cut: Optional[Decimal] = None
    note: Optional[str] = None
    status: SaleStatus = SaleStatus.DRAFT

    # display fields
    client_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
    rep_name: Optional[str] = field(default=None, compare=False, repr=False, init=False)
    rep_percentage: Optional[int] = field(default=None, compare=False, repr=False, init=False)
    items: List[SaleProductEntity] = field(default_factory=list, compare=False, repr=False, init=False)
    stock_warnings: List[str] = field(default_factory=list, compare=False, repr=False, init=False)
