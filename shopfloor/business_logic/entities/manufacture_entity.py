# shopfloor/business_logic/entities/manufacture_entity.py
from dataclasses import dataclass, field
import datetime
from typing import List
from .base_entity import BaseEntity
from .manufacture_product_entity import ManufactureProductEntity


@dataclass
class ManufactureEntity(BaseEntity):
    date: datetime.date = field(default_factory=datetime.date.today)

    items: List[ManufactureProductEntity] = field(default_factory=list, compare=False, repr=False, init=False)
    stock_warnings: List[str] = field(default_factory=list, compare=False, repr=False, init=False)
