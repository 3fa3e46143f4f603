# shopfloor/business_logic/entities/rep_entity.py
from dataclasses import dataclass
from .base_entity import BaseEntity


@dataclass
class RepEntity(BaseEntity):
    name: str
    percentage: int = 0  # commission, 0-100
