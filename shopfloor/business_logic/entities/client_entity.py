# shopfloor/business_logic/entities/client_entity.py
from dataclasses import dataclass
from typing import Optional
from .base_entity import BaseEntity


@dataclass
class ClientEntity(BaseEntity):
    name: str
    address: str = ""
    email: Optional[str] = None

    def contact_line(self) -> str:
        return f"{self.name} {self.address}"
