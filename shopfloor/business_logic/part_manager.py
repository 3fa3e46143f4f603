# shopfloor/business_logic/part_manager.py

import logging
from typing import List, Optional

from shopfloor.business_logic.entities.part_entity import PartEntity
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class PartManager:
    def __init__(self, parts_repository: PartsRepository):
        if parts_repository is None:
            raise ValueError("parts_repository cannot be None")
        self.parts_repository = parts_repository

    def create_part(self, name: str) -> PartEntity:
        """Adds a part with no stock and no purchase history."""
        if not name or not name.strip():
            raise InvalidInputError("Part name cannot be empty.")
        created = self.parts_repository.add(PartEntity(name=name.strip()))
        logger.info(f"Part '{created.name}' (ID: {created.id}) added.")
        return created

    def get_part_by_id(self, part_id: int) -> Optional[PartEntity]:
        return self.parts_repository.get_by_id(part_id)

    def get_all_parts(self) -> List[PartEntity]:
        logger.debug("Fetching all parts.")
        return self.parts_repository.get_all()

    def get_low_stock_parts(self, threshold: int) -> List[PartEntity]:
        return self.parts_repository.get_low_stock(threshold)

    def rename_part(self, part_id: int, name: str) -> PartEntity:
        if not name or not name.strip():
            raise InvalidInputError("Part name cannot be empty.")
        updated = self.parts_repository.update_fields(part_id, {"name": name.strip()})
        logger.info(f"Part ID {part_id} renamed to '{name.strip()}'.")
        return updated

    def delete_part(self, part_id: int) -> None:
        if not self.parts_repository.delete(part_id):
            raise NotFoundError(f"Part {part_id} not found.")
        logger.info(f"Part ID {part_id} deleted.")
