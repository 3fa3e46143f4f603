# shopfloor/business_logic/rep_manager.py

import logging
from typing import List

from shopfloor.business_logic.entities.rep_entity import RepEntity
from shopfloor.data_access.reps_repository import RepsRepository
from shopfloor.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class RepManager:
    def __init__(self, reps_repository: RepsRepository):
        if reps_repository is None:
            raise ValueError("reps_repository cannot be None")
        self.reps_repository = reps_repository

    @staticmethod
    def _validate(name: str, percentage: int) -> None:
        if not name or not name.strip():
            raise InvalidInputError("Rep name cannot be empty.")
        if not isinstance(percentage, int) or not 0 <= percentage <= 100:
            raise InvalidInputError(f"Commission percentage must be between 0 and 100, got {percentage}.")

    def add_rep(self, name: str, percentage: int) -> RepEntity:
        self._validate(name, percentage)
        rep = self.reps_repository.add(RepEntity(name=name.strip(), percentage=percentage))
        logger.info(f"Rep '{rep.name}' (ID: {rep.id}) added at {rep.percentage}%.")
        return rep

    def get_all_reps(self) -> List[RepEntity]:
        return self.reps_repository.get_all()

    def update_rep(self, rep_id: int, name: str, percentage: int) -> RepEntity:
        self._validate(name, percentage)
        updated = self.reps_repository.update_fields(rep_id, {"name": name.strip(), "percentage": percentage})
        logger.info(f"Rep ID {rep_id} updated.")
        return updated

    def delete_rep(self, rep_id: int) -> None:
        if not self.reps_repository.delete(rep_id):
            raise NotFoundError(f"Rep {rep_id} not found.")
        logger.info(f"Rep ID {rep_id} deleted.")
