# shopfloor/data_access/base_repository.py

import logging
from dataclasses import MISSING, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from shopfloor.data_access.database_manager import DatabaseManager
from shopfloor.errors import ApiError, NotFoundError

if TYPE_CHECKING:
    from shopfloor.business_logic.entities.base_entity import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='BaseEntity')


class BaseRepository(Generic[T]):
    def __init__(self, db_manager: DatabaseManager, model_type: Type[T], table_name: str):
        self.db_manager = db_manager
        self.model_type = model_type
        self._table_name = table_name
        # Fields declared with init=False are display-only and never persisted.
        self._db_columns = [f.name for f in fields(model_type) if f.init]
        logger.debug(f"BaseRepository for {self._table_name} initialized. Columns: {self._db_columns}")

    @property
    def table_name(self) -> str:
        return self._table_name

    def get_by_id(self, entity_id: int) -> Optional[T]:
        query = f"SELECT * FROM {self._table_name} WHERE id = ?"
        row = self.db_manager.fetch_one(query, (entity_id,))
        return self._entity_from_row(dict(row)) if row else None

    def get_all(self, order_by: Optional[str] = "id") -> List[T]:
        query = f"SELECT * FROM {self._table_name}"
        if order_by:
            query += f" ORDER BY {order_by}"
        rows = self.db_manager.fetch_all(query)
        return [self._entity_from_row(dict(row)) for row in rows]

    def _entity_to_dict_for_db(self, entity: T) -> Dict[str, Any]:
        data_to_persist = {}
        for k in self._db_columns:
            v = getattr(entity, k, None)
            processed_v = v
            if isinstance(v, Decimal): processed_v = float(v)
            elif isinstance(v, Enum): processed_v = v.value
            elif isinstance(v, bool): processed_v = 1 if v else 0
            elif isinstance(v, (datetime, date)): processed_v = v.isoformat()
            data_to_persist[k] = processed_v
        return data_to_persist

    def add(self, entity: T) -> T:
        fields_to_insert = self._entity_to_dict_for_db(entity)
        fields_to_insert.pop('id', None)

        columns = ', '.join(fields_to_insert.keys())
        placeholders = ', '.join(['?'] * len(fields_to_insert))
        values_tuple = tuple(fields_to_insert.values())
        query = f"INSERT INTO {self._table_name} ({columns}) VALUES ({placeholders})"
        logger.debug(f"BaseRepository.add: Query: {query}, Values: {values_tuple}")

        cursor = self.db_manager.execute_query(query, values_tuple)
        if cursor.lastrowid is None:
            raise ApiError(f"Insert into {self._table_name} returned no row id")
        entity.id = cursor.lastrowid
        logger.debug(f"BaseRepository.add: {type(entity).__name__} ID set to {entity.id} after insert.")
        return entity

    def update(self, entity: T) -> T:
        if entity.id is None:
            raise ValueError(f"Entity of type {type(entity).__name__} must have an ID to be updated.")
        return self.update_fields(entity.id, {k: v for k, v in self._entity_to_dict_for_db(entity).items() if k != 'id'})

    def update_fields(self, entity_id: int, values: Mapping[str, Any]) -> Any:
        """Updates only the named columns of one row."""
        if not values:
            return None
        converted = {}
        for key, value in values.items():
            if key not in self._db_columns or key == 'id':
                raise ValueError(f"'{key}' is not a column of {self._table_name}")
            if isinstance(value, Decimal): value = float(value)
            elif isinstance(value, Enum): value = value.value
            elif isinstance(value, (datetime, date)): value = value.isoformat()
            converted[key] = value

        set_clause = ', '.join([f"{key} = ?" for key in converted.keys()])
        values_tuple = tuple(converted.values()) + (entity_id,)
        query = f"UPDATE {self._table_name} SET {set_clause} WHERE id = ?"
        logger.debug(f"BaseRepository.update: Query: {query}, Values: {values_tuple}")

        cursor = self.db_manager.execute_query(query, values_tuple)
        if cursor.rowcount == 0:
            raise NotFoundError(f"No row with id {entity_id} in {self._table_name}")
        logger.debug(f"BaseRepository.update: ID {entity_id} in table {self._table_name} updated.")
        return self.get_by_id(entity_id)

    def delete(self, entity_id: int) -> bool:
        query = f"DELETE FROM {self._table_name} WHERE id = ?"
        cursor = self.db_manager.execute_query(query, (entity_id,))
        deleted = cursor.rowcount > 0
        logger.debug(f"BaseRepository.delete: ID {entity_id} from {self._table_name} (deleted={deleted}).")
        return deleted

    def find_by_criteria(self, criteria: Dict[str, Any], order_by: Optional[str] = "id") -> List[T]:
        """
        Finds rows matching every criterion. A value may be a plain value
        (equality) or an ``(operator, value)`` tuple such as ``('<=', 25)``.
        """
        if not criteria:
            return self.get_all(order_by=order_by)

        conditions = []
        params = []
        for key, value in criteria.items():
            if isinstance(value, tuple) and len(value) == 2:
                operator, val = value
                if str(operator).upper() == 'BETWEEN' and isinstance(val, (list, tuple)) and len(val) == 2:
                    conditions.append(f"{key} BETWEEN ? AND ?")
                    params.extend(val)
                else:
                    conditions.append(f"{key} {operator} ?")
                    params.append(val.value if isinstance(val, Enum) else val)
            else:
                conditions.append(f"{key} = ?")
                params.append(value.value if isinstance(value, Enum) else value)

        query = f"SELECT * FROM {self._table_name} WHERE " + " AND ".join(conditions)
        if order_by:
            query += f" ORDER BY {order_by}"
        logger.debug(f"BaseRepository.find_by_criteria: Query: {query}, Values: {tuple(params)}")

        rows = self.db_manager.fetch_all(query, tuple(params))
        return [self._entity_from_row(dict(row)) for row in rows]

    def _entities_from_joined_rows(self, rows, display_columns: Mapping[str, str]) -> List[T]:
        """Builds entities from a JOIN, copying the extra columns onto display fields."""
        entities = []
        for row in rows:
            row_dict = dict(row)
            entity = self._entity_from_row(row_dict)
            for attr, column in display_columns.items():
                setattr(entity, attr, row_dict.get(column))
            entities.append(entity)
        return entities

    def _entity_from_row(self, row: Dict[str, Any]) -> T:
        """
        Builds an entity from a row dict, converting Decimal, date and Enum
        columns according to the dataclass field types.
        """
        entity_data = {}

        for f in fields(self.model_type):
            if not f.init:
                continue

            field_name = f.name
            field_type = f.type
            value_from_db = row.get(field_name)

            if value_from_db is None:
                if f.default is MISSING and f.default_factory is MISSING:
                    is_optional = getattr(field_type, '__origin__', None) is Union and type(None) in getattr(field_type, '__args__', [])
                    if not is_optional:
                        raise ApiError(
                            f"NULL value found for required field '{field_name}' "
                            f"in table '{self._table_name}' for row: {row}"
                        )
                    entity_data[field_name] = None
                continue

            actual_type = field_type
            if getattr(field_type, '__origin__', None) is Union:
                possible_types = [arg for arg in getattr(field_type, '__args__', []) if arg is not type(None)]
                if possible_types:
                    actual_type = possible_types[0]

            is_enum = isinstance(actual_type, type) and issubclass(actual_type, Enum)

            try:
                if is_enum:
                    entity_data[field_name] = actual_type(value_from_db)
                elif actual_type == Decimal:
                    entity_data[field_name] = Decimal(str(value_from_db))
                elif actual_type == date and isinstance(value_from_db, str):
                    entity_data[field_name] = date.fromisoformat(value_from_db.split(" ")[0])
                elif actual_type == bool and isinstance(value_from_db, int):
                    entity_data[field_name] = bool(value_from_db)
                elif actual_type == int and not isinstance(value_from_db, int):
                    entity_data[field_name] = int(value_from_db)
                else:
                    entity_data[field_name] = value_from_db
            except (ValueError, TypeError) as e:
                logger.error(f"Type conversion failed for field '{field_name}' with value '{value_from_db}': {e}")
                raise ApiError(f"Unreadable value for {self._table_name}.{field_name}: {value_from_db!r}") from e

        return self.model_type(**entity_data)
