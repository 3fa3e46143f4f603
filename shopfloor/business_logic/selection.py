# shopfloor/business_logic/selection.py

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from shopfloor.utils.input_parsing import is_numeric_input, parse_money, parse_quantity

logger = logging.getLogger(__name__)

C = TypeVar('C')


class QueryFilter(Generic[C]):
    """A candidate list plus the view matching the current name query.

    Matching is a case-sensitive substring test on ``name``; an empty query
    shows every candidate.
    """

    def __init__(self):
        self.candidates: List[C] = []
        self.query: str = ""
        self.filtered: List[C] = []

    def load(self, candidates: Iterable[C]) -> None:
        self.candidates = list(candidates)
        self._refilter()

    def set_query(self, query: str) -> None:
        self.query = query
        self._refilter()

    def find(self, item_id: int) -> Optional[C]:
        for candidate in self.candidates:
            if candidate.id == item_id:
                return candidate
        return None

    def _refilter(self) -> None:
        if not self.query:
            self.filtered = list(self.candidates)
        else:
            self.filtered = [c for c in self.candidates if self.query in c.name]

    def reset(self) -> None:
        self.candidates = []
        self.query = ""
        self.filtered = []


@dataclass
class SelectionLine:
    item_id: int
    name: str
    qty: int = 0
    cost: str = ""  # operator-entered line cost, raw text
    unit_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    msrp: Decimal = field(default_factory=lambda: Decimal("0"))
    units: int = 0

    def entered_cost(self) -> Decimal:
        return parse_money(self.cost, f"cost of {self.name}")


class SelectionBuffer(QueryFilter[C]):
    """Scratch state of a multi-line form: candidates, filtered view and chosen lines.

    With ``require_cost_to_clear`` a line is only dropped once both its
    quantity is 0 and its cost text is empty.
    """

    def __init__(self, require_cost_to_clear: bool = False):
        super().__init__()
        self.require_cost_to_clear = require_cost_to_clear
        self.chosen: Dict[int, SelectionLine] = {}

    def load(self, candidates: Iterable[C]) -> None:
        super().load(candidates)
        # Chosen lines survive a reload as long as the candidate still exists.
        by_id = {c.id: c for c in self.candidates}
        for item_id in list(self.chosen):
            candidate = by_id.get(item_id)
            if candidate is None:
                del self.chosen[item_id]
            else:
                fresh = self._line_for(candidate)
                self.chosen[item_id] = replace(fresh, qty=self.chosen[item_id].qty, cost=self.chosen[item_id].cost)

    def set_quantity(self, item_id: int, text: str) -> Optional[SelectionLine]:
        line = self._current_line(item_id)
        if line is None:
            return None
        return self._store(replace(line, qty=parse_quantity(text)))

    def set_cost(self, item_id: int, text: str) -> bool:
        if not is_numeric_input(text):
            logger.debug(f"Rejected cost input '{text}' for item {item_id}.")
            return False
        line = self._current_line(item_id)
        if line is None:
            return False
        self._store(replace(line, cost=text))
        return True

    def remove(self, item_id: int) -> None:
        self.chosen.pop(item_id, None)

    def lines(self) -> List[SelectionLine]:
        return list(self.chosen.values())

    def snapshot(self) -> List[SelectionLine]:
        return [replace(line) for line in self.chosen.values()]

    def is_empty(self) -> bool:
        return not self.chosen

    def reset(self) -> None:
        super().reset()
        self.chosen = {}

    def _is_clearable(self, line: SelectionLine) -> bool:
        if line.qty != 0:
            return False
        return not self.require_cost_to_clear or line.cost == ""

    def _store(self, line: SelectionLine) -> Optional[SelectionLine]:
        if self._is_clearable(line):
            self.chosen.pop(line.item_id, None)
            return None
        self.chosen[line.item_id] = line
        return line

    def _current_line(self, item_id: int) -> Optional[SelectionLine]:
        if item_id in self.chosen:
            return self.chosen[item_id]
        candidate = self.find(item_id)
        if candidate is None:
            logger.warning(f"Item {item_id} is not among the loaded candidates.")
            return None
        return self._line_for(candidate)

    @staticmethod
    def _line_for(candidate: Any) -> SelectionLine:
        units = getattr(candidate, "units", None)
        if units is None:
            units = getattr(candidate, "units_left", 0)
        return SelectionLine(
            item_id=candidate.id,
            name=candidate.name,
            unit_cost=getattr(candidate, "cost", Decimal("0")),
            msrp=getattr(candidate, "msrp", Decimal("0")),
            units=units,
        )
