# shopfloor/presentation/messages.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from shopfloor.constants import Screen


class Action(Enum):
    LOADED = "loaded"
    CANDIDATES_LOADED = "candidates_loaded"
    DETAILS_LOADED = "details_loaded"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    FULFILLED = "fulfilled"
    CLIENT_CREATED = "client_created"
    REP_CREATED = "rep_created"
    PART_CREATED = "part_created"


READ_ACTIONS = frozenset({Action.LOADED, Action.CANDIDATES_LOADED, Action.DETAILS_LOADED})


@dataclass(frozen=True)
class Command:
    """One scheduled call into the managers.

    ``run`` holds everything it needs; the controller never looks at the
    buffers it was built from again.
    """
    action: Action
    screen: Screen
    slice: str
    generation: int
    run: Callable[[], Any] = field(compare=False, repr=False)


@dataclass(frozen=True)
class Completed:
    action: Action
    screen: Screen
    slice: str
    generation: int
    value: Any = None
    error: Optional[Exception] = None


# --- Intents ---
@dataclass(frozen=True)
class Navigate:
    screen: Screen


@dataclass(frozen=True)
class ToggleAdd:
    screen: Screen


@dataclass(frozen=True)
class OpenEdit:
    screen: Screen
    record_id: int


@dataclass(frozen=True)
class OpenView:
    screen: Screen
    record_id: int


@dataclass(frozen=True)
class CloseForm:
    screen: Screen


@dataclass(frozen=True)
class FieldChanged:
    screen: Screen
    field: str
    value: str


@dataclass(frozen=True)
class QuantityChanged:
    screen: Screen
    item_id: int
    text: str


@dataclass(frozen=True)
class CostChanged:
    screen: Screen
    item_id: int
    text: str


@dataclass(frozen=True)
class RemoveLine:
    screen: Screen
    item_id: int


@dataclass(frozen=True)
class QueryChanged:
    screen: Screen
    query: str
    target: str = "items"  # "items", "clients" or "reps"


@dataclass(frozen=True)
class Submit:
    screen: Screen


@dataclass(frozen=True)
class Delete:
    screen: Screen
    record_id: int


@dataclass(frozen=True)
class SelectClient:
    client_id: int


@dataclass(frozen=True)
class SelectRep:
    rep_id: Optional[int]


@dataclass(frozen=True)
class ToggleInlineCreate:
    kind: str  # "client", "rep" or "part"


@dataclass(frozen=True)
class InlineFieldChanged:
    kind: str
    field: str
    value: str


@dataclass(frozen=True)
class SubmitInlineCreate:
    kind: str


@dataclass(frozen=True)
class CopyClientInfo:
    pass


@dataclass(frozen=True)
class Fulfill:
    sale_id: int


@dataclass(frozen=True)
class DismissError:
    pass
