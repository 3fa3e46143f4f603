# shopfloor/presentation/state.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from shopfloor.business_logic.dashboard_manager import HomeSnapshot
from shopfloor.business_logic.entities.client_entity import ClientEntity
from shopfloor.business_logic.selection import QueryFilter, SelectionBuffer
from shopfloor.constants import Screen


# --- Form state: exactly one of these per module ---
@dataclass
class Closed:
    pass


@dataclass
class Adding:
    draft: Dict[str, str] = field(default_factory=dict)


@dataclass
class Editing:
    record_id: int
    draft: Dict[str, str] = field(default_factory=dict)


@dataclass
class Viewing:
    record_id: int
    record: Any = None


FormState = Union[Closed, Adding, Editing, Viewing]


@dataclass
class ErrorNotice:
    """Last failure, kept for the status bar."""
    module: str
    kind: str
    message: str


@dataclass
class ModuleState:
    records: List[Any] = field(default_factory=list)
    form: FormState = field(default_factory=Closed)

    def close_form(self) -> None:
        self.form = Closed()

    def find_record(self, record_id: int) -> Optional[Any]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None


@dataclass
class HomeState(ModuleState):
    snapshot: HomeSnapshot = field(default_factory=HomeSnapshot)


@dataclass
class ProductsState(ModuleState):
    buffer: SelectionBuffer = field(default_factory=SelectionBuffer)
    viewed_parts: List[Any] = field(default_factory=list)

    def close_form(self) -> None:
        super().close_form()
        self.buffer.reset()
        self.viewed_parts = []


@dataclass
class PurchasesState(ModuleState):
    buffer: SelectionBuffer = field(default_factory=lambda: SelectionBuffer(require_cost_to_clear=True))
    viewed_parts: List[Any] = field(default_factory=list)
    inline_part: Optional[Dict[str, str]] = None

    def close_form(self) -> None:
        super().close_form()
        self.buffer.reset()
        self.viewed_parts = []
        self.inline_part = None


@dataclass
class ManufacturesState(ModuleState):
    buffer: SelectionBuffer = field(default_factory=SelectionBuffer)
    viewed_products: List[Any] = field(default_factory=list)

    def close_form(self) -> None:
        super().close_form()
        self.buffer.reset()
        self.viewed_products = []


@dataclass
class SalesState(ModuleState):
    buffer: SelectionBuffer = field(default_factory=SelectionBuffer)
    clients: QueryFilter = field(default_factory=QueryFilter)
    reps: QueryFilter = field(default_factory=QueryFilter)
    selected_client_id: Optional[int] = None
    selected_rep_id: Optional[int] = None
    inline_client: Optional[Dict[str, str]] = None
    inline_rep: Optional[Dict[str, str]] = None
    viewed_products: List[Any] = field(default_factory=list)
    viewed_client: Optional[ClientEntity] = None

    def close_form(self) -> None:
        super().close_form()
        self.buffer.reset()
        self.clients.reset()
        self.reps.reset()
        self.selected_client_id = None
        self.selected_rep_id = None
        self.inline_client = None
        self.inline_rep = None
        self.viewed_products = []
        self.viewed_client = None


@dataclass
class AppState:
    screen: Screen = Screen.HOME
    home: HomeState = field(default_factory=HomeState)
    parts: ModuleState = field(default_factory=ModuleState)
    products: ProductsState = field(default_factory=ProductsState)
    purchases: PurchasesState = field(default_factory=PurchasesState)
    manufactures: ManufacturesState = field(default_factory=ManufacturesState)
    sales: SalesState = field(default_factory=SalesState)
    clients: ModuleState = field(default_factory=ModuleState)
    reps: ModuleState = field(default_factory=ModuleState)
    last_error: Optional[ErrorNotice] = None
    notices: List[str] = field(default_factory=list)

    def module(self, screen: Screen) -> ModuleState:
        return getattr(self, screen.name.lower())

    def modules(self) -> List[ModuleState]:
        return [self.module(screen) for screen in Screen]
