# shopfloor/presentation/controller.py
"""Message reducer for the whole application.

``update`` takes an intent or a completion, changes ``state`` right away and
returns the commands to run next. It never calls a manager itself; every
read and write goes out as a ``Command`` whose completion comes back through
``update``.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from shopfloor.bootstrap import Services
from shopfloor.business_logic.selection import SelectionLine
from shopfloor.constants import Screen
from shopfloor.errors import ApiError, InvalidInputError
from shopfloor.presentation.messages import (
    READ_ACTIONS, Action, CloseForm, Command, Completed, CopyClientInfo, CostChanged, Delete,
    DismissError, FieldChanged, Fulfill, InlineFieldChanged, Navigate, OpenEdit, OpenView,
    QuantityChanged, QueryChanged, RemoveLine, SelectClient, SelectRep, Submit, SubmitInlineCreate,
    ToggleAdd, ToggleInlineCreate,
)
from shopfloor.presentation.state import Adding, AppState, Editing, ErrorNotice, Viewing
from shopfloor.utils.input_parsing import (
    format_date, is_numeric_input, optional_text, parse_date, parse_money, parse_optional_money,
    parse_percentage, parse_quantity,
)

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = {"msrp", "cost", "discount", "percentage", "units"}

ADD_DRAFTS: Dict[Screen, Dict[str, str]] = {
    Screen.PARTS: {"name": ""},
    Screen.CLIENTS: {"name": "", "address": "", "email": ""},
    Screen.REPS: {"name": "", "percentage": ""},
    Screen.PRODUCTS: {"name": "", "msrp": ""},
    Screen.PURCHASES: {"date": "", "note": ""},
    Screen.MANUFACTURES: {"date": ""},
    Screen.SALES: {"date": "", "discount": "", "note": ""},
}

INLINE_DRAFTS: Dict[str, Dict[str, str]] = {
    "client": {"name": "", "address": "", "email": ""},
    "rep": {"name": "", "percentage": ""},
    "part": {"name": ""},
}

SCREENS_WITH_LINES = (Screen.PRODUCTS, Screen.PURCHASES, Screen.MANUFACTURES, Screen.SALES)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _checked_lines(lines: List[SelectionLine], kind: str,
                   allow_zero: bool = False, allow_empty: bool = False) -> List[SelectionLine]:
    """Rejects an empty selection and quantities the managers would refuse."""
    if not lines and not allow_empty:
        raise InvalidInputError(f"Choose at least one {kind}.")
    for line in lines:
        if line.qty < 0 or (line.qty == 0 and not allow_zero):
            raise InvalidInputError(f"Quantity of {line.name} must be {'zero or more' if allow_zero else 'positive'}.")
    return lines


class Controller:
    def __init__(self, services: Services, clipboard: Optional[Callable[[str], None]] = None):
        if services is None:
            raise ValueError("services cannot be None")
        self.services = services
        self.clipboard = clipboard
        self.state = AppState()
        self._generations: Dict[str, int] = {}

        self._intent_handlers = {
            Navigate: self._on_navigate,
            ToggleAdd: self._on_toggle_add,
            OpenEdit: self._on_open_edit,
            OpenView: self._on_open_view,
            CloseForm: self._on_close_form,
            FieldChanged: self._on_field_changed,
            QuantityChanged: self._on_quantity_changed,
            CostChanged: self._on_cost_changed,
            RemoveLine: self._on_remove_line,
            QueryChanged: self._on_query_changed,
            Submit: self._on_submit,
            Delete: self._on_delete,
            SelectClient: self._on_select_client,
            SelectRep: self._on_select_rep,
            ToggleInlineCreate: self._on_toggle_inline,
            InlineFieldChanged: self._on_inline_field_changed,
            SubmitInlineCreate: self._on_submit_inline,
            CopyClientInfo: self._on_copy_client_info,
            Fulfill: self._on_fulfill,
            DismissError: self._on_dismiss_error,
        }
        self._completion_handlers = {
            Action.LOADED: self._apply_list,
            Action.CANDIDATES_LOADED: self._apply_candidates,
            Action.DETAILS_LOADED: self._apply_details,
            Action.CREATED: self._after_write,
            Action.UPDATED: self._after_write,
            Action.DELETED: self._after_write,
            Action.FULFILLED: self._after_fulfill,
            Action.CLIENT_CREATED: self._after_client_created,
            Action.REP_CREATED: self._after_rep_created,
            Action.PART_CREATED: self._after_part_created,
        }

        self._list_loaders: Dict[Screen, Callable[[], Any]] = {
            Screen.HOME: services.dashboard_manager.get_home,
            Screen.PARTS: services.part_manager.get_all_parts,
            Screen.PRODUCTS: services.product_manager.get_all_products,
            Screen.PURCHASES: services.purchase_manager.get_all_purchases,
            Screen.MANUFACTURES: services.manufacture_manager.get_all_manufactures,
            Screen.SALES: services.sale_manager.get_all_sales,
            Screen.CLIENTS: services.client_manager.get_all_clients,
            Screen.REPS: services.rep_manager.get_all_reps,
        }
        self._candidate_loaders: Dict[Screen, Callable[[], Any]] = {
            Screen.PRODUCTS: services.part_manager.get_all_parts,
            Screen.PURCHASES: services.part_manager.get_all_parts,
            Screen.MANUFACTURES: services.product_manager.get_all_products,
            Screen.SALES: services.sale_manager.get_sale_candidates,
        }
        self._detail_loaders: Dict[Screen, Callable[[int], Any]] = {
            Screen.PRODUCTS: services.product_manager.get_product_parts,
            Screen.PURCHASES: services.purchase_manager.get_purchase_parts,
            Screen.MANUFACTURES: services.manufacture_manager.get_manufacture_products,
            Screen.SALES: services.sale_manager.get_sale_details,
        }

    # --- Entry points ---
    def start(self) -> List[Command]:
        return [self._load_list(Screen.HOME)]

    def update(self, message: Any) -> List[Command]:
        if isinstance(message, Completed):
            return self._on_completed(message)
        handler = self._intent_handlers.get(type(message))
        if handler is None:
            logger.warning(f"No handler for message {message!r}.")
            return []
        logger.debug(f"Handling {message!r}.")
        return handler(message)

    # --- Command construction ---
    def _next_generation(self, slice_name: str) -> int:
        generation = self._generations.get(slice_name, 0) + 1
        self._generations[slice_name] = generation
        return generation

    def _read(self, action: Action, screen: Screen, slice_name: str, run: Callable[[], Any]) -> Command:
        return Command(action=action, screen=screen, slice=slice_name,
                       generation=self._next_generation(slice_name), run=run)

    def _write(self, action: Action, screen: Screen, run: Callable[[], Any]) -> Command:
        slice_name = f"{screen.value}:write"
        return Command(action=action, screen=screen, slice=slice_name,
                       generation=self._next_generation(slice_name), run=run)

    def _load_list(self, screen: Screen) -> Command:
        return self._read(Action.LOADED, screen, screen.value, self._list_loaders[screen])

    def _load_candidates(self, screen: Screen) -> Command:
        return self._read(Action.CANDIDATES_LOADED, screen, f"{screen.value}:candidates",
                          self._candidate_loaders[screen])

    def _load_details(self, screen: Screen, record_id: int) -> Command:
        loader = self._detail_loaders[screen]
        return self._read(Action.DETAILS_LOADED, screen, f"{screen.value}:details",
                          lambda: loader(record_id))

    def _fail(self, screen: Screen, error: Exception) -> List[Command]:
        kind = error.kind if isinstance(error, ApiError) else "api"
        logger.error(f"{screen.value}: {error}")
        self.state.last_error = ErrorNotice(module=screen.value, kind=kind, message=str(error))
        return []

    # --- Intents ---
    def _on_navigate(self, msg: Navigate) -> List[Command]:
        for module in self.state.modules():
            module.close_form()
        self.state.screen = msg.screen
        self.state.last_error = None
        return [self._load_list(msg.screen)]

    def _on_toggle_add(self, msg: ToggleAdd) -> List[Command]:
        if msg.screen not in ADD_DRAFTS:
            return []
        module = self.state.module(msg.screen)
        if isinstance(module.form, Adding):
            module.close_form()
            return []
        module.close_form()
        module.form = Adding(draft=dict(ADD_DRAFTS[msg.screen]))
        if msg.screen in SCREENS_WITH_LINES:
            return [self._load_candidates(msg.screen)]
        return []

    def _edit_draft(self, screen: Screen, record: Any) -> Dict[str, str]:
        if screen == Screen.PARTS:
            return {"name": record.name}
        if screen == Screen.CLIENTS:
            return {"name": record.name, "address": record.address, "email": _text(record.email)}
        if screen == Screen.REPS:
            return {"name": record.name, "percentage": str(record.percentage)}
        if screen == Screen.PRODUCTS:
            return {"name": record.name, "units": str(record.units), "cost": str(record.cost), "msrp": str(record.msrp)}
        if screen == Screen.PURCHASES:
            return {"date": format_date(record.date), "note": _text(record.note)}
        if screen == Screen.MANUFACTURES:
            return {"date": format_date(record.date)}
        if screen == Screen.SALES:
            return {"date": format_date(record.date), "discount": _text(record.discount), "note": _text(record.note)}
        return {}

    def _on_open_edit(self, msg: OpenEdit) -> List[Command]:
        if msg.screen == Screen.HOME:
            return []
        module = self.state.module(msg.screen)
        record = module.find_record(msg.record_id)
        if record is None:
            logger.warning(f"{msg.screen.value}: record {msg.record_id} is not loaded.")
            return []
        module.close_form()
        module.form = Editing(record_id=msg.record_id, draft=self._edit_draft(msg.screen, record))
        if msg.screen == Screen.SALES:
            self.state.sales.selected_client_id = record.client_id
            return [self._load_candidates(Screen.SALES)]
        return []

    def _on_open_view(self, msg: OpenView) -> List[Command]:
        module = self.state.module(msg.screen)
        record = module.find_record(msg.record_id)
        module.close_form()
        module.form = Viewing(record_id=msg.record_id, record=record)
        if msg.screen in self._detail_loaders:
            return [self._load_details(msg.screen, msg.record_id)]
        return []

    def _on_close_form(self, msg: CloseForm) -> List[Command]:
        self.state.module(msg.screen).close_form()
        return []

    def _on_field_changed(self, msg: FieldChanged) -> List[Command]:
        form = self.state.module(msg.screen).form
        if not isinstance(form, (Adding, Editing)):
            return []
        if msg.field in NUMERIC_FIELDS and not is_numeric_input(msg.value):
            logger.debug(f"Rejected '{msg.value}' for numeric field {msg.field}.")
            return []
        form.draft[msg.field] = msg.value
        return []

    def _on_quantity_changed(self, msg: QuantityChanged) -> List[Command]:
        if msg.screen in SCREENS_WITH_LINES:
            self.state.module(msg.screen).buffer.set_quantity(msg.item_id, msg.text)
        return []

    def _on_cost_changed(self, msg: CostChanged) -> List[Command]:
        if msg.screen == Screen.PURCHASES:
            self.state.purchases.buffer.set_cost(msg.item_id, msg.text)
        return []

    def _on_remove_line(self, msg: RemoveLine) -> List[Command]:
        if msg.screen in SCREENS_WITH_LINES:
            self.state.module(msg.screen).buffer.remove(msg.item_id)
        return []

    def _on_query_changed(self, msg: QueryChanged) -> List[Command]:
        if msg.target == "clients":
            self.state.sales.clients.set_query(msg.query)
        elif msg.target == "reps":
            self.state.sales.reps.set_query(msg.query)
        elif msg.screen in SCREENS_WITH_LINES:
            self.state.module(msg.screen).buffer.set_query(msg.query)
        return []

    def _on_select_client(self, msg: SelectClient) -> List[Command]:
        self.state.sales.selected_client_id = msg.client_id
        return []

    def _on_select_rep(self, msg: SelectRep) -> List[Command]:
        self.state.sales.selected_rep_id = msg.rep_id
        return []

    def _on_submit(self, msg: Submit) -> List[Command]:
        module = self.state.module(msg.screen)
        form = module.form
        if not isinstance(form, (Adding, Editing)):
            return []
        try:
            action, run = self._prepare_write(msg.screen, form)
        except InvalidInputError as e:
            # Nothing was sent; the form stays open for correction.
            return self._fail(msg.screen, e)
        module.close_form()
        return [self._write(action, msg.screen, run)]

    def _prepare_write(self, screen: Screen, form):
        """Parses the draft and snapshots the chosen lines into a ready-to-run call."""
        s = self.services
        draft = dict(form.draft)
        editing = isinstance(form, Editing)
        record_id = form.record_id if editing else None

        if screen == Screen.PARTS:
            name = draft["name"]
            if editing:
                return Action.UPDATED, lambda: s.part_manager.rename_part(record_id, name)
            return Action.CREATED, lambda: s.part_manager.create_part(name)

        if screen == Screen.CLIENTS:
            name, address, email = draft["name"], draft["address"], optional_text(draft.get("email"))
            if editing:
                return Action.UPDATED, lambda: s.client_manager.update_client(record_id, name, address, email)
            return Action.CREATED, lambda: s.client_manager.add_client(name, address, email)

        if screen == Screen.REPS:
            name, percentage = draft["name"], parse_percentage(draft["percentage"])
            if editing:
                return Action.UPDATED, lambda: s.rep_manager.update_rep(record_id, name, percentage)
            return Action.CREATED, lambda: s.rep_manager.add_rep(name, percentage)

        if screen == Screen.PRODUCTS:
            name, msrp = draft["name"], parse_money(draft["msrp"], "MSRP")
            if editing:
                units = parse_quantity(draft["units"])
                cost = parse_money(draft["cost"], "cost")
                return Action.UPDATED, lambda: s.product_manager.update_product(record_id, name, units, cost, msrp)
            parts = [(line.item_id, line.qty)
                     for line in _checked_lines(self.state.products.buffer.snapshot(), "part", allow_empty=True)]
            return Action.CREATED, lambda: s.product_manager.create_product(name, msrp, parts)

        if screen == Screen.PURCHASES:
            purchase_date, note = parse_date(draft["date"]), optional_text(draft.get("note"))
            if editing:
                return Action.UPDATED, lambda: s.purchase_manager.update_purchase(record_id, purchase_date, note)
            lines = [(line.item_id, line.qty, line.entered_cost())
                     for line in _checked_lines(self.state.purchases.buffer.snapshot(), "part", allow_zero=True)]
            return Action.CREATED, lambda: s.purchase_manager.create_purchase(purchase_date, lines, note)

        if screen == Screen.MANUFACTURES:
            manufacture_date = parse_date(draft["date"])
            if editing:
                return Action.UPDATED, lambda: s.manufacture_manager.update_manufacture(record_id, manufacture_date)
            lines = [(line.item_id, line.qty)
                     for line in _checked_lines(self.state.manufactures.buffer.snapshot(), "product")]
            return Action.CREATED, lambda: s.manufacture_manager.create_manufacture(manufacture_date, lines)

        if screen == Screen.SALES:
            sales = self.state.sales
            sale_date = parse_date(draft["date"])
            discount = parse_optional_money(draft.get("discount"), "discount")
            note = optional_text(draft.get("note"))
            client_id = sales.selected_client_id
            if client_id is None:
                raise InvalidInputError("Choose a client for the sale.")
            if editing:
                return Action.UPDATED, lambda: s.sale_manager.update_sale(record_id, client_id, sale_date, discount, note)
            rep_id = sales.selected_rep_id
            lines = [(line.item_id, line.qty) for line in _checked_lines(sales.buffer.snapshot(), "product")]
            return Action.CREATED, lambda: s.sale_manager.create_sale(client_id, sale_date, lines, rep_id, discount, note)

        raise InvalidInputError(f"{screen.value} has no form to submit.")

    def _on_delete(self, msg: Delete) -> List[Command]:
        s = self.services
        deleters: Dict[Screen, Callable[[int], None]] = {
            Screen.PARTS: s.part_manager.delete_part,
            Screen.PRODUCTS: s.product_manager.delete_product,
            Screen.PURCHASES: s.purchase_manager.delete_purchase,
            Screen.MANUFACTURES: s.manufacture_manager.delete_manufacture,
            Screen.SALES: s.sale_manager.delete_sale,
            Screen.CLIENTS: s.client_manager.delete_client,
            Screen.REPS: s.rep_manager.delete_rep,
        }
        deleter = deleters.get(msg.screen)
        if deleter is None:
            return []
        module = self.state.module(msg.screen)
        if isinstance(module.form, (Editing, Viewing)) and module.form.record_id == msg.record_id:
            module.close_form()
        record_id = msg.record_id
        return [self._write(Action.DELETED, msg.screen, lambda: deleter(record_id))]

    def _on_fulfill(self, msg: Fulfill) -> List[Command]:
        sale_id = msg.sale_id
        return [self._write(Action.FULFILLED, Screen.SALES, lambda: self.services.sale_manager.fulfill_sale(sale_id))]

    def _on_toggle_inline(self, msg: ToggleInlineCreate) -> List[Command]:
        attr, owner = self._inline_slot(msg.kind)
        if owner is None:
            return []
        current = getattr(owner, attr)
        setattr(owner, attr, None if current is not None else dict(INLINE_DRAFTS[msg.kind]))
        return []

    def _on_inline_field_changed(self, msg: InlineFieldChanged) -> List[Command]:
        attr, owner = self._inline_slot(msg.kind)
        if owner is None or getattr(owner, attr) is None:
            return []
        if msg.field == "percentage" and not is_numeric_input(msg.value):
            return []
        getattr(owner, attr)[msg.field] = msg.value
        return []

    def _on_submit_inline(self, msg: SubmitInlineCreate) -> List[Command]:
        attr, owner = self._inline_slot(msg.kind)
        if owner is None or getattr(owner, attr) is None:
            return []
        draft = dict(getattr(owner, attr))
        s = self.services
        screen = Screen.PURCHASES if msg.kind == "part" else Screen.SALES
        try:
            if msg.kind == "client":
                name, address, email = draft["name"], draft["address"], optional_text(draft.get("email"))
                action, run = Action.CLIENT_CREATED, lambda: s.client_manager.add_client(name, address, email)
            elif msg.kind == "rep":
                name, percentage = draft["name"], parse_percentage(draft["percentage"])
                action, run = Action.REP_CREATED, lambda: s.rep_manager.add_rep(name, percentage)
            else:
                name = draft["name"]
                action, run = Action.PART_CREATED, lambda: s.part_manager.create_part(name)
        except InvalidInputError as e:
            return self._fail(screen, e)
        setattr(owner, attr, None)
        return [self._write(action, screen, run)]

    def _inline_slot(self, kind: str):
        if kind == "client":
            return "inline_client", self.state.sales
        if kind == "rep":
            return "inline_rep", self.state.sales
        if kind == "part":
            return "inline_part", self.state.purchases
        logger.warning(f"Unknown inline form '{kind}'.")
        return None, None

    def _on_copy_client_info(self, msg: CopyClientInfo) -> List[Command]:
        client = self.state.sales.viewed_client
        if client is None:
            logger.debug("No client loaded to copy.")
            return []
        if self.clipboard is None:
            logger.warning("No clipboard available; client info not copied.")
            return []
        self.clipboard(client.contact_line())
        logger.info(f"Copied contact line of client {client.id}.")
        return []

    def _on_dismiss_error(self, msg: DismissError) -> List[Command]:
        self.state.last_error = None
        return []

    # --- Completions ---
    def _on_completed(self, msg: Completed) -> List[Command]:
        if msg.action in READ_ACTIONS and msg.generation != self._generations.get(msg.slice):
            logger.debug(f"Discarding stale {msg.action.value} for {msg.slice} (generation {msg.generation}).")
            return []
        if msg.error is not None:
            return self._fail(msg.screen, msg.error)
        return self._completion_handlers[msg.action](msg)

    def _apply_list(self, msg: Completed) -> List[Command]:
        if msg.screen == Screen.HOME:
            self.state.home.snapshot = msg.value
        else:
            module = self.state.module(msg.screen)
            module.records = list(msg.value)
            if isinstance(module.form, Viewing) and msg.screen not in self._detail_loaders:
                module.form.record = module.find_record(module.form.record_id)
        return []

    def _apply_candidates(self, msg: Completed) -> List[Command]:
        if msg.screen == Screen.SALES:
            sales = self.state.sales
            sales.buffer.load(msg.value.products)
            sales.clients.load(msg.value.clients)
            sales.reps.load(msg.value.reps)
        else:
            self.state.module(msg.screen).buffer.load(msg.value)
        return []

    def _apply_details(self, msg: Completed) -> List[Command]:
        module = self.state.module(msg.screen)
        if msg.screen == Screen.PRODUCTS:
            module.viewed_parts = list(msg.value)
        elif msg.screen == Screen.PURCHASES:
            module.viewed_parts = list(msg.value)
        elif msg.screen == Screen.MANUFACTURES:
            module.viewed_products = list(msg.value)
        elif msg.screen == Screen.SALES:
            module.viewed_products = list(msg.value.products)
            module.viewed_client = msg.value.client
            if isinstance(module.form, Viewing):
                module.form.record = msg.value.sale
        return []

    def _after_write(self, msg: Completed) -> List[Command]:
        warnings = getattr(msg.value, "stock_warnings", None)
        if warnings:
            self.state.notices.extend(warnings)
        return [self._load_list(msg.screen)]

    def _after_fulfill(self, msg: Completed) -> List[Command]:
        return [self._load_list(Screen.SALES), self._load_list(Screen.HOME)]

    def _after_client_created(self, msg: Completed) -> List[Command]:
        self.state.sales.selected_client_id = msg.value
        return [self._load_candidates(Screen.SALES)]

    def _after_rep_created(self, msg: Completed) -> List[Command]:
        rep = msg.value
        reps = self.state.sales.reps
        reps.load(reps.candidates + [rep])
        self.state.sales.selected_rep_id = rep.id
        return []

    def _after_part_created(self, msg: Completed) -> List[Command]:
        return [self._load_candidates(Screen.PURCHASES)]
