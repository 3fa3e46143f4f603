# shopfloor/presentation/main_window.py

import logging
from typing import Any, Dict, List, Optional

from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import (
    QAbstractItemView, QComboBox, QFormLayout, QGroupBox, QHBoxLayout, QHeaderView, QLabel,
    QLineEdit, QMainWindow, QPushButton, QTableView, QVBoxLayout, QWidget,
)

from shopfloor.constants import Screen
from shopfloor.presentation.messages import (
    CloseForm, CopyClientInfo, Delete, DismissError, FieldChanged, Fulfill, InlineFieldChanged,
    Navigate, OpenEdit, OpenView, QueryChanged, SelectClient, SelectRep, Submit, SubmitInlineCreate,
    ToggleAdd, ToggleInlineCreate,
)
from shopfloor.presentation.state import Adding, AppState, Editing, Viewing
from shopfloor.presentation.table_models import SelectionLinesModel, SnapshotTableModel
from shopfloor.utils.input_parsing import format_date
from shopfloor.utils.money import format_money

logger = logging.getLogger(__name__)

SALE_COLUMNS = [
    ("ID", lambda s: s.id),
    ("Date", lambda s: format_date(s.date)),
    ("Client", lambda s: s.client_name),
    ("Rep", lambda s: s.rep_name),
    ("Total", lambda s: format_money(s.total)),
    ("Cost", lambda s: format_money(s.cost)),
    ("Net", lambda s: format_money(s.net)),
    ("Shipping", lambda s: format_money(s.shipping)),
    ("Rep cut", lambda s: format_money(s.rep_cut)),
    ("Discount", lambda s: format_money(s.discount)),
    ("Status", lambda s: s.status.value),
]
PART_COLUMNS = [
    ("ID", lambda p: p.id),
    ("Name", lambda p: p.name),
    ("Units left", lambda p: p.units_left),
    ("Unit cost", lambda p: format_money(p.cost)),
    ("Total spent", lambda p: format_money(p.total_spent)),
    ("Units purchased", lambda p: p.total_units_purchased),
]
PRODUCT_COLUMNS = [
    ("ID", lambda p: p.id),
    ("Name", lambda p: p.name),
    ("Units", lambda p: p.units),
    ("Cost", lambda p: format_money(p.cost)),
    ("MSRP", lambda p: format_money(p.msrp)),
]

LIST_COLUMNS = {
    Screen.HOME: SALE_COLUMNS,
    Screen.PARTS: PART_COLUMNS,
    Screen.PRODUCTS: PRODUCT_COLUMNS,
    Screen.PURCHASES: [
        ("ID", lambda p: p.id),
        ("Date", lambda p: format_date(p.date)),
        ("Total", lambda p: format_money(p.total)),
        ("Note", lambda p: p.note),
    ],
    Screen.MANUFACTURES: [
        ("ID", lambda m: m.id),
        ("Date", lambda m: format_date(m.date)),
    ],
    Screen.SALES: SALE_COLUMNS,
    Screen.CLIENTS: [
        ("ID", lambda c: c.id),
        ("Name", lambda c: c.name),
        ("Address", lambda c: c.address),
        ("Email", lambda c: c.email),
    ],
    Screen.REPS: [
        ("ID", lambda r: r.id),
        ("Name", lambda r: r.name),
        ("Percentage", lambda r: f"{r.percentage}%"),
    ],
}

DETAIL_COLUMNS = {
    Screen.PRODUCTS: [
        ("Part", lambda pp: pp.part_name),
        ("Qty per unit", lambda pp: pp.qty),
        ("Part cost", lambda pp: format_money(pp.cost)),
    ],
    Screen.PURCHASES: [
        ("Part", lambda pp: pp.part_name),
        ("Qty", lambda pp: pp.qty),
        ("Line cost", lambda pp: format_money(pp.cost)),
    ],
    Screen.MANUFACTURES: [
        ("Product", lambda mp: mp.product_name),
        ("Qty", lambda mp: mp.qty),
    ],
    Screen.SALES: [
        ("Product", lambda sp: sp.product_name),
        ("Qty", lambda sp: sp.qty),
        ("Cost at sale", lambda sp: format_money(sp.cost_at_sale)),
        ("MSRP at sale", lambda sp: format_money(sp.msrp_at_sale)),
    ],
}


def _make_table(model) -> QTableView:
    view = QTableView()
    view.setModel(model)
    view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
    view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
    header = view.horizontalHeader()
    if header:
        header.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        header.setStretchLastSection(True)
    return view


class MainWindow(QMainWindow):
    def __init__(self, runner, parent=None):
        super().__init__(parent)
        self.runner = runner
        self.controller = runner.controller
        self.setWindowTitle("Shopfloor")
        self.setGeometry(100, 100, 1200, 780)

        self._form_key: Optional[tuple] = None
        self._field_edits: Dict[str, QLineEdit] = {}
        self._render_pending = False
        self._notices_shown = 0

        self._init_ui()
        self.runner.state_changed.connect(self._schedule_render)

    @property
    def state(self) -> AppState:
        return self.controller.state

    def dispatch(self, message: Any) -> None:
        self.runner.dispatch(message)

    # --- Layout ---
    def _init_ui(self):
        central = QWidget(self)
        main_layout = QHBoxLayout(central)

        nav_layout = QVBoxLayout()
        for screen in Screen:
            button = QPushButton(screen.value)
            button.clicked.connect(lambda _=False, s=screen: self.dispatch(Navigate(s)))
            nav_layout.addWidget(button)
        nav_layout.addStretch()
        main_layout.addLayout(nav_layout)

        content = QVBoxLayout()
        self.title_label = QLabel()
        content.addWidget(self.title_label)

        self.list_model = SnapshotTableModel(LIST_COLUMNS[Screen.HOME])
        self.list_view = _make_table(self.list_model)
        content.addWidget(self.list_view)

        self.low_products_model = SnapshotTableModel(PRODUCT_COLUMNS)
        self.low_parts_model = SnapshotTableModel(PART_COLUMNS)
        self.home_box = QGroupBox("Running low")
        home_layout = QHBoxLayout(self.home_box)
        home_layout.addWidget(_make_table(self.low_products_model))
        home_layout.addWidget(_make_table(self.low_parts_model))
        content.addWidget(self.home_box)

        button_layout = QHBoxLayout()
        self.add_button = QPushButton("Add")
        self.edit_button = QPushButton("Edit")
        self.view_button = QPushButton("View")
        self.delete_button = QPushButton("Delete")
        self.fulfill_button = QPushButton("Fulfill")
        self.add_button.clicked.connect(lambda: self.dispatch(ToggleAdd(self.state.screen)))
        self.edit_button.clicked.connect(lambda: self._with_selected(lambda rid: OpenEdit(self.state.screen, rid)))
        self.view_button.clicked.connect(lambda: self._with_selected(lambda rid: OpenView(self.state.screen, rid)))
        self.delete_button.clicked.connect(lambda: self._with_selected(lambda rid: Delete(self.state.screen, rid)))
        self.fulfill_button.clicked.connect(lambda: self._with_selected(Fulfill))
        for button in (self.add_button, self.edit_button, self.view_button, self.delete_button, self.fulfill_button):
            button_layout.addWidget(button)
        button_layout.addStretch()
        content.addLayout(button_layout)

        self.form_box = QGroupBox()
        self.form_layout = QVBoxLayout(self.form_box)
        content.addWidget(self.form_box)

        self.lines_model = SelectionLinesModel(self.dispatch)
        self.detail_model = SnapshotTableModel(DETAIL_COLUMNS[Screen.SALES])

        main_layout.addLayout(content, stretch=1)
        self.setCentralWidget(central)
        self.statusBar().messageChanged.connect(self._on_status_cleared)
        logger.info("MainWindow initialized.")

    def _with_selected(self, make_message) -> None:
        indexes = self.list_view.selectionModel().selectedRows()
        if not indexes:
            return
        record = self.list_model.get_row(indexes[0].row())
        if record is not None:
            self.dispatch(make_message(record.id))

    def _on_status_cleared(self, text: str) -> None:
        if not text and self.state.last_error is not None:
            self.dispatch(DismissError())

    # --- Rendering ---
    def _schedule_render(self) -> None:
        # Coalesce bursts of completions and never reset a model inside its own setData.
        if not self._render_pending:
            self._render_pending = True
            QTimer.singleShot(0, self.render)

    def render(self) -> None:
        self._render_pending = False
        state = self.state
        screen = state.screen
        self.title_label.setText(f"<h2>{screen.value}</h2>")

        self.list_model.set_columns(LIST_COLUMNS[screen])
        if screen == Screen.HOME:
            self.list_model.update_data(state.home.snapshot.draft_sales)
            self.low_products_model.update_data(state.home.snapshot.low_stock_products)
            self.low_parts_model.update_data(state.home.snapshot.low_stock_parts)
        else:
            self.list_model.update_data(state.module(screen).records)
        self.home_box.setVisible(screen == Screen.HOME)

        editable = screen != Screen.HOME
        for button in (self.add_button, self.edit_button, self.view_button, self.delete_button):
            button.setVisible(editable)
        self.fulfill_button.setVisible(screen in (Screen.HOME, Screen.SALES))

        self._render_form()
        self._render_status()

    def _render_status(self) -> None:
        error = self.state.last_error
        if error is not None:
            self.statusBar().showMessage(f"{error.module}: {error.message}")
        elif len(self.state.notices) != self._notices_shown:
            self._notices_shown = len(self.state.notices)
            self.statusBar().showMessage("; ".join(self.state.notices[-3:]), 10000)

    def _form_identity(self) -> tuple:
        screen = self.state.screen
        if screen == Screen.HOME:
            return (screen,)
        module = self.state.module(screen)
        form = module.form
        inline = ()
        if screen == Screen.SALES:
            inline = (module.inline_client is not None, module.inline_rep is not None)
        elif screen == Screen.PURCHASES:
            inline = (module.inline_part is not None,)
        return (screen, type(form).__name__, getattr(form, "record_id", None), inline)

    def _render_form(self) -> None:
        key = self._form_identity()
        if key != self._form_key:
            self._form_key = key
            self._rebuild_form()
        self._refresh_form_values()

    def _clear_form(self) -> None:
        while self.form_layout.count():
            item = self.form_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.setParent(None)
            elif item.layout() is not None:
                self._drop_layout(item.layout())
        self._field_edits = {}

    def _drop_layout(self, layout) -> None:
        while layout.count():
            item = layout.takeAt(0)
            if item.widget() is not None:
                item.widget().setParent(None)
            elif item.layout() is not None:
                self._drop_layout(item.layout())

    def _rebuild_form(self) -> None:
        self._clear_form()
        screen = self.state.screen
        if screen == Screen.HOME:
            self.form_box.setVisible(False)
            return
        module = self.state.module(screen)
        form = module.form
        if isinstance(form, (Adding, Editing)):
            self.form_box.setTitle(f"{'New' if isinstance(form, Adding) else 'Edit'} {screen.value.rstrip('s').lower()}")
            self._build_draft_form(screen, form)
            self.form_box.setVisible(True)
        elif isinstance(form, Viewing):
            self.form_box.setTitle(f"{screen.value.rstrip('s')} #{form.record_id}")
            self._build_view(screen)
            self.form_box.setVisible(True)
        else:
            self.form_box.setVisible(False)

    def _build_draft_form(self, screen: Screen, form) -> None:
        fields_layout = QFormLayout()
        for name in form.draft:
            edit = QLineEdit()
            edit.setPlaceholderText("YYYY-MM-DD" if name == "date" else "")
            edit.textEdited.connect(lambda text, n=name: self.dispatch(FieldChanged(screen, n, text)))
            self._field_edits[name] = edit
            fields_layout.addRow(name.capitalize(), edit)
        self.form_layout.addLayout(fields_layout)

        if screen == Screen.SALES:
            self._build_sale_pickers(isinstance(form, Adding))
        if isinstance(form, Adding) and screen in (Screen.PRODUCTS, Screen.PURCHASES, Screen.MANUFACTURES, Screen.SALES):
            search = QLineEdit()
            search.setPlaceholderText("Filter by name")
            search.textEdited.connect(lambda text: self.dispatch(QueryChanged(screen, text)))
            self.form_layout.addWidget(search)
            self.form_layout.addWidget(_make_table(self.lines_model))
            self.chosen_label = QLabel()
            self.form_layout.addWidget(self.chosen_label)
            if screen == Screen.PURCHASES:
                self._build_inline("part", "New part", self.state.purchases.inline_part)

        buttons = QHBoxLayout()
        submit = QPushButton("Save")
        cancel = QPushButton("Cancel")
        submit.clicked.connect(lambda: self.dispatch(Submit(screen)))
        cancel.clicked.connect(lambda: self.dispatch(CloseForm(screen)))
        buttons.addWidget(submit)
        buttons.addWidget(cancel)
        buttons.addStretch()
        self.form_layout.addLayout(buttons)

    def _build_sale_pickers(self, with_rep: bool) -> None:
        sales = self.state.sales
        client_search = QLineEdit()
        client_search.setPlaceholderText("Filter clients")
        client_search.textEdited.connect(lambda text: self.dispatch(QueryChanged(Screen.SALES, text, "clients")))
        self.client_combo = QComboBox()
        self.client_combo.activated.connect(
            lambda i: self.dispatch(SelectClient(self.client_combo.itemData(i))) if self.client_combo.itemData(i) is not None else None)
        row = QHBoxLayout()
        row.addWidget(client_search)
        row.addWidget(self.client_combo)
        self.form_layout.addLayout(row)
        self._build_inline("client", "New client", sales.inline_client)

        self.rep_combo = None
        if with_rep:
            rep_search = QLineEdit()
            rep_search.setPlaceholderText("Filter reps")
            rep_search.textEdited.connect(lambda text: self.dispatch(QueryChanged(Screen.SALES, text, "reps")))
            self.rep_combo = QComboBox()
            self.rep_combo.activated.connect(lambda i: self.dispatch(SelectRep(self.rep_combo.itemData(i))))
            row = QHBoxLayout()
            row.addWidget(rep_search)
            row.addWidget(self.rep_combo)
            self.form_layout.addLayout(row)
            self._build_inline("rep", "New rep", sales.inline_rep)

    def _build_inline(self, kind: str, label: str, draft: Optional[Dict[str, str]]) -> None:
        toggle = QPushButton(label if draft is None else f"Cancel {label.lower()}")
        toggle.clicked.connect(lambda: self.dispatch(ToggleInlineCreate(kind)))
        self.form_layout.addWidget(toggle)
        if draft is None:
            return
        row = QHBoxLayout()
        for name, value in draft.items():
            edit = QLineEdit(value)
            edit.setPlaceholderText(name)
            edit.textEdited.connect(lambda text, n=name: self.dispatch(InlineFieldChanged(kind, n, text)))
            row.addWidget(edit)
        save = QPushButton("Create")
        save.clicked.connect(lambda: self.dispatch(SubmitInlineCreate(kind)))
        row.addWidget(save)
        self.form_layout.addLayout(row)

    def _build_view(self, screen: Screen) -> None:
        if screen not in DETAIL_COLUMNS:
            self.view_label = QLabel()
            self.form_layout.addWidget(self.view_label)
            return
        self.detail_model.set_columns(DETAIL_COLUMNS[screen])
        self.form_layout.addWidget(_make_table(self.detail_model))
        if screen == Screen.SALES:
            self.view_label = QLabel()
            self.form_layout.addWidget(self.view_label)
            copy = QPushButton("Copy client info")
            copy.clicked.connect(lambda: self.dispatch(CopyClientInfo()))
            self.form_layout.addWidget(copy)
        close = QPushButton("Close")
        close.clicked.connect(lambda: self.dispatch(CloseForm(screen)))
        self.form_layout.addWidget(close)

    def _refresh_form_values(self) -> None:
        screen = self.state.screen
        if screen == Screen.HOME:
            return
        module = self.state.module(screen)
        form = module.form
        if isinstance(form, (Adding, Editing)):
            for name, edit in self._field_edits.items():
                value = form.draft.get(name, "")
                if edit.text() != value:
                    edit.setText(value)
            if isinstance(form, Adding) and hasattr(module, "buffer"):
                self.lines_model.show(screen, module.buffer)
                chosen = [f"{line.name} x{line.qty}" for line in module.buffer.lines()]
                self.chosen_label.setText("Chosen: " + (", ".join(chosen) if chosen else "nothing yet"))
            if screen == Screen.SALES:
                self._fill_pickers()
        elif isinstance(form, Viewing):
            self._refresh_view(screen, module, form)

    def _fill_pickers(self) -> None:
        sales = self.state.sales
        self.client_combo.clear()
        self.client_combo.addItem("(choose client)", None)
        for client in sales.clients.filtered:
            self.client_combo.addItem(client.name, client.id)
            if client.id == sales.selected_client_id:
                self.client_combo.setCurrentIndex(self.client_combo.count() - 1)
        if self.rep_combo is not None:
            self.rep_combo.clear()
            self.rep_combo.addItem("(no rep)", None)
            for rep in sales.reps.filtered:
                self.rep_combo.addItem(f"{rep.name} ({rep.percentage}%)", rep.id)
                if rep.id == sales.selected_rep_id:
                    self.rep_combo.setCurrentIndex(self.rep_combo.count() - 1)

    def _refresh_view(self, screen: Screen, module, form: Viewing) -> None:
        if screen == Screen.PRODUCTS or screen == Screen.PURCHASES:
            self.detail_model.update_data(module.viewed_parts)
        elif screen == Screen.MANUFACTURES:
            self.detail_model.update_data(module.viewed_products)
        elif screen == Screen.SALES:
            self.detail_model.update_data(module.viewed_products)
            client = module.viewed_client
            self.view_label.setText(client.contact_line() if client else "")
        elif form.record is not None:
            self.view_label.setText(", ".join(f"{name}: {value}" for name, value in self._describe(form.record)))

    @staticmethod
    def _describe(record) -> List[tuple]:
        return [(k, v) for k, v in vars(record).items() if not isinstance(v, list)]
