from datetime import date
from decimal import Decimal
from unittest import mock

import pytest

from shopfloor.business_logic.dashboard_manager import HomeSnapshot
from shopfloor.constants import SaleStatus, Screen
from shopfloor.presentation.command_runner import CommandRunner, execute_command
from shopfloor.presentation.controller import Controller
from shopfloor.presentation.messages import (
    Action, CopyClientInfo, CostChanged, Delete, DismissError, FieldChanged, Fulfill, InlineFieldChanged,
    Navigate, OpenEdit, OpenView, QuantityChanged, QueryChanged, SelectClient, Submit, SubmitInlineCreate,
    ToggleAdd, ToggleInlineCreate,
)
from shopfloor.presentation.state import Adding, Closed, Editing, Viewing


@pytest.fixture
def clipboard():
    return mock.Mock()


@pytest.fixture
def controller(services, clipboard):
    return Controller(services, clipboard=clipboard)


@pytest.fixture
def runner(controller):
    runner = CommandRunner(controller)
    runner.start()
    return runner


@pytest.fixture
def held_runner(controller):
    runner = CommandRunner(controller, hold=True)
    runner.start()
    runner.drain()
    return runner


def names(records):
    return [r.name for r in records]


def test_start_loads_home(runner, controller):
    assert runner.history[0].action == Action.LOADED
    assert runner.history[0].screen == Screen.HOME
    assert isinstance(controller.state.home.snapshot, HomeSnapshot)
    assert controller.state.screen == Screen.HOME


def test_add_part_through_form(runner, controller):
    runner.dispatch(Navigate(Screen.PARTS))
    runner.dispatch(ToggleAdd(Screen.PARTS))
    assert isinstance(controller.state.parts.form, Adding)

    runner.dispatch(FieldChanged(Screen.PARTS, "name", "Bolt"))
    runner.dispatch(Submit(Screen.PARTS))

    assert isinstance(controller.state.parts.form, Closed)
    assert names(controller.state.parts.records) == ["Bolt"]
    assert controller.state.last_error is None


def test_toggle_add_twice_closes_form(runner, controller):
    runner.dispatch(ToggleAdd(Screen.CLIENTS))
    runner.dispatch(ToggleAdd(Screen.CLIENTS))
    assert isinstance(controller.state.clients.form, Closed)


def test_rename_part_through_edit_form(runner, controller, services):
    bolt = services.part_manager.create_part("Bolt")
    runner.dispatch(Navigate(Screen.PARTS))

    runner.dispatch(OpenEdit(Screen.PARTS, bolt.id))
    assert controller.state.parts.form == Editing(record_id=bolt.id, draft={"name": "Bolt"})
    runner.dispatch(FieldChanged(Screen.PARTS, "name", "Hex bolt"))
    runner.dispatch(Submit(Screen.PARTS))

    assert names(controller.state.parts.records) == ["Hex bolt"]


def test_purchase_form_records_lines(runner, controller, services):
    bolt = services.part_manager.create_part("Bolt")
    services.part_manager.create_part("Nut")

    runner.dispatch(Navigate(Screen.PURCHASES))
    runner.dispatch(ToggleAdd(Screen.PURCHASES))
    assert names(controller.state.purchases.buffer.candidates) == ["Bolt", "Nut"]

    runner.dispatch(QueryChanged(Screen.PURCHASES, "Bo"))
    assert names(controller.state.purchases.buffer.filtered) == ["Bolt"]
    runner.dispatch(QuantityChanged(Screen.PURCHASES, bolt.id, "10"))
    runner.dispatch(CostChanged(Screen.PURCHASES, bolt.id, "20"))
    runner.dispatch(FieldChanged(Screen.PURCHASES, "date", "2024-01-05"))
    runner.dispatch(Submit(Screen.PURCHASES))

    purchases = controller.state.purchases.records
    assert len(purchases) == 1
    assert purchases[0].date == date(2024, 1, 5)
    assert purchases[0].total == Decimal("20")
    assert services.part_manager.get_part_by_id(bolt.id).cost == Decimal("2")


def test_numeric_fields_reject_other_text(runner, controller):
    runner.dispatch(ToggleAdd(Screen.REPS))
    runner.dispatch(FieldChanged(Screen.REPS, "percentage", "1O"))
    assert controller.state.reps.form.draft["percentage"] == ""
    runner.dispatch(FieldChanged(Screen.REPS, "percentage", "10"))
    assert controller.state.reps.form.draft["percentage"] == "10"


def test_invalid_percentage_keeps_form_open(runner, controller, services):
    runner.dispatch(Navigate(Screen.REPS))
    runner.dispatch(ToggleAdd(Screen.REPS))
    runner.dispatch(FieldChanged(Screen.REPS, "name", "Dana"))
    runner.dispatch(FieldChanged(Screen.REPS, "percentage", "150"))

    runner.dispatch(Submit(Screen.REPS))

    assert isinstance(controller.state.reps.form, Adding)
    assert controller.state.reps.form.draft["name"] == "Dana"
    assert controller.state.last_error.kind == "invalid_input"
    assert controller.state.last_error.module == "Reps"
    assert services.rep_manager.get_all_reps() == []

    runner.dispatch(DismissError())
    assert controller.state.last_error is None


def test_submit_sends_snapshot_and_closes_form(held_runner, controller, services, make_product):
    widget = make_product(units=0)
    held_runner.dispatch(Navigate(Screen.MANUFACTURES))
    held_runner.dispatch(ToggleAdd(Screen.MANUFACTURES))
    held_runner.drain()
    held_runner.dispatch(QuantityChanged(Screen.MANUFACTURES, widget.id, "2"))

    held_runner.dispatch(Submit(Screen.MANUFACTURES))

    assert isinstance(controller.state.manufactures.form, Closed)
    assert controller.state.manufactures.buffer.is_empty()
    assert [c.action for c in held_runner.pending] == [Action.CREATED]

    held_runner.drain()
    assert services.product_manager.get_product_by_id(widget.id).units == 2
    assert len(controller.state.manufactures.records) == 1


def test_stale_list_load_is_discarded(held_runner, controller, services):
    held_runner.dispatch(Navigate(Screen.PARTS))
    stale = execute_command(held_runner.pending.popleft())
    services.part_manager.create_part("Bolt")

    held_runner.dispatch(Navigate(Screen.PARTS))
    held_runner.drain()
    assert names(controller.state.parts.records) == ["Bolt"]

    held_runner.deliver(stale)
    assert names(controller.state.parts.records) == ["Bolt"]


def test_completion_for_another_screen_still_applies(held_runner, controller):
    held_runner.dispatch(Navigate(Screen.PARTS))
    held_runner.drain()
    held_runner.dispatch(ToggleAdd(Screen.PARTS))
    held_runner.dispatch(FieldChanged(Screen.PARTS, "name", "Bolt"))
    held_runner.dispatch(Submit(Screen.PARTS))

    held_runner.dispatch(Navigate(Screen.CLIENTS))
    held_runner.drain()

    assert controller.state.screen == Screen.CLIENTS
    assert names(controller.state.parts.records) == ["Bolt"]


def test_deleting_client_with_sales_reports_constraint(runner, controller, services, make_product, client_id):
    widget = make_product()
    services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])
    runner.dispatch(Navigate(Screen.CLIENTS))

    runner.dispatch(Delete(Screen.CLIENTS, client_id))

    assert controller.state.last_error.kind == "constraint"
    assert controller.state.last_error.module == "Clients"
    assert names(controller.state.clients.records) == ["Acme Corp"]


def test_sale_needs_a_client(runner, controller):
    runner.dispatch(Navigate(Screen.SALES))
    runner.dispatch(ToggleAdd(Screen.SALES))

    runner.dispatch(Submit(Screen.SALES))

    assert isinstance(controller.state.sales.form, Adding)
    assert controller.state.last_error.message == "Choose a client for the sale."


def test_sale_form_with_inline_client_and_rep(runner, controller, services, make_product):
    widget = make_product(units=1, cost="100", msrp="500")
    runner.dispatch(Navigate(Screen.SALES))
    runner.dispatch(ToggleAdd(Screen.SALES))

    runner.dispatch(ToggleInlineCreate("client"))
    runner.dispatch(InlineFieldChanged("client", "name", "Beta LLC"))
    runner.dispatch(InlineFieldChanged("client", "address", "2 Side St"))
    runner.dispatch(SubmitInlineCreate("client"))

    sales = controller.state.sales
    assert sales.inline_client is None
    assert names(sales.clients.candidates) == ["Beta LLC"]
    assert sales.selected_client_id == sales.clients.candidates[0].id

    runner.dispatch(ToggleInlineCreate("rep"))
    runner.dispatch(InlineFieldChanged("rep", "name", "Dana"))
    runner.dispatch(InlineFieldChanged("rep", "percentage", "10"))
    runner.dispatch(SubmitInlineCreate("rep"))
    assert sales.reps.find(sales.selected_rep_id).name == "Dana"

    runner.dispatch(QuantityChanged(Screen.SALES, widget.id, "2"))
    runner.dispatch(Submit(Screen.SALES))

    assert controller.state.last_error is None
    [sale] = controller.state.sales.records
    assert (sale.client_name, sale.rep_name) == ("Beta LLC", "Dana")
    assert sale.net == Decimal("691")
    assert controller.state.notices == ["Product 'Widget' is at -1 units"]


def test_edit_sale_preselects_client(runner, controller, services, make_product, client_id):
    widget = make_product()
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])
    other = services.client_manager.add_client("Beta LLC")
    runner.dispatch(Navigate(Screen.SALES))

    runner.dispatch(OpenEdit(Screen.SALES, sale.id))
    assert controller.state.sales.selected_client_id == client_id
    runner.dispatch(SelectClient(other))
    runner.dispatch(Submit(Screen.SALES))

    assert controller.state.sales.records[0].client_name == "Beta LLC"


def test_fulfill_reloads_sales_and_home(runner, controller, services, make_product, client_id):
    widget = make_product()
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])
    runner.dispatch(Navigate(Screen.SALES))

    runner.dispatch(Fulfill(sale.id))

    assert controller.state.sales.records[0].status == SaleStatus.COMPLETED
    assert controller.state.home.snapshot.draft_sales == []


def test_view_sale_and_copy_client_info(runner, controller, services, make_product, client_id, clipboard):
    widget = make_product()
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])
    runner.dispatch(Navigate(Screen.SALES))

    runner.dispatch(OpenView(Screen.SALES, sale.id))
    assert isinstance(controller.state.sales.form, Viewing)
    assert [p.product_name for p in controller.state.sales.viewed_products] == ["Widget"]

    runner.dispatch(CopyClientInfo())
    clipboard.assert_called_once_with("Acme Corp 1 Main St")


def test_copy_without_viewed_client_does_nothing(runner, clipboard):
    runner.dispatch(CopyClientInfo())
    clipboard.assert_not_called()


def test_unknown_message_is_ignored(controller):
    assert controller.update(object()) == []


def test_negative_quantity_keeps_manufacture_draft(runner, controller, services, make_product):
    widget = make_product(units=0)
    runner.dispatch(Navigate(Screen.MANUFACTURES))
    runner.dispatch(ToggleAdd(Screen.MANUFACTURES))
    runner.dispatch(QuantityChanged(Screen.MANUFACTURES, widget.id, "-2"))

    runner.dispatch(Submit(Screen.MANUFACTURES))

    assert isinstance(controller.state.manufactures.form, Adding)
    assert controller.state.manufactures.buffer.chosen[widget.id].qty == -2
    assert controller.state.last_error.kind == "invalid_input"
    assert services.manufacture_manager.get_all_manufactures() == []


def test_sale_without_lines_keeps_form(runner, controller, services, client_id):
    runner.dispatch(Navigate(Screen.SALES))
    runner.dispatch(ToggleAdd(Screen.SALES))
    runner.dispatch(SelectClient(client_id))

    runner.dispatch(Submit(Screen.SALES))

    assert isinstance(controller.state.sales.form, Adding)
    assert controller.state.sales.selected_client_id == client_id
    assert controller.state.last_error.message == "Choose at least one product."
    assert services.sale_manager.get_all_sales() == []


def test_purchase_line_with_cost_and_no_units_is_accepted(runner, controller, services):
    bolt = services.part_manager.create_part("Bolt")
    runner.dispatch(Navigate(Screen.PURCHASES))
    runner.dispatch(ToggleAdd(Screen.PURCHASES))
    runner.dispatch(CostChanged(Screen.PURCHASES, bolt.id, "4"))

    runner.dispatch(Submit(Screen.PURCHASES))

    assert controller.state.last_error is None
    assert controller.state.purchases.records[0].total == Decimal("4")
    assert services.part_manager.get_part_by_id(bolt.id).cost == Decimal("0")
