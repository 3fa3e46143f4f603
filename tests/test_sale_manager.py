from datetime import date
from decimal import Decimal

import pytest

from shopfloor.constants import SaleStatus
from shopfloor.errors import ConstraintError, InvalidInputError, NotFoundError


def test_sale_just_below_free_shipping_pays_flat_charge(services, make_product, client_id):
    widget = make_product(cost="100", msrp="499.99")

    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])

    stored = services.sale_manager.get_sale_details(sale.id).sale
    assert stored.shipping == Decimal("15")
    assert stored.total == Decimal("514.99")
    assert stored.cost == Decimal("109")
    assert stored.net == Decimal("405.99")
    assert stored.rep_cut is None
    assert stored.status == SaleStatus.DRAFT


def test_sale_at_threshold_ships_free(services, make_product, client_id):
    widget = make_product(cost="100", msrp="500")

    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])

    stored = services.sale_manager.get_sale_details(sale.id).sale
    assert stored.shipping == Decimal("0")
    assert stored.total == Decimal("500")
    assert stored.net == Decimal("391")


def test_rep_commission_comes_out_of_net(services, make_product, client_id):
    widget = make_product(cost="100", msrp="500")
    rep = services.rep_manager.add_rep("Dana", 10)

    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 2)], rep_id=rep.id)

    stored = services.sale_manager.get_sale_details(sale.id).sale
    assert stored.rep_cut == Decimal("100")
    assert stored.total == Decimal("1000")
    assert stored.cost == Decimal("109")
    assert stored.net == Decimal("691")
    assert stored.rep_name == "Dana"
    assert stored.rep_percentage == 10


def test_sale_takes_stock_and_freezes_prices(services, make_product, client_id):
    widget = make_product(units=5, cost="40", msrp="60")

    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 2)], note="rush")
    services.product_manager.update_product(widget.id, "Widget", 3, Decimal("45"), Decimal("80"))

    assert sale.stock_warnings == []
    details = services.sale_manager.get_sale_details(sale.id)
    assert details.sale.note == "rush"
    assert details.client.name == "Acme Corp"
    assert [(i.product_name, i.qty, i.cost_at_sale, i.msrp_at_sale) for i in details.products] == [
        ("Widget", 2, Decimal("40"), Decimal("60"))]


def test_sale_units_decrement_and_may_go_negative(services, make_product, client_id):
    widget = make_product(units=1)

    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 3)])

    assert services.product_manager.get_product_by_id(widget.id).units == -2
    assert sale.stock_warnings == ["Product 'Widget' is at -2 units"]


def test_fulfill_is_idempotent_and_leaves_stock(services, make_product, client_id):
    widget = make_product(units=10)
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 4)])

    first = services.sale_manager.fulfill_sale(sale.id)
    second = services.sale_manager.fulfill_sale(sale.id)

    assert first.status == SaleStatus.COMPLETED
    assert second.status == SaleStatus.COMPLETED
    assert services.product_manager.get_product_by_id(widget.id).units == 6
    assert services.sale_manager.get_draft_sales() == []
    with pytest.raises(NotFoundError):
        services.sale_manager.fulfill_sale(9999)


def test_sales_without_rep_are_listed(services, make_product, client_id):
    widget = make_product()
    rep = services.rep_manager.add_rep("Dana", 5)
    services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])
    services.sale_manager.create_sale(client_id, date(2024, 5, 2), [(widget.id, 1)], rep_id=rep.id)

    sales = services.sale_manager.get_all_sales()

    assert [(s.client_name, s.rep_name) for s in sales] == [("Acme Corp", None), ("Acme Corp", "Dana")]


def test_deleting_rep_keeps_sale(services, make_product, client_id):
    widget = make_product(msrp="500")
    rep = services.rep_manager.add_rep("Dana", 5)
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)], rep_id=rep.id)

    services.rep_manager.delete_rep(rep.id)

    stored = services.sale_manager.get_sale_details(sale.id).sale
    assert stored.rep_id is None
    assert stored.rep_cut == Decimal("25")


def test_client_with_sales_cannot_be_deleted(services, make_product, client_id):
    widget = make_product()
    services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])

    with pytest.raises(ConstraintError):
        services.client_manager.delete_client(client_id)
    assert services.client_manager.get_client_by_id(client_id) is not None


def test_update_sale_keeps_totals(services, make_product, client_id):
    widget = make_product(cost="100", msrp="500")
    other = services.client_manager.add_client("Beta LLC")
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(widget.id, 1)])

    updated = services.sale_manager.update_sale(sale.id, other, date(2024, 5, 3), Decimal("5"), "moved")

    assert updated.client_name == "Beta LLC"
    assert updated.discount == Decimal("5")
    assert updated.date == date(2024, 5, 3)
    assert updated.total == Decimal("500")


def test_create_sale_validation(services, make_product, client_id):
    widget = make_product(units=10)
    with pytest.raises(InvalidInputError):
        services.sale_manager.create_sale(client_id, date.today(), [])
    with pytest.raises(InvalidInputError):
        services.sale_manager.create_sale(client_id, date.today(), [(widget.id, 0)])
    with pytest.raises(NotFoundError):
        services.sale_manager.create_sale(9999, date.today(), [(widget.id, 1)])
    with pytest.raises(NotFoundError):
        services.sale_manager.create_sale(client_id, date.today(), [(widget.id, 1), (9999, 1)])

    assert services.sale_manager.get_all_sales() == []
    assert services.product_manager.get_product_by_id(widget.id).units == 10


def test_home_snapshot_lists_drafts_and_low_stock(services, make_product, client_id):
    plenty = make_product(name="Plenty", units=100)
    make_product(name="Scarce", units=3)
    services.part_manager.create_part("Bolt")
    sale = services.sale_manager.create_sale(client_id, date(2024, 5, 1), [(plenty.id, 1)])

    home = services.dashboard_manager.get_home()

    assert [s.id for s in home.draft_sales] == [sale.id]
    assert [p.name for p in home.low_stock_products] == ["Scarce"]
    assert [p.name for p in home.low_stock_parts] == ["Bolt"]

    services.sale_manager.fulfill_sale(sale.id)
    assert services.dashboard_manager.get_home().draft_sales == []
