from decimal import Decimal

from shopfloor.business_logic import costing
from shopfloor.business_logic.costing import SaleLine
from shopfloor.business_logic.entities.part_entity import PartEntity
from shopfloor.business_logic.entities.product_part_entity import ProductPartEntity


def test_apply_purchase_uses_line_cost_as_total_paid():
    part = PartEntity(name="Bolt", id=1)

    after_first = costing.apply_purchase(part, 10, Decimal("20.00"))
    assert after_first.cost == Decimal("2")
    assert after_first.units_left == 10

    after_second = costing.apply_purchase(after_first, 5, Decimal("25.00"))
    assert after_second.total_spent == Decimal("45.00")
    assert after_second.total_units_purchased == 15
    assert after_second.units_left == 15
    assert after_second.cost == Decimal("3")


def test_apply_purchase_does_not_mutate_input():
    part = PartEntity(name="Bolt", id=1)
    costing.apply_purchase(part, 4, Decimal("8"))
    assert part.units_left == 0
    assert part.total_spent == Decimal("0")


def test_apply_purchase_with_no_units_keeps_cost_at_zero():
    part = PartEntity(name="Bolt", id=1)
    updated = costing.apply_purchase(part, 0, Decimal("5"))
    assert updated.cost == Decimal("0")
    assert updated.total_spent == Decimal("5")
    assert updated.total_units_purchased == 0


def test_weighted_average_is_order_independent():
    part = PartEntity(name="Nut", id=2)
    a_then_b = costing.apply_purchase(costing.apply_purchase(part, 3, Decimal("9")), 7, Decimal("14"))
    b_then_a = costing.apply_purchase(costing.apply_purchase(part, 7, Decimal("14")), 3, Decimal("9"))
    assert a_then_b.cost == b_then_a.cost == Decimal("2.3")


def test_product_cost_sums_quantity_times_snapshot():
    lines = [
        ProductPartEntity(product_id=1, part_id=1, qty=2, cost=Decimal("3")),
        ProductPartEntity(product_id=1, part_id=2, qty=1, cost=Decimal("1.50")),
    ]
    assert costing.product_cost(lines) == Decimal("7.50")
    assert costing.product_cost([]) == Decimal("0")


def test_assembly_cost_and_purchase_total():
    assert costing.assembly_cost([(Decimal("2"), 3), (Decimal("0.5"), 4)]) == Decimal("8")
    assert costing.purchase_total([Decimal("20"), Decimal("25.50")]) == Decimal("45.50")


def test_manufacture_deltas_scale_parts_by_run_quantity():
    bom = {
        10: [ProductPartEntity(product_id=10, part_id=1, qty=2), ProductPartEntity(product_id=10, part_id=2, qty=1)],
        11: [ProductPartEntity(product_id=11, part_id=1, qty=1)],
    }
    deltas = costing.manufacture_deltas([(10, 3), (11, 4)], bom)
    assert deltas.product_units == {10: 3, 11: 4}
    assert deltas.part_units == {1: -10, 2: -3}


def test_shipping_charged_below_threshold():
    result = costing.sale_economics([SaleLine(product_id=1, qty=1, cost=Decimal("100"), msrp=Decimal("499.99"))])
    assert result.shipping == Decimal("15.00")
    assert result.total == Decimal("514.99")
    assert result.cost == Decimal("109.00")
    assert result.net == Decimal("405.99")
    assert result.rep_cut is None


def test_shipping_free_at_threshold():
    result = costing.sale_economics([SaleLine(product_id=1, qty=1, cost=Decimal("100"), msrp=Decimal("500.00"))])
    assert result.shipping == Decimal("0")
    assert result.total == Decimal("500.00")
    assert result.net == Decimal("391.00")


def test_rep_commission_comes_off_net():
    lines = [SaleLine(product_id=1, qty=2, cost=Decimal("100"), msrp=Decimal("500"))]
    result = costing.sale_economics(lines, rep_percentage=10)
    assert result.rep_cut == Decimal("100")
    # 1000 revenue - 200 scaled cost - 100 commission - 9 shipping expense
    assert result.net == Decimal("691")
    assert result.total == Decimal("1000")


def test_sale_cost_sums_unit_costs_without_quantity():
    lines = [
        SaleLine(product_id=1, qty=3, cost=Decimal("10"), msrp=Decimal("20")),
        SaleLine(product_id=2, qty=2, cost=Decimal("5"), msrp=Decimal("8")),
    ]
    result = costing.sale_economics(lines)
    assert result.cost == Decimal("24")  # 10 + 5 + 9
    assert result.net == Decimal("76") - Decimal("40") + Decimal("15") - Decimal("9")


def test_negative_stock_warnings_only_for_items_below_zero():
    warnings = costing.negative_stock_warnings("Part", {1: "Bolt", 2: "Nut"}, {1: -2, 2: 0})
    assert warnings == ["Part 'Bolt' is at -2 units"]
