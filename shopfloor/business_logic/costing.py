# shopfloor/business_logic/costing.py
"""Unit-cost, stock and sale arithmetic.

Every function here takes value snapshots and returns new values; nothing
touches the database. The managers persist whatever these return.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from shopfloor.business_logic.entities.part_entity import PartEntity
from shopfloor.business_logic.entities.product_part_entity import ProductPartEntity
from shopfloor.constants import FLAT_SHIPPING_CHARGE, FREE_SHIPPING_THRESHOLD, SHIPPING_EXPENSE

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def weighted_average_cost(total_spent: Decimal, total_units: int) -> Decimal:
    if total_units == 0:
        return ZERO
    return Decimal(total_spent) / Decimal(total_units)


def apply_purchase(part: PartEntity, quantity: int, line_cost: Decimal) -> PartEntity:
    """Folds one purchased line into a part.

    ``line_cost`` is what was paid for the whole line. The unit cost becomes
    the running total spent over the running units purchased; if no units
    were ever bought the cost stays at zero.
    """
    total_units = part.total_units_purchased + quantity
    total_spent = part.total_spent + line_cost
    if total_units == 0:
        cost = part.cost
    else:
        cost = weighted_average_cost(total_spent, total_units)
    return replace(
        part,
        units_left=part.units_left + quantity,
        total_spent=total_spent,
        total_units_purchased=total_units,
        cost=cost,
    )


def product_cost(product_parts: Iterable[ProductPartEntity]) -> Decimal:
    return sum((pp.cost * pp.qty for pp in product_parts), ZERO)


def assembly_cost(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Initial product cost from (part unit cost, qty per unit) pairs."""
    return sum((cost * qty for cost, qty in lines), ZERO)


def purchase_total(line_costs: Iterable[Decimal]) -> Decimal:
    return sum(line_costs, ZERO)


@dataclass(frozen=True)
class StockDeltas:
    product_units: Dict[int, int]
    part_units: Dict[int, int]


def manufacture_deltas(lines: Sequence[Tuple[int, int]],
                       product_parts_by_product: Mapping[int, Sequence[ProductPartEntity]]) -> StockDeltas:
    """Units gained per product and consumed per part for a manufacturing run.

    ``lines`` holds (product_id, qty) pairs. Each product gains ``qty`` units
    and each of its parts loses ``ProductPart.qty * qty``.
    """
    product_units: Dict[int, int] = {}
    part_units: Dict[int, int] = {}
    for product_id, qty in lines:
        product_units[product_id] = product_units.get(product_id, 0) + qty
        for pp in product_parts_by_product.get(product_id, ()):
            part_units[pp.part_id] = part_units.get(pp.part_id, 0) - pp.qty * qty
    return StockDeltas(product_units=product_units, part_units=part_units)


@dataclass(frozen=True)
class SaleLine:
    product_id: int
    qty: int
    cost: Decimal
    msrp: Decimal


@dataclass(frozen=True)
class SaleEconomics:
    total: Decimal
    cost: Decimal
    net: Decimal
    shipping: Decimal
    rep_cut: Optional[Decimal]


def shipping_charge(total: Decimal) -> Decimal:
    return ZERO if total >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_CHARGE


def sale_economics(lines: Sequence[SaleLine], rep_percentage: Optional[int] = None) -> SaleEconomics:
    """Totals for a sale.

    ``cost`` sums the unit costs of the lines without scaling by quantity,
    while ``net`` subtracts the quantity-scaled cost. Shipping is decided on
    the goods total before shipping is added. The flat shipping expense is
    always booked against cost and net.
    """
    total = sum((line.msrp * line.qty for line in lines), ZERO)
    cost = sum((line.cost for line in lines), ZERO)
    net = total - sum((line.cost * line.qty for line in lines), ZERO)

    shipping = shipping_charge(total)

    rep_cut = None
    if rep_percentage is not None:
        rep_cut = total * (Decimal(rep_percentage) / HUNDRED)
        net -= rep_cut

    total += shipping
    cost += SHIPPING_EXPENSE
    net += shipping - SHIPPING_EXPENSE
    return SaleEconomics(total=total, cost=cost, net=net, shipping=shipping, rep_cut=rep_cut)


def negative_stock_warnings(kind: str, names: Mapping[int, str], levels: Mapping[int, int]) -> List[str]:
    return [f"{kind} '{names.get(item_id, item_id)}' is at {units} units"
            for item_id, units in levels.items() if units < 0]
