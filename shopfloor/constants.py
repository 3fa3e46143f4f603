# shopfloor/constants.py

from enum import Enum
from decimal import Decimal

# General
DATE_FORMAT = "%Y-%m-%d"
MONEY_QUANTUM = Decimal("0.01")

# Sales
FREE_SHIPPING_THRESHOLD = Decimal("500.00")
FLAT_SHIPPING_CHARGE = Decimal("15.00")
SHIPPING_EXPENSE = Decimal("9.00")  # booked against every sale


class SaleStatus(Enum):
    DRAFT = "DRAFT"
    COMPLETED = "COMPLETED"


class Screen(Enum):
    HOME = "Home"
    PARTS = "Parts"
    PRODUCTS = "Products"
    PURCHASES = "Purchases"
    MANUFACTURES = "Manufactures"
    SALES = "Sales"
    CLIENTS = "Clients"
    REPS = "Reps"
