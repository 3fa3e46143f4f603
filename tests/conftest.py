import pytest
from decimal import Decimal

from shopfloor.bootstrap import build_services
from shopfloor.data_access.database_manager import DatabaseManager


@pytest.fixture
def db_manager(tmp_path):
    """A fresh SQLite file with every table created."""
    manager = DatabaseManager(str(tmp_path / "shopfloor_test.db"))
    manager.create_tables()
    return manager


@pytest.fixture
def services(db_manager):
    return build_services(db_manager)


@pytest.fixture
def make_product(services):
    """Creates a product and pins its stock, cost and msrp."""
    def _make(name="Widget", units=10, cost="100", msrp="499.99", parts=()):
        product = services.product_manager.create_product(name, Decimal(msrp), list(parts))
        return services.product_manager.update_product(product.id, name, units, Decimal(cost), Decimal(msrp))
    return _make


@pytest.fixture
def client_id(services):
    return services.client_manager.add_client("Acme Corp", "1 Main St", "buyer@acme.test")
