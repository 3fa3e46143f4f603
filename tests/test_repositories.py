import sqlite3
from datetime import date
from decimal import Decimal
from unittest import mock

import pytest

from shopfloor.business_logic.entities.client_entity import ClientEntity
from shopfloor.business_logic.entities.part_entity import PartEntity
from shopfloor.business_logic.entities.product_entity import ProductEntity
from shopfloor.business_logic.entities.product_part_entity import ProductPartEntity
from shopfloor.business_logic.entities.rep_entity import RepEntity
from shopfloor.business_logic.entities.sale_entity import SaleEntity
from shopfloor.constants import SaleStatus
from shopfloor.data_access.clients_repository import ClientsRepository
from shopfloor.data_access.parts_repository import PartsRepository
from shopfloor.data_access.product_parts_repository import ProductPartsRepository
from shopfloor.data_access.products_repository import ProductsRepository
from shopfloor.data_access.reps_repository import RepsRepository
from shopfloor.data_access.sales_repository import SalesRepository
from shopfloor.errors import ApiError, ConstraintError, NotFoundError, UnavailableError, from_sqlite_error


@pytest.fixture
def parts_repo(db_manager):
    return PartsRepository(db_manager)


def test_part_crud(parts_repo):
    part = parts_repo.add(PartEntity(name="Bolt", cost=Decimal("1.25")))
    assert part.id is not None

    stored = parts_repo.get_by_id(part.id)
    assert stored == PartEntity(id=part.id, name="Bolt", cost=Decimal("1.25"))

    renamed = parts_repo.update_fields(part.id, {"name": "Hex bolt"})
    assert renamed.name == "Hex bolt"
    assert parts_repo.delete(part.id) is True
    assert parts_repo.get_by_id(part.id) is None
    assert parts_repo.delete(part.id) is False


def test_update_fields_missing_row_and_bad_column(parts_repo):
    with pytest.raises(NotFoundError):
        parts_repo.update_fields(9999, {"name": "Ghost"})
    part = parts_repo.add(PartEntity(name="Bolt"))
    with pytest.raises(ValueError):
        parts_repo.update_fields(part.id, {"part_name": "Bolt"})


def test_low_stock_and_adjust(parts_repo):
    bolt = parts_repo.add(PartEntity(name="Bolt", units_left=30))
    nut = parts_repo.add(PartEntity(name="Nut", units_left=10))

    assert [p.name for p in parts_repo.get_low_stock(25)] == ["Nut"]
    parts_repo.adjust_units_left(bolt.id, -10)
    assert [p.name for p in parts_repo.get_low_stock(25)] == ["Nut", "Bolt"]
    assert parts_repo.get_by_id(nut.id).units_left == 10


def test_rep_percentage_check_is_a_constraint(db_manager):
    reps = RepsRepository(db_manager)
    with pytest.raises(ConstraintError):
        reps.add(RepEntity(name="Greedy", percentage=120))


def test_sale_status_and_names(db_manager):
    clients = ClientsRepository(db_manager)
    sales = SalesRepository(db_manager)
    client = clients.add(ClientEntity(name="Acme Corp"))
    sale = sales.add(SaleEntity(client_id=client.id, date=date(2024, 5, 1), total=Decimal("10")))

    sales.set_status(sale.id, SaleStatus.COMPLETED)

    stored = sales.get_with_names(sale.id)
    assert stored.status == SaleStatus.COMPLETED
    assert stored.client_name == "Acme Corp"
    assert stored.rep_name is None
    assert sales.get_by_status(SaleStatus.DRAFT) == []
    with pytest.raises(ConstraintError):
        clients.delete(client.id)


def test_product_parts_cost_propagation(db_manager, parts_repo):
    products = ProductsRepository(db_manager)
    product_parts = ProductPartsRepository(db_manager)
    bolt = parts_repo.add(PartEntity(name="Bolt"))
    shelf = products.add(ProductEntity(name="Shelf"))
    rack = products.add(ProductEntity(name="Rack"))
    product_parts.add(ProductPartEntity(product_id=shelf.id, part_id=bolt.id, qty=4))
    product_parts.add(ProductPartEntity(product_id=rack.id, part_id=bolt.id, qty=2))

    product_parts.update_cost_for_part(bolt.id, Decimal("3"))

    grouped = product_parts.get_grouped_by_product()
    assert set(grouped) == {shelf.id, rack.id}
    assert all(pp.cost == Decimal("3") for pp in product_parts.get_by_part_id(bolt.id))
    assert product_parts.get_by_product_id(shelf.id)[0].part_name == "Bolt"


def test_transaction_rolls_back_every_write(db_manager, parts_repo):
    with pytest.raises(RuntimeError):
        with db_manager.transaction():
            parts_repo.add(PartEntity(name="Bolt"))
            parts_repo.add(PartEntity(name="Nut"))
            raise RuntimeError("boom")
    assert parts_repo.get_all() == []
    assert not db_manager.in_transaction


def test_transaction_commits(db_manager, parts_repo):
    with db_manager.transaction():
        parts_repo.add(PartEntity(name="Bolt"))
        with db_manager.transaction():
            parts_repo.add(PartEntity(name="Nut"))
    assert [p.name for p in parts_repo.get_all()] == ["Bolt", "Nut"]


def test_sqlite_errors_are_classified():
    assert isinstance(from_sqlite_error(sqlite3.IntegrityError("x")), ConstraintError)
    assert isinstance(from_sqlite_error(sqlite3.OperationalError("x")), UnavailableError)
    assert type(from_sqlite_error(sqlite3.DatabaseError("x"))) is ApiError


def test_unreachable_database_is_unavailable(tmp_path, db_manager, parts_repo):
    with mock.patch.object(db_manager, "db_path", str(tmp_path / "missing" / "shop.db")):
        with pytest.raises(UnavailableError):
            parts_repo.get_all()


def test_transaction_holds_write_lock_from_the_start(db_manager):
    with db_manager.transaction() as conn:
        assert conn.in_transaction
        other = sqlite3.connect(db_manager.db_path, timeout=0)
        try:
            with pytest.raises(sqlite3.OperationalError):
                other.execute("BEGIN IMMEDIATE")
        finally:
            other.close()
