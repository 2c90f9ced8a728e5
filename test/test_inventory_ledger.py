import sqlite3
from pathlib import Path

import pytest

from conftest import seed_product
from pos.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from pos.repositories.contracts import InventoryStore, OrderStore, ProductLookup
from pos.repositories.sqlite_repo import SqliteRepository
from pos.services.inventory_service import InventoryService


def _setup(tmp_path: Path):
    repo = SqliteRepository(tmp_path / "ledger.db")
    repo.init_db()
    return repo, InventoryService(repo)


def test_product_creation_provisions_zero_stock(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1")

    record = repo.get_inventory(pid)
    assert record is not None
    assert record.quantity == 0
    assert record.audit.version == 0
    assert inventory.check_availability(pid, 0) is True
    assert inventory.check_availability(pid, 1) is False


def test_decrement_is_conditional(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1", qty=3)

    inventory.decrement(pid, 2)
    assert inventory.get_quantity(pid) == 1

    with pytest.raises(InsufficientStockError) as exc:
        inventory.decrement(pid, 2)
    assert exc.value.product_id == pid
    assert inventory.get_quantity(pid) == 1


def test_decrement_rejects_non_positive_quantity(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1", qty=3)

    with pytest.raises(ValidationError):
        inventory.decrement(pid, 0)
    with pytest.raises(ValidationError):
        inventory.decrement(pid, -1)


def test_increment_and_version_bump(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1")
    before = repo.get_inventory(pid).audit.version

    assert inventory.increment(pid, 4) == 4
    assert inventory.increment(pid, 0) == 4

    assert repo.get_inventory(pid).audit.version == before + 2
    with pytest.raises(ValidationError):
        inventory.increment(pid, -1)


def test_missing_record_counts_as_zero_and_ensure_is_idempotent(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1", qty=5)
    conn = repo._conn()
    conn.execute("DELETE FROM inventory WHERE product_id=?", (pid,))
    conn.commit()
    conn.close()

    assert inventory.get_quantity(pid) == 0
    assert inventory.check_availability(pid, 1) is False

    inventory.ensure_exists(pid)
    inventory.ensure_exists(pid)
    assert repo.get_inventory(pid).quantity == 0

    assert inventory.increment(pid, 2) == 2


def test_ensure_exists_requires_product(tmp_path: Path):
    _repo, inventory = _setup(tmp_path)

    with pytest.raises(NotFoundError):
        inventory.ensure_exists(4242)


def test_negative_stock_is_rejected_by_schema(tmp_path: Path):
    repo, _inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1", qty=1)

    conn = repo._conn()
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute("UPDATE inventory SET quantity=-1 WHERE product_id=?", (pid,))
    conn.close()


def test_set_and_add_by_barcode(tmp_path: Path):
    repo, inventory = _setup(tmp_path)
    pid = seed_product(repo, "A-1", name="Apple")
    seed_product(repo, "B-1", name="Banana", qty=2)

    inventory.set_quantity_by_barcode("A-1", 7)
    assert inventory.get_quantity(pid) == 7
    assert inventory.add_stock_by_barcode(" A-1 ", 3) == 10

    with pytest.raises(NotFoundError):
        inventory.set_quantity_by_barcode("NOPE", 1)
    with pytest.raises(ValidationError):
        inventory.set_quantity_by_barcode("A-1", -1)

    rows = inventory.list_inventory()
    assert [(r.barcode, r.quantity) for r in rows] == [("A-1", 10), ("B-1", 2)]
    assert [r.name for r in inventory.list_inventory("ban")] == ["Banana"]


def test_sqlite_repo_satisfies_store_contracts(tmp_path: Path):
    repo, _inventory = _setup(tmp_path)

    assert isinstance(repo, ProductLookup)
    assert isinstance(repo, InventoryStore)
    assert isinstance(repo, OrderStore)
