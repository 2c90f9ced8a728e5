from pathlib import Path

import pytest

from conftest import build_order_service, count_rows, seed_product
from pos.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from pos.repositories.sqlite_repo import SqliteRepository


def _setup(tmp_path: Path):
    repo = SqliteRepository(tmp_path / "orders.db")
    repo.init_db()
    return repo, build_order_service(repo)


def _stock(repo, pid: int) -> int:
    return repo.get_inventory(pid).quantity


def test_create_order_persists_items_and_decrements_stock(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=10, name="Apple")
    b = seed_product(repo, "B-1", qty=5, name="Banana")

    result = orders.create_order(
        [
            {"barcode": "A-1", "quantity": 3, "unit_price": 2.5},
            {"barcode": "B-1", "quantity": 2, "unit_price": 1.1},
        ]
    )

    assert result.total == 9.7
    assert result.order.total == 9.7
    assert result.order.item_count == 2
    assert [line.name for line in result.order.items] == ["Apple", "Banana"]
    assert result.order.invoice_path is None
    assert _stock(repo, a) == 7
    assert _stock(repo, b) == 3

    again = orders.get_order_by_id(result.order.id)
    assert again == result.order


def test_create_order_rejects_empty_cart(tmp_path: Path):
    _repo, orders = _setup(tmp_path)

    with pytest.raises(ValidationError, match="at least one item"):
        orders.create_order([])


def test_create_order_reports_every_invalid_field(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    seed_product(repo, "A-1", qty=10)

    with pytest.raises(ValidationError) as exc:
        orders.create_order(
            [
                {"barcode": "A-1", "quantity": 0, "unit_price": 1.0},
                {"barcode": "  ", "quantity": 1, "unit_price": -2.0},
                {"barcode": "A-1", "quantity": 1.5, "unit_price": "abc"},
            ]
        )

    pairs = {(e.index, e.field) for e in exc.value.errors}
    assert pairs == {
        (0, "quantity"),
        (1, "barcode"),
        (1, "unit_price"),
        (2, "quantity"),
        (2, "unit_price"),
    }
    assert count_rows(repo, "orders") == 0


def test_missing_barcodes_are_all_listed_and_nothing_changes(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=10)

    with pytest.raises(NotFoundError) as exc:
        orders.create_order(
            [
                {"barcode": "A-1", "quantity": 1, "unit_price": 1.0},
                {"barcode": "ZZ-9", "quantity": 1, "unit_price": 1.0},
                {"barcode": "MISSING", "quantity": 1, "unit_price": 1.0},
            ]
        )

    assert exc.value.barcodes == ["MISSING", "ZZ-9"]
    assert "MISSING" in str(exc.value) and "ZZ-9" in str(exc.value)
    assert _stock(repo, a) == 10
    assert count_rows(repo, "orders") == 0
    assert count_rows(repo, "order_items") == 0


def test_insufficient_stock_leaves_inventory_untouched(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=10)
    b = seed_product(repo, "B-1", qty=1)

    with pytest.raises(InsufficientStockError) as exc:
        orders.create_order(
            [
                {"barcode": "A-1", "quantity": 4, "unit_price": 1.0},
                {"barcode": "B-1", "quantity": 2, "unit_price": 1.0},
            ]
        )

    assert exc.value.barcodes == ["B-1"]
    assert _stock(repo, a) == 10
    assert _stock(repo, b) == 1
    assert count_rows(repo, "orders") == 0


def test_sequential_orders_against_ten_units(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=10)

    orders.create_order([{"barcode": "A-1", "quantity": 6, "unit_price": 1.0}])
    assert _stock(repo, a) == 4

    with pytest.raises(InsufficientStockError):
        orders.create_order([{"barcode": "A-1", "quantity": 5, "unit_price": 1.0}])
    assert _stock(repo, a) == 4

    orders.create_order([{"barcode": "A-1", "quantity": 4, "unit_price": 1.0}])
    assert _stock(repo, a) == 0


def test_duplicate_barcodes_are_separate_lines_checked_cumulatively(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=5)

    with pytest.raises(InsufficientStockError):
        orders.create_order(
            [
                {"barcode": "A-1", "quantity": 3, "unit_price": 1.0},
                {"barcode": "A-1", "quantity": 3, "unit_price": 1.0},
            ]
        )
    assert _stock(repo, a) == 5

    result = orders.create_order(
        [
            {"barcode": "A-1", "quantity": 2, "unit_price": 1.0},
            {"barcode": "A-1", "quantity": 3, "unit_price": 1.5},
        ]
    )
    assert result.order.item_count == 2
    assert result.total == 6.5
    assert _stock(repo, a) == 0


def test_expected_total_mismatch_is_rejected(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=10)

    with pytest.raises(ValidationError, match="A-1") as exc:
        orders.create_order([{"barcode": "A-1", "quantity": 3, "unit_price": 2.0, "expected_total": 6.5}])

    assert exc.value.errors[0].index == 0
    assert exc.value.errors[0].field == "expected_total"
    assert _stock(repo, a) == 10


def test_expected_total_within_a_cent_is_accepted(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    seed_product(repo, "A-1", qty=10)

    result = orders.create_order([{"barcode": "A-1", "quantity": 3, "unit_price": 0.1, "expected_total": 0.3}])

    assert result.total == 0.3


def test_unit_price_need_not_match_mrp(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    seed_product(repo, "A-1", qty=10, mrp=99.0)

    result = orders.create_order([{"barcode": "A-1", "quantity": 1, "unit_price": 80.0}])

    assert result.order.items[0].selling_price == 80.0


def test_barcodes_are_trimmed_before_lookup(tmp_path: Path):
    repo, orders = _setup(tmp_path)
    a = seed_product(repo, "A-1", qty=2)

    orders.create_order([{"barcode": "  A-1 ", "quantity": "2", "unit_price": "1.25"}])

    assert _stock(repo, a) == 0
