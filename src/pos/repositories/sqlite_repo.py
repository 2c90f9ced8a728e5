from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from pos.domain.errors import ConflictError, InsufficientStockError, InternalError, NotFoundError
from pos.domain.models import (
    AuditInfo,
    Client,
    ClientSales,
    DaySales,
    InventoryRecord,
    InventoryRow,
    Order,
    OrderItem,
    Product,
)

# SQLite caps bound parameters per statement; stay well under the oldest default (999).
_IN_CHUNK = 500

_PRODUCT_COLUMNS = "id, barcode, client_id, name, mrp, image_url, active, version, created_at, updated_at"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat(sep=" ")


def _chunks(values: list, size: int = _IN_CHUNK) -> Iterable[list]:
    for i in range(0, len(values), size):
        yield values[i : i + size]


class SqliteRepository:
    def __init__(self, db_path: Path | str, timeout: float = 30.0):
        self.db_path = str(db_path)
        self.timeout = float(timeout)

    def _conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def init_db(self) -> None:
        self.run_migrations()

    def run_migrations(self) -> None:
        conn = self._conn()
        backup_path = None
        try:
            # WAL lets order reads proceed while a writer holds the lock.
            conn.execute("PRAGMA journal_mode=WAL")
            cur = conn.cursor()
            cur.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)")
            conn.commit()
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            current_version = int(cur.fetchone()[0])

            pending = [(v, m) for v, m in self._migrations() if v > current_version]
            if not pending:
                return
            if current_version > 0:
                backup_path = self._create_pre_migration_backup(conn)

            cur.execute("BEGIN IMMEDIATE")
            for version, migration in pending:
                migration(cur)
                cur.execute(
                    "INSERT INTO schema_migrations (version, applied_at) VALUES (?, datetime('now'))",
                    (version,),
                )
            conn.commit()
        except Exception as exc:
            conn.rollback()
            self._restore_pre_migration_backup(conn, backup_path)
            raise RuntimeError(
                "Database migration failed. Original database restored from automatic backup."
            ) from exc
        finally:
            conn.close()

    def _migrations(self):
        return [
            (1, self._migration_v1_base),
            (2, self._migration_v2_indexes),
        ]

    def _create_pre_migration_backup(self, conn: sqlite3.Connection) -> Path:
        db_file = Path(self.db_path)
        backup_file = db_file.with_name(f"{db_file.stem}.pre_migration_{datetime.now().strftime('%Y%m%d%H%M%S')}.bak")
        dst = sqlite3.connect(str(backup_file))
        try:
            conn.backup(dst)
        finally:
            dst.close()
        return backup_file

    def _restore_pre_migration_backup(self, conn: sqlite3.Connection, backup_path: Path | None) -> None:
        if backup_path is None or not backup_path.exists():
            return
        src = sqlite3.connect(str(backup_path))
        try:
            src.backup(conn)
        finally:
            src.close()

    def _migration_v1_base(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS clients (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            version INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
        )

        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            barcode TEXT UNIQUE NOT NULL,
            client_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            mrp REAL NOT NULL CHECK(mrp > 0),
            image_url TEXT,
            active INTEGER NOT NULL DEFAULT 1 CHECK(active IN (0,1)),
            version INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(client_id) REFERENCES clients(id)
        )
        """
        )

        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS inventory (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            product_id INTEGER UNIQUE NOT NULL,
            quantity INTEGER NOT NULL DEFAULT 0 CHECK(quantity >= 0),
            version INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(product_id) REFERENCES products(id)
        )
        """
        )

        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TEXT NOT NULL,
            invoice_path TEXT,
            version INTEGER NOT NULL DEFAULT 0,
            updated_at TEXT NOT NULL
        )
        """
        )

        # product_id is not a foreign key: order history outlives catalog rows.
        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS order_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            order_id INTEGER NOT NULL,
            product_id INTEGER NOT NULL,
            quantity INTEGER NOT NULL CHECK(quantity > 0),
            selling_price REAL NOT NULL CHECK(selling_price > 0),
            FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
        )
        """
        )

    def _migration_v2_indexes(self, cur: sqlite3.Cursor) -> None:
        cur.execute("CREATE INDEX IF NOT EXISTS idx_orders_created_at ON orders(created_at)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_order_items_order_id ON order_items(order_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_products_client_id ON products(client_id)")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_products_name ON products(name)")

    @staticmethod
    def _audit(version, created_at, updated_at) -> AuditInfo:
        return AuditInfo(version=int(version), created_at=str(created_at), updated_at=str(updated_at))

    @classmethod
    def _product_from_row(cls, r) -> Product:
        return Product(
            id=int(r[0]),
            barcode=str(r[1]),
            client_id=int(r[2]),
            name=str(r[3]),
            mrp=float(r[4]),
            image_url=(str(r[5]) if r[5] is not None else None),
            active=int(r[6]),
            audit=cls._audit(r[7], r[8], r[9]),
        )

    # ---------- Clients ----------
    def add_client(self, name: str) -> int:
        now = utc_now_iso()
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO clients (name, created_at, updated_at) VALUES (?, ?, ?)",
                (name, now, now),
            )
            cid = int(cur.lastrowid)
            conn.commit()
            return cid
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ConflictError(f"Client with name: {name} already exists.", field="name", value=name) from exc
        finally:
            conn.close()

    def update_client_name(self, client_id: int, name: str) -> bool:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE clients
                SET name=?, version=version+1, updated_at=?
                WHERE id=?
                """,
                (name, utc_now_iso(), int(client_id)),
            )
            changed = cur.rowcount > 0
            conn.commit()
            return bool(changed)
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ConflictError(f"Client with name: {name} already exists.", field="name", value=name) from exc
        finally:
            conn.close()

    def get_client_by_id(self, client_id: int) -> Optional[Client]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            "SELECT id, name, version, created_at, updated_at FROM clients WHERE id=?",
            (int(client_id),),
        )
        r = cur.fetchone()
        conn.close()
        if not r:
            return None
        return Client(id=int(r[0]), name=str(r[1]), audit=self._audit(r[2], r[3], r[4]))

    def get_client_by_name(self, name: str) -> Optional[Client]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            "SELECT id, name, version, created_at, updated_at FROM clients WHERE name=?",
            (name,),
        )
        r = cur.fetchone()
        conn.close()
        if not r:
            return None
        return Client(id=int(r[0]), name=str(r[1]), audit=self._audit(r[2], r[3], r[4]))

    def list_clients(self, name_prefix: Optional[str] = None, limit: int = 100, offset: int = 0) -> list[Client]:
        conn = self._conn()
        cur = conn.cursor()
        sql = "SELECT id, name, version, created_at, updated_at FROM clients"
        params: list = []
        if name_prefix:
            sql += " WHERE name LIKE ? ESCAPE '\\'"
            params.append(self._like_prefix(name_prefix))
        sql += " ORDER BY name LIMIT ? OFFSET ?"
        params.extend([int(limit), int(offset)])
        cur.execute(sql, params)
        rows = cur.fetchall()
        conn.close()
        return [Client(id=int(r[0]), name=str(r[1]), audit=self._audit(r[2], r[3], r[4])) for r in rows]

    @staticmethod
    def _like_prefix(prefix: str) -> str:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return escaped + "%"

    # ---------- Products ----------
    def create_product_with_inventory(
        self, barcode: str, client_id: int, name: str, mrp: float, image_url: Optional[str]
    ) -> int:
        now = utc_now_iso()
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            cur.execute("SELECT 1 FROM clients WHERE id=?", (int(client_id),))
            if not cur.fetchone():
                raise NotFoundError("Client not found.", entity="client", entity_id=int(client_id))
            cur.execute("SELECT 1 FROM products WHERE barcode=?", (barcode,))
            if cur.fetchone():
                raise ConflictError(
                    f"Product with barcode {barcode} already exists.", field="barcode", value=barcode
                )
            cur.execute(
                """
                INSERT INTO products (barcode, client_id, name, mrp, image_url, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (barcode, int(client_id), name, float(mrp), image_url, now, now),
            )
            pid = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO inventory (product_id, quantity, created_at, updated_at) VALUES (?, 0, ?, ?)",
                (pid, now, now),
            )
            conn.commit()
            return pid
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def update_product(self, product_id: int, name: str, mrp: float, image_url: Optional[str]) -> bool:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE products
            SET name=?, mrp=?, image_url=?, version=version+1, updated_at=?
            WHERE id=? AND active=1
            """,
            (name, float(mrp), image_url, utc_now_iso(), int(product_id)),
        )
        changed = cur.rowcount > 0
        conn.commit()
        conn.close()
        return bool(changed)

    def deactivate_product(self, product_id: int) -> bool:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE products
            SET active=0, version=version+1, updated_at=?
            WHERE id=? AND active=1
            """,
            (utc_now_iso(), int(product_id)),
        )
        changed = cur.rowcount > 0
        conn.commit()
        conn.close()
        return bool(changed)

    def barcode_exists(self, barcode: str) -> bool:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("SELECT 1 FROM products WHERE barcode=?", (barcode,))
        row = cur.fetchone()
        conn.close()
        return row is not None

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE active=1 AND id=?",
            (int(product_id),),
        )
        r = cur.fetchone()
        conn.close()
        return self._product_from_row(r) if r else None

    def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE active=1 AND barcode=?",
            (barcode,),
        )
        r = cur.fetchone()
        conn.close()
        return self._product_from_row(r) if r else None

    def find_products_by_barcodes(self, barcodes: Iterable[str]) -> dict[str, Product]:
        distinct = sorted(set(barcodes))
        if not distinct:
            return {}
        conn = self._conn()
        cur = conn.cursor()
        found: dict[str, Product] = {}
        for chunk in _chunks(distinct):
            marks = ",".join("?" for _ in chunk)
            cur.execute(
                f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE active=1 AND barcode IN ({marks})",
                chunk,
            )
            for r in cur.fetchall():
                p = self._product_from_row(r)
                found[p.barcode] = p
        conn.close()
        return found

    def products_by_ids(self, product_ids: Iterable[int]) -> dict[int, Product]:
        distinct = sorted({int(pid) for pid in product_ids})
        if not distinct:
            return {}
        conn = self._conn()
        cur = conn.cursor()
        found: dict[int, Product] = {}
        for chunk in _chunks(distinct):
            marks = ",".join("?" for _ in chunk)
            cur.execute(
                f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE active=1 AND id IN ({marks})",
                chunk,
            )
            for r in cur.fetchall():
                p = self._product_from_row(r)
                found[p.id] = p
        conn.close()
        return found

    def search_products(
        self,
        barcode: Optional[str] = None,
        name_prefix: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        sql = f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE active=1"
        params: list = []
        if barcode:
            sql += " AND barcode=?"
            params.append(barcode)
        if name_prefix:
            sql += " AND LOWER(name) LIKE ? ESCAPE '\\'"
            params.append(self._like_prefix(name_prefix.lower()))
        sql += " ORDER BY name, id LIMIT ? OFFSET ?"
        params.extend([int(limit), int(offset)])

        conn = self._conn()
        cur = conn.cursor()
        cur.execute(sql, params)
        rows = cur.fetchall()
        conn.close()
        return [self._product_from_row(r) for r in rows]

    # ---------- Inventory ----------
    def ensure_inventory(self, product_id: int) -> None:
        now = utc_now_iso()
        conn = self._conn()
        try:
            conn.execute(
                """
                INSERT INTO inventory (product_id, quantity, created_at, updated_at)
                VALUES (?, 0, ?, ?)
                ON CONFLICT(product_id) DO NOTHING
                """,
                (int(product_id), now, now),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise NotFoundError(
                f"Product with id: {product_id} not found", entity="product", entity_id=int(product_id)
            ) from exc
        finally:
            conn.close()

    def get_inventory(self, product_id: int) -> Optional[InventoryRecord]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            "SELECT product_id, quantity, version, created_at, updated_at FROM inventory WHERE product_id=?",
            (int(product_id),),
        )
        r = cur.fetchone()
        conn.close()
        if not r:
            return None
        return InventoryRecord(product_id=int(r[0]), quantity=int(r[1]), audit=self._audit(r[2], r[3], r[4]))

    def decrement_inventory(self, product_id: int, qty: int) -> bool:
        """Subtract ``qty`` only if enough stock remains; returns False otherwise."""
        conn = self._conn()
        try:
            cur = conn.cursor()
            changed = self._conditional_decrement(cur, int(product_id), int(qty), utc_now_iso())
            conn.commit()
            return changed
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _conditional_decrement(cur: sqlite3.Cursor, product_id: int, qty: int, now: str) -> bool:
        cur.execute(
            """
            UPDATE inventory
            SET quantity = quantity - ?, version = version + 1, updated_at = ?
            WHERE product_id = ? AND quantity >= ?
            """,
            (qty, now, product_id, qty),
        )
        return cur.rowcount > 0

    def increment_inventory(self, product_id: int, qty: int) -> int:
        now = utc_now_iso()
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO inventory (product_id, quantity, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(product_id) DO UPDATE
                SET quantity = quantity + excluded.quantity,
                    version = version + 1,
                    updated_at = excluded.updated_at
                """,
                (int(product_id), int(qty), now, now),
            )
            cur.execute("SELECT quantity FROM inventory WHERE product_id=?", (int(product_id),))
            quantity = int(cur.fetchone()[0])
            conn.commit()
            return quantity
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise NotFoundError(
                f"Product with id: {product_id} not found", entity="product", entity_id=int(product_id)
            ) from exc
        finally:
            conn.close()

    def set_inventory_quantities(self, quantities: Iterable[tuple[int, int]]) -> int:
        """Absolute upsert of (product_id, quantity) pairs in one transaction."""
        now = utc_now_iso()
        rows = [(int(pid), int(qty), now, now) for pid, qty in quantities]
        if not rows:
            return 0
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            cur.executemany(
                """
                INSERT INTO inventory (product_id, quantity, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(product_id) DO UPDATE
                SET quantity = excluded.quantity,
                    version = version + 1,
                    updated_at = excluded.updated_at
                """,
                rows,
            )
            conn.commit()
            return len(rows)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_inventory(self, name_prefix: Optional[str] = None, limit: int = 100, offset: int = 0) -> list[InventoryRow]:
        sql = """
            SELECT p.id, p.barcode, p.name, COALESCE(i.quantity, 0)
            FROM products p
            LEFT JOIN inventory i ON i.product_id = p.id
            WHERE p.active = 1
        """
        params: list = []
        if name_prefix:
            sql += " AND LOWER(p.name) LIKE ? ESCAPE '\\'"
            params.append(self._like_prefix(name_prefix.lower()))
        sql += " ORDER BY p.name ASC, p.id ASC LIMIT ? OFFSET ?"
        params.extend([int(limit), int(offset)])

        conn = self._conn()
        cur = conn.cursor()
        cur.execute(sql, params)
        rows = cur.fetchall()
        conn.close()
        return [InventoryRow(product_id=int(r[0]), barcode=str(r[1]), name=str(r[2]), quantity=int(r[3])) for r in rows]

    # ---------- Orders ----------
    def create_order_with_items(self, datetime_iso: str, lines: Iterable[tuple[int, int, float]]) -> int:
        """Insert the order header, decrement stock per line and bulk insert the items atomically.

        ``lines`` are ``(product_id, quantity, selling_price)`` tuples. A line whose
        conditional decrement affects no row aborts the whole transaction.
        """
        lines = [(int(pid), int(qty), float(price)) for pid, qty, price in lines]
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            cur.execute(
                "INSERT INTO orders (created_at, updated_at) VALUES (?, ?)",
                (datetime_iso, datetime_iso),
            )
            order_id = int(cur.lastrowid)

            for pid, qty, _price in lines:
                if not self._conditional_decrement(cur, pid, qty, datetime_iso):
                    raise InsufficientStockError(
                        f"Insufficient inventory for product id: {pid}", product_id=pid
                    )

            cur.executemany(
                """
                INSERT INTO order_items (order_id, product_id, quantity, selling_price)
                VALUES (?, ?, ?, ?)
                """,
                [(order_id, pid, qty, price) for pid, qty, price in lines],
            )
            conn.commit()
            return order_id
        except sqlite3.Error as exc:
            conn.rollback()
            raise InternalError(f"Failed to persist order: {exc}") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    def _order_from_row(cls, r) -> Order:
        return Order(
            id=int(r[0]),
            created_at=str(r[1]),
            invoice_path=(str(r[2]) if r[2] is not None else None),
            audit=cls._audit(r[3], r[1], r[4]),
        )

    def get_order(self, order_id: int) -> Optional[Order]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            "SELECT id, created_at, invoice_path, version, updated_at FROM orders WHERE id=?",
            (int(order_id),),
        )
        r = cur.fetchone()
        conn.close()
        return self._order_from_row(r) if r else None

    def search_orders(
        self,
        start_iso: Optional[str] = None,
        end_iso: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> list[Order]:
        sql = "SELECT id, created_at, invoice_path, version, updated_at FROM orders WHERE 1=1"
        params: list = []
        if start_iso is not None:
            sql += " AND created_at >= ?"
            params.append(start_iso)
        if end_iso is not None:
            sql += " AND created_at <= ?"
            params.append(end_iso)
        if order_id is not None:
            sql += " AND id = ?"
            params.append(int(order_id))
        sql += " ORDER BY created_at DESC, id DESC"

        conn = self._conn()
        cur = conn.cursor()
        cur.execute(sql, params)
        rows = cur.fetchall()
        conn.close()
        return [self._order_from_row(r) for r in rows]

    def order_items_for_orders(self, order_ids: Iterable[int]) -> dict[int, list[OrderItem]]:
        distinct = sorted({int(oid) for oid in order_ids})
        out: dict[int, list[OrderItem]] = {oid: [] for oid in distinct}
        if not distinct:
            return out
        conn = self._conn()
        cur = conn.cursor()
        for chunk in _chunks(distinct):
            marks = ",".join("?" for _ in chunk)
            cur.execute(
                f"""
                SELECT id, order_id, product_id, quantity, selling_price
                FROM order_items
                WHERE order_id IN ({marks})
                ORDER BY order_id, id
                """,
                chunk,
            )
            for r in cur.fetchall():
                out[int(r[1])].append(
                    OrderItem(
                        id=int(r[0]),
                        order_id=int(r[1]),
                        product_id=int(r[2]),
                        quantity=int(r[3]),
                        selling_price=float(r[4]),
                    )
                )
        conn.close()
        return out

    def set_invoice_path(self, order_id: int, invoice_path: str) -> bool:
        """Write-once annotation; False when the order already carries an invoice."""
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE orders
            SET invoice_path=?, version=version+1, updated_at=?
            WHERE id=? AND invoice_path IS NULL
            """,
            (invoice_path, utc_now_iso(), int(order_id)),
        )
        changed = cur.rowcount > 0
        conn.commit()
        conn.close()
        return bool(changed)

    # ---------- Reports ----------
    def sales_by_client(
        self, start_iso: str, end_iso: str, client_id: Optional[int] = None
    ) -> list[ClientSales]:
        sql = """
            SELECT c.name,
                   COALESCE(SUM(oi.quantity), 0) AS total_quantity,
                   COALESCE(SUM(oi.quantity * oi.selling_price), 0) AS total_revenue
            FROM order_items oi
            JOIN orders o ON o.id = oi.order_id
            JOIN products p ON p.id = oi.product_id
            JOIN clients c ON c.id = p.client_id
            WHERE o.created_at >= ? AND o.created_at <= ?
        """
        params: list = [start_iso, end_iso]
        if client_id is not None:
            sql += " AND c.id = ?"
            params.append(int(client_id))
        sql += " GROUP BY c.id ORDER BY total_revenue DESC, c.name ASC"

        conn = self._conn()
        cur = conn.cursor()
        cur.execute(sql, params)
        rows = cur.fetchall()
        conn.close()
        return [
            ClientSales(client_name=str(r[0]), total_quantity=int(r[1]), total_revenue=round(float(r[2]), 2))
            for r in rows
        ]

    def day_sales(self, start_iso: str, end_iso: str) -> list[DaySales]:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute(
            """
            SELECT substr(o.created_at, 1, 10) AS d,
                   COUNT(DISTINCT o.id),
                   COALESCE(SUM(oi.quantity), 0),
                   COALESCE(SUM(oi.quantity * oi.selling_price), 0)
            FROM orders o
            JOIN order_items oi ON oi.order_id = o.id
            WHERE o.invoice_path IS NOT NULL
              AND o.created_at >= ? AND o.created_at <= ?
            GROUP BY d
            ORDER BY d
            """,
            (start_iso, end_iso),
        )
        rows = cur.fetchall()
        conn.close()
        return [
            DaySales(
                date=str(r[0]),
                invoiced_orders=int(r[1]),
                invoiced_items=int(r[2]),
                total_revenue=round(float(r[3]), 2),
            )
            for r in rows
        ]
