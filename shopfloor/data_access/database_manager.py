# shopfloor/data_access/database_manager.py

import sqlite3
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from shopfloor.config import DATABASE_PATH
from shopfloor.constants import SaleStatus
from shopfloor.errors import from_sqlite_error

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Connection handling for the SQLite store.

    Outside a transaction every call opens, commits and closes its own
    connection. Inside ``transaction()`` all calls made on the same thread
    share one connection which is committed or rolled back as a unit.
    """

    def __init__(self, db_path: str = DATABASE_PATH):
        self.db_path = db_path
        self._local = threading.local()

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row  # Access columns by name
            conn.execute("PRAGMA foreign_keys = ON;")
            logger.debug(f"Database connection established to {self.db_path}")
            return conn
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database {self.db_path}: {e}")
            raise from_sqlite_error(e) from e

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "conn", None) is not None

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        shared = getattr(self._local, "conn", None)
        if shared is not None:
            yield shared
            return
        conn = self._open()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()
            logger.debug("Database connection closed.")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        if self.in_transaction:
            # Nested workflows join the outer unit of work.
            yield self._local.conn
            return
        conn = self._open()
        try:
            # Take the write lock before the first read so reads inside the unit of work stay current.
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            conn.close()
            logger.error(f"Could not begin transaction on {self.db_path}: {e}")
            raise from_sqlite_error(e) from e
        self._local.conn = conn
        try:
            yield conn
            conn.commit()
            logger.debug("Transaction committed.")
        except Exception:
            conn.rollback()
            logger.warning("Transaction rolled back.")
            raise
        finally:
            self._local.conn = None
            conn.close()

    def execute_query(self, query: str, params: Optional[Sequence] = None) -> sqlite3.Cursor:
        try:
            with self.connect() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor
        except sqlite3.Error as e:
            logger.error(f"Query execution failed: {query} with params {params} - {e}")
            raise from_sqlite_error(e) from e

    def fetch_one(self, query: str, params: Optional[Sequence] = None) -> Optional[sqlite3.Row]:
        try:
            with self.connect() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Fetch one failed: {query} with params {params} - {e}")
            raise from_sqlite_error(e) from e

    def fetch_all(self, query: str, params: Optional[Sequence] = None) -> List[sqlite3.Row]:
        try:
            with self.connect() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Fetch all failed: {query} with params {params} - {e}")
            raise from_sqlite_error(e) from e

    def create_tables(self):
        queries = [
            """
            CREATE TABLE IF NOT EXISTS parts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                units_left INTEGER NOT NULL DEFAULT 0,
                cost REAL NOT NULL DEFAULT 0.0,
                total_spent REAL NOT NULL DEFAULT 0.0,
                total_units_purchased INTEGER NOT NULL DEFAULT 0
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                units INTEGER NOT NULL DEFAULT 0,
                cost REAL NOT NULL DEFAULT 0.0,
                msrp REAL NOT NULL DEFAULT 0.0
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS product_parts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                product_id INTEGER NOT NULL,
                part_id INTEGER NOT NULL,
                qty INTEGER NOT NULL,
                cost REAL NOT NULL DEFAULT 0.0, -- part cost snapshot, refreshed on purchase
                FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE,
                FOREIGN KEY (part_id) REFERENCES parts(id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS purchases (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                date TEXT NOT NULL, -- ISO Date
                total REAL NOT NULL DEFAULT 0.0,
                note TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS purchase_parts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                purchase_id INTEGER NOT NULL,
                part_id INTEGER NOT NULL,
                qty INTEGER NOT NULL,
                cost REAL NOT NULL, -- total paid for the line
                FOREIGN KEY (purchase_id) REFERENCES purchases(id) ON DELETE CASCADE,
                FOREIGN KEY (part_id) REFERENCES parts(id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS manufactures (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                date TEXT NOT NULL
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS manufacture_products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                manufacture_id INTEGER NOT NULL,
                product_id INTEGER NOT NULL,
                qty INTEGER NOT NULL,
                FOREIGN KEY (manufacture_id) REFERENCES manufactures(id) ON DELETE CASCADE,
                FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS clients (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                address TEXT NOT NULL DEFAULT '',
                email TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS reps (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                percentage INTEGER NOT NULL CHECK(percentage BETWEEN 0 AND 100)
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS sales (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                date TEXT NOT NULL,
                client_id INTEGER NOT NULL,
                rep_id INTEGER,
                total REAL NOT NULL DEFAULT 0.0,
                cost REAL NOT NULL DEFAULT 0.0,
                net REAL NOT NULL DEFAULT 0.0,
                shipping REAL NOT NULL DEFAULT 0.0,
                discount REAL,
                rep_cut REAL,
                note TEXT,
                status TEXT NOT NULL CHECK(status IN ({})),
                FOREIGN KEY (client_id) REFERENCES clients(id) ON DELETE RESTRICT,
                FOREIGN KEY (rep_id) REFERENCES reps(id) ON DELETE SET NULL
            );
            """.format(', '.join(f"'{s.value}'" for s in SaleStatus)),
            """
            CREATE TABLE IF NOT EXISTS sale_products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sale_id INTEGER NOT NULL,
                product_id INTEGER NOT NULL,
                qty INTEGER NOT NULL,
                cost_at_sale REAL NOT NULL,
                msrp_at_sale REAL NOT NULL,
                FOREIGN KEY (sale_id) REFERENCES sales(id) ON DELETE CASCADE,
                FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE RESTRICT
            );
            """,
        ]
        try:
            with self.connect() as conn:
                for query in queries:
                    conn.execute(query)
            logger.info(f"{len(queries)} tables checked/created in {self.db_path}.")
        except sqlite3.Error as e:
            logger.error(f"Error creating tables: {e}")
            raise from_sqlite_error(e) from e
