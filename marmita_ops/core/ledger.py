"""Ledger store adapter: ingredient costs and sales over the SQLite ledger.

Ledger is a plain handle around a DB path; pass db_path=None to resolve the
active path (DB_PATH or the default) on every call.  Reads for the
report are full scans with no pagination, fine for one kitchen's history.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from marmita_ops.db.database import get_connection
from marmita_ops.db.models import (
    DEFAULT_UNIT,
    Ingredient,
    Sale,
    SaleConfirmation,
    UpsertOutcome,
)
from marmita_ops.errors import StoreError

log = logging.getLogger(__name__)

# Earliest-created row wins when a search term matches several ingredients.
_MATCH_CLAUSE = "WHERE CASEFOLD(nome) LIKE ? ESCAPE '\\' ORDER BY id"


def _like_pattern(term: str) -> str:
    """Build a substring LIKE pattern with %, _ and the escape char taken literally."""
    escaped = (
        term.strip().casefold()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


def _to_ingredient(row) -> Ingredient:
    return Ingredient(id=row["id"], name=row["nome"], unit_cost=row["custo"], unit=row["unidade"])


def _to_sale(row) -> Sale:
    return Sale(
        id=row["id"],
        product=row["produto"],
        sale_price=row["valor_venda"],
        production_cost=row["custo_producao"],
        created_at=row["created_at"],
    )


class Ledger:
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path

    def find_ingredient(self, pattern: str) -> list[Ingredient]:
        """Case-insensitive substring search by name. Never raises; store errors yield []."""
        try:
            conn = get_connection(self.db_path)
        except sqlite3.Error:
            log.warning("Ingredient search for %r could not open the ledger", pattern, exc_info=True)
            return []
        try:
            rows = conn.execute(
                f"SELECT * FROM ingredientes {_MATCH_CLAUSE}", (_like_pattern(pattern),)
            ).fetchall()
            return [_to_ingredient(row) for row in rows]
        except sqlite3.Error:
            log.warning("Ingredient search for %r failed", pattern, exc_info=True)
            return []
        finally:
            conn.close()

    def upsert_ingredient_cost(self, name: str, cost: float) -> UpsertOutcome:
        """Update the first matching ingredient's cost, or create a new ingredient.

        The lookup and the write share one BEGIN IMMEDIATE transaction, so two
        concurrent requests for an unseen name cannot both insert.  A failing
        lookup counts as "no match"; a failing write raises StoreError.
        """
        name = name.strip()
        try:
            conn = get_connection(self.db_path)
        except sqlite3.Error as e:
            raise StoreError("upsert_ingredient_cost", str(e)) from e
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                existing = conn.execute(
                    f"SELECT id FROM ingredientes {_MATCH_CLAUSE} LIMIT 1",
                    (_like_pattern(name),),
                ).fetchone()
            except sqlite3.Error:
                log.warning("Lookup for %r failed, treating as a new ingredient", name, exc_info=True)
                existing = None

            if existing:
                conn.execute("UPDATE ingredientes SET custo = ? WHERE id = ?", (cost, existing["id"]))
                outcome = UpsertOutcome.UPDATED
            else:
                conn.execute(
                    "INSERT INTO ingredientes (nome, custo, unidade) VALUES (?, ?, ?)",
                    (name, cost, DEFAULT_UNIT),
                )
                outcome = UpsertOutcome.CREATED
            conn.commit()
            log.info("Ingredient %r cost set to %.2f (%s)", name, cost, outcome.value)
            return outcome
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError("upsert_ingredient_cost", str(e)) from e
        finally:
            conn.close()

    def record_sale(self, product: str, sale_price: float, production_cost: float) -> SaleConfirmation:
        """Append one sale row and return what was stored, with the derived profit."""
        product = product.strip()
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    "INSERT INTO vendas (produto, valor_venda, custo_producao) VALUES (?, ?, ?)",
                    (product, sale_price, production_cost),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError("record_sale", str(e)) from e

        return SaleConfirmation(
            product=product,
            sale_price=sale_price,
            production_cost=production_cost,
            profit=round(sale_price - production_cost, 2),
        )

    def fetch_all_sales(self) -> list[Sale]:
        try:
            conn = get_connection(self.db_path)
            try:
                rows = conn.execute("SELECT * FROM vendas ORDER BY id").fetchall()
                return [_to_sale(row) for row in rows]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError("fetch_all_sales", str(e)) from e

    def fetch_all_ingredients(self) -> list[Ingredient]:
        try:
            conn = get_connection(self.db_path)
            try:
                rows = conn.execute("SELECT * FROM ingredientes ORDER BY id").fetchall()
                return [_to_ingredient(row) for row in rows]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError("fetch_all_ingredients", str(e)) from e
