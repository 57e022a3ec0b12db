"""Dataclass models for the ledger entities.

Ingredient and Sale map 1:1 to the ingredientes and vendas tables.
These are plain data containers; profit is derived, never stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_UNIT = "un"


@dataclass
class Ingredient:
    """An ingredient with its current unit cost (e.g. arroz, R$ 5.00 per kg)."""
    id: Optional[int]
    name: str
    unit_cost: float = 0.0
    unit: Optional[str] = DEFAULT_UNIT


@dataclass
class Sale:
    """A single sale. Append-only: rows are never updated or deleted.

    created_at is assigned by the store as an ISO 'YYYY-MM-DD HH:MM:SS' string.
    """

    id: Optional[int]
    product: str
    sale_price: float
    production_cost: float
    created_at: Optional[str] = None

    @property
    def profit(self) -> float:
        return self.sale_price - self.production_cost


@dataclass
class SaleConfirmation:
    """What the sender gets echoed back after a sale is stored."""
    product: str
    sale_price: float
    production_cost: float
    profit: float


class UpsertOutcome(Enum):
    UPDATED = "updated"
    CREATED = "created"


@dataclass
class FinancialReport:
    """Totals over the whole sales history plus the ingredient count."""
    revenue: float
    cost: float
    profit: float
    margin: float  # percent, one decimal place
    ingredient_count: int
    sale_count: int = 0
