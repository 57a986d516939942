"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the callers (CLI, request handlers) and the
application layer without exposing domain internals. Money and
percentages are pre-formatted strings; "n/a" marks a figure that has
no data behind it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.model.outcomes import NoData


# ── Price history ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PriceRecordDTO:
    sequence: int
    product_id: str
    purchase_price: str  # formatted, e.g. "$15.00"
    selling_price: str
    recorded_at: str  # ISO-8601, UTC
    reason: str
    actor: str
    previous_purchase_price: str | None = None
    previous_selling_price: str | None = None


@dataclass(frozen=True)
class PriceHistoryDTO:
    product_id: str
    records: list[PriceRecordDTO]
    total_count: int
    page: int
    limit: int
    total_pages: int


@dataclass(frozen=True)
class PriceMovementDTO:
    earlier_mean: str
    later_mean: str
    percent_change: str
    direction: str


@dataclass(frozen=True)
class PriceTrendDTO:
    product_id: str
    direction: str | None
    purchase: PriceMovementDTO | NoData
    selling: PriceMovementDTO | NoData
    data_points: int
    window_days: int
    latest_purchase_price: str
    latest_selling_price: str
    purchase_change: str
    selling_change: str


@dataclass(frozen=True)
class PriceAveragesDTO:
    product_id: str
    avg_purchase: str
    avg_selling: str
    avg_margin: str
    avg_margin_percent: str
    data_points: int
    window_days: int


@dataclass(frozen=True)
class PriceSuggestionDTO:
    product_id: str
    suggested_selling_price: str
    latest_purchase_price: str
    target_margin_percent: str
    confidence: str
    signal: str
    trend_direction: str | None
    data_points: int
    window_days: int


@dataclass(frozen=True)
class BatchResultDTO:
    updated_count: int


# ── Stock alerts ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StockAlertDTO:
    product_id: str
    sku: str
    name: str
    category: str
    current_stock: int
    reorder_point: int
    severity: str


@dataclass(frozen=True)
class LowStockReportDTO:
    products: list[StockAlertDTO]
    critical_count: int
    high_count: int
    total_count: int


# ── Profit ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProfitRowDTO:
    product_id: str
    sku: str
    name: str
    brand: str
    category: str
    purchase_price: str
    selling_price: str
    profit_amount: str
    margin_percent: str
    current_stock: int


@dataclass(frozen=True)
class ProfitSummaryDTO:
    total_products: int
    total_profit_amount: str
    average_margin_percent: str
    highest_margin_product: str | None
    lowest_margin_product: str | None


@dataclass(frozen=True)
class ProfitAnalysisDTO:
    rows: list[ProfitRowDTO]
    summary: ProfitSummaryDTO


@dataclass(frozen=True)
class CategoryProfitDTO:
    category: str
    product_count: int
    total_profit: str
    average_profit: str
    average_margin_percent: str


@dataclass(frozen=True)
class MonthlyProfitDTO:
    month: str  # "2026-10"
    label: str  # "October 2026"
    record_count: int
    total_profit: str
    total_selling: str
    margin_percent: str
