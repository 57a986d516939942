"""Domain service: Profit Analyzer.

Per-product and per-category figures come from current prices. The
monthly trend comes from the price ledger, so it reflects what prices
actually were in each month.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, timezone
from decimal import Decimal

from ims.domain.exceptions import ValidationError
from ims.domain.model.clock import Clock, SystemClock
from ims.domain.model.product import Product
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.service.price_ledger import PriceLedger

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class ProfitRow:
    product_id: str
    sku: str
    name: str
    brand: str
    category: str
    purchase_price: Decimal
    selling_price: Decimal
    profit_amount: Decimal
    margin_percent: Decimal | None
    current_stock: int

    @classmethod
    def from_product(cls, product: Product) -> ProfitRow:
        return cls(
            product_id=product.id,
            sku=product.sku,
            name=product.name,
            brand=product.brand,
            category=product.category,
            purchase_price=product.purchase_price.amount,
            selling_price=product.selling_price.amount,
            profit_amount=product.profit_amount,
            margin_percent=product.margin_percent,
            current_stock=product.current_stock,
        )


NUMERIC_SORT_FIELDS = frozenset(
    {"purchase_price", "selling_price", "profit_amount", "margin_percent", "current_stock"}
)
TEXT_SORT_FIELDS = frozenset({"product_id", "sku", "name", "brand", "category"})
SORT_FIELDS = NUMERIC_SORT_FIELDS | TEXT_SORT_FIELDS
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ProfitSummary:
    total_products: int
    total_profit_amount: Decimal
    average_margin_percent: Decimal | None
    highest_margin: ProfitRow | None
    lowest_margin: ProfitRow | None


@dataclass(frozen=True)
class ProfitAnalysis:
    rows: list[ProfitRow]
    summary: ProfitSummary


@dataclass(frozen=True)
class CategoryProfit:
    category: str
    product_count: int
    total_profit: Decimal
    average_margin_percent: Decimal | None

    @property
    def average_profit(self) -> Decimal:
        return self.total_profit / self.product_count


@dataclass(frozen=True)
class MonthlyProfit:
    month: date
    record_count: int
    total_profit: Decimal
    total_selling: Decimal

    @property
    def margin_percent(self) -> Decimal | None:
        if self.total_selling == 0:
            return None
        return self.total_profit / self.total_selling * 100


def _mean(values: list[Decimal]) -> Decimal | None:
    if not values:
        return None
    return sum(values, ZERO) / len(values)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def sort_rows(rows: list[ProfitRow], sort_by: str, order: str) -> list[ProfitRow]:
    """Sort by any row field; rows without a value go last either way."""
    if sort_by not in SORT_FIELDS:
        raise ValidationError(
            f"Cannot sort by '{sort_by}'. Choose one of: {', '.join(sorted(SORT_FIELDS))}"
        )
    if order not in SORT_ORDERS:
        raise ValidationError(f"Sort order must be 'asc' or 'desc', got '{order}'")

    def key(row: ProfitRow):
        value = getattr(row, sort_by)
        return value.lower() if isinstance(value, str) else value

    present = [r for r in rows if getattr(r, sort_by) is not None]
    absent = [r for r in rows if getattr(r, sort_by) is None]
    present.sort(key=key, reverse=(order == "desc"))
    return present + absent


class ProfitAnalyzer:

    def __init__(
        self,
        product_repo: ProductRepository,
        ledger: PriceLedger,
        clock: Clock | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._ledger = ledger
        self._clock = clock or SystemClock()

    def analyze(
        self,
        search: str | None = None,
        category: str | None = None,
        sort_by: str = "profit_amount",
        order: str = "desc",
    ) -> ProfitAnalysis:
        products = self._product_repo.list_all()

        if search:
            needle = search.strip().lower()
            products = [
                p for p in products
                if needle in p.name.lower()
                or needle in p.brand.lower()
                or needle in p.sku.lower()
            ]
        if category:
            products = [p for p in products if p.category == category]

        rows = sort_rows([ProfitRow.from_product(p) for p in products], sort_by, order)
        return ProfitAnalysis(rows=rows, summary=self._summarize(rows))

    def by_category(self) -> list[CategoryProfit]:
        groups: dict[str, list[Product]] = defaultdict(list)
        for product in self._product_repo.list_all():
            groups[product.category].append(product)

        result = [
            CategoryProfit(
                category=category,
                product_count=len(products),
                total_profit=sum((p.profit_amount for p in products), ZERO),
                average_margin_percent=_mean(
                    [p.margin_percent for p in products if p.margin_percent is not None]
                ),
            )
            for category, products in groups.items()
        ]
        result.sort(key=lambda c: c.category)
        result.sort(key=lambda c: c.total_profit, reverse=True)
        return result

    def monthly_trend(self, months: int) -> list[MonthlyProfit]:
        """One point per calendar month, oldest first, current month last.

        Months without any price record yield an explicit zero point, so
        the series always has exactly ``months`` entries.
        """
        if isinstance(months, bool) or not isinstance(months, int) or months < 1:
            raise ValidationError(f"Months must be a whole number >= 1, got {months!r}")

        now = self._clock.now_utc()
        first_year, first_month = _shift_month(now.year, now.month, -(months - 1))
        end_year, end_month = _shift_month(now.year, now.month, 1)
        if first_year < MINYEAR or end_year > MAXYEAR:
            raise ValidationError(
                f"{months} months back from {now:%Y-%m} leaves the supported calendar"
            )
        start = datetime(first_year, first_month, 1, tzinfo=timezone.utc)
        end = datetime(end_year, end_month, 1, tzinfo=timezone.utc)

        buckets: dict[tuple[int, int], list] = defaultdict(list)
        for record in self._ledger.records_between(start, end):
            buckets[(record.recorded_at.year, record.recorded_at.month)].append(record)

        points: list[MonthlyProfit] = []
        for offset in range(months):
            year, month = _shift_month(first_year, first_month, offset)
            records = buckets.get((year, month), [])
            points.append(
                MonthlyProfit(
                    month=date(year, month, 1),
                    record_count=len(records),
                    total_profit=sum((r.profit_amount for r in records), ZERO),
                    total_selling=sum((r.selling_price.amount for r in records), ZERO),
                )
            )
        logger.debug("Monthly profit trend over %d month(s) from %s", months, start.date())
        return points

    @staticmethod
    def _summarize(rows: list[ProfitRow]) -> ProfitSummary:
        with_margin = [r for r in rows if r.margin_percent is not None]
        return ProfitSummary(
            total_products=len(rows),
            total_profit_amount=sum((r.profit_amount for r in rows), ZERO),
            average_margin_percent=_mean([r.margin_percent for r in with_margin]),
            highest_margin=max(with_margin, key=lambda r: r.margin_percent, default=None),
            lowest_margin=min(with_margin, key=lambda r: r.margin_percent, default=None),
        )
