"""Application services: profit analysis queries.

Per-product rows with filters and sorting, per-category totals, and the
monthly profit trend from the price ledger.
"""

from __future__ import annotations

from ims.application.dto import (
    CategoryProfitDTO,
    MonthlyProfitDTO,
    ProfitAnalysisDTO,
    ProfitRowDTO,
    ProfitSummaryDTO,
)
from ims.domain.model.clock import Clock
from ims.domain.model.value_objects import format_amount, format_percent
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.profit_analyzer import ProfitAnalyzer, ProfitRow

DEFAULT_TREND_MONTHS = 6


def _analyzer(uow: UnitOfWork, clock: Clock | None) -> ProfitAnalyzer:
    return ProfitAnalyzer(uow.products, PriceLedger(uow.price_records, uow.products), clock)


def _row_dto(row: ProfitRow) -> ProfitRowDTO:
    return ProfitRowDTO(
        product_id=row.product_id,
        sku=row.sku,
        name=row.name,
        brand=row.brand,
        category=row.category,
        purchase_price=format_amount(row.purchase_price),
        selling_price=format_amount(row.selling_price),
        profit_amount=format_amount(row.profit_amount),
        margin_percent=format_percent(row.margin_percent),
        current_stock=row.current_stock,
    )


class ShowProfitAnalysisHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._analyzer = _analyzer(uow, clock)

    def handle(
        self,
        search: str | None = None,
        category: str | None = None,
        sort_by: str = "profit_amount",
        order: str = "desc",
    ) -> ProfitAnalysisDTO:
        analysis = self._analyzer.analyze(
            search=search, category=category, sort_by=sort_by, order=order
        )
        summary = analysis.summary
        return ProfitAnalysisDTO(
            rows=[_row_dto(r) for r in analysis.rows],
            summary=ProfitSummaryDTO(
                total_products=summary.total_products,
                total_profit_amount=format_amount(summary.total_profit_amount),
                average_margin_percent=format_percent(summary.average_margin_percent),
                highest_margin_product=(
                    summary.highest_margin.product_id if summary.highest_margin else None
                ),
                lowest_margin_product=(
                    summary.lowest_margin.product_id if summary.lowest_margin else None
                ),
            ),
        )


class ShowProfitByCategoryHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._analyzer = _analyzer(uow, clock)

    def handle(self) -> list[CategoryProfitDTO]:
        return [
            CategoryProfitDTO(
                category=c.category,
                product_count=c.product_count,
                total_profit=format_amount(c.total_profit),
                average_profit=format_amount(c.average_profit),
                average_margin_percent=format_percent(c.average_margin_percent),
            )
            for c in self._analyzer.by_category()
        ]


class ShowMonthlyProfitTrendHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._analyzer = _analyzer(uow, clock)

    def handle(self, months: int = DEFAULT_TREND_MONTHS) -> list[MonthlyProfitDTO]:
        return [
            MonthlyProfitDTO(
                month=p.month.strftime("%Y-%m"),
                label=p.month.strftime("%B %Y"),
                record_count=p.record_count,
                total_profit=format_amount(p.total_profit),
                total_selling=format_amount(p.total_selling),
                margin_percent=format_percent(p.margin_percent),
            )
            for p in self._analyzer.monthly_trend(months)
        ]
