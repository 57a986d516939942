"""Operations facade consumed by the request-handling layer.

Wraps each use-case handler so callers receive a Result instead of an
exception. Single-batch writes succeed or fail as a whole; the
multi-product queries (``trends_for`` / ``averages_for``) resolve each
product on its own, so one failing product never hides the others.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime

from ims.application.bulk_update_prices import BulkUpdatePricesHandler
from ims.application.dto import (
    BatchResultDTO,
    CategoryProfitDTO,
    LowStockReportDTO,
    MonthlyProfitDTO,
    PriceAveragesDTO,
    PriceHistoryDTO,
    PriceSuggestionDTO,
    PriceTrendDTO,
    ProfitAnalysisDTO,
)
from ims.application.results import ErrorKind, Failure, Result, capture
from ims.application.show_low_stock import ShowLowStockHandler
from ims.application.show_price_averages import ShowPriceAveragesHandler
from ims.application.show_price_history import ShowPriceHistoryHandler
from ims.application.show_price_trend import ShowPriceTrendHandler
from ims.application.show_profit_analysis import (
    DEFAULT_TREND_MONTHS,
    ShowMonthlyProfitTrendHandler,
    ShowProfitAnalysisHandler,
    ShowProfitByCategoryHandler,
)
from ims.application.suggest_price import SuggestPriceHandler
from ims.application.update_reorder_point import (
    BulkUpdateReorderPointsHandler,
    UpdateReorderPointHandler,
)
from ims.domain.model.clock import Clock
from ims.domain.model.outcomes import NoData
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.bulk_price_update import DEFAULT_ACTOR, DEFAULT_REASON
from ims.domain.service.price_ledger import DEFAULT_PAGE_SIZE
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS


class InventoryOperations:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock | None = None,
        suggestion_window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._suggestion_window_days = suggestion_window_days

    # --- Price history --------------------------------------------------------

    def history(
        self,
        product_id: str,
        start_date: str | date | datetime | None = None,
        end_date: str | date | datetime | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Result[PriceHistoryDTO]:
        handler = ShowPriceHistoryHandler(self._uow)
        return capture(
            handler.handle, product_id,
            start_date=start_date, end_date=end_date, page=page, limit=limit,
        )

    def trends(
        self, product_id: str, days: int = DEFAULT_WINDOW_DAYS
    ) -> Result[PriceTrendDTO | NoData]:
        return capture(ShowPriceTrendHandler(self._uow, self._clock).handle, product_id, days)

    def averages(
        self, product_id: str, days: int = DEFAULT_WINDOW_DAYS
    ) -> Result[PriceAveragesDTO | NoData]:
        return capture(ShowPriceAveragesHandler(self._uow, self._clock).handle, product_id, days)

    def suggestions(self, product_id: str) -> Result[PriceSuggestionDTO | NoData]:
        handler = SuggestPriceHandler(
            self._uow, self._clock, window_days=self._suggestion_window_days
        )
        return capture(handler.handle, product_id)

    def trends_for(
        self, product_ids: list[str], days: int = DEFAULT_WINDOW_DAYS
    ) -> dict[str, Result[PriceTrendDTO | NoData]] | Failure:
        return self._fan_out(product_ids, lambda pid: self.trends(pid, days))

    def averages_for(
        self, product_ids: list[str], days: int = DEFAULT_WINDOW_DAYS
    ) -> dict[str, Result[PriceAveragesDTO | NoData]] | Failure:
        return self._fan_out(product_ids, lambda pid: self.averages(pid, days))

    def bulk_update_prices(
        self,
        updates: list,
        reason: str = DEFAULT_REASON,
        actor: str = DEFAULT_ACTOR,
    ) -> Result[BatchResultDTO]:
        handler = BulkUpdatePricesHandler(self._uow, self._clock)
        return capture(handler.handle, updates, reason=reason, actor=actor)

    # --- Stock alerts ---------------------------------------------------------

    def low_stock_report(self) -> Result[LowStockReportDTO]:
        return capture(ShowLowStockHandler(self._uow).handle)

    def update_reorder_point(self, product_id: str, value: int) -> Result[None]:
        return capture(UpdateReorderPointHandler(self._uow).handle, product_id, value)

    def bulk_update_reorder_points(self, updates: list[Mapping]) -> Result[BatchResultDTO]:
        return capture(BulkUpdateReorderPointsHandler(self._uow).handle, updates)

    # --- Profit ---------------------------------------------------------------

    def profit_analysis(
        self,
        search: str | None = None,
        category: str | None = None,
        sort_by: str = "profit_amount",
        order: str = "desc",
    ) -> Result[ProfitAnalysisDTO]:
        handler = ShowProfitAnalysisHandler(self._uow, self._clock)
        return capture(
            handler.handle, search=search, category=category, sort_by=sort_by, order=order
        )

    def profit_by_category(self) -> Result[list[CategoryProfitDTO]]:
        return capture(ShowProfitByCategoryHandler(self._uow, self._clock).handle)

    def monthly_profit_trend(
        self, months: int = DEFAULT_TREND_MONTHS
    ) -> Result[list[MonthlyProfitDTO]]:
        return capture(ShowMonthlyProfitTrendHandler(self._uow, self._clock).handle, months)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _fan_out(product_ids: list[str], resolve) -> dict[str, Result] | Failure:
        if isinstance(product_ids, (str, bytes)) or not isinstance(product_ids, Iterable):
            return Failure(ErrorKind.VALIDATION, "Product IDs must be given as a list")

        results: dict[str, Result] = {}
        for pid in product_ids:
            if not isinstance(pid, str):
                # keyed by repr so unhashable entries still get an answer
                results.setdefault(
                    repr(pid),
                    Failure(ErrorKind.VALIDATION, f"Product ID must be a string, got {pid!r}"),
                )
                continue
            pid = pid.strip()
            if pid and pid not in results:
                results[pid] = resolve(pid)

        if not results:
            return Failure(ErrorKind.VALIDATION, "At least one product ID is required")
        return results
