"""Application service: Show Low Stock use case (query)."""

from __future__ import annotations

from ims.application.dto import LowStockReportDTO, StockAlertDTO
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.stock_threshold_monitor import StockThresholdMonitor


class ShowLowStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._monitor = StockThresholdMonitor(uow)

    def handle(self) -> LowStockReportDTO:
        report = self._monitor.low_stock_report()
        return LowStockReportDTO(
            products=[
                StockAlertDTO(
                    product_id=alert.product.id,
                    sku=alert.product.sku,
                    name=alert.product.name,
                    category=alert.product.category,
                    current_stock=alert.product.current_stock,
                    reorder_point=alert.reorder_point,
                    severity=alert.severity.value,
                )
                for alert in report.alerts
            ],
            critical_count=report.critical_count,
            high_count=report.high_count,
            total_count=report.total_count,
        )
