from .metrics import DispatcherMetrics, MetricsCollector

__all__ = ["DispatcherMetrics", "MetricsCollector"]
