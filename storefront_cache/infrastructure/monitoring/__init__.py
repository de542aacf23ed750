from .metrics_collector import MetricsCollector, get_metrics_collector, get_prometheus_metrics

__all__ = ["MetricsCollector", "get_metrics_collector", "get_prometheus_metrics"]
