from .daily_metrics_service import DailyMetricsService, parse_day_bucket

__all__ = [
    'DailyMetricsService',
    'parse_day_bucket'
]
