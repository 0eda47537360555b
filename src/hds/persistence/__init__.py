from .stats_store import CareerRecord, CareerStatsStore

__all__ = [
    "CareerRecord",
    "CareerStatsStore",
]
