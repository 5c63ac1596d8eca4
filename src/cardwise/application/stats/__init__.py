# Application Stats Package
from .service import StatsOverview, StatsService

__all__ = ["StatsOverview", "StatsService"]
