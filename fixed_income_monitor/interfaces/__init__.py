"""Protocol interfaces for the fixed-income monitor."""
from .notifier import Notifier
from .store import MarketRatesStore, PositionStore

__all__ = ["MarketRatesStore", "Notifier", "PositionStore"]
