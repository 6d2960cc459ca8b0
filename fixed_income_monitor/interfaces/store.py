"""Store protocols: persistence of positions and the market rates snapshot."""
from typing import Protocol

from ..models import MarketRates, Position


class PositionStore(Protocol):
    """Abstract interface for position persistence."""

    def list_positions(self) -> list[Position]: ...

    def get_position(self, position_id: str) -> Position: ...

    def add_position(self, position: Position) -> Position: ...

    def update_position(self, position: Position) -> Position: ...

    def delete_position(self, position_id: str) -> bool: ...

    def replace_positions(self, positions: list[Position]) -> None: ...


class MarketRatesStore(Protocol):
    """Abstract interface for the current market rates snapshot."""

    def get_market_rates(self) -> MarketRates: ...

    def set_market_rates(self, rates: MarketRates) -> None: ...
