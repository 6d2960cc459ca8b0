"""Service modules"""
from .monitor import ExposureMonitor
from .portfolio_service import PortfolioService

__all__ = ["ExposureMonitor", "PortfolioService"]
