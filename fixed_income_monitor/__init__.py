"""Fixed-income position projection and deposit-insurance exposure monitor."""
from .engine import project, summarize_exposure

__version__ = "0.1.0"

__all__ = ["project", "summarize_exposure"]
