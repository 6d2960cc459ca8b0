"""Storage backends."""
from .yaml_store import YamlPortfolioStore

__all__ = ["YamlPortfolioStore"]
