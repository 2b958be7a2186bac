"""Reference implementations of the price and score collaborator contracts."""

from .prices import FramePriceProvider
from .scores import TableScoreProvider, TechnicalScoreProvider

__all__ = ["FramePriceProvider", "TableScoreProvider", "TechnicalScoreProvider"]
