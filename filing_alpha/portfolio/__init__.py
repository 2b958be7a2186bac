from .optimizer import Allocation, optimize_portfolio

__all__ = ["Allocation", "optimize_portfolio"]
