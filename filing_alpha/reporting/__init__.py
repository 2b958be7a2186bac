from .plots import plot_equity

__all__ = ["plot_equity"]
