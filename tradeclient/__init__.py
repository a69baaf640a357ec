"""Trading client core: order books, market data recovery, features, positions, risk and strategies."""

__version__ = "0.1.0"

__all__ = ["__version__"]