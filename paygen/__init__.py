"""paygen — synthetic UK payment-instruction file generator."""

__version__ = "0.1.0"
