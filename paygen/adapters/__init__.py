"""Adapters — one per payment file format.

Public re-exports for convenient access.
"""

from paygen.adapters.bacs18 import Bacs18PaymentLinesAdapter
from paygen.adapters.base import FormatAdapter
from paygen.adapters.eazipay import EaziPayAdapter
from paygen.adapters.registry import FormatRegistry, default_registry
from paygen.adapters.sddirect import SDDirectAdapter

__all__ = [
    "Bacs18PaymentLinesAdapter",
    "EaziPayAdapter",
    "FormatAdapter",
    "FormatRegistry",
    "SDDirectAdapter",
    "default_registry",
]
