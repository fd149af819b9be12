"""
Format registry — central lookup for all format adapters.

The generation pipeline never instantiates an adapter directly; it asks
the registry. Lookup is case-insensitive and accepts the format aliases
(``bacs18``, ``variable_csv``, ``csv_trailer`` ...).
"""

from __future__ import annotations

import logging

from paygen.adapters.base import FormatAdapter
from paygen.core.errors import UnsupportedFormatError
from paygen.core.models.request import FileFormat

logger = logging.getLogger(__name__)


class FormatRegistry:
    """Registry of format adapters keyed by ``FileFormat``."""

    def __init__(self) -> None:
        self._adapters: dict[FileFormat, FormatAdapter] = {}

    def register(self, adapter: FormatAdapter) -> None:
        key = adapter.file_format
        if key in self._adapters:
            logger.warning("Overwriting existing format adapter: %s", key)
        self._adapters[key] = adapter
        logger.debug("Registered format adapter: %s", key)

    def unregister(self, file_format: FileFormat | str) -> None:
        self._adapters.pop(FileFormat.resolve(file_format), None)

    def get(self, file_format: FileFormat | str) -> FormatAdapter:
        """Look up an adapter.

        Raises:
            UnsupportedFormatError: Unknown identifier, or a known format
                with nothing registered for it.
        """
        key = FileFormat.resolve(file_format)
        adapter = self._adapters.get(key)
        if adapter is None:
            raise UnsupportedFormatError(str(file_format), self.list_formats())
        return adapter

    def adapters(self) -> list[FormatAdapter]:
        return list(self._adapters.values())

    def list_formats(self) -> list[str]:
        return [str(k) for k in self._adapters]

    def describe(self) -> list[dict]:
        return [a.describe() for a in self._adapters.values()]

    def __contains__(self, file_format: object) -> bool:
        try:
            return FileFormat.resolve(str(file_format)) in self._adapters
        except UnsupportedFormatError:
            return False


def default_registry() -> FormatRegistry:
    """A registry with every built-in format."""
    from paygen.adapters.bacs18 import Bacs18PaymentLinesAdapter
    from paygen.adapters.eazipay import EaziPayAdapter
    from paygen.adapters.sddirect import SDDirectAdapter

    registry = FormatRegistry()
    registry.register(SDDirectAdapter())
    registry.register(Bacs18PaymentLinesAdapter())
    registry.register(EaziPayAdapter())
    return registry
