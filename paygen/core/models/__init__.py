"""
Domain models — Pydantic types for the generation core.

All models are re-exported here for convenient access:

    from paygen.core.models import GenerationRequest, GeneratedFile, FileFormat
"""

from paygen.core.models.generated import FileMeta, GeneratedFile, GeneratedRow
from paygen.core.models.request import (
    DateFormat,
    FileFormat,
    GenerationRequest,
    OriginatingAccount,
    WidthVariant,
)
from paygen.core.models.settings import RateLimitSettings, Settings

__all__ = [
    # request.py
    "DateFormat",
    "FileFormat",
    # generated.py
    "FileMeta",
    "GeneratedFile",
    "GeneratedRow",
    "GenerationRequest",
    "OriginatingAccount",
    # settings.py
    "RateLimitSettings",
    "Settings",
    "WidthVariant",
]
