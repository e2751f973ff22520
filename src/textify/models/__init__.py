# Data models for the text revision engine

from .cleaning import CleaningConfig, CleanRequest, CleanResponse, RegexOptions
from .revision import (
    DiffStats,
    ExportedFile,
    RegexMatchResult,
    RegexSpan,
    SessionSnapshot,
    TextSegment,
)
from .api_models import EngineVersion, HealthResponse, VersionResponse

__all__ = [
    "CleaningConfig",
    "CleanRequest",
    "CleanResponse",
    "RegexOptions",
    "DiffStats",
    "ExportedFile",
    "RegexMatchResult",
    "RegexSpan",
    "SessionSnapshot",
    "TextSegment",
    "EngineVersion",
    "HealthResponse",
    "VersionResponse",
]
