"""
Version constants for the text revision engine.

Component versions are reported by the version endpoint so that a diff or a
share link can be traced back to the code that produced it.
"""

from .cleaning.prompts import CURRENT_PROMPT_VERSION
from .cleaning.tool_definitions import TOOL_CALLING_VERSION
from .config import settings
from .models.api_models import EngineVersion

# API Version
API_VERSION = "1.0.0"

# Component versions (update these when implementations change)
DIFF_ENGINE_VERSION = "char-diff-1.0.0"
SHARE_CODEC_VERSION = "share-b64url-utf8-1.0.0"


def get_current_engine_version() -> EngineVersion:
    """
    Get current engine version configuration.

    Returns:
        EngineVersion instance with current versions
    """
    return EngineVersion(
        diff_engine_version=DIFF_ENGINE_VERSION,
        share_codec_version=SHARE_CODEC_VERSION,
        prompt_version=CURRENT_PROMPT_VERSION,
        tool_calling_version=TOOL_CALLING_VERSION,
        llm_provider=settings.llm_provider,
        llm_model=settings.llm_model,
    )
