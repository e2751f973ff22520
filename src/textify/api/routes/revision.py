"""
Revision API routes.

Provides REST endpoints for the text revision engine:
- POST /api/v1/clean - Clean text with the LLM collaborator and diff it
- POST /api/v1/diff - Character diff between two texts
- POST /api/v1/regex/matches - Live match highlighting
- POST /api/v1/regex/replace - Regex replace-all with diff
- POST /api/v1/share/encode - Build a share token / link
- POST /api/v1/share/decode - Decode a share token or fragment
"""

from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
import structlog

from textify.cleaning.cleaner import LLMTextCleaner, TextCleaner
from textify.config import settings
from textify.models.cleaning import CAMEL_CASE_CONFIG, CleanRequest
from textify.models.revision import DiffStats, RegexMatchResult, TextSegment
from textify.revision import regex_matcher, share_codec
from textify.revision.diff_engine import compute_diff, summarize_diff


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["revision"])


def _check_length(text: str) -> str:
    if len(text) > settings.max_text_length:
        raise ValueError(f"Text exceeds {settings.max_text_length} characters")
    return text


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CleanTextRequest(CleanRequest):
    """Request model for text cleaning (the collaborator request, length-checked)."""

    @field_validator("text")
    @classmethod
    def text_within_limit(cls, v: str) -> str:
        return _check_length(v)

    model_config = {
        **CAMEL_CASE_CONFIG,
        "json_schema_extra": {
            "example": {
                "text": "# Hello *world* 🎉\nVisit https://example.com",
                "removeEmojis": True,
                "removeUrls": True,
            }
        },
    }


class CleanTextResponse(BaseModel):
    """Cleaned text with the diff against the original."""
    success: bool = True
    cleaned_text: str
    diff: List[TextSegment]
    stats: DiffStats

    model_config = CAMEL_CASE_CONFIG


class DiffRequest(BaseModel):
    """Request model for a standalone diff."""
    original: str = Field(..., description="Text before cleaning")
    cleaned: str = Field(..., description="Text after cleaning")

    @field_validator("original", "cleaned")
    @classmethod
    def text_within_limit(cls, v: str) -> str:
        return _check_length(v)


class DiffResponse(BaseModel):
    """Diff segments and character counts."""
    diff: List[TextSegment]
    stats: DiffStats


class RegexMatchRequest(BaseModel):
    """Request model for live match highlighting."""
    pattern: str = Field(..., description="Regular expression")
    text: str = Field(..., description="Subject text")
    case_sensitive: bool = Field(default=False, description="Match case-sensitively")

    model_config = CAMEL_CASE_CONFIG


class RegexReplaceRequest(RegexMatchRequest):
    """Request model for regex replace-all."""
    replacement: str = Field(default="", description="Replacement template")

    @field_validator("text")
    @classmethod
    def text_within_limit(cls, v: str) -> str:
        return _check_length(v)


class ShareEncodeRequest(BaseModel):
    """Request model for share link creation."""
    text: str = Field(..., description="Cleaned text to share")
    base_url: Optional[str] = Field(default=None, description="Page URL to attach the fragment to")

    model_config = CAMEL_CASE_CONFIG


class ShareEncodeResponse(BaseModel):
    token: str
    fragment: str
    url: Optional[str] = None


class ShareDecodeRequest(BaseModel):
    """Either a bare token or a fragment/URL following the share scheme."""
    token: Optional[str] = None
    fragment: Optional[str] = None


class ShareDecodeResponse(BaseModel):
    text: str


# ============================================================================
# DEPENDENCIES
# ============================================================================

@lru_cache(maxsize=1)
def get_text_cleaner() -> TextCleaner:
    """Cleaning collaborator built from settings, created on first use."""
    return LLMTextCleaner()


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/clean", response_model=CleanTextResponse, status_code=status.HTTP_200_OK)
async def clean_endpoint(
    request: CleanTextRequest,
    cleaner: TextCleaner = Depends(get_text_cleaner),
) -> CleanTextResponse:
    """
    Clean text and return the cleaned text with its character diff.

    Raises:
        HTTPException: 422 on empty text
        CleaningError: When the collaborator fails (mapped to 502)
    """
    if not request.text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Text must not be empty",
        )

    logger.info(
        "clean_request_received",
        text_length=len(request.text),
        flags=request.enabled_flags(),
    )

    response = await cleaner.clean(CleanRequest.model_validate(request.model_dump()))

    segments = compute_diff(request.text, response.cleaned_text)

    return CleanTextResponse(
        cleaned_text=response.cleaned_text,
        diff=segments,
        stats=summarize_diff(segments),
    )


@router.post("/diff", response_model=DiffResponse)
async def diff_endpoint(request: DiffRequest) -> DiffResponse:
    """Character-level diff between two texts."""
    segments = compute_diff(request.original, request.cleaned)
    return DiffResponse(diff=segments, stats=summarize_diff(segments))


@router.post("/regex/matches", response_model=RegexMatchResult)
async def regex_matches_endpoint(request: RegexMatchRequest) -> RegexMatchResult:
    """Match count and highlighted spans. An invalid pattern yields zero matches."""
    return regex_matcher.find_matches(
        request.pattern, request.text, case_sensitive=request.case_sensitive
    )


@router.post("/regex/replace", response_model=DiffResponse)
async def regex_replace_endpoint(request: RegexReplaceRequest) -> DiffResponse:
    """
    Replace every match and diff the result against the input.

    Raises:
        InvalidPatternError: If the pattern or template is invalid (mapped to 422)
    """
    replaced = regex_matcher.replace_all(
        request.pattern,
        request.text,
        request.replacement,
        case_sensitive=request.case_sensitive,
    )

    segments = compute_diff(request.text, replaced)
    return DiffResponse(diff=segments, stats=summarize_diff(segments))


@router.post("/share/encode", response_model=ShareEncodeResponse)
async def share_encode_endpoint(request: ShareEncodeRequest) -> ShareEncodeResponse:
    """Encode text into a share token, fragment and (optionally) full URL."""
    return ShareEncodeResponse(
        token=share_codec.encode(request.text),
        fragment=share_codec.build_share_fragment(request.text),
        url=share_codec.build_share_url(request.base_url, request.text) if request.base_url else None,
    )


@router.post("/share/decode", response_model=ShareDecodeResponse)
async def share_decode_endpoint(request: ShareDecodeRequest) -> ShareDecodeResponse:
    """
    Decode a share token.

    Raises:
        HTTPException: 422 if no token is given
        ShareTokenError: If the token cannot be decoded (mapped to 422)
    """
    token = request.token or share_codec.parse_share_fragment(request.fragment)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No share token provided",
        )

    return ShareDecodeResponse(text=share_codec.decode(token))
