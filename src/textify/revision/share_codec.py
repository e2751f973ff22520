"""
Share link codec.

Cleaned text is embedded in a URL fragment ``#/s/<token>`` where the token is
the URL-safe base64 of the text's UTF-8 bytes with the ``=`` padding stripped.
Encoding the bytes rather than the code points keeps any Unicode text
round-trippable. Decoding also accepts the standard base64 alphabet and
padded tokens, so links produced by plain ``btoa``-style encoders still open.
"""

import base64
import binascii
import re
from typing import Optional
from urllib.parse import unquote, urlsplit, urlunsplit

import structlog

from ..config import settings
from ..exceptions import ShareTokenError


logger = structlog.get_logger(__name__)

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def encode(text: str) -> str:
    """
    Encode ``text`` into an opaque, URL-embeddable token.

    Examples:
        >>> encode("Hello")
        'SGVsbG8'
        >>> decode(encode("naïve 日本語 ✨"))
        'naïve 日本語 ✨'
    """
    raw = base64.urlsafe_b64encode(text.encode("utf-8"))
    return raw.decode("ascii").rstrip("=")


def decode(token: str) -> str:
    """
    Decode a token produced by :func:`encode`.

    Args:
        token: Share token (padding optional, either base64 alphabet)

    Returns:
        The original text

    Raises:
        ShareTokenError: If the token is not valid base64 or not UTF-8
    """
    normalized = token.strip().translate(str.maketrans("+/", "-_")).rstrip("=")

    if not _TOKEN_RE.match(normalized):
        raise ShareTokenError("Share token contains characters outside the base64 alphabet")
    if len(normalized) % 4 == 1:
        raise ShareTokenError("Share token has an impossible length")

    padded = normalized + "=" * (-len(normalized) % 4)
    try:
        data = base64.urlsafe_b64decode(padded)
        return data.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise ShareTokenError(f"Share token could not be decoded: {e}") from e


def build_share_fragment(text: str) -> str:
    """Build the ``#/s/<token>`` fragment for ``text``."""
    return f"{settings.share_fragment_prefix}{encode(text)}"


def parse_share_fragment(fragment: Optional[str]) -> Optional[str]:
    """
    Extract the token from a URL fragment.

    Args:
        fragment: Fragment including the leading ``#`` (or a full URL)

    Returns:
        The token, or None when the fragment does not follow the share scheme
    """
    if not fragment:
        return None

    if not fragment.startswith("#"):
        fragment = "#" + urlsplit(fragment).fragment

    prefix = settings.share_fragment_prefix
    if not fragment.startswith(prefix):
        return None

    token = unquote(fragment[len(prefix):])
    return token or None


def build_share_url(base_url: str, text: str) -> str:
    """
    Build a full share URL, replacing any fragment already on ``base_url``.

    Examples:
        >>> build_share_url("https://textify.app/#old", "Hi")
        'https://textify.app/#/s/SGk'
    """
    parts = urlsplit(base_url)
    fragment = build_share_fragment(text)[1:]
    url = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, fragment))

    logger.debug("share_url_built", text_length=len(text), url_length=len(url))
    return url
